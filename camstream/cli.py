"""Command-line front end of the streaming client."""

from __future__ import annotations

import argparse
import asyncio
import signal
import sys
from dataclasses import dataclass
from typing import Sequence, TextIO

from .domain import Logger, VideoConfig
from .service import WebcamService


@dataclass
class Config:
    """Options of the streaming client."""

    address: str = "localhost:8080"
    width: int = 640
    height: int = 480
    fps: int = 30
    bit_rate: int = 1_000_000
    debug: bool = False
    list_devices: bool = False
    device_id: str = ""

    def video_config(self) -> VideoConfig:
        """Return the stream parameters these options describe."""
        return VideoConfig(
            width=self.width,
            height=self.height,
            frame_rate=self.fps,
            bit_rate=self.bit_rate,
            device_id=self.device_id,
            codec_name="h264",
            streaming_url=f"ws://{self.address}/ws",
        )


def parse_args(argv: Sequence[str] | None = None) -> Config:
    """Parse the client's command-line options."""
    defaults = Config()
    parser = argparse.ArgumentParser(description="Stream a webcam to a recording server.")
    parser.add_argument("-addr", "--addr", dest="address", default=defaults.address,
                        help="server address")
    parser.add_argument("-width", "--width", type=int, default=defaults.width,
                        help="video width")
    parser.add_argument("-height", "--height", type=int, default=defaults.height,
                        help="video height")
    parser.add_argument("-fps", "--fps", type=int, default=defaults.fps,
                        help="frame rate")
    parser.add_argument("-bitrate", "--bitrate", dest="bit_rate", type=int,
                        default=defaults.bit_rate, help="video bitrate (bps)")
    parser.add_argument("-debug", "--debug", action="store_true",
                        help="enable debug messages")
    parser.add_argument("-list-devices", "--list-devices", dest="list_devices",
                        action="store_true", help="list available cameras and exit")
    parser.add_argument("-device", "--device", dest="device_id", default=defaults.device_id,
                        help="ID of the camera to use")
    return Config(**vars(parser.parse_args(argv)))


class CLI:
    """Runs the client according to its options."""

    def __init__(
        self,
        webcam_service: WebcamService,
        logger: Logger,
        config: Config,
        out: TextIO | None = None,
    ) -> None:
        self.webcam_service = webcam_service
        self.logger = logger
        self.config = config
        self._out = out
        self._interrupted = asyncio.Event()

    def interrupt(self) -> None:
        """Ask a running capture to shut down."""
        self._interrupted.set()

    async def run(self) -> None:
        """List devices, or capture until interrupted and then stop."""
        if self.config.list_devices:
            self.list_devices()
            return

        await self.webcam_service.start_capture(self.config.video_config())
        await self._wait_for_interrupt()
        self.logger.info("Interrupt received, shutting down...")
        await self.webcam_service.stop_capture()

    def list_devices(self) -> None:
        """Print the available capture devices."""
        out = self._out or sys.stdout
        devices = self.webcam_service.list_devices()
        print("Available devices:", file=out)
        for index, device in enumerate(devices):
            print(f"[{index}] {device.label} ({device.kind})", file=out)

    async def _wait_for_interrupt(self) -> None:
        loop = asyncio.get_running_loop()
        try:
            loop.add_signal_handler(signal.SIGINT, self.interrupt)
            installed = True
        except (NotImplementedError, RuntimeError, ValueError):
            installed = False
        try:
            await self._interrupted.wait()
        finally:
            if installed:
                loop.remove_signal_handler(signal.SIGINT)