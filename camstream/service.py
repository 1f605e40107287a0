"""Application service tying a camera to a stream."""

from __future__ import annotations

import asyncio
import contextlib

from .domain import (
    CameraManager,
    Logger,
    StreamManager,
    VideoConfig,
    VideoDevice,
    VideoTrack,
)


class CaptureError(RuntimeError):
    """Raised when a capture operation is not possible."""


class WebcamService:
    """Opens a camera and streams it in a background task."""

    def __init__(
        self,
        camera_manager: CameraManager,
        stream_manager: StreamManager,
        logger: Logger,
    ) -> None:
        self._camera = camera_manager
        self._streamer = stream_manager
        self._logger = logger
        self._track: VideoTrack | None = None
        self._task: asyncio.Task[None] | None = None
        self._lock = asyncio.Lock()

    @property
    def active(self) -> bool:
        """Whether a capture is running."""
        return self._track is not None

    def list_devices(self) -> list[VideoDevice]:
        """Return the available capture devices."""
        try:
            return list(self._camera.list_devices())
        except Exception as exc:
            self._logger.error("Error listing devices: %s", exc)
            raise

    async def start_capture(self, config: VideoConfig) -> None:
        """Open the camera and start streaming it, replacing any running capture."""
        async with self._lock:
            if self._track is not None:
                await self._stop()

            self._logger.info(
                "Opening camera: %dx%d, %d fps, bitrate: %d bps",
                config.width,
                config.height,
                config.frame_rate,
                config.bit_rate,
            )
            try:
                track = self._camera.open_camera(config)
            except Exception as exc:
                self._logger.error("Error opening camera: %s", exc)
                raise

            self._track = track
            self._logger.info("Using camera: %s", track.id)
            self._task = asyncio.create_task(self._stream(track, config))

    async def stop_capture(self) -> None:
        """Stop streaming and close the camera.

        Raises CaptureError when nothing is being captured.
        """
        async with self._lock:
            if self._track is None:
                raise CaptureError("no active capture")
            await self._stop()

    async def _stream(self, track: VideoTrack, config: VideoConfig) -> None:
        try:
            await self._streamer.start_streaming(track, config)
        except Exception as exc:
            self._logger.error("Streaming error: %s", exc)

    async def _stop(self) -> None:
        task, self._task = self._task, None
        if task is not None:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        try:
            await self._streamer.stop_streaming()
        except Exception as exc:
            self._logger.error("Error stopping stream: %s", exc)

        track, self._track = self._track, None
        if track is not None:
            try:
                track.close()
            except Exception as exc:
                self._logger.error("Error closing track: %s", exc)