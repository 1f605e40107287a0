"""Streams encoded video frames to a recording server over a WebSocket."""

from __future__ import annotations

import asyncio
import time
from urllib.parse import urlsplit

import aiohttp

from .domain import Logger, VideoConfig, VideoFrame, VideoTrack

DEBUG_EVERY = 30
_SCHEMES = frozenset({"ws", "wss", "http", "https"})


def _check_url(url: str) -> str:
    parts = urlsplit(url)
    if parts.scheme not in _SCHEMES or not parts.netloc:
        raise ValueError(f"bad streaming URL: {url!r}")
    return parts.geturl()


class WebSocketStreamer:
    """Sends the frames of a track as binary WebSocket messages."""

    def __init__(self, logger: Logger, debug_mode: bool = False) -> None:
        self._logger = logger
        self.debug_mode = debug_mode
        self._lock = asyncio.Lock()
        self._session: aiohttp.ClientSession | None = None
        self._ws: aiohttp.ClientWebSocketResponse | None = None
        self.frame_counter = 0
        self._start_time = 0.0

    async def start_streaming(self, track: VideoTrack, config: VideoConfig) -> None:
        """Connect and send the track's frames until reading or sending fails.

        Cancelling the calling task stops streaming; the connection stays open
        until stop_streaming is called.
        """
        if self.is_connected():
            await self.stop_streaming()

        async with self._lock:
            try:
                url = _check_url(config.streaming_url)
            except ValueError as exc:
                self._logger.error("Invalid streaming URL: %s", exc)
                raise

            self._logger.info("Connecting to %s", url)
            session = aiohttp.ClientSession()
            try:
                ws = await session.ws_connect(url)
            except BaseException as exc:
                await session.close()
                if isinstance(exc, Exception):
                    self._logger.error("Could not connect to server: %s", exc)
                raise

            self._session = session
            self._ws = ws
            self.frame_counter = 0
            self._start_time = time.monotonic()

        self._logger.info("Connected to server")

        try:
            reader = track.create_reader()
        except Exception as exc:
            self._logger.error("Could not create reader: %s", exc)
            await self.stop_streaming()
            raise

        self._logger.info("Streaming video...")
        try:
            while True:
                try:
                    frame = await asyncio.to_thread(reader.read)
                except Exception as exc:
                    self._logger.error("Error reading frame: %s", exc)
                    raise
                if frame is None:
                    continue
                try:
                    await self._send_counted(frame)
                except Exception as exc:
                    self._logger.error("Error sending frame: %s", exc)
                    raise
        except asyncio.CancelledError:
            self._logger.info("Streaming stopped")
            raise
        finally:
            reader.close()

    async def stop_streaming(self) -> None:
        """Close the connection if there is one."""
        async with self._lock:
            ws, session = self._ws, self._session
            self._ws = None
            self._session = None
            if ws is None:
                return
            try:
                await ws.close()
            except Exception as exc:
                self._logger.error("Error closing WebSocket: %s", exc)
            finally:
                if session is not None:
                    await session.close()

    async def send_frame(self, frame: VideoFrame) -> None:
        """Send one frame; does nothing when not connected."""
        async with self._lock:
            if self._ws is None:
                return
            await self._ws.send_bytes(frame.data)

    def is_connected(self) -> bool:
        """Whether a connection is open."""
        return self._ws is not None

    async def _send_counted(self, frame: VideoFrame) -> None:
        async with self._lock:
            if self._ws is None:
                return
            await self._ws.send_bytes(frame.data)
            self.frame_counter += 1
            if self.debug_mode and self.frame_counter % DEBUG_EVERY == 0:
                elapsed = time.monotonic() - self._start_time
                fps = self.frame_counter / elapsed if elapsed > 0 else 0.0
                self._logger.debug(
                    "Frames sent: %d, FPS: %.2f, last frame size: %d bytes",
                    self.frame_counter,
                    fps,
                    frame.size,
                )