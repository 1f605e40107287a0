"""Core entities and the interfaces the capture pipeline is built from."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Protocol, runtime_checkable


@dataclass(frozen=True)
class VideoFrame:
    """One chunk of encoded video read from a track."""

    data: bytes
    number: int = 0

    @property
    def size(self) -> int:
        """Size of the encoded data in bytes."""
        return len(self.data)


@dataclass(frozen=True)
class VideoDevice:
    """A capture device known to the system."""

    id: str
    label: str
    kind: str


@dataclass(frozen=True)
class VideoConfig:
    """Parameters of a video stream."""

    width: int = 640
    height: int = 480
    frame_rate: int = 30
    bit_rate: int = 1_000_000
    device_id: str = ""
    codec_name: str = "h264"
    streaming_url: str = ""


@runtime_checkable
class VideoReader(Protocol):
    """Source of encoded frames."""

    def read(self) -> VideoFrame | None:
        """Return the next frame, or None when nothing was read this time."""
        ...

    def close(self) -> None:
        """Release the reader."""
        ...


@runtime_checkable
class VideoTrack(Protocol):
    """An opened video track."""

    @property
    def id(self) -> str:
        """Identifier of the track."""
        ...

    def close(self) -> None:
        """Release the track."""
        ...

    def create_reader(self) -> VideoReader:
        """Open a reader of encoded frames."""
        ...


@runtime_checkable
class CameraManager(Protocol):
    """Lists and opens capture devices."""

    def list_devices(self) -> list[VideoDevice]:
        """Return the available capture devices."""
        ...

    def open_camera(self, config: VideoConfig) -> VideoTrack:
        """Open a camera with the given parameters."""
        ...


@runtime_checkable
class StreamManager(Protocol):
    """Sends a track's frames somewhere; cancel the task to stop early."""

    async def start_streaming(self, track: VideoTrack, config: VideoConfig) -> None:
        """Stream the track until it ends, fails or the task is cancelled."""
        ...

    async def stop_streaming(self) -> None:
        """Stop streaming and close the connection."""
        ...


@runtime_checkable
class Logger(Protocol):
    """Printf-style logger."""

    def info(self, msg: str, *args: object) -> None:
        ...

    def error(self, msg: str, *args: object) -> None:
        ...

    def debug(self, msg: str, *args: object) -> None:
        ...