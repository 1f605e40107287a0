"""WebSocket recording server for H.264 streams and the client pieces that feed it."""

__version__ = "0.1.0"

__all__ = ["__version__"]