"""WebSocket server that stores incoming H.264 streams to files."""

from __future__ import annotations

import argparse
import html
import logging
import threading
from datetime import datetime
from pathlib import Path
from typing import BinaryIO, Sequence

from aiohttp import WSMsgType, web

log = logging.getLogger("camstream.server")

DEFAULT_PORT = 8080
DEFAULT_OUTPUT = "recordings"


class VideoWriter:
    """Writes a raw H.264 stream to a timestamped file in a directory."""

    def __init__(self, output_dir: str | Path, now: datetime | None = None) -> None:
        directory = Path(output_dir)
        directory.mkdir(parents=True, exist_ok=True)
        stamp = (now or datetime.now()).strftime("%Y-%m-%d_%H-%M-%S")
        self.path = directory / f"webcam_{stamp}.h264"
        self._lock = threading.Lock()
        self._file: BinaryIO | None = open(self.path, "wb")
        log.info("Recording to file: %s", self.path)

    def write(self, data: bytes) -> None:
        """Append data to the file."""
        with self._lock:
            if self._file is None:
                raise ValueError(f"recording {self.path} is closed")
            self._file.write(data)
            self._file.flush()

    def close(self) -> None:
        """Close the file; further calls do nothing."""
        with self._lock:
            if self._file is not None:
                log.info("Closing file: %s", self.path)
                file, self._file = self._file, None
                file.close()

    @property
    def closed(self) -> bool:
        return self._file is None

    def __enter__(self) -> VideoWriter:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def status_page(output_dir: str) -> str:
    """Return the HTML status page."""
    return f"""
<!DOCTYPE html>
<html>
<head>
    <title>Webcam streaming server</title>
    <style>
        body {{ font-family: Arial, sans-serif; margin: 40px; }}
        .status {{ padding: 20px; background-color: #e0f7fa; border-radius: 5px; }}
    </style>
</head>
<body>
    <h1>Webcam streaming server</h1>
    <div class="status">
        <p>✅ Server is running and accepting connections</p>
        <p>Recordings directory: <code>{html.escape(str(output_dir))}</code></p>
    </div>
</body>
</html>
"""


def create_app(output_dir: str | Path) -> web.Application:
    """Build the application: /ws records streams, every other path shows status."""
    output_dir = str(output_dir)

    async def handle_ws(request: web.Request) -> web.WebSocketResponse:
        ws = web.WebSocketResponse()
        await ws.prepare(request)

        try:
            writer = VideoWriter(output_dir)
        except OSError as exc:
            log.error("Could not start recording: %s", exc)
            await ws.close()
            return ws

        client = request.remote
        log.info("Client connected: %s", client)
        with writer:
            async for msg in ws:
                if msg.type == WSMsgType.BINARY:
                    try:
                        writer.write(msg.data)
                    except OSError as exc:
                        log.error("Write error: %s", exc)
                        break
                elif msg.type == WSMsgType.ERROR:
                    log.error("Read error: %s", ws.exception())
                    break
        log.info("Client disconnected: %s", client)
        return ws

    async def handle_status(request: web.Request) -> web.Response:
        return web.Response(text=status_page(output_dir), content_type="text/html")

    app = web.Application()
    app.router.add_get("/ws", handle_ws)
    app.router.add_route("*", "/{tail:.*}", handle_status)
    return app


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse the server's command-line options."""
    parser = argparse.ArgumentParser(description="Receive and record webcam streams.")
    parser.add_argument(
        "-port", "--port", type=int, default=DEFAULT_PORT, help="port to listen on"
    )
    parser.add_argument(
        "-output",
        "--output",
        default=DEFAULT_OUTPUT,
        help="directory for recordings",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> None:
    """Run the server until interrupted."""
    args = parse_args(argv)
    logging.basicConfig(level=logging.INFO, format="%(asctime)s %(message)s")
    log.info("Starting server on port %d...", args.port)
    log.info("Server status available at http://localhost:%d", args.port)
    web.run_app(create_app(args.output), port=args.port, print=None)


if __name__ == "__main__":
    main()