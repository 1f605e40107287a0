# camstream

Send an already encoded webcam stream over a WebSocket and record it on a
server as raw H.264 files.

The package has two halves:

- **A recording server** (`camstream.server`). It accepts WebSocket
  connections on `/ws`, writes every binary message it receives into a new
  file named `webcam_<YYYY-MM-DD_HH-MM-SS>.h264` in the output directory, and
  answers every other path with a small HTML status page.
- **Streaming client pieces** (`camstream.domain`, `camstream.streaming`,
  `camstream.service`, `camstream.cli`). They open a video track through a
  camera manager you supply, read encoded frames from it and push each one to
  the server as a binary WebSocket message.

## Installation

```
pip install camstream
```

For running the tests:

```
pip install "camstream[test]"
pytest
```

## Running the server

```
camstream-server --port 8080 --output recordings
```

Both options are optional (single-dash forms `-port` and `-output` work as
well). By default the server listens on port 8080 and writes its recordings
to `./recordings`, creating the directory if it does not exist yet. Open
`http://localhost:8080/` to see the status page. Each client connection gets
its own file, which is closed when the client disconnects.

The aiohttp application can also be built in code:

```python
from aiohttp import web
from camstream.server import create_app

web.run_app(create_app("recordings"), port=8080)
```

`VideoWriter(output_dir)` is the file writer the server uses; it can be used
on its own as a context manager, with `write(data)` and `close()`.

## Streaming from a client

The building blocks in `camstream.domain`:

- `VideoConfig`: width, height, frame rate, bit rate, device id, codec name
  and the WebSocket URL to stream to.
- `VideoFrame`: encoded bytes and a frame number; `size` is the byte length.
- `VideoTrack` and `VideoReader`: protocols a camera backend implements. A
  track creates a reader; a reader's `read()` returns a `VideoFrame`, or
  `None` when nothing was read.
- `CameraManager`: lists `VideoDevice` entries and opens a `VideoTrack` for a
  `VideoConfig`.
- `StreamManager` and `Logger`: the protocols the streamer and the logger
  satisfy.

`WebSocketStreamer(logger, debug_mode=False)` (in `camstream.streaming`) has
an async `start_streaming(track, config)` that connects to
`config.streaming_url` (a `ws`, `wss`, `http` or `https` URL, otherwise
`ValueError`), then reads frames and sends them until reading or sending
fails or the task is cancelled. `stop_streaming()` closes the connection,
`send_frame(frame)` sends one frame if connected, and `is_connected()`
reports the connection state.

`WebcamService(camera_manager, stream_manager, logger)` (in
`camstream.service`) ties them together: `list_devices()` returns the
devices, the async `start_capture(config)` opens the camera and streams it in
a background task (replacing any capture already running), and the async
`stop_capture()` cancels the stream and closes the track. Calling
`stop_capture()` with nothing running raises `CaptureError`.

`camstream.cli.parse_args(argv)` turns command-line options (`--addr`,
`--width`, `--height`, `--fps`, `--bitrate`, `--debug`, `--list-devices`,
`--device`) into a `Config`, with defaults `localhost:8080`, 640x480 at
30 fps and 1,000,000 bps. `Config.video_config()` builds the matching
`VideoConfig`, streaming to `ws://<address>/ws` with the `h264` codec.
`CLI(webcam_service, logger, config)` has `list_devices()`, which prints the
devices as `[index] label (kind)`, and an async `run()` that either lists
devices or starts a capture, waits for Ctrl+C (or a call to `interrupt()`)
and then stops it.

```python
import asyncio
from camstream.cli import CLI, parse_args
from camstream.logger import StdLogger
from camstream.service import WebcamService
from camstream.streaming import WebSocketStreamer

config = parse_args()
logger = StdLogger(config.debug)
service = WebcamService(my_camera_manager, WebSocketStreamer(logger, config.debug), logger)
asyncio.run(CLI(service, logger, config).run())
```

## What is not included

The package has no camera backend and no ready-made client command: it
cannot open a webcam or encode video by itself. To stream, supply an object
implementing `CameraManager` (and the `VideoTrack`/`VideoReader` it returns)
for your platform and wire it up as above. Only `camstream-server` is
installed as a command.

## Logging

`camstream.logger.StdLogger(debug_enabled=False)` writes through the
standard `logging` module under the `camstream` logger. Errors are prefixed
with `ERROR: `, and debug messages (prefixed with `DEBUG: `) are only written
when debugging is enabled. With debugging on, the streamer reports the number
of frames sent, the average frame rate and the size of the last frame every
30 frames.