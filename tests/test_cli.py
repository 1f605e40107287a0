import asyncio
import io

import pytest

from camstream.cli import CLI, Config, parse_args
from camstream.domain import VideoDevice
from camstream.service import WebcamService


class RecordingLogger:
    def __init__(self):
        self.infos = []
        self.errors = []

    def info(self, msg, *args):
        self.infos.append((msg, args))

    def error(self, msg, *args):
        self.errors.append((msg, args))

    def debug(self, msg, *args):
        pass


class FakeTrack:
    def __init__(self):
        self.closed = False

    @property
    def id(self):
        return "cam-0"

    def close(self):
        self.closed = True

    def create_reader(self):
        raise NotImplementedError


class FakeCamera:
    def __init__(self, devices=(), fail=None):
        self.devices = list(devices)
        self.fail = fail
        self.tracks = []

    def list_devices(self):
        return self.devices

    def open_camera(self, config):
        if self.fail:
            raise self.fail
        track = FakeTrack()
        self.tracks.append(track)
        return track


class FakeStreamer:
    def __init__(self):
        self.started = asyncio.Event()
        self.configs = []
        self.stopped = 0

    async def start_streaming(self, track, config):
        self.configs.append(config)
        self.started.set()
        await asyncio.Event().wait()

    async def stop_streaming(self):
        self.stopped += 1


def test_parse_args_defaults():
    config = parse_args([])
    assert config == Config(
        address="localhost:8080",
        width=640,
        height=480,
        fps=30,
        bit_rate=1_000_000,
        debug=False,
        list_devices=False,
        device_id="",
    )


def test_parse_args_flags():
    config = parse_args(
        ["-addr", "example.com:9000", "-width", "1280", "-height", "720", "-fps", "25",
         "-bitrate", "2000000", "-debug", "-list-devices", "-device", "dev-test"]
    )
    assert config.address == "example.com:9000"
    assert (config.width, config.height, config.fps) == (1280, 720, 25)
    assert config.bit_rate == 2000000
    assert config.debug and config.list_devices
    assert config.device_id == "dev-test"


def test_parse_args_rejects_non_numeric_width():
    with pytest.raises(SystemExit):
        parse_args(["-width", "wide"])


def test_video_config_mirrors_options():
    config = Config(address="example.com:9000", width=320, height=240, fps=15,
                    bit_rate=500, device_id="dev-test")
    video = config.video_config()
    assert video.streaming_url == "ws://example.com:9000/ws"
    assert video.codec_name == "h264"
    assert (video.width, video.height, video.frame_rate, video.bit_rate) == (320, 240, 15, 500)
    assert video.device_id == "dev-test"


def test_list_devices_output():
    devices = [VideoDevice("dev-a", "Front", "videoinput"), VideoDevice("dev-b", "Mic", "audioinput")]
    service = WebcamService(FakeCamera(devices), FakeStreamer(), RecordingLogger())
    out = io.StringIO()
    CLI(service, RecordingLogger(), Config(), out=out).list_devices()
    assert out.getvalue().splitlines() == [
        "Available devices:",
        "[0] Front (videoinput)",
        "[1] Mic (audioinput)",
    ]


@pytest.mark.asyncio
async def test_run_lists_devices_without_capturing():
    camera = FakeCamera([VideoDevice("dev-a", "Front", "videoinput")])
    service = WebcamService(camera, FakeStreamer(), RecordingLogger())
    out = io.StringIO()
    await CLI(service, RecordingLogger(), Config(list_devices=True), out=out).run()
    assert "[0] Front (videoinput)" in out.getvalue()
    assert camera.tracks == []


@pytest.mark.asyncio
async def test_run_captures_until_interrupted():
    camera = FakeCamera()
    streamer = FakeStreamer()
    logger = RecordingLogger()
    service = WebcamService(camera, streamer, logger)
    cli = CLI(service, logger, Config())
    task = asyncio.create_task(cli.run())
    await asyncio.wait_for(streamer.started.wait(), 1)
    assert not task.done()
    cli.interrupt()
    await asyncio.wait_for(task, 1)
    assert streamer.configs[0].streaming_url == "ws://localhost:8080/ws"
    assert streamer.stopped == 1
    assert camera.tracks[0].closed
    assert not service.active


@pytest.mark.asyncio
async def test_run_propagates_camera_failure():
    service = WebcamService(FakeCamera(fail=OSError("busy")), FakeStreamer(), RecordingLogger())
    cli = CLI(service, RecordingLogger(), Config())
    with pytest.raises(OSError, match="busy"):
        await cli.run()
    assert not service.active