import re
from datetime import datetime

import pytest
from aiohttp.test_utils import TestClient, TestServer

from camstream.server import VideoWriter, create_app, parse_args, status_page


def test_writer_file_name_from_timestamp(tmp_path):
    writer = VideoWriter(tmp_path, now=datetime(2024, 1, 2, 3, 4, 5))
    try:
        assert writer.path.name == "webcam_2024-01-02_03-04-05.h264"
        assert writer.path.exists()
    finally:
        writer.close()


def test_writer_creates_nested_directory(tmp_path):
    target = tmp_path / "a" / "b"
    with VideoWriter(target) as writer:
        assert writer.path.parent == target
        assert re.fullmatch(
            r"webcam_\d{4}-\d{2}-\d{2}_\d{2}-\d{2}-\d{2}\.h264", writer.path.name
        )


def test_writer_appends_data(tmp_path):
    with VideoWriter(tmp_path) as writer:
        writer.write(b"\x00\x00\x00\x01")
        writer.write(b"\x65\x88")
    assert writer.path.read_bytes() == b"\x00\x00\x00\x01\x65\x88"
    assert writer.closed


def test_writer_close_is_idempotent_and_blocks_writes(tmp_path):
    writer = VideoWriter(tmp_path)
    writer.close()
    writer.close()
    with pytest.raises(ValueError):
        writer.write(b"late")


def test_writer_fails_when_directory_is_a_file(tmp_path):
    blocker = tmp_path / "file"
    blocker.write_text("x")
    with pytest.raises(OSError):
        VideoWriter(blocker)


def test_status_page_shows_directory():
    page = status_page("recordings")
    assert "<code>recordings</code>" in page
    assert page.strip().startswith("<!DOCTYPE html>")


def test_status_page_escapes_directory():
    page = status_page("<dir>")
    assert "<dir>" not in page
    assert "&lt;dir&gt;" in page


def test_parse_args_defaults():
    args = parse_args([])
    assert args.port == 8080
    assert args.output == "recordings"


def test_parse_args_single_dash_flags():
    args = parse_args(["-port", "9000", "-output", "out"])
    assert (args.port, args.output) == (9000, "out")


def test_parse_args_rejects_non_numeric_port():
    with pytest.raises(SystemExit):
        parse_args(["-port", "abc"])


@pytest.mark.asyncio
async def test_websocket_stream_is_recorded(tmp_path):
    client = TestClient(TestServer(create_app(tmp_path)))
    await client.start_server()
    try:
        ws = await client.ws_connect("/ws")
        await ws.send_bytes(b"\x00\x00\x00\x01")
        await ws.send_str("ignored text")
        await ws.send_bytes(b"\x67\x42")
        await ws.close()
    finally:
        await client.close()
    files = list(tmp_path.glob("webcam_*.h264"))
    assert len(files) == 1
    assert files[0].read_bytes() == b"\x00\x00\x00\x01\x67\x42"


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/", "/anything/else"])
async def test_status_served_on_any_path(tmp_path, path):
    client = TestClient(TestServer(create_app(tmp_path)))
    await client.start_server()
    try:
        resp = await client.get(path)
        body = await resp.text()
        assert resp.status == 200
        assert resp.content_type == "text/html"
        assert str(tmp_path) in body
    finally:
        await client.close()