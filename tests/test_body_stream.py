import io

import pytest

from sockhttp.body_stream import BodyStream
from sockhttp.errors import HttpParseError, ResponseTimeoutError, StreamClosedError

from fakes import FakeChannel


def test_get_contents_with_known_size():
    stream = BodyStream(FakeChannel(b"hello"), size=5)
    assert stream.get_contents() == b"hello"
    assert stream.eof()
    assert stream.get_contents() == b""


def test_get_contents_loops_over_short_reads():
    stream = BodyStream(FakeChannel(b"0123456789", chunk_size=3), size=10)
    assert stream.get_contents() == b"0123456789"
    assert stream.tell() == 10


def test_get_contents_after_partial_read_returns_remainder():
    stream = BodyStream(FakeChannel(b"0123456789", chunk_size=4), size=10)
    assert stream.read(4) == b"0123"
    assert stream.get_contents() == b"456789"


def test_known_size_ignores_bytes_past_declared_length():
    channel = FakeChannel(b"helloEXTRA")
    stream = BodyStream(channel, size=5)
    assert stream.read(100) == b"hello"
    assert stream.read(100) == b""
    assert stream.eof()
    assert not channel.eof()


def test_read_at_logical_eof_does_not_touch_channel():
    channel = FakeChannel(b"abc")
    stream = BodyStream(channel, size=3)
    stream.get_contents()
    channel.read = lambda size: pytest.fail("channel read past declared length")
    assert stream.read(10) == b""


def test_unknown_size_reads_until_peer_closes():
    channel = FakeChannel(b"streamed body", chunk_size=4)
    stream = BodyStream(channel)
    assert stream.size is None
    assert stream.read(4) == b"stre"
    assert stream.get_contents() == b"amed body"
    assert stream.eof()
    assert stream.tell() == 13


def test_read_timeout_raises():
    stream = BodyStream(FakeChannel(b"0123456789", time_out_after=4), size=10)
    assert stream.read(4) == b"0123"
    with pytest.raises(ResponseTimeoutError):
        stream.read(4)


def test_get_contents_timeout_raises():
    stream = BodyStream(FakeChannel(b"0123456789", chunk_size=2, time_out_after=6), size=10)
    with pytest.raises(ResponseTimeoutError):
        stream.get_contents()


def test_truncated_body_raises():
    stream = BodyStream(FakeChannel(b"abc"), size=10)
    with pytest.raises(HttpParseError, match="Connection closed before full content length"):
        stream.get_contents()


def test_close_closes_channel_and_blocks_further_reads():
    channel = FakeChannel(b"hello")
    stream = BodyStream(channel, size=5)
    stream.close()
    assert channel.closed
    assert stream.closed
    with pytest.raises(StreamClosedError):
        stream.read(1)
    with pytest.raises(StreamClosedError):
        stream.get_contents()


def test_context_manager_closes_channel():
    channel = FakeChannel(b"hello")
    with BodyStream(channel, size=5) as stream:
        assert stream.read(2) == b"he"
    assert channel.closed


def test_detach_hands_over_channel():
    channel = FakeChannel(b"hello")
    stream = BodyStream(channel, size=5)
    assert stream.detach() is channel
    stream.close()
    assert not channel.closed
    with pytest.raises(StreamClosedError):
        stream.read(1)


def test_stream_is_read_only_and_forward_only():
    stream = BodyStream(FakeChannel(b"hello"), size=5)
    assert stream.readable()
    assert not stream.seekable()
    assert not stream.writable()
    with pytest.raises(io.UnsupportedOperation):
        stream.seek(0)
    with pytest.raises(io.UnsupportedOperation):
        stream.rewind()
    with pytest.raises(io.UnsupportedOperation):
        stream.write(b"x")


def test_iteration_yields_all_chunks():
    stream = BodyStream(FakeChannel(b"a" * 20000), size=20000)
    assert b"".join(stream) == b"a" * 20000


def test_bytes_renders_contents():
    assert bytes(BodyStream(FakeChannel(b"hello"), size=5)) == b"hello"


def test_metadata_reports_position_and_timeout():
    channel = FakeChannel(b"hello")
    stream = BodyStream(channel, size=5)
    stream.read(2)
    assert stream.metadata() == {"timed_out": False, "eof": False, "position": 2, "size": 5}
