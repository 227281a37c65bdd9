import pytest

from sockhttp.errors import NetworkError, SocketWriteError
from sockhttp.writer import write_all, write_resilient

from fakes import FakeChannel


def test_returns_full_write_count():
    channel = FakeChannel()
    assert write_resilient(channel, b"hello") == 5
    assert channel.sent == b"hello"
    assert channel.poll_calls == 0


def test_returns_partial_write_without_retrying():
    channel = FakeChannel(write_results=[3])
    assert write_resilient(channel, b"hello") == 3
    assert channel.sent == b"hel"
    assert channel.write_calls == 1


def test_zero_write_on_unwritable_channel_is_backpressure():
    channel = FakeChannel(write_results=[0], writable=False)
    assert write_resilient(channel, b"hello") == 0
    assert channel.poll_calls == 1
    assert channel.write_calls == 1


def test_zero_write_on_writable_channel_retries_once():
    channel = FakeChannel(write_results=[0, 5], writable=True)
    assert write_resilient(channel, b"hello") == 5
    assert channel.write_calls == 2


def test_second_zero_write_on_writable_channel_is_broken():
    channel = FakeChannel(write_results=[0, 0], writable=True)
    with pytest.raises(SocketWriteError):
        write_resilient(channel, b"hello")
    assert channel.write_calls == 2


def test_broken_channel_is_a_network_error():
    channel = FakeChannel(write_results=[0, 0], writable=True)
    with pytest.raises(NetworkError):
        write_resilient(channel, b"hello")


def test_retry_count_is_tunable():
    channel = FakeChannel(write_results=[0, 0, 0, 5], writable=True)
    assert write_resilient(channel, b"hello", retries=3) == 5
    assert channel.write_calls == 4


def test_zero_retries_fails_on_first_ambiguous_zero():
    channel = FakeChannel(write_results=[0], writable=True)
    with pytest.raises(SocketWriteError):
        write_resilient(channel, b"hello", retries=0)


def test_empty_buffer_writes_nothing():
    channel = FakeChannel()
    assert write_resilient(channel, b"") == 0
    assert channel.write_calls == 0


def test_write_all_loops_over_partial_writes():
    channel = FakeChannel(write_results=[2, 1, 10])
    write_all(channel, b"hello world")
    assert channel.sent == b"hello world"
    assert channel.write_calls == 3


def test_write_all_waits_out_backpressure():
    # write 0 -> probe says not writable -> wait says writable -> write succeeds
    channel = FakeChannel(write_results=[0, 5], writable=[False, True])
    write_all(channel, b"hello", wait_timeout=1.0)
    assert channel.sent == b"hello"


def test_write_all_fails_when_channel_never_becomes_writable():
    channel = FakeChannel(write_results=[0], writable=False)
    with pytest.raises(SocketWriteError, match="Timed out waiting"):
        write_all(channel, b"hello", wait_timeout=0.01)
