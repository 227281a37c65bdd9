import logging

from .errors import SocketWriteError
from .transport import Channel

log = logging.getLogger(__name__)


def write_resilient(channel: Channel, data: bytes, retries: int = 1) -> int:
    """Writes ``data`` once, telling backpressure apart from a dead peer.

    A zero-byte write is ambiguous. If a non-blocking poll says the channel
    is not writable the zero is returned as backpressure. Otherwise the write
    is retried ``retries`` times and a further zero means the channel is
    broken. Partial writes are returned as-is.
    """
    if not data:
        return 0

    written = channel.write(data)
    if written:
        return written

    if not channel.poll_writable(0.0):
        return 0

    for _ in range(retries):
        log.warning("zero-byte write on a writable channel, retrying")
        written = channel.write(data)
        if written:
            return written

    raise SocketWriteError("Failed to write to channel, connection appears broken.")


def write_all(channel: Channel, data: bytes, retries: int = 1, wait_timeout: float | None = None) -> None:
    """Writes every byte of ``data``, waiting out backpressure up to ``wait_timeout``."""
    view = memoryview(data)
    while view:
        written = write_resilient(channel, view, retries)
        if written:
            view = view[written:]
            continue

        log.debug("channel not writable, waiting")
        if not channel.poll_writable(wait_timeout):
            raise SocketWriteError("Timed out waiting for channel to become writable.")
