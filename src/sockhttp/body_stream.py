import io
import logging

from .errors import HttpParseError, ResponseTimeoutError, StreamClosedError
from .transport import Channel

log = logging.getLogger(__name__)


class BodyStream:
    """Forward-only reader over the entity bytes left on a response channel.

    With a known ``size`` the stream stops at that many bytes even if the
    peer keeps the connection open. With ``size=None`` it reads until the
    peer closes. Closing the stream closes the channel.
    """

    def __init__(self, channel: Channel, size: int | None = None) -> None:
        self._channel: Channel | None = channel
        self._size = size
        self._bytes_read = 0

    @property
    def size(self) -> int | None:
        return self._size

    @property
    def bytes_read(self) -> int:
        return self._bytes_read

    @property
    def closed(self) -> bool:
        return self._channel is None or self._channel.closed

    def _require_channel(self) -> Channel:
        if self._channel is None or self._channel.closed:
            raise StreamClosedError("Cannot read from a closed body stream.")
        return self._channel

    def read(self, size: int = -1) -> bytes:
        if size is None or size < 0:
            return self.get_contents()

        channel = self._require_channel()

        if self._size is None:
            return channel.read(size)

        if self._bytes_read == self._size:
            return b""

        data = channel.read(min(size, self._size - self._bytes_read))
        if channel.timed_out:
            raise ResponseTimeoutError("Stream timed out while reading data.")

        self._bytes_read += len(data)
        return data

    def get_contents(self) -> bytes:
        channel = self._require_channel()

        if self._size is None:
            return channel.read_all()

        chunks = []
        while self._bytes_read < self._size:
            chunk = self.read(self._size - self._bytes_read)
            if not chunk:
                log.debug("peer closed after %d of %d body bytes", self._bytes_read, self._size)
                raise HttpParseError("Connection closed before full content length was received.")
            chunks.append(chunk)
        return b"".join(chunks)

    def eof(self) -> bool:
        if self._size is not None:
            return self._bytes_read == self._size
        return self._require_channel().eof()

    def tell(self) -> int:
        if self._size is not None:
            return self._bytes_read
        return self._require_channel().tell()

    def metadata(self) -> dict:
        channel = self._require_channel()
        return {
            "timed_out": channel.timed_out,
            "eof": self.eof(),
            "position": self.tell(),
            "size": self._size,
        }

    def close(self) -> None:
        if self._channel is not None:
            self._channel.close()

    def detach(self) -> Channel | None:
        channel, self._channel = self._channel, None
        return channel

    def readable(self) -> bool:
        return not self.closed

    def seekable(self) -> bool:
        return False

    def writable(self) -> bool:
        return False

    def seek(self, offset: int, whence: int = io.SEEK_SET) -> int:
        raise io.UnsupportedOperation("This stream is not seekable")

    def rewind(self) -> None:
        raise io.UnsupportedOperation("This stream is not seekable")

    def write(self, data: bytes) -> int:
        raise io.UnsupportedOperation("This stream is not writable")

    def __iter__(self):
        while True:
            chunk = self.read(8192)
            if not chunk:
                return
            yield chunk

    def __bytes__(self) -> bytes:
        return self.get_contents()

    def __enter__(self) -> "BodyStream":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def __del__(self) -> None:
        try:
            self.close()
        except Exception:
            pass
