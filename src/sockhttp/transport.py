from typing import Protocol


class Channel(Protocol):
    """A connected duplex byte stream.

    Reads never raise on timeout: they return what arrived and leave
    ``timed_out`` set, so callers check the flag after each read phase.
    """

    @property
    def timed_out(self) -> bool:
        ...

    @property
    def closed(self) -> bool:
        ...

    def read(self, size: int) -> bytes:
        ...

    def readline(self) -> bytes:
        ...

    def read_all(self) -> bytes:
        ...

    def write(self, data: bytes) -> int:
        ...

    def poll_writable(self, timeout: float = 0.0) -> bool:
        ...

    def eof(self) -> bool:
        ...

    def tell(self) -> int:
        ...

    def close(self) -> None:
        ...
