from __future__ import annotations

import io
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import TYPE_CHECKING, BinaryIO, Protocol
from urllib.parse import urlsplit

from .headers import Headers

if TYPE_CHECKING:
    from .body_stream import BodyStream


DEFAULT_PORTS = {"http": 80, "https": 443}


class HttpMethod(Enum):
    GET = "GET"
    HEAD = "HEAD"
    POST = "POST"
    PUT = "PUT"
    PATCH = "PATCH"
    DELETE = "DELETE"
    OPTIONS = "OPTIONS"


@dataclass(frozen=True)
class HttpRequest:
    method: HttpMethod | str = HttpMethod.GET
    url: str = "/"
    version: str = "1.1"
    headers: Headers = field(default_factory=Headers)
    body: bytes | BinaryIO = b""

    def __post_init__(self) -> None:
        if not isinstance(self.headers, Headers):
            object.__setattr__(self, "headers", Headers(self.headers))

    @property
    def method_name(self) -> str:
        if isinstance(self.method, HttpMethod):
            return self.method.value
        return self.method.upper()

    @property
    def scheme(self) -> str:
        return urlsplit(self.url).scheme.lower()

    @property
    def host(self) -> str:
        return urlsplit(self.url).hostname or ""

    @property
    def port(self) -> int | None:
        return urlsplit(self.url).port

    @property
    def authority(self) -> str:
        """Host header value for the URL: IPv6 bracketed, port only when not the default."""
        host = self.host
        if ":" in host:
            host = f"[{host}]"
        port = self.port
        if port is not None and port != DEFAULT_PORTS.get(self.scheme):
            host = f"{host}:{port}"
        return host

    @property
    def target(self) -> str:
        if self.url == "*":
            return self.url
        parts = urlsplit(self.url)
        target = parts.path or "/"
        if parts.query:
            target += "?" + parts.query
        return target

    def body_size(self) -> int | None:
        """Length of the body in bytes, or None when it cannot be known up front."""
        if isinstance(self.body, (bytes, bytearray, memoryview)):
            return len(self.body)
        if isinstance(self.body, io.BytesIO):
            return self.body.getbuffer().nbytes
        seekable = getattr(self.body, "seekable", None)
        if seekable is not None and seekable():
            position = self.body.tell()
            size = self.body.seek(0, io.SEEK_END)
            self.body.seek(position)
            return size
        return None

    def body_stream(self) -> BinaryIO:
        if isinstance(self.body, (bytes, bytearray, memoryview)):
            return io.BytesIO(self.body)
        return self.body

    def with_header(self, name: str, value: str) -> HttpRequest:
        headers = self.headers.copy()
        headers.set(name, value)
        return replace(self, headers=headers)

    def with_added_header(self, name: str, value: str) -> HttpRequest:
        headers = self.headers.copy()
        headers.add(name, value)
        return replace(self, headers=headers)


@dataclass
class HttpResponse:
    status_code: int
    reason: str = ""
    version: str = "1.1"
    headers: Headers = field(default_factory=Headers)
    body: BodyStream | None = None

    def read(self) -> bytes:
        if self.body is None:
            return b""
        return self.body.get_contents()

    def text(self, encoding: str = "utf-8") -> str:
        return self.read().decode(encoding, errors="replace")

    def close(self) -> None:
        if self.body is not None:
            self.body.close()

    def __enter__(self) -> HttpResponse:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ResponseFactory(Protocol):
    def create_response(self, status_code: int, reason: str = "") -> HttpResponse:
        ...


class DefaultResponseFactory:
    def create_response(self, status_code: int, reason: str = "") -> HttpResponse:
        return HttpResponse(status_code=status_code, reason=reason)


def create_response(status_code: int, reason: str = "") -> HttpResponse:
    return DefaultResponseFactory().create_response(status_code, reason)

