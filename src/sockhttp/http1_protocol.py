import logging
from dataclasses import replace

from .body_stream import BodyStream
from .config import ClientConfig
from .errors import HttpParseError, RequestError, ResponseTimeoutError
from .headers import Headers
from .http_protocol import DefaultResponseFactory, HttpRequest, HttpResponse, ResponseFactory
from .transport import Channel
from .writer import write_all

log = logging.getLogger(__name__)

_BODILESS_STATUSES = (204, 304)


class Http1Protocol:
    _HEADER_ENCODING = "latin-1"

    def __init__(self, config: ClientConfig | None = None, response_factory: ResponseFactory | None = None) -> None:
        self._config = config or ClientConfig()
        self._response_factory = response_factory or DefaultResponseFactory()

    def prepare_request(self, request: HttpRequest) -> HttpRequest:
        """Returns a copy of ``request`` carrying the headers this client always sends."""
        if "Host" not in request.headers and request.host:
            headers = Headers([("Host", request.authority)])
            for name, values in request.headers.items():
                for value in values:
                    headers.add(name, value)
            request = replace(request, headers=headers)

        request = request.with_header("Connection", "close")

        if "Content-Length" not in request.headers:
            size = request.body_size()
            if size is None:
                raise RequestError("Request body of unknown size needs an explicit Content-Length header.", request)
            if size:
                request = request.with_header("Content-Length", str(size))

        if "User-Agent" not in request.headers:
            request = request.with_header("User-Agent", self._config.default_user_agent)

        return request

    def build_head(self, request: HttpRequest) -> bytes:
        lines = [f"{request.method_name} {request.target} HTTP/{request.version}"]
        for name, values in request.headers.items():
            value = ", ".join(values)
            if any(c in name or c in value for c in "\r\n") or ":" in name:
                raise RequestError(f"Invalid header '{name}'", request)
            lines.append(f"{name}: {value}")
        lines.append("")
        lines.append("")

        try:
            return "\r\n".join(lines).encode(self._HEADER_ENCODING)
        except UnicodeEncodeError as e:
            raise RequestError(f"Request head is not encodable as {self._HEADER_ENCODING}: {e}", request) from e

    def write_request(self, channel: Channel, request: HttpRequest) -> HttpRequest:
        request = self.prepare_request(request)
        head = self.build_head(request)

        log.debug("sending %s %s", request.method_name, request.target)
        write_all(channel, head, self._config.write_retries, self._config.effective_read_timeout)

        body = request.body_stream()
        readable = getattr(body, "readable", None)
        if readable is None or readable():
            self._write_body(channel, body)

        return request

    def _write_body(self, channel: Channel, body) -> None:
        seekable = getattr(body, "seekable", None)
        if seekable is not None and seekable():
            body.seek(0)

        sent = 0
        while True:
            chunk = body.read(self._config.write_buffer_size)
            if not chunk:
                break
            write_all(channel, chunk, self._config.write_retries, self._config.effective_read_timeout)
            sent += len(chunk)
        log.debug("sent %d body bytes", sent)

    def read_response(self, channel: Channel, request: HttpRequest | None = None) -> HttpResponse:
        lines = []
        while True:
            raw = channel.readline()
            if not raw:
                break
            line = raw.decode(self._HEADER_ENCODING).strip()
            if line == "":
                break
            lines.append(line)

        if not lines:
            raise HttpParseError("Cannot read the response, no headers.")

        if channel.timed_out:
            raise ResponseTimeoutError("Error while reading response, stream timed out.")

        status_line = lines.pop(0)
        parts = status_line.split(" ", 2)
        if len(parts) < 2:
            raise HttpParseError(f"Cannot read the response, malformed status line '{status_line}'.")

        try:
            status_code = int(parts[1])
        except ValueError:
            raise HttpParseError(f"Invalid status code in status line '{status_line}'.")

        version = parts[0][-3:]
        reason = parts[2] if len(parts) > 2 else ""
        log.debug("got %03d %s", status_code, reason)

        response = self._response_factory.create_response(status_code, reason)
        response.version = version

        headers = Headers()
        for line in lines:
            name, _, value = line.partition(":")
            name = name.strip()
            if name:
                headers.add(name, value.strip())
        response.headers = headers

        response.body = BodyStream(channel, self._body_size(response, request))
        return response

    def _body_size(self, response: HttpResponse, request: HttpRequest | None) -> int | None:
        if request is not None and request.method_name == "HEAD":
            return 0
        if response.status_code < 200 or response.status_code in _BODILESS_STATUSES:
            return 0

        value = response.headers.get("Content-Length")
        if value is None:
            return None
        try:
            size = int(value)
        except ValueError:
            log.debug("ignoring invalid Content-Length %r", value)
            return None
        return size if size >= 0 else None
