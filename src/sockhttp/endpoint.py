import logging
from dataclasses import dataclass

from .errors import RequestError
from .http_protocol import DEFAULT_PORTS, HttpRequest

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Endpoint:
    host: str
    port: int
    transport: str = "tcp"

    @property
    def tls(self) -> bool:
        return self.transport == "tls"

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def __str__(self) -> str:
        host = f"[{self.host}]" if ":" in self.host else self.host
        return f"{self.transport}://{host}:{self.port}"


def _split_host_header(value: str, default_port: int) -> tuple[str, int]:
    value = value.strip()
    if value.startswith("["):
        host, _, rest = value[1:].partition("]")
        port = rest[1:] if rest.startswith(":") else ""
    elif value.count(":") == 1:
        host, _, port = value.partition(":")
    else:
        host, port = value, ""

    if not port:
        return host, default_port
    if not port.isdigit():
        raise RequestError(f"Invalid port in Host header: '{value}'")
    return host, int(port)


def resolve_endpoint(request: HttpRequest) -> Endpoint:
    try:
        scheme = request.scheme
        host = request.host
        port = request.port
    except ValueError as e:
        raise RequestError(f"Invalid request URL '{request.url}': {e}", request) from e

    transport = "tls" if scheme == "https" else "tcp"
    default_port = DEFAULT_PORTS.get(scheme, 80)

    if host:
        endpoint = Endpoint(host, port or default_port, transport)
    elif request.headers.get("Host"):
        try:
            host, port = _split_host_header(request.headers.get_line("Host"), default_port)
        except RequestError as e:
            e.attach(request)
            raise
        if not host:
            raise RequestError("Cannot determine destination host", request)
        endpoint = Endpoint(host, port, transport)
    else:
        raise RequestError("Cannot determine destination host", request)

    log.debug("resolved %s to %s", request.url, endpoint)
    return endpoint
