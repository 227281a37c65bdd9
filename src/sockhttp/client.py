import logging
from typing import BinaryIO, Iterable, Mapping

from .config import ClientConfig
from .endpoint import resolve_endpoint
from .errors import ClientError
from .headers import Headers
from .http1_protocol import Http1Protocol
from .http_protocol import HttpMethod, HttpRequest, HttpResponse, ResponseFactory
from .tcp_transport import open_channel

log = logging.getLogger(__name__)

HeadersLike = Headers | Mapping[str, str] | Iterable[tuple[str, str]] | None


class HttpClient:
    """Sends each request over its own freshly opened connection."""

    def __init__(self, config: ClientConfig | None = None, response_factory: ResponseFactory | None = None) -> None:
        self._config = config or ClientConfig()
        self._protocol = Http1Protocol(self._config, response_factory)

    @property
    def config(self) -> ClientConfig:
        return self._config

    def send_request(self, request: HttpRequest) -> HttpResponse:
        try:
            endpoint = resolve_endpoint(request)
            channel = open_channel(endpoint, self._config)
        except ClientError as e:
            e.attach(request)
            raise

        try:
            self._protocol.write_request(channel, request)
            response = self._protocol.read_response(channel, request)
        except ClientError as e:
            channel.close()
            e.attach(request)
            raise
        except BaseException:
            channel.close()
            raise

        log.debug("%s %s -> %d", request.method_name, request.url, response.status_code)
        return response

    def request(
        self,
        method: HttpMethod | str,
        url: str,
        headers: HeadersLike = None,
        body: bytes | BinaryIO = b"",
    ) -> HttpResponse:
        return self.send_request(HttpRequest(method=method, url=url, headers=Headers(headers), body=body))

    def get(self, url: str, headers: HeadersLike = None) -> HttpResponse:
        return self.request(HttpMethod.GET, url, headers)

    def head(self, url: str, headers: HeadersLike = None) -> HttpResponse:
        return self.request(HttpMethod.HEAD, url, headers)

    def post(self, url: str, body: bytes | BinaryIO, headers: HeadersLike = None) -> HttpResponse:
        return self.request(HttpMethod.POST, url, headers, body)

    def put(self, url: str, body: bytes | BinaryIO, headers: HeadersLike = None) -> HttpResponse:
        return self.request(HttpMethod.PUT, url, headers, body)

    def delete(self, url: str, headers: HeadersLike = None) -> HttpResponse:
        return self.request(HttpMethod.DELETE, url, headers)
