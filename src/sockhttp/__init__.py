__version__ = "0.1.0"

from .body_stream import BodyStream
from .client import HttpClient
from .config import ClientConfig
from .endpoint import Endpoint, resolve_endpoint
from .errors import (
    HttpcError,
    ClientError,
    RequestError,
    NetworkError,
)
from .headers import Headers
from .http_protocol import (
    HttpMethod,
    HttpRequest,
    HttpResponse,
    ResponseFactory,
    create_response,
)

__all__ = [
    "BodyStream",
    "ClientConfig",
    "ClientError",
    "Endpoint",
    "Headers",
    "HttpClient",
    "HttpMethod",
    "HttpRequest",
    "HttpResponse",
    "HttpcError",
    "NetworkError",
    "RequestError",
    "ResponseFactory",
    "create_response",
    "resolve_endpoint",
]
