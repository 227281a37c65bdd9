from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .http_protocol import HttpRequest


class HttpcError(Exception):
    """Base exception for the sockhttp library."""
    pass


class ClientError(HttpcError):
    """An error tied to one outbound request.

    Transport code raises these before it knows which request it is serving;
    the client attaches the request on the way out.
    """

    def __init__(self, message: str = "", request: HttpRequest | None = None) -> None:
        super().__init__(message)
        self.request = request

    def attach(self, request: HttpRequest) -> ClientError:
        if self.request is None:
            self.request = request
        return self


# --- Request Errors ---

class RequestError(ClientError):
    """The request cannot be sent, whatever the state of the network."""
    pass


# --- Network Errors ---

class NetworkError(ClientError):
    """Connecting, writing or reading failed."""
    pass

class DnsFailureError(NetworkError): pass
class SocketConnectError(NetworkError): pass
class TlsHandshakeError(NetworkError): pass
class SocketWriteError(NetworkError): pass
class SocketReadError(NetworkError): pass
class ResponseTimeoutError(NetworkError): pass
class HttpParseError(NetworkError): pass
class StreamClosedError(NetworkError): pass
