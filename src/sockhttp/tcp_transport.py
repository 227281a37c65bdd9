import logging
import select
import socket
import ssl

from .config import ClientConfig
from .endpoint import Endpoint
from .errors import (
    DnsFailureError,
    HttpParseError,
    SocketConnectError,
    SocketReadError,
    SocketWriteError,
    TlsHandshakeError,
)
from .transport import Channel

log = logging.getLogger(__name__)

_TLS_VERSIONS = {
    "TLSv1.2": ssl.TLSVersion.TLSv1_2,
    "TLSv1.3": ssl.TLSVersion.TLSv1_3,
}


def build_ssl_context(config: ClientConfig) -> ssl.SSLContext:
    context = ssl.create_default_context(cafile=config.ca_file)
    context.minimum_version = _TLS_VERSIONS[config.tls_min_version]
    if not config.verify_certificate:
        context.check_hostname = False
        context.verify_mode = ssl.CERT_NONE
    return context


class TcpTransport(Channel):
    _READ_CHUNK_SIZE = 4096
    _MAX_LINE_SIZE = 64 * 1024

    def __init__(self, config: ClientConfig | None = None) -> None:
        self._config = config or ClientConfig()
        self._sock: socket.socket | None = None
        self._buffer = bytearray()
        self._position = 0
        self._eof = False
        self._timed_out = False

    @property
    def timed_out(self) -> bool:
        return self._timed_out

    @property
    def closed(self) -> bool:
        return self._sock is None

    @property
    def tls_enabled(self) -> bool:
        return isinstance(self._sock, ssl.SSLSocket)

    def connect(self, endpoint: Endpoint) -> None:
        if self._sock is not None:
            raise SocketConnectError("Transport is already connected.")

        log.debug("connecting to %s", endpoint)
        try:
            sock = socket.create_connection(endpoint.address, timeout=self._config.connect_timeout)
        except socket.gaierror as e:
            raise DnsFailureError(f"DNS Failure for host '{endpoint.host}': {e}") from e
        except TimeoutError as e:
            raise SocketConnectError(f"Connection to {endpoint} timed out") from e
        except OSError as e:
            raise SocketConnectError(f"Socket connection failed: {e}") from e

        try:
            sock.setsockopt(socket.IPPROTO_TCP, socket.TCP_NODELAY, 1)
            if endpoint.tls:
                sock = self._start_tls(sock, endpoint)
            sock.settimeout(self._config.effective_read_timeout)
        except BaseException:
            sock.close()
            raise

        self._sock = sock

    def _start_tls(self, sock: socket.socket, endpoint: Endpoint) -> ssl.SSLSocket:
        log.debug("establishing tls layer (minimum %s)", self._config.tls_min_version)
        try:
            context = build_ssl_context(self._config)
            tls_sock = context.wrap_socket(sock, server_hostname=endpoint.host)
        except ssl.SSLError as e:
            raise TlsHandshakeError(f"Cannot enable tls: {e}") from e
        except OSError as e:
            raise TlsHandshakeError(f"Cannot enable tls: {e}") from e
        log.debug("negotiated %s with %s", tls_sock.version(), endpoint)
        return tls_sock

    def _recv(self, size: int) -> bytes:
        if self._sock is None:
            raise SocketReadError("Cannot read from a disconnected transport.")
        if self._eof or self._timed_out:
            return b""

        try:
            data = self._sock.recv(size)
        except TimeoutError:
            log.debug("read timed out")
            self._timed_out = True
            return b""
        except OSError as e:
            raise SocketReadError(f"Socket read failed: {e}") from e

        if not data:
            self._eof = True
        return data

    def _take(self, size: int) -> bytes:
        data = bytes(self._buffer[:size])
        del self._buffer[:size]
        self._position += len(data)
        return data

    def read(self, size: int) -> bytes:
        if size <= 0:
            return b""
        if self._buffer:
            return self._take(size)

        data = self._recv(size)
        self._position += len(data)
        return data

    def readline(self) -> bytes:
        while True:
            newline = self._buffer.find(b"\n")
            if newline != -1:
                return self._take(newline + 1)
            if len(self._buffer) > self._MAX_LINE_SIZE:
                raise HttpParseError("Response line exceeds maximum length.")

            chunk = self._recv(self._READ_CHUNK_SIZE)
            if not chunk:
                return self._take(len(self._buffer))
            self._buffer += chunk

    def read_all(self) -> bytes:
        chunks = []
        while True:
            chunk = self.read(64 * 1024)
            if not chunk:
                break
            chunks.append(chunk)
        return b"".join(chunks)

    def write(self, data: bytes) -> int:
        if self._sock is None:
            raise SocketWriteError("Cannot write on a disconnected transport.")

        try:
            return self._sock.send(data)
        except (BlockingIOError, InterruptedError, TimeoutError, ssl.SSLWantWriteError):
            return 0
        except OSError as e:
            raise SocketWriteError(f"Socket write failed: {e}") from e

    def poll_writable(self, timeout: float = 0.0) -> bool:
        if self._sock is None:
            return False
        _, writable, _ = select.select([], [self._sock], [], timeout)
        return bool(writable)

    def eof(self) -> bool:
        return self._eof and not self._buffer

    def tell(self) -> int:
        return self._position

    def close(self) -> None:
        if self._sock is not None:
            try:
                self._sock.close()
            finally:
                self._sock = None
                self._buffer.clear()


def open_channel(endpoint: Endpoint, config: ClientConfig | None = None) -> TcpTransport:
    transport = TcpTransport(config)
    transport.connect(endpoint)
    return transport
