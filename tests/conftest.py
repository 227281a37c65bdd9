import socket
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from typing import Callable

import pytest


@dataclass
class ServerDetails:
    host: str = ""
    port: int = 0

    @property
    def base_url(self) -> str:
        return f"http://{self.host}:{self.port}"


@pytest.fixture
def server_factory():
    @contextmanager
    def _factory(handler: Callable[[socket.socket], None]):
        listener_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener_sock.bind(("127.0.0.1", 0))
        details = ServerDetails(*listener_sock.getsockname())

        def server_loop():
            try:
                client_sock, _ = listener_sock.accept()
                with client_sock:
                    handler(client_sock)
            except OSError:
                pass

        listener_sock.settimeout(2.0)
        listener_sock.listen()
        server_thread = threading.Thread(target=server_loop, daemon=True)
        server_thread.start()
        try:
            yield details
        finally:
            server_thread.join(timeout=2.0)
            listener_sock.close()

    return _factory
