import pytest
import socket
import threading

from dataclasses import dataclass
from typing import Callable, ContextManager
from contextlib import contextmanager


@dataclass
class ServerDetails:
    host: str = ""
    port: int = 0


@pytest.fixture
def server_factory() -> Callable[[Callable[[socket.socket], None]], ContextManager[ServerDetails]]:
    """
    Runs a one-shot TCP server on 127.0.0.1 in a background thread.

    The handler receives the accepted client socket, which is closed once the
    handler returns.
    """
    @contextmanager
    def _factory(handler: Callable[[socket.socket], None]):
        details = ServerDetails()

        def server_loop(listener: socket.socket):
            try:
                client_sock, _ = listener.accept()
                with client_sock:
                    handler(client_sock)
            except (socket.timeout, OSError):
                pass

        listener_sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
        listener_sock.bind(("127.0.0.1", 0))
        details.host, details.port = listener_sock.getsockname()

        server_thread = None
        try:
            listener_sock.settimeout(2.0)
            listener_sock.listen()
            server_thread = threading.Thread(target=server_loop, args=(listener_sock,))
            server_thread.start()
            yield details
        finally:
            # Connect once to unblock accept() if the client never did.
            try:
                with socket.create_connection((details.host, details.port), timeout=0.1):
                    pass
            except OSError:
                pass

            if server_thread:
                server_thread.join(timeout=2.0)
            listener_sock.close()

    return _factory


def recv_request(sock: socket.socket) -> bytes:
    """Reads from the socket until a full request with its declared body has arrived."""
    data = b""
    while b"\r\n\r\n" not in data:
        chunk = sock.recv(4096)
        if not chunk:
            return data
        data += chunk

    head, _, body = data.partition(b"\r\n\r\n")
    content_length = 0
    for line in head.split(b"\r\n")[1:]:
        name, _, value = line.partition(b":")
        if name.strip().lower() == b"content-length":
            content_length = int(value.strip())

    while len(body) < content_length:
        chunk = sock.recv(4096)
        if not chunk:
            break
        body += chunk

    return head + b"\r\n\r\n" + body


@pytest.fixture
def read_request() -> Callable[[socket.socket], bytes]:
    return recv_request
