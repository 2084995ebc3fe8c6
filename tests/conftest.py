"""Shared fixtures for tests that need a real HTTP peer."""
import socket
import threading

import pytest

TRUNCATED_HEADERS = (
    b"HTTP/1.1 200 OK\r\n"
    b"Content-Type: application/json\r\n"
    b"Content-Length: 1000\r\n"
    b"Connection: close\r\n"
    b"\r\n"
)


@pytest.fixture
def truncated_server():
    """Serve one response that promises 1000 bytes and closes after a fragment."""
    listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    listener.bind(('127.0.0.1', 0))
    listener.listen(1)
    listener.settimeout(10)
    host, port = listener.getsockname()

    def serve():
        conn, _ = listener.accept()
        with conn:
            request = b''
            while b'\r\n\r\n' not in request:
                chunk = conn.recv(4096)
                if not chunk:
                    break
                request += chunk
            conn.sendall(TRUNCATED_HEADERS + b'{"events": [')

    thread = threading.Thread(target=serve, daemon=True)
    thread.start()

    yield f"http://{host}:{port}/api/v1/event/"

    thread.join(timeout=10)
    listener.close()
