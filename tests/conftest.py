import socket
import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import httpx
import pytest

from remote_reader import http


STALL_SECONDS = 1.5
DRIP_CHUNKS = 8
DRIP_INTERVAL = 0.4

ROUTES = {
    '/json/valid': b'{"content": 1}',
    '/json/invalid': b'boom',
    '/json/array': b'[1, 2, 3]',
    '/empty': b'',
    '/bytes': b'hello from the remote end',
}


class _Handler(BaseHTTPRequestHandler):

    def do_GET(self) -> None:
        try:
            self._route()
        except (BrokenPipeError, ConnectionResetError):
            # the client gave up on a slow route
            pass

    def _route(self) -> None:
        if self.path == '/user-agent':
            # http.server decodes header bytes as latin-1, send them back raw
            self._reply(200, self.headers.get('User-Agent', '').encode('latin-1'))
        elif self.path == '/stall':
            time.sleep(STALL_SECONDS)
            self._reply(200, b'late')
        elif self.path == '/drip':
            self.send_response(200)
            self.send_header('Content-Length', str(DRIP_CHUNKS))
            self.end_headers()
            for _ in range(DRIP_CHUNKS):
                self.wfile.write(b'x')
                self.wfile.flush()
                time.sleep(DRIP_INTERVAL)
        elif self.path == '/redirect':
            self.send_response(302)
            self.send_header('Location', '/bytes')
            self.send_header('Content-Length', '0')
            self.end_headers()
        elif self.path in ROUTES:
            self._reply(200, ROUTES[self.path])
        else:
            self._reply(404, b'missing')

    def _reply(self, status: int, body: bytes) -> None:
        self.send_response(status)
        self.send_header('Content-Type', 'application/octet-stream')
        self.send_header('Content-Length', str(len(body)))
        self.end_headers()
        self.wfile.write(body)

    def log_message(self, format, *args) -> None:
        pass


@pytest.fixture(scope='session')
def server_url():
    '''Base URL of a local HTTP server serving the fixed ROUTES.'''
    server = ThreadingHTTPServer(('127.0.0.1', 0), _Handler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f'http://{host}:{port}'
    server.shutdown()
    server.server_close()


@pytest.fixture
def closed_port_url():
    '''URL on a local port nothing is listening on.'''
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as sock:
        sock.bind(('127.0.0.1', 0))
        port = sock.getsockname()[1]
    return f'http://127.0.0.1:{port}/'


@pytest.fixture
def mock_transport(monkeypatch):
    '''
    Replace the per-read transport with an `httpx.MockTransport` driven
    by `handler`, returns the list of requests the transport received.
    '''
    def install(handler):
        requests: list[httpx.Request] = []

        def record(request: httpx.Request) -> httpx.Response:
            requests.append(request)
            return handler(request)

        def fake_build_transport(**_kwargs):
            return httpx.MockTransport(record)

        monkeypatch.setattr(http, 'build_transport', fake_build_transport)
        return requests

    return install
