"""Shared test fixtures."""

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer
from urllib.parse import parse_qs, urlparse

import pytest


class _WaitHandler(BaseHTTPRequestHandler):
    """Answers ``GET /test?wait=<seconds>`` with 200 after sleeping."""

    protocol_version = "HTTP/1.1"

    def do_GET(self):
        query = parse_qs(urlparse(self.path).query)
        time.sleep(float(query.get("wait", ["0"])[0]))
        body = b"ok"
        try:
            self.send_response(200)
            self.send_header("Content-Type", "text/plain")
            self.send_header("Content-Length", str(len(body)))
            self.end_headers()
            self.wfile.write(body)
        except (BrokenPipeError, ConnectionResetError):
            # client gave up (timeout tests)
            self.close_connection = True

    def log_message(self, format, *args):
        pass


@pytest.fixture
def http_server():
    server = ThreadingHTTPServer(("127.0.0.1", 0), _WaitHandler)
    thread = threading.Thread(target=server.serve_forever, daemon=True)
    thread.start()
    host, port = server.server_address[:2]
    yield f"http://{host}:{port}/test"
    server.shutdown()
    server.server_close()


CANONICAL_DURATIONS = [
    "0s",
    "1ns",
    "999ns",
    "1.1µs",
    "2.2ms",
    "300ms",
    "3.3s",
    "5s",
    "1m30s",
    "4m5.001s",
    "5h6m7.001s",
    "8m0.000000001s",
    "1h0m0s",
    "2h45m0s",
    "-1.5s",
    "-7ns",
    "2562047h47m16.854775807s",
    "-2562047h47m16.854775808s",
]
