# tests/test_smartpod_client.py

import threading
import time
from http.server import BaseHTTPRequestHandler, ThreadingHTTPServer

import pytest
import requests

from submer_exporter.config import SmartPodConfig
from submer_exporter.errors import (
    DecodeError,
    RequestBuildError,
    SmartPodError,
    TransportError,
    UpstreamStatusError,
)
from submer_exporter.logging import get_logger
from submer_exporter.services.smartpod_client import SmartPodClient
from submer_exporter.tests.fake_session import SAMPLE_PAYLOAD, FakeResponse, FakeSession


LOG = get_logger("smartpod-client-test")
URL = "http://pod.test/api/realTime"


def _client(*responses, **cfg_overrides):
    cfg = SmartPodConfig(api_url=URL, **cfg_overrides)
    session = FakeSession(*responses)
    return SmartPodClient(cfg, LOG, session=session), session


def test_fetch_decodes_snapshot():
    client, session = _client(FakeResponse(200, SAMPLE_PAYLOAD))

    snap = client.fetch()

    assert snap.temperature == 22.5
    assert snap.mpue == 1.02
    assert session.calls == [{"url": URL, "params": None, "timeout": 5.0, "stream": True}]


def test_timeout_comes_from_config():
    client, session = _client(FakeResponse(200, SAMPLE_PAYLOAD), timeout=2.5)
    client.fetch()
    assert session.calls[0]["timeout"] == 2.5


def test_http_error_status_raises():
    client, _ = _client(FakeResponse(500, {"data": {"temperature": 99.0}}))

    with pytest.raises(UpstreamStatusError) as excinfo:
        client.fetch()
    assert excinfo.value.status_code == 500


def test_non_json_body_raises_decode_error():
    client, _ = _client(FakeResponse(200, text="<html>maintenance</html>"))

    with pytest.raises(DecodeError):
        client.fetch()


@pytest.mark.parametrize(
    "exc, expected",
    [
        (requests.exceptions.ConnectionError("refused"), TransportError),
        (requests.exceptions.ReadTimeout("slow"), TransportError),
        (requests.exceptions.ConnectTimeout("slow"), TransportError),
        (requests.exceptions.MissingSchema("no scheme"), RequestBuildError),
        (requests.exceptions.InvalidURL("bad"), RequestBuildError),
    ],
)
def test_request_failures_map_to_error_taxonomy(exc, expected):
    client, _ = _client(exc)

    with pytest.raises(expected) as excinfo:
        client.fetch()
    assert isinstance(excinfo.value, SmartPodError)
    assert excinfo.value.__cause__ is exc


def test_malformed_url_with_real_session():
    cfg = SmartPodConfig(api_url="not a url")
    client = SmartPodClient(cfg, LOG)

    with pytest.raises(RequestBuildError):
        client.fetch()


def test_response_is_closed_after_success_and_error_status():
    ok = FakeResponse(200, SAMPLE_PAYLOAD)
    client, _ = _client(ok)
    client.fetch()
    assert ok.closed is True

    failed = FakeResponse(503, {"data": {}})
    client, _ = _client(failed)
    with pytest.raises(UpstreamStatusError):
        client.fetch()
    assert failed.closed is True


class TricklingPod:
    """Loopback API that sends its JSON body one byte at a time."""

    def __init__(self, delay):
        body = b'{"data": {"temperature": 22.5}}'

        class Handler(BaseHTTPRequestHandler):
            def do_GET(self):
                self.send_response(200)
                self.send_header("Content-Type", "application/json")
                self.send_header("Content-Length", str(len(body)))
                self.end_headers()
                for i in range(len(body)):
                    try:
                        self.wfile.write(body[i:i + 1])
                        self.wfile.flush()
                    except OSError:
                        return
                    time.sleep(delay)

            def log_message(self, format, *args):
                pass

        self.httpd = ThreadingHTTPServer(("127.0.0.1", 0), Handler)
        self.httpd.daemon_threads = True
        self.thread = threading.Thread(target=self.httpd.serve_forever, daemon=True)
        self.thread.start()

    @property
    def url(self):
        host, port = self.httpd.server_address[:2]
        return f"http://{host}:{port}/api/realTime"

    def close(self):
        self.httpd.shutdown()
        self.httpd.server_close()


def test_slow_body_hits_total_deadline():
    pod = TricklingPod(delay=0.3)
    session = requests.Session()
    session.trust_env = False
    client = SmartPodClient(SmartPodConfig(api_url=pod.url, timeout=1.0), LOG, session=session)
    try:
        started = time.monotonic()
        with pytest.raises(TransportError, match="timed out"):
            client.fetch()
        elapsed = time.monotonic() - started
    finally:
        pod.close()

    assert elapsed < 2.0
