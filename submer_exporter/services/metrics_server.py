from __future__ import annotations

import socket
import threading
from socketserver import ThreadingMixIn
from typing import Optional
from wsgiref.simple_server import WSGIRequestHandler, WSGIServer, make_server

from prometheus_client import make_wsgi_app

from submer_exporter.services.pod_metrics import PodMetrics


METRICS_PATH = "/metrics"


class _ThreadingWSGIServer(ThreadingMixIn, WSGIServer):
    """One thread per scrape."""

    daemon_threads = True


def _server_class_for(host: str, port: int):
    """Server class whose address family matches host (IPv4 or IPv6)."""
    infos = socket.getaddrinfo(host or None, port, type=socket.SOCK_STREAM, flags=socket.AI_PASSIVE)
    family = infos[0][0]
    return type("_ThreadingWSGIServer", (_ThreadingWSGIServer,), {"address_family": family})


def _handler_for(log):
    class _LoggingHandler(WSGIRequestHandler):
        def log_message(self, format, *args):
            log.debug("[%s] %s", self.address_string(), format % args)

    return _LoggingHandler


class MetricsServer:
    """
    Serve the gauges of a PodMetrics instance on GET /metrics.

    The socket is bound in the constructor, so a bad host/port raises
    OSError before anything else is started.
    """

    def __init__(self, metrics: PodMetrics, host: str, port: int, log):
        self.metrics = metrics
        self.log = log
        self._metrics_app = make_wsgi_app(metrics.registry)
        self._httpd = make_server(
            host,
            port,
            self._app,
            server_class=_server_class_for(host, port),
            handler_class=_handler_for(log),
        )
        self._thread: Optional[threading.Thread] = None

    # ------------------------------------------------------------------
    def _app(self, environ, start_response):
        if environ.get("PATH_INFO") != METRICS_PATH:
            start_response("404 Not Found", [("Content-Type", "text/plain; charset=utf-8")])
            return [b"Not Found\n"]
        return self._metrics_app(environ, start_response)

    @property
    def address(self) -> tuple[str, int]:
        host, port = self._httpd.server_address[:2]
        return host, port

    # ------------------------------------------------------------------
    def serve_forever(self) -> None:
        host, port = self.address
        self.log.info("Serving at %s:%d", host, port)
        self._httpd.serve_forever()

    def start(self) -> None:
        self._thread = threading.Thread(target=self.serve_forever, daemon=True, name="metrics-http")
        self._thread.start()

    def shutdown(self) -> None:
        if self._thread is not None:
            self._httpd.shutdown()
            self._thread.join()
            self._thread = None
        self._httpd.server_close()
