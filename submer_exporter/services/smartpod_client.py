from __future__ import annotations

import json
import time
from typing import Optional

import requests

from submer_exporter.config import SmartPodConfig
from submer_exporter.errors import (
    DecodeError,
    RequestBuildError,
    TransportError,
    UpstreamStatusError,
)
from submer_exporter.models.realtime import SmartPodSnapshot


# Buffered reads block until the chunk is full, so read byte-wise to be able
# to check the deadline between bytes of a trickling body.
READ_CHUNK = 1


class SmartPodClient:
    """Fetch and decode the SmartPod realTime document.

    ``cfg.timeout`` bounds the whole exchange (connect, headers and body),
    not just each socket read.
    """

    def __init__(self, cfg: SmartPodConfig, log, session: Optional[requests.Session] = None):
        self.cfg = cfg
        self.log = log
        self.session = session or requests.Session()

    # ------------------------------------------------------------------
    @property
    def url(self) -> str:
        return self.cfg.api_url

    def _timed_out(self) -> TransportError:
        return TransportError(f"request to {self.url} timed out after {self.cfg.timeout}s")

    def _get(self) -> requests.Response:
        try:
            return self.session.get(self.url, timeout=self.cfg.timeout, stream=True)
        except (
            requests.exceptions.MissingSchema,
            requests.exceptions.InvalidSchema,
            requests.exceptions.InvalidURL,
        ) as exc:
            raise RequestBuildError(f"cannot build request for {self.url!r}: {exc}") from exc
        except requests.exceptions.Timeout as exc:
            raise self._timed_out() from exc
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"request to {self.url} failed: {exc}") from exc

    def _read_body(self, resp, deadline: float) -> bytes:
        body = bytearray()
        try:
            for chunk in resp.iter_content(chunk_size=READ_CHUNK):
                if time.monotonic() > deadline:
                    raise self._timed_out()
                body.extend(chunk)
        except requests.exceptions.RequestException as exc:
            raise TransportError(f"reading response from {self.url} failed: {exc}") from exc
        return bytes(body)

    # ------------------------------------------------------------------
    def fetch(self) -> SmartPodSnapshot:
        deadline = time.monotonic() + self.cfg.timeout
        resp = self._get()
        try:
            if time.monotonic() > deadline:
                raise self._timed_out()
            if not 200 <= resp.status_code < 300:
                raise UpstreamStatusError(resp.status_code, self.url)
            body = self._read_body(resp, deadline)
        finally:
            resp.close()

        try:
            payload = json.loads(body)
        except ValueError as exc:
            raise DecodeError(f"{self.url} returned non-JSON payload: {exc}") from exc

        snapshot = SmartPodSnapshot.from_payload(payload)
        self.log.debug("SmartPod realTime fetched from %s", self.url)
        return snapshot
