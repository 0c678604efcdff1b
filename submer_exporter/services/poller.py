from __future__ import annotations

import threading
from typing import Optional

from submer_exporter.errors import SmartPodError
from submer_exporter.services.pod_metrics import PodMetrics
from submer_exporter.services.smartpod_client import SmartPodClient


class Poller:
    """
    Background loop: fetch, push into the gauges, sleep, repeat.

    Spacing between ticks is fetch duration plus ``interval``. A failed
    tick is logged and leaves the gauges as they were; the next tick is
    the only retry.
    """

    def __init__(self, client: SmartPodClient, metrics: PodMetrics, log, interval: float = 1.0):
        self.client = client
        self.metrics = metrics
        self.log = log
        self.interval = interval
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    # ----------------------------------------------------------------------
    def run_once(self) -> bool:
        try:
            snapshot = self.client.fetch()
        except SmartPodError as exc:
            self.log.warning("SmartPod poll failed (%s): %s", type(exc).__name__, exc)
            return False

        self.log.debug("Summary: %s", snapshot.summary())
        self.metrics.update(snapshot)
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                self.run_once()
            except Exception:
                self.log.exception("Unexpected error in SmartPod poll loop")
            self._stop.wait(self.interval)

    # ----------------------------------------------------------------------
    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self._thread is not None:
            raise RuntimeError("Poller already started")
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, daemon=True, name="smartpod-poller")
        self._thread.start()
        self.log.info(
            "Polling %s every %ss (timeout %ss)",
            self.client.url,
            self.interval,
            self.client.cfg.timeout,
        )

    def stop(self, timeout: Optional[float] = None) -> None:
        self._stop.set()
        if self._thread is not None:
            self._thread.join(timeout)
