from __future__ import annotations

from typing import Dict, Optional

from prometheus_client import CollectorRegistry, Gauge, generate_latest

from submer_exporter.models.realtime import EXPORTED_FIELDS, SmartPodSnapshot


NAMESPACE = "submer"
SUBSYSTEM = "smartpod"

GAUGE_HELP = {
    "temperature": "The temperature of the smartpod (°C)",
    "consumption": "The consumption of the smartpod (kW)",
    "dissipation": "The dissipation of the smartpod (kW)",
    "setpoint": "The setpoint of the smartpod (°C)",
    "mpue": "The mPUE of the smartpod",
    "pump1rpm": "The pump1rpm of the smartpod (rotations per minute)",
    "pump2rpm": "The pump2rpm of the smartpod (rotations per minute)",
}


class PodMetrics:
    """
    Fixed set of SmartPod gauges on a private CollectorRegistry.

    Each gauge is set independently: a scrape racing update() can see some
    values from the previous snapshot and some from the new one.
    """

    def __init__(self, registry: Optional[CollectorRegistry] = None):
        self.registry = registry or CollectorRegistry(auto_describe=True)
        self._gauges: Dict[str, Gauge] = {
            name: Gauge(
                name,
                GAUGE_HELP[name],
                namespace=NAMESPACE,
                subsystem=SUBSYSTEM,
                registry=self.registry,
            )
            for name in EXPORTED_FIELDS
        }

    # ------------------------------------------------------------------
    @property
    def names(self) -> tuple[str, ...]:
        return tuple(self._gauges)

    def set(self, name: str, value: float) -> None:
        self._gauges[name].set(value)

    def update(self, snapshot: SmartPodSnapshot) -> None:
        for name, value in snapshot.readings().items():
            self.set(name, value)

    # ------------------------------------------------------------------
    def value(self, name: str) -> float:
        sample = self.registry.get_sample_value(f"{NAMESPACE}_{SUBSYSTEM}_{name}")
        if sample is None:
            raise KeyError(name)
        return sample

    def values(self) -> Dict[str, float]:
        return {name: self.value(name) for name in self._gauges}

    def render(self) -> bytes:
        return generate_latest(self.registry)
