# submer_exporter/models/realtime.py
from __future__ import annotations

import math
from dataclasses import dataclass, field, fields
from typing import Any, Dict, List

from submer_exporter.errors import DecodeError


# Keys of the realTime "data" object that are exported as gauges.
EXPORTED_FIELDS = (
    "temperature",
    "consumption",
    "dissipation",
    "setpoint",
    "mpue",
    "pump1rpm",
    "pump2rpm",
)


def _as_float(key: str, value: Any) -> float:
    if value is None:
        return 0.0
    # bool is an int subclass; the pod never sends booleans for readings.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise DecodeError(f"field '{key}' is not a number: {value!r}")
    try:
        number = float(value)
    except OverflowError as exc:
        raise DecodeError(f"field '{key}' does not fit a float") from exc
    if not math.isfinite(number):
        raise DecodeError(f"field '{key}' is not finite: {value!r}")
    return number


@dataclass
class SmartPodSnapshot:
    temperature: float = 0.0      # °C
    consumption: float = 0.0      # kW
    dissipation: float = 0.0      # kW
    setpoint: float = 0.0         # °C
    mpue: float = 0.0
    pump1rpm: float = 0.0
    pump2rpm: float = 0.0
    extra: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_payload(cls, payload: Any) -> "SmartPodSnapshot":
        """Decode a realTime response body.

        Missing or null readings decode to 0.0 and unknown keys land in
        ``extra``. A non-object top level or ``data`` value, or a
        non-numeric reading, raises DecodeError.
        """
        if payload is None:
            return cls()
        if not isinstance(payload, dict):
            raise DecodeError(
                f"expected a JSON object, got {type(payload).__name__}"
            )

        data = payload.get("data")
        if data is None:
            return cls()
        if not isinstance(data, dict):
            raise DecodeError(
                f"'data' is not an object: {type(data).__name__}"
            )

        readings = {key: _as_float(key, data.get(key)) for key in EXPORTED_FIELDS}
        extra = {k: v for k, v in data.items() if k not in EXPORTED_FIELDS}
        return cls(**readings, extra=extra)

    # ------------------------------------------------------------------
    def readings(self) -> Dict[str, float]:
        return {f.name: getattr(self, f.name) for f in fields(self) if f.name in EXPORTED_FIELDS}

    @property
    def alarm(self) -> bool:
        try:
            return bool(float(self.extra.get("alarm") or 0))
        except (TypeError, ValueError):
            return False

    @property
    def errors(self) -> List[Dict[str, Any]]:
        return [e for e in self.extra.get("errors") or [] if isinstance(e, dict)]

    @property
    def warnings(self) -> List[Dict[str, Any]]:
        return [w for w in self.extra.get("warnings") or [] if isinstance(w, dict)]

    @property
    def mode(self) -> str | None:
        mode = self.extra.get("mode")
        return mode if isinstance(mode, str) and mode else None

    def summary(self) -> str:
        parts = [f"{key}={value:g}" for key, value in self.readings().items()]
        parts.append(f"mode={self.mode or '-'}")
        parts.append(f"alarm={int(self.alarm)}")
        parts.append(f"errors={len(self.errors)}")
        parts.append(f"warnings={len(self.warnings)}")
        return " ".join(parts)
