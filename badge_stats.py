"""Request counters reported by the badge service."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from datetime import datetime, timezone


class FrequencyCounter:
    """Count generated badges per requested name."""

    def __init__(self) -> None:
        self._counts: dict[str, int] = {}
        self._lock = threading.Lock()

    def record(self, name: str) -> None:
        with self._lock:
            self._counts[name] = self._counts.get(name, 0) + 1

    def snapshot(self) -> dict[str, int]:
        with self._lock:
            return dict(self._counts)


@dataclass(frozen=True)
class StatsSnapshot:
    num_requests: int
    num_errors: int
    last_error: str
    processing_time: float
    average_processing_time: float

    def as_dict(self) -> dict[str, int | float | str]:
        return {
            "num_requests": self.num_requests,
            "num_errors": self.num_errors,
            "last_error": self.last_error,
            "processing_time": self.processing_time,
            "average_processing_time": self.average_processing_time,
        }


class ServiceStats:
    """Request, error and latency totals for one endpoint."""

    def __init__(self) -> None:
        self.started = datetime.now(timezone.utc)
        self._num_requests = 0
        self._num_errors = 0
        self._last_error = ""
        self._processing_time = 0.0
        self._lock = threading.Lock()

    def record(self, elapsed: float, error: str | None = None) -> None:
        with self._lock:
            self._num_requests += 1
            self._processing_time += elapsed
            if error:
                self._num_errors += 1
                self._last_error = error

    def snapshot(self) -> StatsSnapshot:
        with self._lock:
            average = (
                self._processing_time / self._num_requests
                if self._num_requests
                else 0.0
            )
            return StatsSnapshot(
                num_requests=self._num_requests,
                num_errors=self._num_errors,
                last_error=self._last_error,
                processing_time=self._processing_time,
                average_processing_time=average,
            )
