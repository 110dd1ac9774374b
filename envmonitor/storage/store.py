"""
Thread-safe append-only reading history with a filter/sort query engine.

The history is never evicted: it grows for the lifetime of the process.
"""

import threading
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

import structlog

from envmonitor.anomaly.detector import AnomalyDetector
from envmonitor.anomaly.models import QueryResult
from envmonitor.core.models import Reading, Thresholds

from .persistence import ReadingPersistence

logger = structlog.get_logger(__name__)


class SortCriteria(Enum):
    """Sort key and direction for query results"""

    TIMESTAMP_ASC = "ts_asc"
    TIMESTAMP_DESC = "ts_desc"
    TEMPERATURE_ASC = "temp_asc"
    TEMPERATURE_DESC = "temp_desc"
    HUMIDITY_ASC = "hum_asc"
    HUMIDITY_DESC = "hum_desc"
    LIGHT_ASC = "light_asc"
    LIGHT_DESC = "light_desc"
    DEVIATION_ASC = "dev_asc"
    DEVIATION_DESC = "dev_desc"

    @property
    def descending(self) -> bool:
        return self.value.endswith("_desc")


_SORT_KEYS: dict[str, Callable[[QueryResult], float]] = {
    "ts": lambda result: result.timestamp_ms,
    "temp": lambda result: result.temperature,
    "hum": lambda result: result.humidity,
    "light": lambda result: result.light,
    "dev": lambda result: result.deviation,
}


@dataclass(frozen=True)
class QueryParams:
    """Query options.

    anomalous_only: True keeps anomalous results, False keeps normal ones,
    None keeps all.
    """

    anomalous_only: bool | None = None
    sort_by: SortCriteria = SortCriteria.TIMESTAMP_ASC


class ReadingStore:
    """Owns the reading history; share one instance between server and query callers"""

    def __init__(self, thresholds: Thresholds | None = None):
        self.detector = AnomalyDetector(thresholds)
        self._readings: list[Reading] = []
        self._lock = threading.Lock()

    @property
    def thresholds(self) -> Thresholds:
        return self.detector.thresholds

    def append(self, reading: Reading) -> None:
        """Append a reading. Field values are stored as-is, without validation."""
        with self._lock:
            self._readings.append(reading)

    def query(self, params: QueryParams | None = None) -> list[QueryResult]:
        """Project, filter and sort the history as one consistent snapshot"""
        params = params or QueryParams()
        key = _SORT_KEYS[params.sort_by.value.rsplit("_", 1)[0]]

        with self._lock:
            results = [self.detector.evaluate(reading) for reading in self._readings]

            if params.anomalous_only is not None:
                results = [r for r in results if r.is_anomalous == params.anomalous_only]

            # sorted() is stable in both directions, ties keep insertion order
            return sorted(results, key=key, reverse=params.sort_by.descending)

    def count(self) -> int:
        with self._lock:
            return len(self._readings)

    def all_readings(self) -> list[Reading]:
        with self._lock:
            return list(self._readings)

    def save_to(self, persistence: ReadingPersistence) -> bool:
        """Replace the persisted file with the full history"""
        with self._lock:
            snapshot = list(self._readings)
        saved = persistence.replace_all(snapshot)
        if saved:
            logger.info("History saved", count=len(snapshot), path=str(persistence.binary_path))
        return saved

    def load_from(self, persistence: ReadingPersistence) -> int:
        """Append every persisted reading to the history, returns how many were loaded"""
        loaded = persistence.load_all()
        with self._lock:
            self._readings.extend(loaded)
        logger.info("History loaded", count=len(loaded), path=str(persistence.binary_path))
        return len(loaded)
