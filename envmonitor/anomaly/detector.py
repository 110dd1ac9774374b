"""
Threshold classification and deviation scoring.

Comparisons follow IEEE-754 semantics: a NaN field never compares outside its
range, so it neither flags the reading nor adds to its deviation.
"""

from collections.abc import Iterable

from envmonitor.core.models import Reading, Thresholds

from .models import QueryResult


def _bounds(reading: Reading, thresholds: Thresholds) -> tuple[tuple[float, float, float], ...]:
    return (
        (reading.temperature, thresholds.min_temp, thresholds.max_temp),
        (reading.humidity, thresholds.min_humidity, thresholds.max_humidity),
        (reading.light, thresholds.min_light, thresholds.max_light),
    )


def is_anomalous(reading: Reading, thresholds: Thresholds) -> bool:
    """True if any dimension is strictly below its min or strictly above its max"""
    return any(value < low or value > high for value, low, high in _bounds(reading, thresholds))


def find_anomalies(readings: Iterable[Reading], thresholds: Thresholds) -> list[Reading]:
    """Anomalous readings of a batch, in input order"""
    return [reading for reading in readings if is_anomalous(reading, thresholds)]


def deviation(reading: Reading, thresholds: Thresholds) -> float:
    """Sum over all dimensions of the distance outside the normal range.

    Zero when the reading is within every range.
    """
    total = 0.0
    for value, low, high in _bounds(reading, thresholds):
        if value < low:
            total += low - value
        if value > high:
            total += value - high
    return total


class AnomalyDetector:
    """Evaluates readings against a fixed set of thresholds"""

    def __init__(self, thresholds: Thresholds | None = None):
        self.thresholds = thresholds if thresholds is not None else Thresholds()

    def is_anomalous(self, reading: Reading) -> bool:
        return is_anomalous(reading, self.thresholds)

    def find_anomalies(self, readings: Iterable[Reading]) -> list[Reading]:
        return find_anomalies(readings, self.thresholds)

    def deviation(self, reading: Reading) -> float:
        return deviation(reading, self.thresholds)

    def evaluate(self, reading: Reading) -> QueryResult:
        """Project a reading to a QueryResult"""
        return QueryResult(
            reading=reading,
            is_anomalous=self.is_anomalous(reading),
            deviation=self.deviation(reading),
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(thresholds={self.thresholds})"
