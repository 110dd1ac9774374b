"""
Data models for anomaly detection results.
"""

from dataclasses import dataclass
from enum import Enum

from envmonitor.core.models import Reading
from envmonitor.core.protocol import encode_reading


class AnomalyType(Enum):
    """Out-of-range conditions that can be injected into simulated readings"""

    TEMPERATURE_LOW = "temperature_low"
    TEMPERATURE_HIGH = "temperature_high"
    HUMIDITY_LOW = "humidity_low"
    HUMIDITY_HIGH = "humidity_high"
    LIGHT_LOW = "light_low"
    LIGHT_HIGH = "light_high"


@dataclass(frozen=True)
class QueryResult:
    """A reading enriched with its anomaly flag and deviation.

    Derived on every query from the current thresholds, never stored.
    """

    reading: Reading
    is_anomalous: bool
    deviation: float

    @property
    def timestamp_ms(self) -> int:
        return self.reading.timestamp_ms

    @property
    def temperature(self) -> float:
        return self.reading.temperature

    @property
    def humidity(self) -> float:
        return self.reading.humidity

    @property
    def light(self) -> float:
        return self.reading.light

    def describe(self) -> str:
        """Human-readable line with anomaly status and deviation"""
        return (
            f"{encode_reading(self.reading)}, "
            f"Anomalous: {'YES' if self.is_anomalous else 'NO'}, "
            f"Deviation: {self.deviation:.2f}"
        )
