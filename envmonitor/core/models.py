"""
Data models shared by the transport, storage and anomaly layers.
"""

import time
from dataclasses import dataclass


@dataclass(frozen=True)
class Reading:
    """One timestamped environmental sample.

    Equality is exact field-wise comparison, so readings that went through a
    lossy conversion (e.g. the 2-decimal wire format) may no longer compare
    equal to the original.
    """

    timestamp_ms: int  # milliseconds since Unix epoch
    temperature: float  # degrees Celsius
    humidity: float  # percentage
    light: float  # lux

    @staticmethod
    def now_ms() -> int:
        """Current wall-clock time in milliseconds since epoch"""
        return time.time_ns() // 1_000_000


@dataclass(frozen=True)
class Thresholds:
    """Inclusive normal-range bounds per dimension.

    min <= max is expected but not checked: an inverted range makes every
    value anomalous on that axis.
    """

    min_temp: float = 15.0
    max_temp: float = 30.0
    min_humidity: float = 30.0
    max_humidity: float = 70.0
    min_light: float = 100.0
    max_light: float = 1000.0
