"""
Simulated sensor readings.
"""

import random

from envmonitor.anomaly.models import AnomalyType
from envmonitor.core.models import Reading

from .models import ClientConfig


class SensorSimulator:
    """Draws readings from uniform distributions with optional anomaly injection"""

    def __init__(self, config: ClientConfig, rng: random.Random | None = None):
        self.config = config
        self.rng = rng or random.Random()

    def read(self, inject_anomaly: AnomalyType | None = None) -> Reading:
        """Generate one reading stamped with the current time

        Args:
            inject_anomaly: Optional anomaly to force. When omitted, one is
                picked with probability `anomaly_probability`.
        """
        if inject_anomaly is None and self.rng.random() < self.config.anomaly_probability:
            if self.config.enabled_anomalies:
                inject_anomaly = self.rng.choice(self.config.enabled_anomalies)

        temperature = self.rng.uniform(*self.config.temperature_range)
        humidity = self.rng.uniform(*self.config.humidity_range)
        light = self.rng.uniform(*self.config.light_range)

        if inject_anomaly == AnomalyType.TEMPERATURE_LOW:
            temperature = self.rng.uniform(-5.0, 10.0)
        elif inject_anomaly == AnomalyType.TEMPERATURE_HIGH:
            temperature = self.rng.uniform(35.0, 45.0)
        elif inject_anomaly == AnomalyType.HUMIDITY_LOW:
            humidity = self.rng.uniform(5.0, 20.0)
        elif inject_anomaly == AnomalyType.HUMIDITY_HIGH:
            humidity = self.rng.uniform(80.0, 95.0)
        elif inject_anomaly == AnomalyType.LIGHT_LOW:
            light = self.rng.uniform(0.0, 50.0)
        elif inject_anomaly == AnomalyType.LIGHT_HIGH:
            light = self.rng.uniform(1500.0, 3000.0)

        return Reading(
            timestamp_ms=Reading.now_ms(),
            temperature=temperature,
            humidity=humidity,
            light=light,
        )
