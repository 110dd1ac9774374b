"""
Configuration for the simulated sensor client.
"""

from dataclasses import dataclass

from envmonitor.anomaly.models import AnomalyType


@dataclass
class ClientConfig:
    """Configuration for the sensor client"""

    # Server settings
    host: str = "127.0.0.1"
    port: int = 8080
    connect_timeout_seconds: float = 5.0
    buffer_size: int = 1024

    # Retry settings
    max_retries: int = 10
    retry_delay_seconds: float = 1.0

    # Generation settings
    send_interval_seconds: float = 5.0
    temperature_range: tuple[float, float] = (18.0, 30.0)  # degrees Celsius
    humidity_range: tuple[float, float] = (30.0, 70.0)  # percentage
    light_range: tuple[float, float] = (100.0, 1000.0)  # lux

    # Anomaly settings
    anomaly_probability: float = 0.0
    enabled_anomalies: list[AnomalyType] | None = None

    def __post_init__(self):
        if self.enabled_anomalies is None:
            self.enabled_anomalies = list(AnomalyType)
