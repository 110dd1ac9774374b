"""
Predefined configurations for different operational scenarios.
"""

from .models import ClientConfig

# Normal operation (plain uniform readings)
NORMAL_CONFIG = ClientConfig(send_interval_seconds=5.0)


# Chaos mode (frequent out-of-range readings)
CHAOS_CONFIG = ClientConfig(
    send_interval_seconds=1.0,
    anomaly_probability=0.2,  # 20%
)


# Development/Testing (fast, few retries)
DEV_CONFIG = ClientConfig(
    send_interval_seconds=0.5,
    max_retries=3,
    retry_delay_seconds=0.5,
    anomaly_probability=0.05,
)
