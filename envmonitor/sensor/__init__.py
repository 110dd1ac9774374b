"""
Simulated Environmental Sensor
Generates temperature, humidity and light readings and sends them to the ingest
server with connection retry.
"""

from .client import SensorClient
from .config import CHAOS_CONFIG, DEV_CONFIG, NORMAL_CONFIG
from .models import ClientConfig
from .simulator import SensorSimulator

__all__ = [
    "ClientConfig",
    "SensorClient",
    "SensorSimulator",
    "NORMAL_CONFIG",
    "CHAOS_CONFIG",
    "DEV_CONFIG",
]
