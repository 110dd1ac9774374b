"""
Pytest configuration and shared fixtures.
"""

import pytest

from envmonitor.core.models import Reading, Thresholds
from envmonitor.ingest.models import ServerConfig
from envmonitor.sensor.models import ClientConfig
from envmonitor.storage.persistence import ReadingPersistence
from envmonitor.storage.store import ReadingStore


@pytest.fixture
def thresholds():
    """Default thresholds {15, 30, 30, 70, 100, 1000}."""
    return Thresholds()


@pytest.fixture
def normal_reading():
    return Reading(timestamp_ms=1640995200000, temperature=22.0, humidity=45.0, light=500.0)


@pytest.fixture
def sample_readings():
    """One normal reading followed by four anomalous ones."""
    return [
        Reading(1000, 22.0, 45.0, 500.0),  # normal
        Reading(2000, 12.0, 50.0, 300.0),  # low temperature
        Reading(3000, 25.0, 80.0, 250.0),  # high humidity
        Reading(4000, 35.0, 55.0, 50.0),  # high temperature and low light
        Reading(5000, 26.0, 65.0, 1200.0),  # high light
    ]


@pytest.fixture
def store(thresholds):
    return ReadingStore(thresholds)


@pytest.fixture
def persistence(tmp_path):
    return ReadingPersistence(tmp_path / "sensor_data.bin", tmp_path / "anomalies.json")


@pytest.fixture
def server_config():
    """Server bound to an ephemeral loopback port with fast shutdown polling."""
    return ServerConfig(host="127.0.0.1", port=0, max_workers=4, poll_interval_seconds=0.05)


@pytest.fixture
def client_config():
    """Client configuration with fast retries for testing."""
    return ClientConfig(
        host="127.0.0.1",
        port=8080,
        connect_timeout_seconds=1.0,
        max_retries=2,
        retry_delay_seconds=0.01,
        send_interval_seconds=0.01,
    )
