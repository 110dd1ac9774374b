"""
Configuration for the ingest server.
"""

from dataclasses import dataclass, field

from envmonitor.core.models import Thresholds


@dataclass
class ServerConfig:
    """Configuration for the ingest server"""

    # Network settings
    host: str = "0.0.0.0"
    port: int = 8080  # 0 binds an ephemeral port
    backlog: int = 5
    buffer_size: int = 1024
    max_line_bytes: int = 4096  # unterminated input beyond this closes the connection

    # Worker settings
    max_workers: int = 16  # connections beyond this wait for a free handler
    poll_interval_seconds: float = 0.5  # how often blocked sockets re-check the running flag

    # Storage settings
    data_file: str = "sensor_data.bin"
    report_file: str = "anomalies.json"

    thresholds: Thresholds = field(default_factory=Thresholds)
