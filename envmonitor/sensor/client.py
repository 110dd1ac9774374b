"""
Sensor client sending readings to the ingest server.
"""

import socket
import time

import structlog

from envmonitor.core.models import Reading
from envmonitor.core.protocol import encode_reading

from .models import ClientConfig
from .simulator import SensorSimulator

logger = structlog.get_logger(__name__)


class SensorClient:
    """Connects to the ingest server with retry and sends encoded readings"""

    def __init__(self, config: ClientConfig, simulator: SensorSimulator | None = None):
        self.config = config
        self.simulator = simulator or SensorSimulator(config)
        self.sock: socket.socket | None = None

        self.stats = {
            "connect_attempts": 0,
            "sent": 0,
            "send_errors": 0,
        }

    @property
    def connected(self) -> bool:
        return self.sock is not None

    def read_sensor_data(self) -> Reading:
        return self.simulator.read()

    def connect(self, max_retries: int | None = None, retry_delay: float | None = None) -> bool:
        """Open a fresh connection, trying up to `max_retries` times

        Args:
            max_retries: Number of attempts (default: config.max_retries)
            retry_delay: Seconds to sleep between attempts (default: config.retry_delay_seconds)
        """
        if self.connected:
            logger.debug("Already connected", host=self.config.host, port=self.config.port)
            return True

        max_retries = self.config.max_retries if max_retries is None else max_retries
        retry_delay = self.config.retry_delay_seconds if retry_delay is None else retry_delay

        for attempt in range(1, max_retries + 1):
            self.stats["connect_attempts"] += 1
            try:
                self.sock = socket.create_connection(
                    (self.config.host, self.config.port),
                    timeout=self.config.connect_timeout_seconds,
                )
            except OSError as e:
                logger.warning(
                    "Connection attempt failed",
                    host=self.config.host,
                    port=self.config.port,
                    attempt=attempt,
                    max_retries=max_retries,
                    error=str(e),
                )
                if attempt < max_retries and retry_delay > 0:
                    time.sleep(retry_delay)
                continue

            logger.info("Connected to server", host=self.config.host, port=self.config.port)
            return True

        logger.error(
            "Failed to connect to server",
            host=self.config.host,
            port=self.config.port,
            attempts=max_retries,
        )
        return False

    def send(self, reading: Reading) -> bool:
        """Send one reading, reconnecting once if needed. Failure disconnects."""
        if not self.connected:
            logger.warning("Not connected, attempting to reconnect")
            if not self.connect(1, 0):
                self.stats["send_errors"] += 1
                return False

        try:
            self.sock.sendall((encode_reading(reading) + "\n").encode("utf-8"))
        except OSError as e:
            logger.error("Send failed", error=str(e))
            self.stats["send_errors"] += 1
            self.disconnect()
            return False

        self.stats["sent"] += 1
        return True

    def receive_response(self) -> str:
        """Read whatever the server sent; empty string on error or closed connection"""
        if not self.connected:
            logger.warning("Not connected, cannot receive")
            return ""

        try:
            data = self.sock.recv(self.config.buffer_size)
        except OSError as e:
            logger.error("Receive failed", error=str(e))
            self.disconnect()
            return ""

        if not data:
            logger.info("Server closed the connection")
            self.disconnect()
            return ""

        return data.decode("utf-8", errors="replace")

    def disconnect(self) -> None:
        if self.sock is not None:
            self.sock.close()
            self.sock = None

    def run(self, duration_seconds: float | None = None):
        """Send readings continuously or for a specified duration

        Args:
            duration_seconds: Optional duration in seconds. If None, runs indefinitely.
        """
        interval = self.config.send_interval_seconds
        logger.info(
            "Starting sensor client",
            host=self.config.host,
            port=self.config.port,
            interval=interval,
            duration=duration_seconds if duration_seconds else "indefinite",
        )

        start_time = time.time()
        last_log_time = start_time

        try:
            while True:
                elapsed = time.time() - start_time
                if duration_seconds and elapsed >= duration_seconds:
                    logger.info("Duration limit reached", duration_seconds=duration_seconds)
                    break

                if not self.connected and not self.connect():
                    logger.warning("Failed to connect, will retry later")
                    time.sleep(interval * 2)
                    continue

                reading = self.read_sensor_data()
                if self.send(reading):
                    logger.debug("Reading sent", reading=encode_reading(reading))
                else:
                    logger.error("Failed to send reading")

                # Log stats every 10 seconds
                if time.time() - last_log_time >= 10:
                    logger.info("Client stats", elapsed_sec=round(elapsed, 1), **self.stats)
                    last_log_time = time.time()

                time.sleep(interval)

        except KeyboardInterrupt:
            logger.info("Received interrupt signal, stopping client")

        finally:
            self.disconnect()
            logger.info(
                "Sensor client stopped",
                elapsed_sec=round(time.time() - start_time, 1),
                **self.stats,
            )
