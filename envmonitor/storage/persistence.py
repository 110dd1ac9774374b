"""
Durable storage for readings.

Binary file: a header-less sequence of fixed-size little-endian records
(int64 timestamp_ms, float64 temperature, float64 humidity, float64 light).
JSON report: a pretty-printed array of anomalous readings.
"""

import json
import math
import struct
from collections.abc import Iterable
from pathlib import Path

import structlog

from envmonitor.core.models import Reading

logger = structlog.get_logger(__name__)

_RECORD = struct.Struct("<qddd")
RECORD_SIZE = _RECORD.size


def _finite_or_none(value: float) -> float | None:
    # JSON has no NaN or Infinity literals; non-finite values are reported as null
    return value if math.isfinite(value) else None


def _pack(reading: Reading) -> bytes:
    return _RECORD.pack(reading.timestamp_ms, reading.temperature, reading.humidity, reading.light)


class ReadingPersistence:
    """Append, replace and load readings in a binary file; export anomaly reports as JSON.

    There is no atomicity: a failed append or replace leaves the file in
    whatever partially-written state resulted.
    """

    def __init__(self, binary_path: str | Path, report_path: str | Path):
        self.binary_path = Path(binary_path)
        self.report_path = Path(report_path)

    def append(self, reading: Reading) -> bool:
        """Append one record"""
        return self._write([reading], mode="ab")

    def append_batch(self, readings: Iterable[Reading]) -> bool:
        """Append records in order, aborting at the first failed write"""
        return self._write(readings, mode="ab")

    def replace_all(self, readings: Iterable[Reading]) -> bool:
        """Truncate the file, then write the records in order"""
        return self._write(readings, mode="wb")

    def _write(self, readings: Iterable[Reading], mode: str) -> bool:
        written = 0
        try:
            with open(self.binary_path, mode) as f:
                for reading in readings:
                    if f.write(_pack(reading)) != RECORD_SIZE:
                        logger.error(
                            "Short write to data file", path=str(self.binary_path), written=written
                        )
                        return False
                    written += 1
        except (OSError, struct.error) as e:
            logger.error(
                "Failed to write data file",
                path=str(self.binary_path),
                written=written,
                error=str(e),
            )
            return False

        logger.debug("Records written", path=str(self.binary_path), count=written, mode=mode)
        return True

    def load_all(self) -> list[Reading]:
        """Read records until EOF; a truncated trailing record is silently dropped"""
        readings: list[Reading] = []
        try:
            with open(self.binary_path, "rb") as f:
                while True:
                    chunk = f.read(RECORD_SIZE)
                    if len(chunk) < RECORD_SIZE:
                        if chunk:
                            logger.warning(
                                "Ignoring truncated trailing record",
                                path=str(self.binary_path),
                                size=len(chunk),
                            )
                        break
                    readings.append(Reading(*_RECORD.unpack(chunk)))
        except FileNotFoundError:
            return readings
        except OSError as e:
            logger.error("Failed to read data file", path=str(self.binary_path), error=str(e))
        return readings

    def export_anomalies(self, anomalies: Iterable[Reading]) -> bool:
        """Write the given readings to the JSON report with full numeric precision"""
        payload = [
            {
                "timestamp_ms": reading.timestamp_ms,
                "temperature": _finite_or_none(reading.temperature),
                "humidity": _finite_or_none(reading.humidity),
                "lightIntensity": _finite_or_none(reading.light),
            }
            for reading in anomalies
        ]
        try:
            with open(self.report_path, "w", encoding="utf-8") as f:
                json.dump(payload, f, indent=2, allow_nan=False)
                f.write("\n")
        except OSError as e:
            logger.error("Failed to write anomaly report", path=str(self.report_path), error=str(e))
            return False

        logger.info("Anomaly report exported", path=str(self.report_path), count=len(payload))
        return True
