"""
Line-oriented text protocol between sensor clients and the ingest server.

Each message is a single line:
    Timestamp (ms): <int>, Temp: <float> C, Humidity: <float> %, Light: <float> lux
"""

import structlog

from .models import Reading

logger = structlog.get_logger(__name__)

ACK = b"ACK\n"

_LABELS = ("Timestamp", "Temp:", "Humidity:", "Light:")


def encode_reading(reading: Reading) -> str:
    """Format a reading as a wire line (without the trailing newline)"""
    return (
        f"Timestamp (ms): {reading.timestamp_ms}, "
        f"Temp: {reading.temperature:.2f} C, "
        f"Humidity: {reading.humidity:.2f} %, "
        f"Light: {reading.light:.2f} lux"
    )


def _value_after(tokens: list[str], start: int, label: str, skip: int = 0) -> tuple[str, int]:
    """Scan forward to `label` and return the token following it (plus `skip` tokens)"""
    for index in range(start, len(tokens)):
        if tokens[index] == label:
            value_index = index + 1 + skip
            if value_index >= len(tokens):
                raise ValueError(f"missing value after {label!r}")
            return tokens[value_index].rstrip(","), value_index + 1
    raise ValueError(f"label {label!r} not found")


def decode_reading(line: str) -> Reading | None:
    """Parse a wire line into a Reading.

    Returns None when any labelled value is missing or malformed, and when the
    timestamp is exactly 0, which the protocol reserves as a parse-failure marker.
    """
    tokens = line.split()
    try:
        # "Timestamp" is followed by "(ms):" before the value
        raw_ts, pos = _value_after(tokens, 0, _LABELS[0], skip=1)
        raw_temp, pos = _value_after(tokens, pos, _LABELS[1])
        raw_hum, pos = _value_after(tokens, pos, _LABELS[2])
        raw_light, pos = _value_after(tokens, pos, _LABELS[3])

        reading = Reading(
            timestamp_ms=int(raw_ts),
            temperature=float(raw_temp),
            humidity=float(raw_hum),
            light=float(raw_light),
        )
    except ValueError as e:
        logger.warning("Failed to parse sensor line", line=line.strip(), error=str(e))
        return None

    if reading.timestamp_ms == 0:
        logger.warning("Rejected sensor line with zero timestamp", line=line.strip())
        return None

    return reading
