"""
Core utilities shared across the application.
"""

from .logger import resolve_level, setup_logging
from .models import Reading, Thresholds
from .protocol import ACK, decode_reading, encode_reading

__all__ = ["resolve_level", "setup_logging", "Reading", "Thresholds", "ACK", "decode_reading", "encode_reading"]
