"""
Environmental Monitoring
Ingests temperature, humidity and light readings from sensor clients over TCP,
flags anomalies against configurable thresholds and persists the history.
"""

__version__ = "1.0.0"
