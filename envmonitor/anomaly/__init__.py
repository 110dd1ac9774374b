"""
Threshold-based anomaly detection for environmental readings.

- Classification: a reading is anomalous when any dimension lies outside its
  inclusive [min, max] range.
- Scoring: the deviation sums how far each dimension overshoots its range and
  is only used for ranking.
"""

from .detector import AnomalyDetector, deviation, find_anomalies, is_anomalous
from .models import AnomalyType, QueryResult

__all__ = [
    "AnomalyDetector",
    "AnomalyType",
    "QueryResult",
    "deviation",
    "find_anomalies",
    "is_anomalous",
]
