"""
In-memory reading history and durable binary storage.
"""

from envmonitor.anomaly.models import QueryResult

from .persistence import RECORD_SIZE, ReadingPersistence
from .store import QueryParams, ReadingStore, SortCriteria

__all__ = [
    "QueryParams",
    "QueryResult",
    "ReadingPersistence",
    "ReadingStore",
    "SortCriteria",
    "RECORD_SIZE",
]
