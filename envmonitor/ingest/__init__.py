"""
Ingest server - TCP sensor lines to store and persistence.
"""

from .models import ServerConfig
from .server import IngestServer

__all__ = ["IngestServer", "ServerConfig"]
