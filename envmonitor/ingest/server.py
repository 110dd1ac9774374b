"""
TCP ingest server accepting sensor lines from any number of clients.
"""

import socket
import threading
from collections.abc import Callable
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from envmonitor.core.models import Reading
from envmonitor.core.protocol import ACK, decode_reading
from envmonitor.storage.persistence import ReadingPersistence
from envmonitor.storage.store import ReadingStore

from .models import ServerConfig

logger = structlog.get_logger(__name__)


class IngestServer:
    """Accepts sensor connections and forwards decoded readings.

    Each decoded reading goes to the optional callback, the store and the
    persistence layer, in that order. Store and persistence writes are
    independent; a crash between them leaves the two views inconsistent.
    """

    def __init__(
        self,
        config: ServerConfig,
        store: ReadingStore | None = None,
        persistence: ReadingPersistence | None = None,
        on_reading: Callable[[Reading], None] | None = None,
    ):
        self.config = config
        self.store = store
        self.persistence = persistence
        self.on_reading = on_reading

        self._listener: socket.socket | None = None
        self._accept_thread: threading.Thread | None = None
        self._executor: ThreadPoolExecutor | None = None
        self._running = threading.Event()

        self._stats_lock = threading.Lock()
        self._stats = {
            "connections_accepted": 0,
            "lines_received": 0,
            "readings_accepted": 0,
            "parse_errors": 0,
            "persist_errors": 0,
            "callback_errors": 0,
        }

    @property
    def running(self) -> bool:
        return self._running.is_set()

    @property
    def port(self) -> int | None:
        """Bound port, useful when the configured port is 0"""
        if self._listener is None:
            return None
        return self._listener.getsockname()[1]

    @property
    def stats(self) -> dict[str, int]:
        with self._stats_lock:
            return dict(self._stats)

    def set_callback(self, on_reading: Callable[[Reading], None] | None) -> None:
        self.on_reading = on_reading

    def _bump(self, key: str, amount: int = 1) -> None:
        with self._stats_lock:
            self._stats[key] += amount

    def start(self) -> bool:
        """Bind, listen and start the accept loop. Returns False on socket errors."""
        if self.running:
            logger.warning("Server already running", port=self.port)
            return True

        listener = None
        try:
            listener = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
            listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
            listener.bind((self.config.host, self.config.port))
            listener.listen(self.config.backlog)
            listener.settimeout(self.config.poll_interval_seconds)
        except OSError as e:
            logger.error(
                "Failed to start server", host=self.config.host, port=self.config.port, error=str(e)
            )
            if listener is not None:
                listener.close()
            return False

        self._listener = listener
        self._executor = ThreadPoolExecutor(
            max_workers=self.config.max_workers, thread_name_prefix="ingest-handler"
        )
        self._running.set()

        self._accept_thread = threading.Thread(
            target=self._accept_clients, name="ingest-accept", daemon=True
        )
        self._accept_thread.start()

        logger.info(
            "Server started",
            host=self.config.host,
            port=self.port,
            max_workers=self.config.max_workers,
        )
        return True

    def stop(self) -> None:
        """Stop accepting, then wait for every handler to finish"""
        if not self.running:
            return

        port = self.port
        self._running.clear()

        if self._listener is not None:
            self._listener.close()
        if self._accept_thread is not None:
            self._accept_thread.join()
            self._accept_thread = None
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None
        self._listener = None

        logger.info("Server stopped", port=port, **self.stats)

    def _accept_clients(self) -> None:
        while self.running:
            try:
                client, address = self._listener.accept()
            except socket.timeout:
                continue
            except OSError as e:
                if self.running:
                    logger.error("Accept failed", error=str(e))
                    continue
                break

            self._bump("connections_accepted")
            logger.info("Client connected", address=f"{address[0]}:{address[1]}")
            client.settimeout(self.config.poll_interval_seconds)
            future = self._executor.submit(self._handle_client, client, address)
            future.add_done_callback(self._log_handler_failure)

    @staticmethod
    def _log_handler_failure(future: Future) -> None:
        if future.cancelled():
            return
        error = future.exception()
        if error is not None:
            logger.error(
                "Client handler crashed",
                error=str(error),
                exc_info=(type(error), error, error.__traceback__),
            )

    def _handle_client(self, client: socket.socket, address: tuple[str, int]) -> None:
        peer = f"{address[0]}:{address[1]}"
        pending = bytearray()
        with client:
            while self.running:
                try:
                    data = client.recv(self.config.buffer_size)
                except socket.timeout:
                    continue
                except OSError as e:
                    logger.warning("Receive failed", peer=peer, error=str(e))
                    break

                if not data:
                    # Peer closed: an unterminated final line is still processed
                    if pending.strip():
                        self._process_line(bytes(pending), peer)
                    break

                pending += data
                newline = pending.find(b"\n")
                while newline != -1:
                    line = bytes(pending[:newline])
                    del pending[: newline + 1]
                    self._process_line(line, peer)
                    try:
                        client.sendall(ACK)
                    except OSError as e:
                        logger.warning("Acknowledgment failed", peer=peer, error=str(e))
                        return
                    newline = pending.find(b"\n")

                if len(pending) > self.config.max_line_bytes:
                    logger.warning(
                        "Line exceeds maximum length, closing connection",
                        peer=peer,
                        size=len(pending),
                        max_line_bytes=self.config.max_line_bytes,
                    )
                    self._bump("parse_errors")
                    break

        logger.info("Client disconnected", peer=peer)

    def _process_line(self, raw: bytes, peer: str) -> Reading | None:
        self._bump("lines_received")
        reading = decode_reading(raw.decode("utf-8", errors="replace"))
        if reading is None:
            self._bump("parse_errors")
            return None

        logger.debug("Reading received", peer=peer, timestamp_ms=reading.timestamp_ms)
        self._bump("readings_accepted")

        if self.on_reading is not None:
            try:
                self.on_reading(reading)
            except Exception as e:
                logger.error("Reading callback failed", peer=peer, error=str(e), exc_info=True)
                self._bump("callback_errors")
        if self.store is not None:
            self.store.append(reading)
        if self.persistence is not None and not self.persistence.append(reading):
            self._bump("persist_errors")

        return reading
