"""JSON Lines sink for the ledger audit log."""

import logging
from pathlib import Path

from rwa_ledger.exceptions import SinkError
from rwa_ledger.models.base import Event
from rwa_ledger.sinks.serialization import decode_event, encode_event

logger = logging.getLogger(__name__)


class JsonlFileSink:
    """Append every event as one JSON line to an audit file.

    The file is opened per write so a crashed process never leaves a
    half-buffered line behind, and several ledgers may share one log.
    """

    def __init__(self, path: str | Path) -> None:
        """Initialize the audit log sink.

        Parameters
        ----------
        path : str | Path
            Audit log file. Parent directories are created; an existing
            file is appended to, never truncated.
        """
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.written = 0

    def write_event(self, event: Event) -> None:
        line = encode_event(event) + b"\n"
        try:
            with open(self.path, "ab") as f:
                f.write(line)
        except OSError as e:
            raise SinkError(f"Cannot append to {self.path}: {e}") from e
        self.written += 1

    def read_events(self) -> list[dict]:
        """Replay the audit log as dictionaries, oldest first."""
        if not self.path.exists():
            return []
        with open(self.path, "rb") as f:
            return [decode_event(line) for line in f if line.strip()]

    def close(self) -> None:
        logger.info("Audit log %s: %d events written", self.path, self.written)
