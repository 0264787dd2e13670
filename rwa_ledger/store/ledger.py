"""Shared ledger store with an all-or-nothing transaction boundary."""

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from typing import Any, Iterator

from rwa_ledger.events import EventPublisher
from rwa_ledger.exceptions import UnknownAssetError
from rwa_ledger.models.enums import EventType
from rwa_ledger.models.property import PendingPurchase, PropertyRecord
from rwa_ledger.store.funds import FundsLedger
from rwa_ledger.store.registry import TokenRegistry

logger = logging.getLogger(__name__)


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class Ledger:
    """Property records, pending purchases and the verifier set.

    Bound to exactly one :class:`TokenRegistry` and one :class:`FundsLedger`.
    Mutations must happen inside :meth:`transaction`; events raised with
    :meth:`emit` are only published once the outermost transaction commits.
    """

    platform_owner: str
    registry: TokenRegistry = field(default_factory=TokenRegistry)
    funds: FundsLedger = field(default_factory=FundsLedger)
    publisher: EventPublisher = field(default_factory=EventPublisher)

    records: dict[int, PropertyRecord] = field(default_factory=dict)
    pending: dict[int, PendingPurchase] = field(default_factory=dict)
    verifiers: set[str] = field(default_factory=set)

    _lock: threading.RLock = field(default_factory=threading.RLock, repr=False)
    _depth: int = 0
    _outbox: list[tuple[EventType, int, dict[str, Any]]] = field(default_factory=list)
    # Pre-transaction copies of the records touched so far; None marks a
    # record created inside the transaction
    _journal: dict[int, PropertyRecord | None] = field(default_factory=dict, repr=False)

    def __post_init__(self) -> None:
        # The deploying identity is the sole initial verifier
        if not self.verifiers:
            self.verifiers.add(self.platform_owner)

    @contextmanager
    def transaction(self) -> Iterator["Ledger"]:
        """Run a block as one indivisible unit.

        Nested calls join the enclosing transaction. If the outermost block
        raises, every store is restored to its state on entry and buffered
        events are dropped.

        Records are journaled on first access through :meth:`get_record` or
        :meth:`add_record`, so rollback cost grows with the records touched.
        The pending map, verifier set, custody map and balances are
        shallow-copied on entry, which is linear in their size.
        """
        with self._lock:
            if self._depth > 0:
                self._depth += 1
                try:
                    yield self
                finally:
                    self._depth -= 1
                return

            saved = self._snapshot()
            self._journal = {}
            self._depth = 1
            try:
                yield self
            except BaseException:
                self._restore(saved)
                dropped = len(self._outbox)
                self._outbox.clear()
                logger.warning("Transaction rolled back (%d events dropped)", dropped)
                raise
            finally:
                self._depth = 0
                self._journal = {}

            events, self._outbox = self._outbox, []
            self.publisher.publish(events)

    @contextmanager
    def read(self) -> Iterator["Ledger"]:
        """Hold the ledger lock for a consistent read of committed state.

        Readers on other threads wait for a running transaction to finish,
        so they never observe a half-applied operation.
        """
        with self._lock:
            yield self

    def emit(self, event_type: EventType, property_id: int, **data: Any) -> None:
        """Queue an event for publication on commit."""
        if self._depth == 0:
            raise RuntimeError("emit() called outside of a ledger transaction")
        self._outbox.append((event_type, property_id, data))

    def _snapshot(self) -> dict[str, Any]:
        return {
            "pending": dict(self.pending),
            "verifiers": set(self.verifiers),
            "registry": self.registry.snapshot(),
            "funds": self.funds.snapshot(),
        }

    def _restore(self, saved: dict[str, Any]) -> None:
        for pid, original in self._journal.items():
            if original is None:
                self.records.pop(pid, None)
            else:
                self.records[pid] = original
        self.pending = saved["pending"]
        self.verifiers = saved["verifiers"]
        self.registry.restore(saved["registry"])
        self.funds.restore(saved["funds"])

    def _touch(self, property_id: int) -> None:
        if self._depth > 0 and property_id not in self._journal:
            record = self.records.get(property_id)
            self._journal[property_id] = replace(record) if record is not None else None

    # Query methods
    def get_record(self, property_id: int) -> PropertyRecord:
        """Return the live record for ``property_id``."""
        record = self.records.get(property_id)
        if record is None:
            raise UnknownAssetError(f"Property {property_id} not found")
        self._touch(property_id)
        return record

    def add_record(self, record: PropertyRecord) -> None:
        self._touch(record.property_id)
        if record.created_at is None:
            record.created_at = utcnow()
        self.records[record.property_id] = record

    def summary(self) -> dict[str, int]:
        """Return summary counts of ledger contents."""
        with self.read():
            return {
                "properties": len(self.records),
                "pending_purchases": len(self.pending),
                "verifiers": len(self.verifiers),
                "escrow_held": self.funds.held,
            }
