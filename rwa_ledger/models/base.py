"""Event envelope published for every committed ledger change."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Event:
    """One ledger event as seen by indexers and the audit log.

    ``subject`` is the affected asset id in string form; it doubles as the
    partition key so all events of one property stay ordered.
    """

    event_id: str
    event_type: str  # PropertySold, PurchaseFailed, ...
    event_time: datetime
    source: str  # ledger instance that committed the change
    subject: str
    data: dict[str, Any]
    metadata: dict[str, Any] = field(default_factory=dict)

    @property
    def property_id(self) -> int:
        return int(self.subject)

    @property
    def key(self) -> bytes:
        return self.subject.encode("utf-8")
