"""Domain models for the property ledger."""

from rwa_ledger.models.base import Event
from rwa_ledger.models.enums import EventType, PropertyState
from rwa_ledger.models.property import PendingPurchase, PropertyRecord

__all__ = ["Event", "EventType", "PendingPurchase", "PropertyRecord", "PropertyState"]
