"""Enumeration types for property ledger entities."""

from enum import Enum


class PropertyState(str, Enum):
    INITIAL_OFFERING = "INITIAL_OFFERING"
    FOR_SALE = "FOR_SALE"
    PENDING_SALE = "PENDING_SALE"
    SOLD = "SOLD"
    NOT_FOR_SALE = "NOT_FOR_SALE"


class EventType(str, Enum):
    """Observable ledger events, named as external indexers see them."""

    PROPERTY_LISTED = "PropertyListed"
    PROPERTY_VERIFIED = "PropertyVerified"
    PROPERTY_SOLD = "PropertySold"
    PURCHASE_REQUESTED = "PurchaseRequested"
    PURCHASE_COMPLETED = "PurchaseCompleted"
    PURCHASE_FAILED = "PurchaseFailed"
    PROPERTY_STATE_CHANGED = "PropertyStateChanged"
    TOKEN_URI_UPDATED = "TokenURIUpdated"
