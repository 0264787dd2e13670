"""Property record and escrow models."""

from dataclasses import dataclass
from datetime import datetime

from rwa_ledger.exceptions import InvalidAmountError
from rwa_ledger.models.enums import PropertyState


def check_unsigned(name: str, value: int) -> None:
    """Reject negative values for fields stored as unsigned integers."""
    if value < 0:
        raise InvalidAmountError(f"{name} must be non-negative, got {value}")


@dataclass
class PropertyRecord:
    """Descriptive record and lifecycle state of one tokenised property."""

    property_id: int
    address: str
    price: int  # Smallest currency unit
    area: int
    legal_id: str
    document_hash: str  # Content-addressed reference to the legal documents
    token_uri: str
    state: PropertyState = PropertyState.INITIAL_OFFERING
    verifier: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def __post_init__(self) -> None:
        check_unsigned("price", self.price)
        check_unsigned("area", self.area)

    @property
    def is_verified(self) -> bool:
        return self.verifier is not None


@dataclass
class PendingPurchase:
    """Buyer funds locked in escrow against one property."""

    property_id: int
    buyer: str
    amount: int
    requested_at: datetime | None = None
