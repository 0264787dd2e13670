"""Tests for ledger models."""

import pytest

from rwa_ledger.exceptions import InvalidAmountError
from rwa_ledger.models import EventType, PendingPurchase, PropertyRecord, PropertyState


def make_record(**overrides) -> PropertyRecord:
    fields = dict(
        property_id=1,
        address="1 Main St",
        price=100,
        area=50,
        legal_id="L-1",
        document_hash="hash",
        token_uri="ipfs://x",
    )
    fields.update(overrides)
    return PropertyRecord(**fields)


class TestPropertyRecord:
    """Tests for PropertyRecord."""

    def test_defaults(self) -> None:
        record = make_record()

        assert record.state == PropertyState.INITIAL_OFFERING
        assert record.verifier is None
        assert record.is_verified is False
        assert record.created_at is None

    def test_is_verified(self) -> None:
        assert make_record(verifier="0xv").is_verified is True

    def test_zero_price_and_area_accepted(self) -> None:
        record = make_record(price=0, area=0)
        assert record.price == 0

    def test_negative_price_rejected(self) -> None:
        with pytest.raises(InvalidAmountError, match="price"):
            make_record(price=-1)

    def test_negative_area_rejected(self) -> None:
        with pytest.raises(InvalidAmountError, match="area"):
            make_record(area=-5)


class TestPendingPurchase:
    """Tests for PendingPurchase."""

    def test_fields(self) -> None:
        purchase = PendingPurchase(property_id=3, buyer="0xb", amount=250)

        assert purchase.property_id == 3
        assert purchase.buyer == "0xb"
        assert purchase.amount == 250
        assert purchase.requested_at is None


class TestEnums:
    """Tests for enum values."""

    def test_property_states(self) -> None:
        assert {s.value for s in PropertyState} == {
            "INITIAL_OFFERING",
            "FOR_SALE",
            "PENDING_SALE",
            "SOLD",
            "NOT_FOR_SALE",
        }

    def test_state_is_str(self) -> None:
        assert PropertyState.FOR_SALE == "FOR_SALE"
        assert PropertyState("SOLD") is PropertyState.SOLD

    def test_event_type_names(self) -> None:
        assert EventType.PURCHASE_FAILED.value == "PurchaseFailed"
        assert EventType.TOKEN_URI_UPDATED.value == "TokenURIUpdated"
        assert len(EventType) == 8
