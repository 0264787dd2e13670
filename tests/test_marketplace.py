"""End-to-end marketplace scenarios."""

from pathlib import Path

import pytest

from rwa_ledger import RwaMarketplace
from rwa_ledger.config import KafkaConfig, LedgerConfig, OutputConfig, RwaLedgerConfig
from rwa_ledger.exceptions import NotVerifiedError
from rwa_ledger.marketplace import build_sinks
from rwa_ledger.models.enums import PropertyState
from rwa_ledger.sinks import JsonlFileSink, MemorySink


class TestSaleScenarios:
    """Full mint, verify, list, request and resolve flows."""

    @pytest.fixture
    def pending_sale(self, market: RwaMarketplace, owner: str, verifier: str, buyer: str) -> int:
        pid = market.create_property(owner, "1 Main St", 100, 120, "L-1", "h", "ipfs://1")
        market.verify_property(verifier, pid)
        market.update_property_state(owner, pid, PropertyState.FOR_SALE, 100)
        market.deposit(buyer, 100)
        market.request_purchase(buyer, pid, 100)

        assert market.get_property(pid).state == PropertyState.PENDING_SALE
        pending = market.get_pending_purchase(pid)
        assert (pending.buyer, pending.amount) == (buyer, 100)
        return pid

    def test_sale_completes(
        self, market: RwaMarketplace, owner: str, buyer: str, pending_sale: int
    ) -> None:
        seller_before = market.balance_of(owner)

        market.complete_purchase(owner, pending_sale, True, "")

        assert market.owner_of(pending_sale) == buyer
        assert market.get_property(pending_sale).state == PropertyState.SOLD
        assert market.balance_of(owner) == seller_before + 100
        assert market.get_pending_purchase(pending_sale) is None

    def test_sale_refunded(
        self, market: RwaMarketplace, owner: str, buyer: str, pending_sale: int, sink: MemorySink
    ) -> None:
        buyer_before = market.balance_of(buyer)

        market.complete_purchase(owner, pending_sale, False, "docs invalid")

        assert market.owner_of(pending_sale) == owner
        assert market.get_property(pending_sale).state == PropertyState.FOR_SALE
        assert market.balance_of(buyer) == buyer_before + 100
        assert sink.of_type("PurchaseFailed")[-1].data["reason"] == "docs invalid"

    def test_unverified_purchase_rejected(
        self, market: RwaMarketplace, owner: str, buyer: str
    ) -> None:
        pid = market.create_property(owner, "2 Main St", 100, 80, "L-2", "h", "ipfs://2")
        market.update_property_state(owner, pid, PropertyState.FOR_SALE)
        market.deposit(buyer, 100)

        with pytest.raises(NotVerifiedError):
            market.request_purchase(buyer, pid, 100)

        assert market.get_pending_purchase(pid) is None
        assert market.balance_of(buyer) == 100
        assert market.escrow_balance == 0

    def test_event_log_for_full_sale(
        self, market: RwaMarketplace, owner: str, pending_sale: int, sink: MemorySink
    ) -> None:
        market.complete_purchase(owner, pending_sale, True)

        assert [e.event_type for e in sink.for_property(pending_sale)] == [
            "PropertyListed",
            "PropertyVerified",
            "PropertyListed",
            "PropertyStateChanged",
            "PurchaseRequested",
            "PropertyStateChanged",
            "PropertySold",
            "PurchaseCompleted",
            "PropertyStateChanged",
        ]
        assert all(e.source == "rwa-ledger" for e in sink.events)
        assert len({e.event_id for e in sink.events}) == len(sink.events)


class TestFromConfig:
    """Tests for building a marketplace from configuration."""

    def test_default_config(self) -> None:
        market = RwaMarketplace.from_config(RwaLedgerConfig())

        assert market.platform_owner == "platform-owner"
        assert market.is_verifier("platform-owner")
        assert len(market.publisher.sinks) == 1
        assert isinstance(market.publisher.sinks[0], MemorySink)

    def test_jsonl_sink_writes_audit_log(self, tmp_path: Path) -> None:
        config = RwaLedgerConfig(
            ledger=LedgerConfig(platform_owner="0xowner", sinks=["jsonl"], source="test-ledger"),
            output=OutputConfig(audit_log_dir=tmp_path),
        )
        market = RwaMarketplace.from_config(config)
        pid = market.create_property("0xowner", "1 St", 5, 5, "L", "h", "u")
        market.close()

        sink = market.publisher.sinks[0]
        assert isinstance(sink, JsonlFileSink)
        events = sink.read_events()
        assert len(events) == 1
        assert events[0]["event_type"] == "PropertyListed"
        assert events[0]["subject"] == str(pid)
        assert events[0]["source"] == "test-ledger"

    def test_build_sinks_kafka(self) -> None:
        from unittest.mock import patch

        config = RwaLedgerConfig(
            ledger=LedgerConfig(sinks=["kafka", "memory"]),
            kafka=KafkaConfig(topic_prefix="prod.rwa"),
        )
        with patch("rwa_ledger.sinks.kafka.Producer") as mock_producer_class:
            sinks = build_sinks(config)

        mock_producer_class.assert_called_once()
        assert sinks[0].config.topic_prefix == "prod.rwa"
        assert isinstance(sinks[1], MemorySink)

    def test_marketplaces_are_independent(self) -> None:
        first = RwaMarketplace("0xa")
        second = RwaMarketplace("0xb")
        first.create_property("0xa", "1 St", 1, 1, "L", "h", "u")

        assert first.get_total_properties() == 1
        assert second.get_total_properties() == 0

    def test_context_manager_closes_sinks(self) -> None:
        from unittest.mock import MagicMock

        sink = MagicMock()
        with RwaMarketplace("0xa", sinks=[sink]) as market:
            market.create_property("0xa", "1 St", 1, 1, "L", "h", "u")

        sink.write_event.assert_called_once()
        sink.close.assert_called_once()
