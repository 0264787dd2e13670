"""Pytest configuration and fixtures."""

import pytest

from rwa_ledger.marketplace import RwaMarketplace
from rwa_ledger.models.enums import PropertyState
from rwa_ledger.sinks.memory import MemorySink

LISTING_PRICE = 100


@pytest.fixture
def seed() -> int:
    """Fixed seed for reproducible tests."""
    return 42


@pytest.fixture
def owner() -> str:
    """Platform owner identity."""
    return "0xowner"


@pytest.fixture
def verifier() -> str:
    """Verifier identity (not the platform owner)."""
    return "0xverifier"


@pytest.fixture
def buyer() -> str:
    """Buyer identity."""
    return "0xbuyer"


@pytest.fixture
def sink() -> MemorySink:
    """Event sink capturing everything the marketplace publishes."""
    return MemorySink()


@pytest.fixture
def market(owner: str, verifier: str, sink: MemorySink) -> RwaMarketplace:
    """Marketplace with one extra verifier and an empty event log."""
    m = RwaMarketplace(platform_owner=owner, sinks=[sink])
    m.add_verifier(owner, verifier)
    sink.clear()
    return m


def _create(market: RwaMarketplace, owner: str, price: int = LISTING_PRICE) -> int:
    return market.create_property(
        owner,
        address="1 Main St, Springfield",
        price=price,
        area=120,
        legal_id="IL-12345.001",
        document_hash="bafy-docs",
        token_uri="ipfs://meta/1.json",
    )


@pytest.fixture
def new_property(market: RwaMarketplace, owner: str) -> int:
    """Freshly minted, unverified property in INITIAL_OFFERING."""
    return _create(market, owner)


@pytest.fixture
def listed_property(market: RwaMarketplace, owner: str, verifier: str, sink: MemorySink) -> int:
    """Verified property listed FOR_SALE at ``LISTING_PRICE``."""
    property_id = _create(market, owner)
    market.verify_property(verifier, property_id)
    market.update_property_state(owner, property_id, PropertyState.FOR_SALE, LISTING_PRICE)
    sink.clear()
    return property_id


@pytest.fixture
def funded_buyer(market: RwaMarketplace, buyer: str) -> str:
    """Buyer holding enough to cover two listings."""
    market.deposit(buyer, LISTING_PRICE * 2)
    return buyer
