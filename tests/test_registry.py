"""Tests for TokenRegistry."""

import pytest

from rwa_ledger.exceptions import NotOwnerError, UnauthorizedError, UnknownAssetError
from rwa_ledger.store.registry import TokenRegistry


@pytest.fixture
def registry() -> TokenRegistry:
    """Create a fresh registry for each test."""
    return TokenRegistry()


class TestMint:
    """Tests for minting."""

    def test_ids_start_at_one(self, registry: TokenRegistry) -> None:
        assert registry.mint("0xa") == 1

    def test_ids_are_monotonic(self, registry: TokenRegistry) -> None:
        ids = [registry.mint("0xa") for _ in range(5)]
        assert ids == [1, 2, 3, 4, 5]
        assert registry.total_minted == 5

    def test_minted_to_owner(self, registry: TokenRegistry) -> None:
        asset_id = registry.mint("0xa")
        assert registry.owner_of(asset_id) == "0xa"
        assert registry.exists(asset_id)


class TestTransfer:
    """Tests for custody transfer."""

    def test_transfer(self, registry: TokenRegistry) -> None:
        asset_id = registry.mint("0xa")
        registry.transfer(asset_id, "0xa", "0xb")

        assert registry.owner_of(asset_id) == "0xb"

    def test_transfer_from_non_holder_fails(self, registry: TokenRegistry) -> None:
        asset_id = registry.mint("0xa")

        with pytest.raises(NotOwnerError):
            registry.transfer(asset_id, "0xb", "0xc")
        assert registry.owner_of(asset_id) == "0xa"

    def test_not_owner_is_unauthorized(self, registry: TokenRegistry) -> None:
        asset_id = registry.mint("0xa")
        with pytest.raises(UnauthorizedError):
            registry.transfer(asset_id, "0xb", "0xc")

    def test_transfer_unknown_asset(self, registry: TokenRegistry) -> None:
        with pytest.raises(UnknownAssetError):
            registry.transfer(99, "0xa", "0xb")


class TestQueries:
    """Tests for lookups."""

    def test_owner_of_unknown(self, registry: TokenRegistry) -> None:
        with pytest.raises(UnknownAssetError, match="Asset 1 not found"):
            registry.owner_of(1)

    def test_exists_unknown(self, registry: TokenRegistry) -> None:
        assert registry.exists(1) is False

    def test_owned_by(self, registry: TokenRegistry) -> None:
        a = registry.mint("0xa")
        b = registry.mint("0xb")
        c = registry.mint("0xa")
        registry.transfer(c, "0xa", "0xb")

        assert registry.owned_by("0xa") == {a}
        assert registry.owned_by("0xb") == {b, c}
        assert registry.owned_by("0xnobody") == set()


class TestSnapshot:
    """Tests for snapshot/restore."""

    def test_restore_undoes_mint_and_transfer(self, registry: TokenRegistry) -> None:
        first = registry.mint("0xa")
        saved = registry.snapshot()

        registry.transfer(first, "0xa", "0xb")
        registry.mint("0xc")
        registry.restore(saved)

        assert registry.owner_of(first) == "0xa"
        assert registry.total_minted == 1
        assert registry.exists(2) is False
