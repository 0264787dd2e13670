"""In-memory token registry: unique asset ids and their custodians."""

import logging
from dataclasses import dataclass, field

from rwa_ledger.exceptions import NotOwnerError, UnknownAssetError

logger = logging.getLogger(__name__)


@dataclass
class TokenRegistry:
    """Mint, transfer and ownership lookups over 1-based asset ids.

    Ids come from a monotonically increasing counter and are never reused.
    Custody flips in a single dict assignment, so no intermediate owner is
    ever observable.
    """

    _owners: dict[int, str] = field(default_factory=dict)
    _next_id: int = 1

    def mint(self, owner: str) -> int:
        """Mint a fresh asset id into ``owner``'s custody."""
        asset_id = self._next_id
        self._next_id += 1
        self._owners[asset_id] = owner
        logger.debug("Minted asset %d to %s", asset_id, owner)
        return asset_id

    def transfer(self, asset_id: int, sender: str, recipient: str) -> None:
        """Move custody of ``asset_id`` from ``sender`` to ``recipient``."""
        current = self.owner_of(asset_id)
        if current != sender:
            raise NotOwnerError(f"{sender} does not hold asset {asset_id}")
        self._owners[asset_id] = recipient
        logger.debug("Asset %d transferred %s -> %s", asset_id, sender, recipient)

    def owner_of(self, asset_id: int) -> str:
        """Return the current custodian of ``asset_id``."""
        try:
            return self._owners[asset_id]
        except KeyError:
            raise UnknownAssetError(f"Asset {asset_id} not found") from None

    def exists(self, asset_id: int) -> bool:
        return asset_id in self._owners

    def owned_by(self, owner: str) -> set[int]:
        """Return every asset id currently held by ``owner``."""
        return {aid for aid, holder in self._owners.items() if holder == owner}

    @property
    def total_minted(self) -> int:
        return self._next_id - 1

    def snapshot(self) -> tuple[dict[int, str], int]:
        return dict(self._owners), self._next_id

    def restore(self, state: tuple[dict[int, str], int]) -> None:
        owners, next_id = state
        self._owners = dict(owners)
        self._next_id = next_id
