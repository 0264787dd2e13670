"""Property directory: records, verification and owner-driven listing."""

from __future__ import annotations

import logging
from dataclasses import replace

from rwa_ledger.exceptions import (
    AlreadyVerifiedError,
    InvalidStateTransitionError,
    UnauthorizedError,
)
from rwa_ledger.models.enums import EventType, PropertyState
from rwa_ledger.models.property import PropertyRecord, check_unsigned
from rwa_ledger.store.ledger import Ledger, utcnow

logger = logging.getLogger(__name__)

# States a custodian may request through update_property_state, keyed by the
# current state. PENDING_SALE and SOLD are only ever entered by the escrow,
# and a pending sale is only ever left by the escrow.
OWNER_TRANSITIONS: dict[PropertyState, frozenset[PropertyState]] = {
    PropertyState.INITIAL_OFFERING: frozenset(
        {PropertyState.INITIAL_OFFERING, PropertyState.FOR_SALE, PropertyState.NOT_FOR_SALE}
    ),
    PropertyState.FOR_SALE: frozenset({PropertyState.FOR_SALE, PropertyState.NOT_FOR_SALE}),
    PropertyState.NOT_FOR_SALE: frozenset({PropertyState.FOR_SALE, PropertyState.NOT_FOR_SALE}),
    PropertyState.SOLD: frozenset({PropertyState.FOR_SALE, PropertyState.NOT_FOR_SALE}),
    PropertyState.PENDING_SALE: frozenset(),
}


def is_owner_transition(current: PropertyState, requested: PropertyState) -> bool:
    return requested in OWNER_TRANSITIONS[current]


class PropertyDirectory:
    """Create, verify, list and look up tokenised properties.

    Every mutating method takes the acting identity as ``caller`` and runs
    in its own ledger transaction.
    """

    def __init__(self, ledger: Ledger) -> None:
        self.ledger = ledger

    @property
    def platform_owner(self) -> str:
        return self.ledger.platform_owner

    def _require_platform_owner(self, caller: str, action: str) -> None:
        if caller != self.platform_owner:
            logger.warning(
                "Rejected %s by %s: not the platform owner",
                action,
                caller,
                extra={"caller": caller},
            )
            raise UnauthorizedError(f"{caller} is not allowed to {action}")

    def _require_verifier(self, caller: str) -> None:
        if caller not in self.ledger.verifiers:
            logger.warning(
                "Rejected verification by %s: not a verifier", caller, extra={"caller": caller}
            )
            raise UnauthorizedError(f"{caller} is not a verifier")

    def _require_custodian(self, caller: str, property_id: int) -> None:
        custodian = self.ledger.registry.owner_of(property_id)
        if caller != custodian:
            logger.warning(
                "Rejected change to property %d by %s",
                property_id,
                caller,
                extra={"property_id": property_id, "caller": caller},
            )
            raise UnauthorizedError(f"{caller} does not hold property {property_id}")

    # Verifier roster
    def add_verifier(self, caller: str, identity: str) -> None:
        """Grant verifier rights. Adding an existing member is a no-op."""
        with self.ledger.transaction() as ledger:
            self._require_platform_owner(caller, "add verifiers")
            ledger.verifiers.add(identity)
        logger.info("Verifier added: %s", identity)

    def remove_verifier(self, caller: str, identity: str) -> None:
        """Revoke verifier rights. Removing a non-member is a no-op."""
        with self.ledger.transaction() as ledger:
            self._require_platform_owner(caller, "remove verifiers")
            ledger.verifiers.discard(identity)
        logger.info("Verifier removed: %s", identity)

    def is_verifier(self, identity: str) -> bool:
        with self.ledger.read() as ledger:
            return identity in ledger.verifiers

    # Lifecycle
    def create_property(
        self,
        caller: str,
        address: str,
        price: int,
        area: int,
        legal_id: str,
        document_hash: str,
        token_uri: str,
    ) -> int:
        """Mint a new property into the platform owner's custody.

        Returns
        -------
        int
            The new asset id.
        """
        with self.ledger.transaction() as ledger:
            self._require_platform_owner(caller, "create properties")
            check_unsigned("price", price)
            check_unsigned("area", area)

            property_id = ledger.registry.mint(caller)
            ledger.add_record(
                PropertyRecord(
                    property_id=property_id,
                    address=address,
                    price=price,
                    area=area,
                    legal_id=legal_id,
                    document_hash=document_hash,
                    token_uri=token_uri,
                )
            )
            ledger.emit(
                EventType.PROPERTY_LISTED,
                property_id,
                owner=caller,
                price=price,
                state=PropertyState.INITIAL_OFFERING,
            )
        logger.info("Created property %d at %s", property_id, address)
        return property_id

    def verify_property(self, caller: str, property_id: int) -> None:
        """Attest a property's legitimacy. The attestation is permanent."""
        with self.ledger.transaction() as ledger:
            self._require_verifier(caller)
            record = ledger.get_record(property_id)
            if record.verifier is not None:
                raise AlreadyVerifiedError(
                    f"Property {property_id} already verified by {record.verifier}"
                )
            record.verifier = caller
            record.updated_at = utcnow()
            ledger.emit(EventType.PROPERTY_VERIFIED, property_id, verifier=caller)
        logger.info("Property %d verified by %s", property_id, caller)

    def update_property_state(
        self,
        caller: str,
        property_id: int,
        new_state: PropertyState,
        new_price: int = 0,
    ) -> None:
        """Change listing state and, when ``new_price > 0``, the price.

        Only the current custodian may call this. The (current, requested)
        pair must appear in ``OWNER_TRANSITIONS``.
        """
        new_state = PropertyState(new_state)
        with self.ledger.transaction() as ledger:
            record = ledger.get_record(property_id)
            self._require_custodian(caller, property_id)
            check_unsigned("price", new_price)
            if not is_owner_transition(record.state, new_state):
                raise InvalidStateTransitionError(
                    f"Property {property_id} cannot move from {record.state.value} "
                    f"to {new_state.value}"
                )

            record.state = new_state
            if new_price > 0:
                record.price = new_price
            record.updated_at = utcnow()

            if new_state == PropertyState.FOR_SALE:
                ledger.emit(
                    EventType.PROPERTY_LISTED,
                    property_id,
                    owner=caller,
                    price=record.price,
                    state=new_state,
                )
            ledger.emit(EventType.PROPERTY_STATE_CHANGED, property_id, new_state=new_state)
        logger.info("Property %d now %s at %d", property_id, new_state.value, record.price)

    def set_token_uri(self, caller: str, property_id: int, token_uri: str) -> None:
        with self.ledger.transaction() as ledger:
            self._require_platform_owner(caller, "set token URIs")
            record = ledger.get_record(property_id)
            record.token_uri = token_uri
            record.updated_at = utcnow()
            ledger.emit(EventType.TOKEN_URI_UPDATED, property_id, token_uri=token_uri)

    # Reads hold the ledger lock and return copies so callers cannot mutate
    # ledger state directly
    def get_property(self, property_id: int) -> PropertyRecord:
        with self.ledger.read() as ledger:
            return replace(ledger.get_record(property_id))

    def get_property_uri(self, property_id: int) -> str:
        with self.ledger.read() as ledger:
            return ledger.get_record(property_id).token_uri

    def get_total_properties(self) -> int:
        with self.ledger.read() as ledger:
            return ledger.registry.total_minted

    def get_all_properties(self) -> list[PropertyRecord]:
        with self.ledger.read() as ledger:
            return [replace(ledger.records[pid]) for pid in sorted(ledger.records)]

    def get_properties_of_owner(self, owner: str) -> list[PropertyRecord]:
        """Return every property currently held by ``owner``, by id."""
        with self.ledger.read() as ledger:
            owned = ledger.registry.owned_by(owner)
            return [replace(ledger.records[pid]) for pid in sorted(owned)]
