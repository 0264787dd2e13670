"""Two-phase escrow for property sales.

A purchase is requested by a buyer who locks funds in escrow
(``request_purchase``) and is then resolved by the platform owner
(``complete_purchase``), either settling (asset to buyer, funds to seller)
or refunding (funds back to buyer, property re-offered).

Both phases run inside a single ledger transaction. If any step of a
resolution fails, for example the payout to the seller, the custody
transfer made earlier in the same call is rolled back with it, so the
asset never moves without its payment.
"""

from __future__ import annotations

import logging
from dataclasses import replace

from rwa_ledger.directory import PropertyDirectory
from rwa_ledger.exceptions import (
    InsufficientFundsError,
    NoPendingPurchaseError,
    NotForSaleError,
    NotVerifiedError,
    PurchaseAlreadyPendingError,
    UnauthorizedError,
)
from rwa_ledger.models.enums import EventType, PropertyState
from rwa_ledger.models.property import PendingPurchase, check_unsigned
from rwa_ledger.store.ledger import Ledger, utcnow

logger = logging.getLogger(__name__)


class EscrowCoordinator:
    """Own the pending-purchase map and the funds held against it."""

    def __init__(self, ledger: Ledger, directory: PropertyDirectory) -> None:
        self.ledger = ledger
        self.directory = directory

    def request_purchase(self, caller: str, property_id: int, submitted_funds: int) -> PendingPurchase:
        """Lock ``submitted_funds`` from ``caller`` against a listed property.

        The current custodian may not buy their own property. That check runs
        after the listing checks and raises ``UnauthorizedError``.

        Raises
        ------
        UnknownAssetError
            The property was never minted.
        PurchaseAlreadyPendingError
            Another request is already outstanding.
        NotForSaleError
            The property is not in FOR_SALE.
        NotVerifiedError
            No verifier has attested the property.
        InsufficientFundsError
            ``submitted_funds`` is below the asking price.
        UnauthorizedError
            The caller already holds the property (self-purchase).
        TransferFailedError
            The caller's balance cannot cover ``submitted_funds``.
        """
        check_unsigned("submitted_funds", submitted_funds)
        with self.ledger.transaction() as ledger:
            listing = self.directory.get_property(property_id)
            if property_id in ledger.pending:
                raise PurchaseAlreadyPendingError(
                    f"Property {property_id} already has a pending purchase"
                )
            if listing.state != PropertyState.FOR_SALE:
                raise NotForSaleError(
                    f"Property {property_id} is {listing.state.value}, not FOR_SALE"
                )
            if not listing.is_verified:
                raise NotVerifiedError(f"Property {property_id} has not been verified")
            if submitted_funds < listing.price:
                raise InsufficientFundsError(
                    f"Submitted {submitted_funds} for property {property_id} priced {listing.price}"
                )
            if ledger.registry.owner_of(property_id) == caller:
                raise UnauthorizedError(f"{caller} already holds property {property_id}")

            ledger.funds.hold(caller, submitted_funds)
            purchase = PendingPurchase(
                property_id=property_id,
                buyer=caller,
                amount=submitted_funds,
                requested_at=utcnow(),
            )
            ledger.pending[property_id] = purchase
            record = ledger.get_record(property_id)
            record.state = PropertyState.PENDING_SALE
            record.updated_at = purchase.requested_at

            ledger.emit(
                EventType.PURCHASE_REQUESTED,
                property_id,
                buyer=caller,
                amount=submitted_funds,
            )
            ledger.emit(
                EventType.PROPERTY_STATE_CHANGED,
                property_id,
                new_state=PropertyState.PENDING_SALE,
            )
        logger.info(
            "Purchase of property %d requested by %s for %d",
            property_id,
            caller,
            submitted_funds,
        )
        return replace(purchase)

    def complete_purchase(
        self,
        caller: str,
        property_id: int,
        success: bool,
        reason: str = "",
    ) -> None:
        """Settle or refund the pending purchase of ``property_id``.

        Only the platform owner may resolve purchases; the seller cannot
        approve their own sale.
        """
        with self.ledger.transaction() as ledger:
            if caller != ledger.platform_owner:
                logger.warning(
                    "Rejected resolution of property %d by %s",
                    property_id,
                    caller,
                    extra={"property_id": property_id, "caller": caller},
                )
                raise UnauthorizedError(f"{caller} is not allowed to resolve purchases")
            record = ledger.get_record(property_id)
            purchase = ledger.pending.get(property_id)
            if purchase is None:
                raise NoPendingPurchaseError(f"Property {property_id} has no pending purchase")

            if success:
                seller = ledger.registry.owner_of(property_id)
                ledger.registry.transfer(property_id, seller, purchase.buyer)
                ledger.funds.release(seller, purchase.amount)
                record.state = PropertyState.SOLD
                ledger.emit(
                    EventType.PROPERTY_SOLD,
                    property_id,
                    seller=seller,
                    buyer=purchase.buyer,
                    price=purchase.amount,
                )
                ledger.emit(
                    EventType.PURCHASE_COMPLETED,
                    property_id,
                    buyer=purchase.buyer,
                    amount=purchase.amount,
                )
            else:
                ledger.funds.release(purchase.buyer, purchase.amount)
                record.state = PropertyState.FOR_SALE
                ledger.emit(
                    EventType.PURCHASE_FAILED,
                    property_id,
                    buyer=purchase.buyer,
                    amount=purchase.amount,
                    reason=reason,
                )

            del ledger.pending[property_id]
            record.updated_at = utcnow()
            ledger.emit(EventType.PROPERTY_STATE_CHANGED, property_id, new_state=record.state)

        if success:
            logger.info("Property %d sold to %s", property_id, purchase.buyer)
        else:
            logger.info("Purchase of property %d refunded: %s", property_id, reason or "no reason")

    def get_pending_purchase(self, property_id: int) -> PendingPurchase | None:
        """Return the outstanding purchase for ``property_id``, if any."""
        with self.ledger.read() as ledger:
            ledger.get_record(property_id)
            purchase = ledger.pending.get(property_id)
            return replace(purchase) if purchase is not None else None
