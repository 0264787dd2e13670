"""Currency balances and escrow custody."""

import logging
from dataclasses import dataclass, field

from rwa_ledger.exceptions import TransferFailedError
from rwa_ledger.models.property import check_unsigned

logger = logging.getLogger(__name__)


@dataclass
class FundsLedger:
    """Per-identity balances plus the balance held in escrow.

    All amounts are integers in the smallest currency unit. Funds enter
    escrow through :meth:`hold` and leave it only through :meth:`release`.
    """

    _balances: dict[str, int] = field(default_factory=dict)
    _held: int = 0

    def deposit(self, account: str, amount: int) -> None:
        """Credit external funds to ``account``."""
        check_unsigned("amount", amount)
        self._balances[account] = self._balances.get(account, 0) + amount

    def balance_of(self, account: str) -> int:
        return self._balances.get(account, 0)

    @property
    def held(self) -> int:
        """Total amount currently locked in escrow."""
        return self._held

    def hold(self, payer: str, amount: int) -> None:
        """Move ``amount`` from ``payer`` into escrow custody."""
        check_unsigned("amount", amount)
        balance = self.balance_of(payer)
        if balance < amount:
            raise TransferFailedError(
                f"{payer} cannot cover {amount}: balance is {balance}"
            )
        self._balances[payer] = balance - amount
        self._held += amount
        logger.debug("Held %d from %s (escrow=%d)", amount, payer, self._held)

    def release(self, payee: str, amount: int) -> None:
        """Pay ``amount`` out of escrow custody to ``payee``."""
        check_unsigned("amount", amount)
        if self._held < amount:
            raise TransferFailedError(
                f"Escrow holds {self._held}, cannot release {amount} to {payee}"
            )
        self._held -= amount
        self._balances[payee] = self.balance_of(payee) + amount
        logger.debug("Released %d to %s (escrow=%d)", amount, payee, self._held)

    def snapshot(self) -> tuple[dict[str, int], int]:
        return dict(self._balances), self._held

    def restore(self, state: tuple[dict[str, int], int]) -> None:
        balances, held = state
        self._balances = dict(balances)
        self._held = held
