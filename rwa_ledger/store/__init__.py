"""In-memory stores backing the property ledger."""

from rwa_ledger.store.funds import FundsLedger
from rwa_ledger.store.ledger import Ledger
from rwa_ledger.store.registry import TokenRegistry

__all__ = ["FundsLedger", "Ledger", "TokenRegistry"]
