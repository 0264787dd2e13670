"""Property ownership ledger with verified, escrow-mediated sales."""

from rwa_ledger.marketplace import RwaMarketplace
from rwa_ledger.models import PendingPurchase, PropertyRecord, PropertyState

__all__ = ["PendingPurchase", "PropertyRecord", "PropertyState", "RwaMarketplace"]

__version__ = "0.1.0"
