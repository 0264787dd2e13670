"""Custom exception hierarchy for rwa-ledger."""


class RwaLedgerError(Exception):
    """Base exception for all rwa-ledger errors."""


class UnauthorizedError(RwaLedgerError):
    """Raised when the caller lacks the role an operation requires."""


class NotOwnerError(UnauthorizedError):
    """Raised when a custody transfer names a sender that does not hold the asset."""


class UnknownAssetError(RwaLedgerError):
    """Raised when an asset id was never minted."""


class AlreadyVerifiedError(RwaLedgerError):
    """Raised when a property already carries a verifier attestation."""


class NotForSaleError(RwaLedgerError):
    """Raised when a purchase is requested for a property that is not listed."""


class NotVerifiedError(RwaLedgerError):
    """Raised when a purchase is requested for an unverified property."""


class InsufficientFundsError(RwaLedgerError):
    """Raised when submitted funds do not cover the asking price."""


class PurchaseAlreadyPendingError(RwaLedgerError):
    """Raised when a property already has an outstanding purchase request."""


class NoPendingPurchaseError(RwaLedgerError):
    """Raised when a purchase is resolved but none is outstanding."""


class TransferFailedError(RwaLedgerError):
    """Raised when a fund movement cannot complete."""


class InvalidStateTransitionError(RwaLedgerError):
    """Raised when a requested lifecycle state change is not allowed."""


class InvalidAmountError(RwaLedgerError, ValueError):
    """Raised when a price, area or amount is negative."""


class ConfigurationError(RwaLedgerError):
    """Raised when configuration is invalid or missing."""


class SinkError(RwaLedgerError):
    """Raised when a sink operation fails."""
