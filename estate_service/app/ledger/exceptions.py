class LedgerInputError(ValueError):
    """Raised when a ledger calculation is handed malformed records."""
