"""Custom exception classes for ledger-advisor."""


class LedgerAdvisorError(Exception):
    """Base exception for all ledger-advisor errors."""
    pass


class LedgerLoadError(LedgerAdvisorError):
    """Raised when a ledger JSON file cannot be loaded, saved or is invalid."""
    pass


class ConfigError(LedgerAdvisorError):
    """Raised when configuration is invalid or missing."""
    pass


class DialogCatalogError(LedgerAdvisorError):
    """Raised when the dialog catalog cannot be loaded."""
    pass


class StateStoreError(LedgerAdvisorError):
    """Raised when the advisor state file cannot be written."""
    pass


class AdvisorError(LedgerAdvisorError):
    """Raised when an advisor cannot produce a response."""
    pass


class AdvisorNotImplementedError(LedgerAdvisorError, NotImplementedError):
    """Raised when requested advisor functionality does not exist."""
    pass
