"""Exceptions raised by the record store and derived views.

A missing record is not an error: lookups return ``None`` and deletes
return ``False``. Only bad input and I/O failures raise.
"""


class VaultError(Exception):
    """Base class for NodeVault errors."""

    pass


class RecordValidationError(VaultError, ValueError):
    """Raised when an operation receives input it cannot act on."""

    pass


class EmptyKeywordError(RecordValidationError):
    """Raised when a search is started without a keyword."""

    def __init__(self, message: str = "No keyword entered"):
        super().__init__(message)


class PersistenceError(VaultError):
    """Raised when reading or writing the backing file or database fails."""

    pass
