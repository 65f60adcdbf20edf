"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class LedgerFetchError(DomainException):
    """Ledger store is unavailable or returned unusable rows"""

    pass


class InvalidLedgerEntryError(DomainException):
    """Ledger row violates the client/staff reference invariant"""

    pass


class InvoiceRenderError(DomainException):
    """Invoice document could not be produced"""

    pass


class TableRenderError(InvoiceRenderError):
    """Line-items table could not be built or drawn"""

    pass
