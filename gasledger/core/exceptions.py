"""Domain errors raised by the reading stream processor."""


class LedgerError(Exception):
    """Base class for ledger errors."""


class MalformedSequenceError(LedgerError):
    """Raised when a reading stream violates its (recorded_at, id) ordering."""

    def __init__(self, customer_code: str | None, reason: str) -> None:
        self.customer_code = customer_code
        self.reason = reason
        super().__init__(f"Malformed reading stream for customer {customer_code!r}: {reason}")
