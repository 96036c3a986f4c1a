class DomainError(Exception):
    """Base exception for business rule violations."""


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""


class EmptyRangeError(ValidationError):
    """Raised when a computed month range contains no months."""


class PersistenceError(DomainError):
    """Raised when a read or write against the document store fails.

    Writes committed before the failure are not rolled back.
    """

    def __init__(self, message: str, *, written: int = 0):
        super().__init__(message)
        self.written = written
