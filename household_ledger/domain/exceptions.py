"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidMonthError(DomainException):
    """Month parameter is not a valid YYYY-MM key"""

    pass


class InvalidTransactionDataError(DomainException):
    """Transaction row is malformed and cannot be placed on the calendar"""

    pass
