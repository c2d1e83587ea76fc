"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidRentAmountError(DomainException):
    """Rent amount is non-positive, NaN or infinite"""

    pass


class InvalidTermError(DomainException):
    """Repayment term is not one of the supported day counts"""

    pass


class InvalidDraftError(DomainException):
    """Serialized tenant draft is malformed or of an unknown kind"""

    pass
