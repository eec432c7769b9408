"""Domain-specific exceptions"""


class DomainException(Exception):
    """Base exception for domain layer"""

    pass


class InvalidTermsError(DomainException):
    """Financing terms are outside what the amortization engine supports"""

    pass


class InvalidPreferenceError(DomainException):
    """Early payment preference is not one of the supported options"""

    pass


class InvalidPaymentError(DomainException):
    """Payment amount cannot be applied to a financing"""

    pass
