"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def account_code_taken(code: str) -> str:
    """Return message for a duplicate chart-of-accounts code."""
    return f"Account with code '{code}' already exists"


def contact_not_found(contact_id: str) -> str:
    """Return message for missing contact."""
    return f"Contact '{contact_id}' not found"


def contact_id_taken(contact_id: str) -> str:
    return f"Contact '{contact_id}' already exists"


def invoice_id_taken(invoice_id: str) -> str:
    return f"Invoice '{invoice_id}' already exists"


def invalid_civil_date(text: str, reason: str) -> str:
    """Return message for a civil date that failed validation."""
    return f"Invalid date '{text}': {reason}"


def non_positive(name: str, value: int) -> str:
    return f"{name} must be at least 1, got {value}"
