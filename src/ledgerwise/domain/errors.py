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


class UnsupportedFormatError(DomainError):
    """No statement parser could be selected for an input."""


class MissingInputError(ValidationError, NotFoundError):
    """An ingestion input (account or statement file) does not exist."""


def account_not_found(account_id: int) -> str:
    """Return message for missing account."""
    return f"Account {account_id} not found"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"


def subscription_not_found(subscription_id: int) -> str:
    """Return message for missing subscription."""
    return f"Subscription {subscription_id} not found"


def file_not_found(file_path: str) -> str:
    """Return message for a missing statement file."""
    return f"File not found: {file_path}"


def no_parser_for_issuer(issuer: str) -> str:
    """Return message when no parser is registered for an issuer."""
    return f"No parser registered for issuer '{issuer}'"


def format_not_detected(issuer: str) -> str:
    """Return message when neither issuer lookup nor header detection succeeds."""
    return (
        f"No parser found for issuer '{issuer}' and the statement format "
        "could not be auto-detected"
    )
