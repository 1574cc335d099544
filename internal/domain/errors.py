"""
Domain-specific exceptions.

Errors raised while compiling and executing catalog searches.
"""
from typing import Optional


class DomainError(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str) -> None:
        """
        Initialize domain error.

        Args:
            message: Error message describing the issue.
        """
        self.message = message
        super().__init__(self.message)


class DomainValidationError(DomainError):
    """Exception raised when domain validation fails."""
    pass


class StoreNotFoundError(DomainError):
    """Exception raised when a store id does not resolve to a store."""

    def __init__(self, store_id: Optional[str]) -> None:
        """
        Initialize store not found error.

        Args:
            store_id: The requested store identifier.
        """
        super().__init__(f"Store {store_id} not found")
        self.store_id = store_id


class AmbiguousFilterError(DomainError):
    """
    Exception raised when the filter catalog holds more than one definition
    for the same key and currency.

    This points to a provisioning bug; the compiler never picks one.
    """

    def __init__(self, key: str, currency: Optional[str], matches: int) -> None:
        """
        Initialize ambiguous filter error.

        Args:
            key: The requested filter key.
            currency: The request currency used for price-range filters.
            matches: How many definitions matched.
        """
        super().__init__(
            f"Filter '{key}' (currency {currency}) matches {matches} definitions"
        )
        self.key = key
        self.currency = currency
        self.matches = matches

