"""
Structured error types for order-store.

Every failure the mapper surfaces to a caller is an :class:`OrderStoreError`
subclass carrying a category, a retryable flag, structured context and an
optional chained cause.  Callers branch on the type; log pipelines use
:meth:`OrderStoreError.to_dict`.

Architecture:
    ::

        ┌─────────────────────────────────────────────────────────────┐
        │                     OrderStoreError                          │
        │        (category, retryable, context, cause)                 │
        ├─────────────────────────────────────────────────────────────┤
        │                                                              │
        │  InvalidEntityError   DatabaseError       ValidationError    │
        │  (NOT_FOUND)          (DATABASE)          (VALIDATION)       │
        │                            │                                 │
        │                       RecordInsertError   ConfigError        │
        │                                           (CONFIG)           │
        └─────────────────────────────────────────────────────────────┘

Propagation:
    - ``InvalidEntityError`` and ``RecordInsertError`` abort the operation
      and reach the caller.
    - Single attribute write failures are collected by the attribute mapper
      and logged; they are never raised.
    - Nothing in this package retries.  ``retryable`` is advisory for the
      storage client above or below.

Examples:
    >>> error = InvalidEntityError("Invalid order.").with_context(record_id=42)
    >>> error.context.record_id
    42
    >>> error.to_dict()["category"]
    'NOT_FOUND'

Tags:
    error-handling, exception-hierarchy, order-store
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Standard error categories for classification and routing."""

    # Infrastructure
    DATABASE = "DATABASE"         # Rejected statement, constraint, driver failure

    # Data
    NOT_FOUND = "NOT_FOUND"       # Missing or mistyped record
    VALIDATION = "VALIDATION"     # Aggregate misuse, bad values

    # Configuration
    CONFIG = "CONFIG"

    # Internal
    INTERNAL = "INTERNAL"


@dataclass
class ErrorContext:
    """Structured metadata attached to an error.

    Attributes:
        operation: Data store operation that failed (``create``, ``read``...)
        record_id: Content record id involved, if any
        record_type: Expected record type discriminator
        attr_key: Attribute key involved, if any
        metadata: Additional key-value pairs
    """

    operation: str | None = None
    record_id: int | None = None
    record_type: str | None = None
    attr_key: str | None = None

    metadata: dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for logging."""
        result = {}
        for key in ["operation", "record_id", "record_type", "attr_key"]:
            value = getattr(self, key)
            if value is not None:
                result[key] = value
        if self.metadata:
            result.update(self.metadata)
        return result


class OrderStoreError(Exception):
    """
    Base exception for all order-store errors.

    Subclasses set ``default_category`` and ``default_retryable`` so that
    raising sites only pass what differs from the norm.

    Examples:
        >>> error = OrderStoreError("Something went wrong")
        >>> error.category
        <ErrorCategory.INTERNAL: 'INTERNAL'>
        >>> error.retryable
        False
    """

    default_category: ErrorCategory = ErrorCategory.INTERNAL
    default_retryable: bool = False

    def __init__(
        self,
        message: str,
        *,
        category: ErrorCategory | None = None,
        retryable: bool | None = None,
        context: ErrorContext | None = None,
        cause: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.category = category or self.default_category
        self.retryable = retryable if retryable is not None else self.default_retryable
        self.context = context or ErrorContext()
        self.cause = cause

        if cause is not None:
            self.__cause__ = cause

    def with_context(self, **kwargs: Any) -> OrderStoreError:
        """
        Add context to this error (fluent API).

        Usage:
            raise InvalidEntityError("Invalid order.").with_context(
                operation="read", record_id=order_id
            )
        """
        for key, value in kwargs.items():
            if hasattr(self.context, key) and key != "metadata":
                setattr(self.context, key, value)
            else:
                self.context.metadata[key] = value
        return self

    def to_dict(self) -> dict[str, Any]:
        """Convert error to dictionary for logging/serialization."""
        result = {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "category": self.category.value,
            "retryable": self.retryable,
        }

        context_dict = self.context.to_dict()
        if context_dict:
            result["context"] = context_dict

        if self.cause is not None:
            result["cause"] = str(self.cause)

        return result

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.message!r}, category={self.category.value})"


# =============================================================================
# NOT FOUND
# =============================================================================


class InvalidEntityError(OrderStoreError):
    """The id does not resolve to a record of the expected type."""

    default_category = ErrorCategory.NOT_FOUND
    default_retryable = False


# =============================================================================
# DATABASE ERRORS
# =============================================================================


class DatabaseError(OrderStoreError):
    """Database statement or transaction error."""

    default_category = ErrorCategory.DATABASE
    default_retryable = False


class RecordInsertError(DatabaseError):
    """Storage rejected the insert of a content record."""

    pass


# =============================================================================
# VALIDATION ERRORS
# =============================================================================


class ValidationError(OrderStoreError):
    """
    Aggregate-level validation error.

    Never retryable - the caller must fix the value.
    """

    default_category = ErrorCategory.VALIDATION
    default_retryable = False

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        value: Any = None,
        **kwargs: Any,
    ):
        super().__init__(message, **kwargs)
        self.field = field
        self.value = value

    def to_dict(self) -> dict[str, Any]:
        result = super().to_dict()
        if self.field:
            result["field"] = self.field
        if self.value is not None:
            result["value"] = repr(self.value)
        return result


# =============================================================================
# CONFIGURATION ERRORS
# =============================================================================


class ConfigError(OrderStoreError):
    """Configuration error.  Never retryable."""

    default_category = ErrorCategory.CONFIG
    default_retryable = False


__all__ = [
    "ErrorCategory",
    "ErrorContext",
    "OrderStoreError",
    "InvalidEntityError",
    "DatabaseError",
    "RecordInsertError",
    "ValidationError",
    "ConfigError",
]
