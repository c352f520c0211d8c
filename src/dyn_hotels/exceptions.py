"""Exceptions for dyn-hotels."""

# ---------------------------------------------------------------------------
# Base Exception
# ---------------------------------------------------------------------------


class DynHotelsError(Exception):
    """
    Base exception for all dyn-hotels errors.

    All exceptions raised by this library inherit from this class,
    allowing callers to catch all library-specific errors with a single
    except clause.
    """

    pass


# ---------------------------------------------------------------------------
# Category Exceptions
# ---------------------------------------------------------------------------


class StoreError(DynHotelsError):
    """
    Base exception for errors raised while talking to the document store.

    This includes transport failures, optimistic concurrency conflicts
    and documents that cannot be decoded into entities.
    """

    pass


class ValidationError(DynHotelsError, ValueError):
    """
    Raised when a configuration value, table spec or entity field is invalid.

    Attributes:
        field: Name of the offending field
        value: The rejected value
        reason: Human-readable explanation
    """

    def __init__(self, field: str, value: object, reason: str) -> None:
        self.field = field
        self.value = value
        self.reason = reason
        super().__init__(f"Invalid {field} {value!r}: {reason}")


# ---------------------------------------------------------------------------
# Store Exceptions
# ---------------------------------------------------------------------------


class ConnectivityError(StoreError):
    """
    Raised when DynamoDB cannot be reached or the request cannot be signed.

    Not retried by this library.

    Attributes:
        cause: The underlying botocore exception
        table_name: The DynamoDB table that was being accessed
        operation: The store operation that failed
    """

    def __init__(
        self,
        message: str,
        cause: Exception | None = None,
        *,
        table_name: str | None = None,
        operation: str | None = None,
    ) -> None:
        self.cause = cause
        self.table_name = table_name
        self.operation = operation
        super().__init__(self._format_message(message))

    def _format_message(self, message: str) -> str:
        parts = [message]
        context = []
        if self.table_name:
            context.append(f"table={self.table_name}")
        if self.operation:
            context.append(f"operation={self.operation}")
        if context:
            parts.append(f"[{', '.join(context)}]")
        return " ".join(parts)


class ConflictError(StoreError):
    """
    Raised when a versioned update loses the optimistic concurrency check.

    The stored item either has a different version than the caller supplied
    or does not exist at all. Callers decide whether to re-read and retry.
    """

    def __init__(self, hotel_id: str, expected_version: int) -> None:
        self.hotel_id = hotel_id
        self.expected_version = expected_version
        super().__init__(
            f"Version conflict for hotel {hotel_id}: expected stored version {expected_version}"
        )


class DecodeError(StoreError):
    """Raised when a stored document does not match the expected entity shape."""

    def __init__(self, reason: str, item_id: str | None = None) -> None:
        self.reason = reason
        self.item_id = item_id
        msg = f"Cannot decode document: {reason}"
        if item_id:
            msg += f" (id={item_id})"
        super().__init__(msg)


# ---------------------------------------------------------------------------
# Provisioning Exceptions
# ---------------------------------------------------------------------------


class ProvisionError(DynHotelsError):
    """
    Raised when table creation fails during provisioning.

    Fatal to the startup sequence; tables processed before the failure
    are left as they are.
    """

    def __init__(self, table_name: str, reason: str) -> None:
        self.table_name = table_name
        self.reason = reason
        super().__init__(f"Provisioning table {table_name} failed: {reason}")
