"""Domain exceptions for the tree copy/delete engine.

Every failure the engine encounters surfaces to its caller as one of these.
Store implementations wrap transport errors so callers can handle a single
hierarchy regardless of backend.
"""

from typing import Any


class SharedFirebaseException(Exception):
    """Base exception for all shared_firebase errors.

    Attributes:
        message: Human-readable error description.
        error_code: Machine-readable error code.
        details: Additional error context (e.g. path, operation).
    """

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Human-readable error description.
            error_code: Optional machine-readable code; defaults to class name.
            details: Optional dict of extra context.
        """
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)


class ValidationException(SharedFirebaseException):
    """Raised when an argument is malformed (path, page size, batch size)."""

    def __init__(self, message: str, field: str | None = None) -> None:
        details = {"field": field} if field else {}
        super().__init__(message, "VALIDATION_ERROR", details)


class GuardViolationException(SharedFirebaseException):
    """Raised before any I/O when a collection delete targets a path outside the allowed prefix."""

    def __init__(self, collection_path: str, allowed_prefix: str) -> None:
        """Initialize with the rejected path and the prefix it failed to match.

        Args:
            collection_path: Collection the caller asked to delete.
            allowed_prefix: Prefix the path was required to start with.
        """
        super().__init__(
            f"Refusing to delete collection outside allowed root: {collection_path!r} "
            f"does not start with {allowed_prefix!r}",
            "GUARD_VIOLATION",
            {"collection_path": collection_path, "allowed_prefix": allowed_prefix},
        )


class StoreOperationException(SharedFirebaseException):
    """Raised when a remote store call fails."""

    def __init__(
        self,
        operation: str,
        path: str,
        message: str | None = None,
        error_code: str = "STORE_OPERATION_FAILED",
    ) -> None:
        """Initialize with the failed operation and the path it targeted.

        Args:
            operation: Store operation name (read, write, list_page, delete_batch).
            path: Document or collection path (first path for batches).
            message: Optional description; defaults to "<operation> failed for <path>".
            error_code: Machine-readable code (subclasses override).
        """
        super().__init__(
            message or f"{operation} failed for {path}",
            error_code,
            {"operation": operation, "path": path},
        )

    @property
    def operation(self) -> str:
        return self.details["operation"]

    @property
    def path(self) -> str:
        return self.details["path"]


class WriteFailureException(StoreOperationException):
    """Raised when a write, list or batch delete fails. Fatal to the current operation."""

    def __init__(self, operation: str, path: str, message: str | None = None) -> None:
        super().__init__(operation, path, message, "WRITE_FAILURE")


class FirestoreNotConfiguredException(SharedFirebaseException):
    """Raised when a Firestore-backed store is requested but no credentials are configured."""

    def __init__(
        self,
        message: str = (
            "Firestore is not configured: set FIREBASE_SERVICE_ACCOUNT_KEY "
            "(full JSON string) or FIREBASE_SERVICE_ACCOUNT_PATH (path to JSON file)."
        ),
    ) -> None:
        super().__init__(message, "FIRESTORE_NOT_CONFIGURED")
