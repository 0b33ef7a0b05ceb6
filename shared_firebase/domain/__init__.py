"""Domain layer: exceptions raised by the engine and the store implementations.

No dependencies on infrastructure. Used by application and infrastructure
layers.
"""

from shared_firebase.domain.exceptions import (
    FirestoreNotConfiguredException,
    GuardViolationException,
    SharedFirebaseException,
    StoreOperationException,
    ValidationException,
    WriteFailureException,
)

__all__ = [
    "FirestoreNotConfiguredException",
    "GuardViolationException",
    "SharedFirebaseException",
    "StoreOperationException",
    "ValidationException",
    "WriteFailureException",
]
