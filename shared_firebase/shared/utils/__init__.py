"""Shared utilities: Firestore path handling and validation."""

from shared_firebase.shared.utils.paths import (
    check_allowed_prefix,
    child_path,
    validate_collection_path,
    validate_document_path,
    validate_page_size,
    validate_subcollection_names,
)

__all__ = [
    "check_allowed_prefix",
    "child_path",
    "validate_collection_path",
    "validate_document_path",
    "validate_page_size",
    "validate_subcollection_names",
]
