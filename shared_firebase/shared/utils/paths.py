"""Firestore path helpers.

Paths are relative to the database root ("clubs/abc/roles/r1"). Collection
paths have an odd number of segments, document paths an even number.
"""

from collections.abc import Sequence

from shared_firebase.core.constants import MAX_BATCH_WRITES, PATH_SEP
from shared_firebase.domain.exceptions import (
    GuardViolationException,
    ValidationException,
)


def _segments(path: str, field: str) -> list[str]:
    if not path:
        raise ValidationException("Path must not be empty", field=field)
    parts = path.split(PATH_SEP)
    if any(not part for part in parts):
        raise ValidationException(
            f"Path has an empty segment (leading, trailing or doubled '/'): {path!r}",
            field=field,
        )
    return parts


def validate_collection_path(path: str, field: str = "collection_path") -> str:
    """Return path unchanged if it names a collection (odd segment count).

    Raises:
        ValidationException: If the path is empty, has empty segments or names a document.
    """
    if len(_segments(path, field)) % 2 == 0:
        raise ValidationException(
            f"Expected a collection path (odd number of segments), got: {path!r}",
            field=field,
        )
    return path


def validate_document_path(path: str, field: str = "path") -> str:
    """Return path unchanged if it names a document (even segment count).

    Raises:
        ValidationException: If the path is empty, has empty segments or names a collection.
    """
    if len(_segments(path, field)) % 2 == 1:
        raise ValidationException(
            f"Expected a document path (even number of segments), got: {path!r}",
            field=field,
        )
    return path


def validate_subcollection_names(names: Sequence[str]) -> tuple[str, ...]:
    """Return names as a tuple; each must be a single non-empty path segment."""
    if isinstance(names, str):
        # A bare string would otherwise iterate per character.
        raise ValidationException(
            "subcollections must be a sequence of names, not a string",
            field="subcollections",
        )
    for name in names:
        if not name or PATH_SEP in name:
            raise ValidationException(
                f"Invalid subcollection name: {name!r}", field="subcollections"
            )
    return tuple(names)


def validate_page_size(page_size: int) -> int:
    """Return page_size if 1 <= page_size <= MAX_BATCH_WRITES."""
    if isinstance(page_size, bool) or not isinstance(page_size, int):
        raise ValidationException("page_size must be an integer", field="page_size")
    if not 1 <= page_size <= MAX_BATCH_WRITES:
        raise ValidationException(
            f"page_size must be between 1 and {MAX_BATCH_WRITES}, got: {page_size}",
            field="page_size",
        )
    return page_size


def child_path(parent: str, name: str) -> str:
    """Join a document path and a collection name, or a collection path and a document id."""
    return f"{parent}{PATH_SEP}{name}"


def check_allowed_prefix(collection_path: str, allowed_prefix: str) -> None:
    """Raise GuardViolationException unless collection_path starts with allowed_prefix.

    Plain string prefix match. An empty prefix would match every path and is
    rejected as a violation.
    """
    if not allowed_prefix or not collection_path.startswith(allowed_prefix):
        raise GuardViolationException(collection_path, allowed_prefix)
