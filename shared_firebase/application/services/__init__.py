"""Application services: tree copy and guarded tree deletion."""

from shared_firebase.application.services.tree_copy_service import TreeCopyService
from shared_firebase.application.services.tree_delete_service import TreeDeleteService

__all__ = ["TreeCopyService", "TreeDeleteService"]
