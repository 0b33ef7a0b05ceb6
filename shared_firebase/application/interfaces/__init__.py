"""Interfaces (ports) implemented by infrastructure."""

from shared_firebase.application.interfaces.document_store import IDocumentStore

__all__ = ["IDocumentStore"]
