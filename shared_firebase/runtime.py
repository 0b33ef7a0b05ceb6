"""Runtime wiring: settings, logging, telemetry, store and services.

Single place for startup/shutdown of a process that drives the engine. No
business logic here and no module-level state: everything is built per
context and torn down on exit.

Example:
    async with open_tree_services() as services:
        await services.deleter.delete_collection(
            "fakeClubs", ["roles", "members"], allowed_prefix="fakeClubs"
        )
"""

import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from dataclasses import dataclass

from shared_firebase.application.interfaces.document_store import IDocumentStore
from shared_firebase.application.services.tree_copy_service import TreeCopyService
from shared_firebase.application.services.tree_delete_service import TreeDeleteService
from shared_firebase.core.config import Settings, get_settings
from shared_firebase.infrastructure.firebase.client import create_firestore_client
from shared_firebase.infrastructure.firebase.document_store import (
    FirestoreDocumentStore,
)
from shared_firebase.shared.telemetry.logging import setup_logging
from shared_firebase.shared.telemetry.telemetry import TelemetryConfig

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class TreeServices:
    """Services bound to one store for the lifetime of an open_tree_services context."""

    store: IDocumentStore
    copier: TreeCopyService
    deleter: TreeDeleteService


@asynccontextmanager
async def open_tree_services(
    settings: Settings | None = None,
    *,
    store: IDocumentStore | None = None,
    configure_logging: bool = True,
) -> AsyncIterator[TreeServices]:
    """Build the copy and delete services, yield them, then shut down.

    Startup order: logging, telemetry (if enabled), Firestore client (unless
    a store is injected). Shutdown order: HTTP client close, telemetry
    shutdown.

    Args:
        settings: Settings to use (defaults to get_settings()).
        store: Store to use instead of Firestore (e.g. InMemoryDocumentStore).
        configure_logging: Call setup_logging (disable when the host already does).

    Raises:
        FirestoreNotConfiguredException: No store injected and no credentials configured.
    """
    settings = settings or get_settings()
    if configure_logging:
        setup_logging(settings)

    telemetry = TelemetryConfig.from_settings(settings)
    if settings.telemetry_enabled:
        telemetry.setup_telemetry(
            exporter_type=settings.telemetry_exporter,
            otlp_endpoint=settings.telemetry_otlp_endpoint,
            sample_rate=settings.telemetry_sample_rate,
        )
        telemetry.instrument_logging()

    client = None
    try:
        if store is None:
            client = create_firestore_client(settings)
            store = FirestoreDocumentStore(client)
        yield TreeServices(
            store=store,
            copier=TreeCopyService(store, settings.default_page_size),
            deleter=TreeDeleteService(store, settings.default_page_size),
        )
    finally:
        if client is not None:
            await client.aclose()
            logger.info("Firestore HTTP client closed")
        telemetry.shutdown()
