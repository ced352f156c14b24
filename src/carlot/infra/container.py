"""Process-wide resources shared by every request."""

from __future__ import annotations

import logging

from carlot.adapters.auth_listeners import AuthListenerRegistry
from carlot.adapters.in_memory_change_feed import InMemoryChangeFeed
from carlot.adapters.local_object_storage import LocalObjectStorage
from carlot.infra.db.session import dispose_engine
from carlot.infra.settings import Settings
from carlot.ports.change_feed import ChangeFeed
from carlot.ports.object_storage import ObjectStorage

logger = logging.getLogger(__name__)


class AppContainer:
    """
    Owns the long-lived collaborators: change feed, object storage and the
    auth event registry. Database sessions are not held here; they are
    opened per request.

    ``startup()`` and ``shutdown()`` are bound to the application lifespan.
    Shutting down closes every open change subscription, which ends any
    running stats stream.
    """

    def __init__(
        self,
        settings: Settings,
        change_feed: ChangeFeed | None = None,
        storage: ObjectStorage | None = None,
        auth_listeners: AuthListenerRegistry | None = None,
    ) -> None:
        self.settings = settings
        self.change_feed: ChangeFeed = change_feed or InMemoryChangeFeed()
        self.storage: ObjectStorage = storage or LocalObjectStorage(
            root=settings.STORAGE_ROOT,
            public_base_url=settings.PUBLIC_BASE_URL,
            secret=settings.APP_SECRET,
        )
        self.auth_listeners = auth_listeners or AuthListenerRegistry()
        self.started = False

    def startup(self) -> None:
        self.settings.STORAGE_ROOT.mkdir(parents=True, exist_ok=True)
        self.started = True
        logger.info(
            "Application started",
            extra={"env": self.settings.APP_ENV, "storage_root": str(self.settings.STORAGE_ROOT)},
        )

    def shutdown(self) -> None:
        self.change_feed.close()
        dispose_engine()
        self.started = False
        logger.info("Application stopped")
