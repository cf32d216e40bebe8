"""Application bootstrap and lifecycle management."""

import os
from typing import Protocol

from .config import resolve_db_path
from .dialogs import DialogSet, DialogStateAccessor, ProfileAccessor
from .dialogue import DialogueAgent, IDialogueAgent
from .logging_config import get_logger
from .storage import IStorage, Storage
from .topics import build_dialog_set
from .tracker import ITracker, Tracker

logger = get_logger(__name__)


class IApplication(Protocol):
    """Bootstrap and lifecycle."""

    async def start(self) -> None:
        """Initialize components in dependency order."""
        ...

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        ...

    async def reset(self) -> None:
        """Reset data between test runs."""
        ...

    @property
    def storage(self) -> IStorage:
        ...

    @property
    def dialogue_agent(self) -> IDialogueAgent:
        ...


class Application:
    """Main application bootstrap."""

    def __init__(self, db_path: str | None = None):
        env_db_path = os.getenv("DATABASE_URL") if db_path is None else db_path
        self._db_path = resolve_db_path(env_db_path)

        # Components (will be initialized in start())
        self._storage: IStorage | None = None
        self._tracker: ITracker | None = None
        self._dialog_set: DialogSet | None = None
        self._dialogue_agent: DialogueAgent | None = None

    async def start(self) -> None:
        """Initialize components in dependency order."""
        logger.info("Starting application")

        # 1. Storage (no dependencies)
        self._storage = Storage(self._db_path)
        await self._storage.init()
        logger.info("Storage initialized at %s", self._db_path)

        # 2. Tracker (depends on Storage)
        self._tracker = Tracker(self._storage)

        # 3. Topic dialogs (depend on Storage-backed accessors + Tracker)
        self._dialog_set = build_dialog_set(
            ProfileAccessor(self._storage),
            DialogStateAccessor(self._storage),
            self._tracker,
        )
        logger.info("Dialogs registered: %s", ", ".join(self._dialog_set.topic_ids))

        # 4. DialogueAgent (depends on DialogSet, Storage, Tracker)
        self._dialogue_agent = DialogueAgent(
            dialog_set=self._dialog_set,
            storage=self._storage,
            tracker=self._tracker,
        )
        await self._dialogue_agent.start()
        logger.info("DialogueAgent started")
        logger.info("All components initialized successfully")

    async def stop(self) -> None:
        """Shutdown in reverse order."""
        if self._dialogue_agent:
            await self._dialogue_agent.stop()
        if self._storage:
            await self._storage.close()
            logger.info("Storage closed")

    async def reset(self) -> None:
        """Reset data between test runs."""
        if self._dialogue_agent:
            await self._dialogue_agent.stop()

        if self._storage:
            await self._storage.clear()
            logger.info("Storage cleared")

        if self._dialogue_agent:
            await self._dialogue_agent.start()
            logger.info("Reset complete")

    @property
    def storage(self) -> IStorage:
        """Get storage instance."""
        if not self._storage:
            raise RuntimeError("Application not started")
        return self._storage

    @property
    def dialog_set(self) -> DialogSet:
        """Get the registered topic dialogs."""
        if not self._dialog_set:
            raise RuntimeError("Application not started")
        return self._dialog_set

    @property
    def dialogue_agent(self) -> DialogueAgent:
        """Get dialogue agent instance."""
        if not self._dialogue_agent:
            raise RuntimeError("Application not started")
        return self._dialogue_agent
