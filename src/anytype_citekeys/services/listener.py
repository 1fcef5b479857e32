"""Automatic key assignment for records added to the library."""

from __future__ import annotations

import asyncio
import logging
from typing import Iterable, Optional, Protocol

from anytype_citekeys.models import Library
from anytype_citekeys.services.processor import ItemProcessor

logger = logging.getLogger(__name__)

ITEM_TYPE = "item"
ADD_EVENT = "add"


class Observer(Protocol):
    def notify(self, event: str, entity_type: str, ids: Iterable[str]) -> None:
        ...


class Notifier(Protocol):
    """Change-notification subscription API of the host library."""

    def register_observer(self, observer: Observer, entity_types: list[str]) -> str:
        ...

    def unregister_observer(self, observer_id: str) -> None:
        ...


class ChangeListener:
    """Gives newly added records a key without overwriting existing ones."""

    def __init__(self, processor: ItemProcessor, library: Library) -> None:
        self._processor = processor
        self._library = library
        self._notifier: Optional[Notifier] = None
        self._observer_id: Optional[str] = None
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def registered(self) -> bool:
        return self._observer_id is not None

    def register(self, notifier: Notifier) -> None:
        self._observer_id = notifier.register_observer(self, [ITEM_TYPE])
        self._notifier = notifier
        logger.debug("Registered change listener %s", self._observer_id)

    def unregister(self) -> None:
        if self._notifier is not None and self._observer_id is not None:
            self._notifier.unregister_observer(self._observer_id)
        self._notifier = None
        self._observer_id = None

    def notify(self, event: str, entity_type: str, ids: Iterable[str]) -> None:
        """Schedule processing for each added item; does not block the caller.

        Notifications delivered outside a running event loop are logged and
        dropped.
        """
        if entity_type != ITEM_TYPE or event != ADD_EVENT:
            return
        ids = list(ids)
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.error("No running event loop, skipping added items %s", ids)
            return
        for record_id in ids:
            task = loop.create_task(self._handle(record_id))
            self._tasks.add(task)
            task.add_done_callback(self._tasks.discard)

    async def drain(self) -> None:
        """Wait until every scheduled task has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _handle(self, record_id: str) -> None:
        try:
            record = await self._library.get(record_id)
            if record is None:
                logger.debug("Added item %s could not be resolved", record_id)
                return
            await self._processor.process(record, overwrite=False)
        except Exception:
            logger.exception("Failed to assign citation key to new item %s", record_id)
