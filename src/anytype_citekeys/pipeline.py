"""High-level orchestration: lifecycle, previews and backfill status."""

from __future__ import annotations

import logging
from typing import Optional

from anytype_citekeys.config import PreferenceStore, ensure_default_preferences
from anytype_citekeys.generator import KeyGenerator
from anytype_citekeys.models import Library, RecordHandle
from anytype_citekeys.services.listener import ChangeListener, Notifier
from anytype_citekeys.services.processor import BatchCoordinator, ItemProcessor

logger = logging.getLogger(__name__)

NO_SELECTION_PREVIEW = "(select an item to preview)"
NOT_REGULAR_PREVIEW = "(select a regular item to preview)"
ERROR_PREVIEW = "(error generating preview)"


class PipelineError(RuntimeError):
    """Raised when the citation key manager is used out of order."""


def format_status(count: int, overwrite: bool) -> str:
    verb = "updated" if overwrite else "generated"
    plural = "" if count == 1 else "s"
    return f"Done - {count} key{plural} {verb}."


class CitekeyManager:
    """Wires the key engine to a library and owns the listener lifecycle."""

    def __init__(
        self,
        library: Library,
        preferences: PreferenceStore,
        notifier: Optional[Notifier] = None,
    ) -> None:
        self.library = library
        self.preferences = preferences
        self.notifier = notifier
        self.generator = KeyGenerator(preferences)
        self.processor = ItemProcessor(self.generator)
        self.coordinator = BatchCoordinator(self.processor, library)
        self.listener = ChangeListener(self.processor, library)

    def startup(self) -> None:
        ensure_default_preferences(self.preferences)
        if self.notifier is not None:
            if self.listener.registered:
                raise PipelineError("Change listener is already registered.")
            self.listener.register(self.notifier)
        logger.info("Citation key manager started")

    async def shutdown(self) -> None:
        self.listener.unregister()
        await self.listener.drain()
        logger.info("Citation key manager stopped")

    def generate_key(self, record: RecordHandle) -> str:
        return self.generator.generate(record)

    def preview(self, record: Optional[RecordHandle]) -> str:
        """Key preview for display; never raises."""
        if record is None:
            return NO_SELECTION_PREVIEW
        try:
            if not record.is_regular_item():
                return NOT_REGULAR_PREVIEW
            return self.generate_key(record)
        except Exception:
            logger.exception("Failed to generate preview")
            return ERROR_PREVIEW

    async def backfill(self, overwrite: bool = False) -> int:
        return await self.coordinator.backfill(overwrite=overwrite)

    async def run_backfill(self, overwrite: bool = False) -> str:
        """Run a backfill and describe the outcome as a status line."""
        try:
            count = await self.backfill(overwrite=overwrite)
        except Exception as exc:
            logger.exception("Backfill failed")
            return f"Error: {exc}"
        return format_status(count, overwrite)
