"""Assignment of citation keys to single records and whole libraries."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from anytype_citekeys.generator import KeyGenerator
from anytype_citekeys.models import CITATION_KEY_FIELD, Library, RecordHandle

logger = logging.getLogger(__name__)


@dataclass
class ItemProcessor:
    """Decides whether a record gets a (new) key and persists it."""

    generator: KeyGenerator

    async def process(self, record: RecordHandle, overwrite: bool = False) -> bool:
        """Assign a key to ``record``; return whether it changed.

        Persistence errors raised by ``record.save()`` propagate.
        """
        if not record.is_regular_item():
            return False
        if not overwrite and record.get_field(CITATION_KEY_FIELD):
            return False

        key = self.generator.generate(record)
        if not key:
            return False

        record.set_field(CITATION_KEY_FIELD, key)
        await record.save()
        logger.debug("Assigned citation key %s", key)
        return True


@dataclass
class BatchCoordinator:
    """Runs the item processor over every record of a library, in order."""

    processor: ItemProcessor
    library: Library

    async def backfill(self, overwrite: bool = False) -> int:
        records = await self.library.all_records()
        changed = 0
        failed = 0
        for record in records:
            try:
                if await self.processor.process(record, overwrite=overwrite):
                    changed += 1
            except Exception:
                failed += 1
                logger.exception("Failed to assign citation key, continuing")
        if failed:
            logger.warning("%d of %d records could not be updated", failed, len(records))
        logger.info(
            "Backfill finished (overwrite=%s): %d of %d records changed",
            overwrite,
            changed,
            len(records),
        )
        return changed
