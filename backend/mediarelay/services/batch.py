"""
MediaRelay Backend — Batch Coordinator
========================================

What:  Uploads every file of a multi-file request concurrently and returns
       one outcome per file, in input order.
How:   One task per item, all started together. Each task writes its outcome
       into a fixed slot indexed by the item's original position; the list
       is read only after every task has finished.
Who:   Called by POST /api/uploads after the batch passed validation.

Join semantics:
    Partial-failure tolerant: a failing file never cancels its siblings.
    An exception escaping a task (a bug, not a remote failure) is recorded as
    a remote_error outcome for that slot only.
"""

import asyncio
import logging
from typing import List, Optional, Sequence, cast

from mediarelay.models.upload import FileItem, Reason, UploadFailure, UploadOutcome
from mediarelay.services.uploader import StreamUploader

logger = logging.getLogger(__name__)


class BatchCoordinator:
    def __init__(self, uploader: StreamUploader):
        self.uploader = uploader

    async def upload_all(self, items: Sequence[FileItem]) -> List[UploadOutcome]:
        """
        Fan out one upload per item and join them all.

        Returns:
            Outcomes with the same length and order as `items`.
        """
        slots: List[Optional[UploadOutcome]] = [None] * len(items)

        async def run(index: int, item: FileItem) -> None:
            try:
                slots[index] = await self.uploader.upload(item)
            except Exception as e:
                logger.error(
                    "Upload task %d (%s) crashed: %s",
                    index,
                    item.filename or "<unnamed>",
                    str(e),
                    exc_info=True,
                )
                slots[index] = UploadFailure(
                    Reason.REMOTE_ERROR, str(e) or "Unknown error", item.filename
                )

        await asyncio.gather(*(run(index, item) for index, item in enumerate(items)))

        # Every task writes its slot, success or not
        missing = [index for index, outcome in enumerate(slots) if outcome is None]
        if missing:
            raise RuntimeError(f"Batch slots left unfilled: {missing}")
        results = cast(List[UploadOutcome], slots)
        failed = sum(1 for outcome in results if isinstance(outcome, UploadFailure))
        logger.info("Batch finished: %d files, %d failed", len(results), failed)
        return results
