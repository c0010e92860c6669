"""
MediaRelay Backend — Asset Remover
====================================

What:  Deletes a stored asset on the remote store by its public identifier.
How:   One destroy call per request; the acknowledgment is returned as-is.
       Deleting a missing asset is left to the remote store's semantics
       (Cloudinary answers {"result": "not found"}).
Who:   Called by DELETE /api/delete/{public_id}.
"""

import logging
from typing import Optional

from mediarelay.exceptions import RemoteStoreError
from mediarelay.models.upload import DeleteFailure, DeleteOutcome, DeleteSuccess, Reason
from mediarelay.services.remote_store import RemoteStore

logger = logging.getLogger(__name__)


class AssetRemover:
    def __init__(self, store: RemoteStore):
        self.store = store

    async def remove(self, public_id: Optional[str]) -> DeleteOutcome:
        """
        Remove `public_id` from the remote store.

        An empty identifier is a local failure and is never sent. Anything else,
        whitespace included, goes to the store unchanged.
        """
        if not public_id:
            return DeleteFailure(Reason.MISSING_PUBLIC_ID, "publicId required")

        try:
            result = await self.store.destroy(public_id)
        except RemoteStoreError as e:
            return DeleteFailure(Reason.REMOTE_ERROR, e.message)
        except Exception as e:
            logger.error("Unexpected error deleting %s: %s", public_id, str(e), exc_info=True)
            return DeleteFailure(Reason.REMOTE_ERROR, str(e) or "Unknown error")

        logger.info("Deleted %s: %s", public_id, result)
        return DeleteSuccess(result=result)
