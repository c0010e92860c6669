"""
MediaRelay Backend — FastAPI Dependencies
===========================================

What:  Hands the process-wide UploadLimits and RemoteStore (built once by
       create_app and kept on app.state) to the route handlers, and assembles
       the per-request service objects around them.
How:   Plain functions resolved by FastAPI's Depends(). Tests swap the store
       by passing their own to create_app().
"""

from typing import Optional

from fastapi import Depends, Request

from mediarelay.models.upload import UploadLimits
from mediarelay.services.asset_service import AssetRemover
from mediarelay.services.batch import BatchCoordinator
from mediarelay.services.remote_store import RemoteStore
from mediarelay.services.uploader import StreamUploader


def get_upload_limits(request: Request) -> UploadLimits:
    return request.app.state.upload_limits


def get_remote_store(request: Request) -> RemoteStore:
    return request.app.state.remote_store


def get_upload_folder(request: Request) -> Optional[str]:
    return request.app.state.upload_folder


def get_uploader(
    store: RemoteStore = Depends(get_remote_store),
    limits: UploadLimits = Depends(get_upload_limits),
    folder: Optional[str] = Depends(get_upload_folder),
) -> StreamUploader:
    return StreamUploader(store, limits, folder=folder)


def get_batch_coordinator(
    uploader: StreamUploader = Depends(get_uploader),
) -> BatchCoordinator:
    return BatchCoordinator(uploader)


def get_asset_remover(store: RemoteStore = Depends(get_remote_store)) -> AssetRemover:
    return AssetRemover(store)
