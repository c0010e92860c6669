"""
MediaRelay Backend — Asset Routes
===================================

What:  DELETE /api/delete/{public_id} removes a stored asset.
How:   The identifier is taken as a path so folder-qualified ids
       ("avatars/abc123") work. An empty identifier answers 400 without
       touching the remote store.
"""

import logging

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from mediarelay.dependencies import get_asset_remover
from mediarelay.schemas.upload import DeleteResponse, ErrorResponse
from mediarelay.services.asset_service import AssetRemover
from mediarelay.services.normalizer import render_delete

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Assets"])


@router.delete(
    "/delete/{public_id:path}",
    response_model=DeleteResponse,
    responses={
        200: {"description": "Remote acknowledgment", "model": DeleteResponse},
        400: {"description": "publicId required", "model": ErrorResponse},
        500: {"description": "Remote store failure", "model": ErrorResponse},
    },
    summary="Delete an uploaded asset",
    description=(
        "Deletes the asset with the given public id from the remote store and "
        "returns the store's acknowledgment unchanged."
    ),
)
async def delete_asset(
    public_id: str,
    remover: AssetRemover = Depends(get_asset_remover),
) -> JSONResponse:
    outcome = await remover.remove(public_id)
    status_code, body = render_delete(outcome)
    return JSONResponse(status_code=status_code, content=body)


@router.delete("/delete", include_in_schema=False)
async def delete_asset_without_id(
    remover: AssetRemover = Depends(get_asset_remover),
) -> JSONResponse:
    status_code, body = render_delete(await remover.remove(""))
    return JSONResponse(status_code=status_code, content=body)
