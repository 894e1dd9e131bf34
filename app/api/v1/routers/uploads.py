from typing import Annotated

from fastapi import APIRouter, Depends
from fastapi.responses import FileResponse

from app.api.v1.dependencies import get_upload_service, require_admin
from app.core.services.upload_service import ImageUploadService
from app.infrastructure.errors.base import NotFoundError


router = APIRouter()


@router.get("/{filename}", summary="Uploaded photo, admin only")
async def get_upload(
    filename: str,
    _: Annotated[str, Depends(require_admin)],
    upload_service: Annotated[ImageUploadService, Depends(get_upload_service)],
) -> FileResponse:
    path = upload_service.resolve(filename)
    if path is None:
        raise NotFoundError("File not found")
    return FileResponse(path)
