from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status

from lms_api.config import settings
from lms_api.schemas.upload_schemas import CorsRequest, CorsResponse, UploadResponse
from lms_api.schemas.user_schemas import User
from lms_api.services.upload_service import (
    FlussonicClient,
    UploadError,
    get_flussonic_client,
    iter_file,
    storage_filename,
)
from lms_api.utils.auth import require_admin
from lms_api.utils.logger import configure_logging

logger = configure_logging()

upload_routes = APIRouter()


def _file_size(file: UploadFile) -> int:
    if file.size is not None:
        return file.size
    file.file.seek(0, 2)
    size = file.file.tell()
    file.file.seek(0)
    return size


@upload_routes.post("/uploads", response_model=UploadResponse)
async def upload_video(
    file: Optional[UploadFile] = File(None),
    admin: User = Depends(require_admin),
    client: FlussonicClient = Depends(get_flussonic_client),
) -> UploadResponse:
    """Relay a lesson video to the Flussonic VOD storage and return its HLS URL."""
    if file is None or not file.filename:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="No file uploaded")
    size = _file_size(file)
    if size > settings.upload_max_bytes:
        raise HTTPException(
            status_code=status.HTTP_413_REQUEST_ENTITY_TOO_LARGE,
            detail=f"File exceeds {settings.upload_max_bytes} bytes",
        )

    filename = storage_filename(file.filename)
    try:
        url = await client.upload(filename, iter_file(file), file.content_type)
    except UploadError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    finally:
        await file.close()

    logger.info("video uploaded by=%s file=%s size=%s", admin.id, filename, size)
    return UploadResponse(url=url)


@upload_routes.post("/uploads/cors", response_model=CorsResponse)
async def configure_cors(
    body: CorsRequest,
    admin: User = Depends(require_admin),
    client: FlussonicClient = Depends(get_flussonic_client),
) -> CorsResponse:
    try:
        await client.configure_cors(body.origins)
    except UploadError as e:
        raise HTTPException(status_code=e.status_code, detail=e.detail)
    return CorsResponse(configured=True, origins=body.origins)
