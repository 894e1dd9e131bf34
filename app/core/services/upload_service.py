import asyncio
import os
import secrets
from pathlib import Path, PurePath

from fastapi import UploadFile

from app.core.dto.contact_form import AttachmentModel
from app.core.validators.contact_form import sanitize
from app.infrastructure.config.config import STORAGE_CONFIG, StorageConfig
from app.infrastructure.errors.image_errors import (
    EmptyImageFile,
    ImageTooLarge,
    InvalidImageType,
    TooManyImages,
)
from app.infrastructure.logging import get_logger
from app.utils.dates import utc_now


logger = get_logger(__name__)

ALLOWED_MIME_TYPES = {"image/jpeg", "image/jpg", "image/png", "image/gif", "image/webp"}
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif", ".webp"}
READ_CHUNK_SIZE = 64 * 1024


def safe_basename(filename: str) -> str:
    """Strip any directory part, both / and \\ separated."""
    return PurePath(filename.replace("\\", "/")).name


class ImageUploadService:
    """Validates uploaded photos and stores them under the uploads directory."""

    def __init__(self, config: StorageConfig = STORAGE_CONFIG):
        self.uploads_dir = Path(config.UPLOADS_DIR)
        self.uploads_url = config.UPLOADS_URL.rstrip("/")
        self.max_size_mb = config.MAX_IMAGE_SIZE_MB
        self.max_images = config.MAX_IMAGES

    def _check_type(self, filename: str, content_type: str | None) -> str:
        extension = os.path.splitext(filename)[1].lower()
        if content_type not in ALLOWED_MIME_TYPES or extension not in ALLOWED_EXTENSIONS:
            raise InvalidImageType(", ".join(sorted(ALLOWED_EXTENSIONS)))
        return extension

    async def _read_limited(self, file: UploadFile) -> bytes:
        """Read the upload in chunks, stopping as soon as it exceeds the size limit."""
        limit = self.max_size_mb * 1024 * 1024
        chunks: list[bytes] = []
        total = 0
        while chunk := await file.read(READ_CHUNK_SIZE):
            total += len(chunk)
            if total > limit:
                raise ImageTooLarge(self.max_size_mb)
            chunks.append(chunk)
        if not total:
            raise EmptyImageFile()
        return b"".join(chunks)

    def _stored_filename(self, extension: str) -> str:
        millis = int(utc_now().timestamp() * 1000)
        return f"{millis}-{secrets.randbelow(10**9)}{extension}"

    def _write(self, filename: str, content: bytes) -> None:
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        (self.uploads_dir / filename).write_bytes(content)

    async def save_all(self, files: list[UploadFile]) -> list[AttachmentModel]:
        files = [file for file in files if file.filename]
        if len(files) > self.max_images:
            raise TooManyImages(self.max_images)

        # validate everything before anything touches the disk
        accepted: list[tuple[UploadFile, str, bytes]] = []
        for file in files:
            original_name = safe_basename(file.filename)
            extension = self._check_type(original_name, file.content_type)
            content = await self._read_limited(file)
            accepted.append((file, extension, content))

        attachments: list[AttachmentModel] = []
        for file, extension, content in accepted:
            stored_filename = safe_basename(self._stored_filename(extension))
            await asyncio.to_thread(self._write, stored_filename, content)
            attachments.append(
                AttachmentModel(
                    stored_filename=stored_filename,
                    original_name=sanitize(safe_basename(file.filename)),
                    public_path=f"{self.uploads_url}/{stored_filename}",
                    size_bytes=len(content),
                    mime_type=file.content_type,
                )
            )
        if attachments:
            logger.info("images_stored", count=len(attachments))
        return attachments

    def resolve(self, filename: str) -> Path | None:
        """Path of a stored upload, None when it doesn't exist."""
        name = safe_basename(filename)
        if not name or name in (".", ".."):
            return None
        path = self.uploads_dir / name
        if not path.is_file():
            return None
        return path
