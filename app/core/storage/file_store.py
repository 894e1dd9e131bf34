import asyncio
import json
import os
from collections import Counter
from pathlib import Path

from pydantic import ValidationError

from app.core.dto.contact_form import (
    AttachmentModel,
    ContactRequestModel,
    ContactStatsModel,
    ValidatedContactModel,
)
from app.infrastructure.errors.base import StorageError
from app.infrastructure.errors.contact_errors import ContactNotFound
from app.infrastructure.logging import get_logger
from app.utils.dates import as_utc, next_timestamp, utc_now
from app.utils.enums import ContactStatusEnum


logger = get_logger(__name__)

FILE_MODE = 0o600


class FileContactStore:
    """Contacts kept as a single JSON array document.

    Every operation holds the store lock for its whole read-modify-write
    cycle, so concurrent requests can't lose each other's updates. Files are
    replaced atomically, readers never see a partial document.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._lock = asyncio.Lock()

    async def init_storage(self) -> None:
        await asyncio.to_thread(self.path.parent.mkdir, parents=True, exist_ok=True)
        logger.info("file_store_ready", path=str(self.path))

    async def check_connection(self) -> bool:
        directory = self.path.parent
        return directory.is_dir() and os.access(directory, os.W_OK)

    async def close(self) -> None:
        return None

    def _write_document(self, document: list[dict]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        tmp_path = self.path.with_name(f"{self.path.name}.tmp")
        with open(tmp_path, "w", encoding="utf-8") as file:
            json.dump(document, file, indent=2, ensure_ascii=False)
        os.chmod(tmp_path, FILE_MODE)
        os.replace(tmp_path, self.path)

    async def _load(self) -> list[ContactRequestModel]:
        try:
            document = await asyncio.to_thread(read_contacts_document, self.path)
            return [ContactRequestModel.model_validate(item) for item in document]
        except (OSError, ValueError, ValidationError) as exc:
            logger.error("file_store_read_failed", path=str(self.path), error=str(exc))
            raise StorageError() from exc

    async def _save(self, contacts: list[ContactRequestModel]) -> None:
        document = [dump_contact(contact) for contact in contacts]
        try:
            await asyncio.to_thread(self._write_document, document)
        except (OSError, TypeError, ValueError) as exc:
            logger.error("file_store_write_failed", path=str(self.path), error=str(exc))
            raise StorageError() from exc

    @staticmethod
    def _find_index(contacts: list[ContactRequestModel], contact_id: str) -> int:
        for index, contact in enumerate(contacts):
            if contact.id == contact_id:
                return index
        raise ContactNotFound(contact_id)

    @staticmethod
    def _next_id(contacts: list[ContactRequestModel]) -> str:
        now_ms = int(utc_now().timestamp() * 1000)
        highest = max((int(contact.id) for contact in contacts if contact.id.isdigit()), default=0)
        return str(max(now_ms, highest + 1))

    async def create(
        self,
        fields: ValidatedContactModel,
        images: list[AttachmentModel],
    ) -> ContactRequestModel:
        async with self._lock:
            contacts = await self._load()
            now = utc_now()
            contact = ContactRequestModel(
                **fields.model_dump(),
                id=self._next_id(contacts),
                timestamp=now,
                images=images,
                status=ContactStatusEnum.NEW,
                created_at=now,
                updated_at=now,
            )
            contacts.insert(0, contact)
            await self._save(contacts)
        return contact

    async def list_all(self) -> list[ContactRequestModel]:
        async with self._lock:
            contacts = await self._load()
        return sorted(contacts, key=lambda contact: as_utc(contact.timestamp), reverse=True)

    async def update_status(self, contact_id: str, status: ContactStatusEnum) -> ContactRequestModel:
        async with self._lock:
            contacts = await self._load()
            index = self._find_index(contacts, contact_id)
            contact = contacts[index].model_copy(
                update={
                    "status": status,
                    "updated_at": next_timestamp(contacts[index].updated_at),
                }
            )
            contacts[index] = contact
            await self._save(contacts)
        return contact

    async def delete(self, contact_id: str) -> ContactRequestModel:
        async with self._lock:
            contacts = await self._load()
            contact = contacts.pop(self._find_index(contacts, contact_id))
            await self._save(contacts)
        return contact

    async def stats(self) -> ContactStatsModel:
        async with self._lock:
            contacts = await self._load()
        counts = Counter(contact.status for contact in contacts)
        return ContactStatsModel(
            total=len(contacts),
            new=counts[ContactStatusEnum.NEW],
            contacted=counts[ContactStatusEnum.CONTACTED],
            completed=counts[ContactStatusEnum.COMPLETED],
        )


def dump_contact(contact: ContactRequestModel) -> dict:
    """File-backend JSON form of a contact."""
    return contact.model_dump(mode="json", by_alias=True)


def read_contacts_document(path: str | Path) -> list[dict]:
    """Raw records of a contacts.json document, empty when the file is missing."""
    path = Path(path)
    if not path.exists():
        return []
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return []
    document = json.loads(text)
    if not isinstance(document, list):
        raise ValueError("contacts document must be a JSON array")
    return document
