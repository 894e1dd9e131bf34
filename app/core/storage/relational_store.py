from contextlib import asynccontextmanager
from datetime import datetime
from typing import AsyncIterator

from sqlalchemy.exc import SQLAlchemyError

from app.core.dto.contact_form import (
    AttachmentModel,
    ContactRequestModel,
    ContactStatsModel,
    ValidatedContactModel,
)
from app.core.repositories.contact_form_repository import ContactRepository
from app.infrastructure.database.adapters.pg_connection import DatabaseConnection
from app.infrastructure.database.models.contact_form import Contact
from app.infrastructure.errors.base import StorageError
from app.infrastructure.errors.contact_errors import ContactNotFound
from app.infrastructure.logging import get_logger
from app.utils.dates import as_utc, utc_now
from app.utils.enums import ContactStatusEnum


logger = get_logger(__name__)

# upper bound of the INTEGER primary key
MAX_CONTACT_ID = 2**31 - 1


class RelationalContactStore:
    """Contacts kept in the `contacts` table, one session per operation."""

    def __init__(self, connection: DatabaseConnection):
        self.connection = connection

    async def init_storage(self) -> None:
        try:
            await self.connection.init_schema()
        except (SQLAlchemyError, OSError) as exc:
            logger.error("database_schema_init_failed", error=str(exc))
            raise StorageError() from exc

    async def check_connection(self) -> bool:
        return await self.connection.check_connection()

    async def close(self) -> None:
        await self.connection.dispose()

    @asynccontextmanager
    async def _repository(self) -> AsyncIterator[ContactRepository]:
        session = await self.connection.get_session()
        try:
            yield ContactRepository(session=session)
        except (SQLAlchemyError, OSError) as exc:
            await session.rollback()
            logger.error("database_operation_failed", error=str(exc))
            raise StorageError() from exc
        finally:
            await session.close()

    @staticmethod
    def _parse_id(contact_id: str) -> int:
        if not str(contact_id).isdigit():
            raise ContactNotFound(contact_id)
        parsed = int(contact_id)
        if parsed > MAX_CONTACT_ID:
            raise ContactNotFound(contact_id)
        return parsed

    async def create(
        self,
        fields: ValidatedContactModel,
        images: list[AttachmentModel],
        legacy_id: str | None = None,
        timestamp: datetime | None = None,
        status: ContactStatusEnum = ContactStatusEnum.NEW,
    ) -> ContactRequestModel:
        now = utc_now()
        contact = Contact(
            **fields.model_dump(),
            legacy_id=legacy_id,
            timestamp=timestamp or now,
            images=[image.model_dump(mode="json", by_alias=True) for image in images],
            status=status,
            created_at=now,
            updated_at=now,
        )
        async with self._repository() as repository:
            created = await repository.add_item(contact)
            return to_contact_model(created)

    async def list_all(self) -> list[ContactRequestModel]:
        async with self._repository() as repository:
            contacts = await repository.get_all_ordered()
            return [to_contact_model(contact) for contact in contacts]

    async def update_status(self, contact_id: str, status: ContactStatusEnum) -> ContactRequestModel:
        async with self._repository() as repository:
            contact = await repository.update_status(self._parse_id(contact_id), status)
            if contact is None:
                raise ContactNotFound(contact_id)
            return to_contact_model(contact)

    async def delete(self, contact_id: str) -> ContactRequestModel:
        async with self._repository() as repository:
            contact = await repository.get_item(self._parse_id(contact_id))
            if contact is None:
                raise ContactNotFound(contact_id)
            removed = to_contact_model(contact)
            await repository.delete_item(contact)
            return removed

    async def stats(self) -> ContactStatsModel:
        async with self._repository() as repository:
            return ContactStatsModel(**await repository.get_stats())

    async def get_legacy_ids(self) -> set[str]:
        async with self._repository() as repository:
            return await repository.get_legacy_ids()


def to_contact_model(contact: Contact) -> ContactRequestModel:
    return ContactRequestModel(
        id=str(contact.id),
        timestamp=as_utc(contact.timestamp),
        name=contact.name,
        phone=contact.phone,
        email=contact.email,
        zip=contact.zip,
        preferred_date=contact.preferred_date,
        preferred_time=contact.preferred_time,
        items=contact.items,
        location=contact.location,
        images=contact.images or [],
        status=contact.status,
        created_at=as_utc(contact.created_at),
        updated_at=as_utc(contact.updated_at),
    )
