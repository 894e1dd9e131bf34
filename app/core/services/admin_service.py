import re

from app.core.dto.contact_form import ContactRequestModel, ContactStatsModel
from app.core.storage.base import ContactStore
from app.infrastructure.errors.base import InvalidRequest
from app.infrastructure.logging import get_logger
from app.utils.enums import ContactStatusEnum


logger = get_logger(__name__)

CONTACT_ID_RE = re.compile(r"^\d+$")


class AdminService:
    """Moderation operations, callers must already be authenticated."""

    def __init__(self, store: ContactStore):
        self.store = store

    @staticmethod
    def _check_id(contact_id: str) -> str:
        if not CONTACT_ID_RE.match(contact_id or ""):
            raise InvalidRequest("Invalid ID format")
        return contact_id

    @staticmethod
    def _check_status(status: str | None) -> ContactStatusEnum:
        try:
            return ContactStatusEnum(status)
        except ValueError:
            raise InvalidRequest("Invalid status value")

    async def list_contacts(self) -> list[ContactRequestModel]:
        return await self.store.list_all()

    async def set_status(self, contact_id: str, status: str | None) -> ContactRequestModel:
        contact_id = self._check_id(contact_id)
        new_status = self._check_status(status)
        contact = await self.store.update_status(contact_id, new_status)
        logger.info("contact_status_updated", contact_id=contact_id, status=new_status.value)
        return contact

    async def remove(self, contact_id: str) -> ContactRequestModel:
        contact = await self.store.delete(self._check_id(contact_id))
        logger.info("contact_deleted", contact_id=contact_id)
        return contact

    async def get_stats(self) -> ContactStatsModel:
        return await self.store.stats()
