from typing import Mapping

from fastapi import UploadFile

from app.core.dto.contact_form import ContactSubmissionResultModel
from app.core.services.upload_service import ImageUploadService
from app.core.storage.base import ContactStore
from app.core.validators.contact_form import validate_submission
from app.infrastructure.logging import get_logger
from app.infrastructure.notifications.hub import NotificationHub, new_contact_event


logger = get_logger(__name__)


class ContactFormService:

    def __init__(
        self,
        store: ContactStore,
        upload_service: ImageUploadService,
        notification_hub: NotificationHub,
    ):
        self.store = store
        self.upload_service = upload_service
        self.notification_hub = notification_hub

    async def submit(
        self,
        raw_fields: Mapping[str, str | None],
        files: list[UploadFile] | None = None,
    ) -> ContactSubmissionResultModel:
        fields = validate_submission(raw_fields)
        images = await self.upload_service.save_all(files or [])

        contact = await self.store.create(fields, images)
        logger.info("contact_created", contact_id=contact.id, image_count=len(images))

        await self._notify_admins()

        return ContactSubmissionResultModel(contact_id=contact.id, image_count=len(images))

    async def _notify_admins(self) -> None:
        try:
            await self.notification_hub.broadcast(new_contact_event())
        except Exception as exc:
            logger.error("contact_notification_failed", error=str(exc))
