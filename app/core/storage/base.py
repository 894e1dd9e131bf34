from typing import Protocol

from app.core.dto.contact_form import (
    AttachmentModel,
    ContactRequestModel,
    ContactStatsModel,
    ValidatedContactModel,
)
from app.utils.enums import ContactStatusEnum


class ContactStore(Protocol):
    """Persistence capability shared by the file and relational backends.

    Lists are ordered newest first. `update_status` and `delete` raise
    ContactNotFound for unknown ids, any other failure surfaces as StorageError.
    """

    async def init_storage(self) -> None: ...

    async def check_connection(self) -> bool: ...

    async def create(
        self,
        fields: ValidatedContactModel,
        images: list[AttachmentModel],
    ) -> ContactRequestModel: ...

    async def list_all(self) -> list[ContactRequestModel]: ...

    async def update_status(self, contact_id: str, status: ContactStatusEnum) -> ContactRequestModel: ...

    async def delete(self, contact_id: str) -> ContactRequestModel: ...

    async def stats(self) -> ContactStatsModel: ...

    async def close(self) -> None: ...
