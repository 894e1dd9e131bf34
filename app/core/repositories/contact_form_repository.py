from typing import Sequence

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.repositories.base import SqlAlchemyRepository
from app.infrastructure.database.models.contact_form import Contact
from app.utils.dates import next_timestamp
from app.utils.enums import ContactStatusEnum


class ContactRepository(SqlAlchemyRepository[Contact]):

    def __init__(self, session: AsyncSession):
        super().__init__(session, Contact)

    async def get_all_ordered(self) -> Sequence[Contact]:
        query = select(Contact).order_by(Contact.timestamp.desc(), Contact.id.desc())
        result = await self.session.execute(query)
        return result.scalars().all()

    async def update_status(self, contact_id: int, status: ContactStatusEnum) -> Contact | None:
        contact = await self.get_item(contact_id)
        if contact is None:
            return None
        contact.status = status
        contact.updated_at = next_timestamp(contact.updated_at)
        await self.session.commit()
        return contact

    async def get_legacy_ids(self) -> set[str]:
        query = select(Contact.legacy_id).where(Contact.legacy_id.is_not(None))
        result = await self.session.execute(query)
        return set(result.scalars().all())

    async def get_stats(self) -> dict[str, int]:
        def count_status(status: ContactStatusEnum):
            return func.coalesce(func.sum(case((Contact.status == status, 1), else_=0)), 0)

        query = select(
            func.count(Contact.id).label("total"),
            count_status(ContactStatusEnum.NEW).label("new"),
            count_status(ContactStatusEnum.CONTACTED).label("contacted"),
            count_status(ContactStatusEnum.COMPLETED).label("completed"),
        )
        result = await self.session.execute(query)
        row = result.one()
        return {
            "total": int(row.total),
            "new": int(row.new),
            "contacted": int(row.contacted),
            "completed": int(row.completed),
        }
