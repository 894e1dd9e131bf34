from typing import Any, Generic, TypeVar

from sqlalchemy.ext.asyncio import AsyncSession

from app.infrastructure.database.models.base import Base


ModelType = TypeVar("ModelType", bound=Base)


class SqlAlchemyRepository(Generic[ModelType]):
    def __init__(self, session: AsyncSession, model: type[ModelType]):
        self.session = session
        self.model = model

    async def get_item(self, item_id: Any) -> ModelType | None:
        return await self.session.get(self.model, item_id)

    async def add_item(self, item: ModelType) -> ModelType:
        self.session.add(item)
        await self.session.commit()
        await self.session.refresh(item)
        return item

    async def delete_item(self, item: ModelType) -> ModelType:
        await self.session.delete(item)
        await self.session.commit()
        return item
