from datetime import date, datetime

from sqlalchemy import JSON, Date, DateTime, Enum as SQLEnum, Index, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.infrastructure.database.models.base import Base
from app.utils.dates import utc_now
from app.utils.enums import ContactStatusEnum


class Contact(Base):
    __tablename__ = "contacts"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # id of the record in contacts.json it was migrated from
    legacy_id: Mapped[str | None] = mapped_column(String(32), unique=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=utc_now)

    name: Mapped[str] = mapped_column(String(100))
    phone: Mapped[str] = mapped_column(String(20))
    email: Mapped[str | None] = mapped_column(String(255))
    zip: Mapped[str] = mapped_column(String(10))
    preferred_date: Mapped[date] = mapped_column(Date)
    preferred_time: Mapped[str] = mapped_column(String(50), default="Any time")
    items: Mapped[str] = mapped_column(Text)
    location: Mapped[str | None] = mapped_column(Text)
    images: Mapped[list[dict]] = mapped_column(
        JSON().with_variant(JSONB(), "postgresql"),
        default=list,
    )
    status: Mapped[ContactStatusEnum] = mapped_column(
        SQLEnum(
            ContactStatusEnum,
            native_enum=False,
            length=20,
            create_constraint=True,
            name="contacts_status_check",
            values_callable=lambda enum: [member.value for member in enum],
        ),
        default=ContactStatusEnum.NEW,
    )

    def __repr__(self):
        return f"<Contact(id={self.id}, name='{self.name}', status={self.status})>"


Index("idx_contacts_status", Contact.status)
Index("idx_contacts_timestamp", Contact.timestamp.desc())
