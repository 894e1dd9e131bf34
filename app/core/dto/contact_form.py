from datetime import date, datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from app.utils.dates import parse_iso8601
from app.utils.enums import ContactStatusEnum


DEFAULT_PREFERRED_TIME = "Any time"


class AttachmentModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    stored_filename: str = Field(..., alias="filename")
    original_name: str = Field(..., alias="originalName")
    public_path: str = Field(..., alias="path")
    size_bytes: int = Field(..., alias="size", ge=0)
    mime_type: str = Field(..., alias="mimetype")


class ValidatedContactModel(BaseModel):
    """Sanitized submission fields, ready to be persisted."""
    model_config = ConfigDict(populate_by_name=True)

    name: str
    phone: str
    email: str | None = None
    zip: str
    preferred_date: date = Field(..., alias="preferredDate")
    preferred_time: str = Field(DEFAULT_PREFERRED_TIME, alias="preferredTime")
    items: str
    location: str | None = None


class ContactRequestModel(ValidatedContactModel):
    id: str
    timestamp: datetime
    images: list[AttachmentModel] = Field(default_factory=list, max_length=5)
    status: ContactStatusEnum = ContactStatusEnum.NEW
    created_at: datetime
    updated_at: datetime

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, value):
        if isinstance(value, int):
            return str(value)
        return value

    @model_validator(mode="before")
    @classmethod
    def upgrade_legacy_record(cls, data):
        # contacts.json files written before created_at/updated_at existed
        # store "" for missing optionals and raw date-time strings
        if not isinstance(data, dict):
            return data
        data = dict(data)
        for key in ("email", "location"):
            if data.get(key) == "":
                data[key] = None
        for key in ("preferredDate", "preferred_date"):
            value = data.get(key)
            if isinstance(value, str) and value:
                try:
                    data[key] = parse_iso8601(value)
                except ValueError:
                    pass
        if not data.get("preferredTime") and not data.get("preferred_time"):
            data["preferredTime"] = DEFAULT_PREFERRED_TIME
        timestamp = data.get("timestamp")
        data.setdefault("created_at", timestamp)
        data.setdefault("updated_at", data["created_at"])
        return data


class ContactStatusUpdateModel(BaseModel):
    status: str | None = None


class ContactStatsModel(BaseModel):
    total: int = 0
    new: int = 0
    contacted: int = 0
    completed: int = 0


class ContactSubmissionResultModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    success: bool = True
    message: str = "Contact request received!"
    image_count: int = Field(0, alias="imageCount")
    contact_id: str = Field(..., exclude=True)


class ContactUpdateResultModel(BaseModel):
    success: bool = True
    contact: ContactRequestModel


class MessageResultModel(BaseModel):
    success: bool = True
    message: str
