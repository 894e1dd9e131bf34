"""
Sanitizing and validation of public contact submissions.

Every rule is checked in a fixed order and the first failure wins:
required fields, name, phone, email, zip, preferred date, items,
preferred time.
Strings are HTML-entity escaped before they are stored.
"""
import re
from typing import Mapping

from pydantic import EmailStr, TypeAdapter, ValidationError

from app.core.dto.contact_form import DEFAULT_PREFERRED_TIME, ValidatedContactModel
from app.infrastructure.errors.contact_errors import (
    InvalidDate,
    InvalidEmail,
    InvalidItems,
    InvalidName,
    InvalidPhone,
    InvalidPreferredTime,
    InvalidZip,
    MissingFields,
)
from app.utils.dates import parse_iso8601


REQUIRED_FIELDS = ("name", "phone", "zip", "preferredDate", "items")

NAME_MIN_LENGTH = 2
NAME_MAX_LENGTH = 100
ITEMS_MIN_LENGTH = 5
ITEMS_MAX_LENGTH = 1000
# column sizes of the contacts table
EMAIL_MAX_LENGTH = 255
PREFERRED_TIME_MAX_LENGTH = 50

PHONE_STRIP_RE = re.compile(r"[\s\-().]")
PHONE_RE = re.compile(r"^\d{10,15}$")
ZIP_RE = re.compile(r"^\d{5}$")

_ESCAPES = {
    "<": "&lt;",
    ">": "&gt;",
    '"': "&quot;",
    "'": "&#x27;",
    "/": "&#x2F;",
    "\\": "&#x5C;",
    "`": "&#96;",
}
_ENTITY_RE = re.compile(r"&(?!(?:amp|lt|gt|quot|#x27|#x2F|#x5C|#96);)")
_SPECIAL_RE = re.compile("[<>\"'/\\\\`]")

_email_adapter = TypeAdapter(EmailStr)


def escape(value: str) -> str:
    """HTML-entity encode `value`. Entities produced earlier are left alone."""
    value = _ENTITY_RE.sub("&amp;", value)
    return _SPECIAL_RE.sub(lambda match: _ESCAPES[match.group(0)], value)


def sanitize(value: str | None) -> str:
    if value is None:
        return ""
    return escape(str(value).strip())


def normalize_phone(phone: str) -> str:
    return PHONE_STRIP_RE.sub("", phone)


def is_valid_email(email: str) -> bool:
    try:
        _email_adapter.validate_python(email)
    except ValidationError:
        return False
    return True


def is_valid_zip(zip_code: str) -> bool:
    return bool(ZIP_RE.match(zip_code))


def validate_submission(raw_fields: Mapping[str, str | None]) -> ValidatedContactModel:
    if any(not raw_fields.get(field) for field in REQUIRED_FIELDS):
        raise MissingFields()

    name = sanitize(raw_fields["name"])
    if not NAME_MIN_LENGTH <= len(name) <= NAME_MAX_LENGTH:
        raise InvalidName()

    phone = normalize_phone(str(raw_fields["phone"]).strip())
    if not PHONE_RE.match(phone):
        raise InvalidPhone()

    raw_email = str(raw_fields.get("email") or "").strip()
    if raw_email and not is_valid_email(raw_email):
        raise InvalidEmail()
    email = escape(raw_email)
    if len(email) > EMAIL_MAX_LENGTH:
        raise InvalidEmail()

    zip_code = sanitize(raw_fields["zip"])
    if not is_valid_zip(zip_code):
        raise InvalidZip()

    preferred_date = sanitize(raw_fields["preferredDate"])
    try:
        parsed_date = parse_iso8601(preferred_date)
    except ValueError:
        raise InvalidDate()

    items = sanitize(raw_fields["items"])
    if not ITEMS_MIN_LENGTH <= len(items) <= ITEMS_MAX_LENGTH:
        raise InvalidItems()

    preferred_time = sanitize(raw_fields.get("preferredTime")) or DEFAULT_PREFERRED_TIME
    if len(preferred_time) > PREFERRED_TIME_MAX_LENGTH:
        raise InvalidPreferredTime()

    return ValidatedContactModel(
        name=name,
        phone=phone,
        email=email or None,
        zip=zip_code,
        preferred_date=parsed_date,
        preferred_time=preferred_time,
        items=items,
        location=sanitize(raw_fields.get("location")) or None,
    )
