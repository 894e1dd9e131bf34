from fastapi import HTTPException, status

from app.infrastructure.errors.base import NotFoundError


class ContactValidationError(HTTPException):
    """Base error for a rejected contact submission."""
    status_code = status.HTTP_400_BAD_REQUEST
    detail = "Invalid submission"

    def __init__(self):
        super().__init__(status_code=self.status_code, detail=self.detail)


class MissingFields(ContactValidationError):
    detail = "Missing required fields"


class InvalidName(ContactValidationError):
    detail = "Invalid name format"


class InvalidPhone(ContactValidationError):
    detail = "Invalid phone number format"


class InvalidEmail(ContactValidationError):
    detail = "Invalid email format"


class InvalidZip(ContactValidationError):
    detail = "Invalid ZIP code format"


class InvalidDate(ContactValidationError):
    detail = "Invalid date format"


class InvalidItems(ContactValidationError):
    detail = "Items description must be between 5 and 1000 characters"


class InvalidPreferredTime(ContactValidationError):
    detail = "Preferred time must be at most 50 characters"


class ContactNotFound(NotFoundError):
    detail = "Contact not found"

    def __init__(self, contact_id: str | None = None):
        super().__init__()
        self.contact_id = contact_id
