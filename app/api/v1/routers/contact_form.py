from typing import Annotated

from fastapi import APIRouter, Depends, File, Form, UploadFile

from app.api.v1.dependencies import get_contact_form_service
from app.core.dto.contact_form import ContactSubmissionResultModel
from app.core.services.contact_form_service import ContactFormService
from app.infrastructure.errors.contact_errors import ContactValidationError
from app.infrastructure.errors.image_errors import ImageError
from app.utils.error_extra import error_response


router = APIRouter()


@router.post(
    "",
    response_model=ContactSubmissionResultModel,
    summary="Submit a pickup request",
    description="Accepts a junk-removal request with up to 5 photos",
    responses={**error_response(ContactValidationError), **error_response(ImageError)},
)
async def submit_contact_form(
    service: Annotated[ContactFormService, Depends(get_contact_form_service)],
    name: Annotated[str | None, Form()] = None,
    phone: Annotated[str | None, Form()] = None,
    email: Annotated[str | None, Form()] = None,
    zip: Annotated[str | None, Form()] = None,
    when: Annotated[str | None, Form()] = None,
    preferred_date: Annotated[str | None, Form(alias="preferredDate")] = None,
    time: Annotated[str | None, Form()] = None,
    items: Annotated[str | None, Form()] = None,
    location: Annotated[str | None, Form()] = None,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> ContactSubmissionResultModel:
    raw_fields = {
        "name": name,
        "phone": phone,
        "email": email,
        "zip": zip,
        "preferredDate": when or preferred_date,
        "preferredTime": time,
        "items": items,
        "location": location,
    }
    return await service.submit(raw_fields, images or [])
