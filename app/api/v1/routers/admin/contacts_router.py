from typing import Annotated

from fastapi import APIRouter, Depends

from app.api.v1.dependencies import get_admin_service
from app.core.dto.contact_form import (
    ContactRequestModel,
    ContactStatsModel,
    ContactStatusUpdateModel,
    ContactUpdateResultModel,
    MessageResultModel,
)
from app.core.services.admin_service import AdminService
from app.infrastructure.errors.base import InvalidRequest
from app.infrastructure.errors.contact_errors import ContactNotFound
from app.utils.error_extra import error_response


router = APIRouter()


@router.get(
    "/contacts",
    response_model=list[ContactRequestModel],
    summary="List all requests",
    description="All contact requests, newest first",
)
async def list_contacts(
    service: Annotated[AdminService, Depends(get_admin_service)]
) -> list[ContactRequestModel]:
    return await service.list_contacts()


@router.patch(
    "/contacts/{contact_id}",
    response_model=ContactUpdateResultModel,
    summary="Change request status",
    responses={**error_response(InvalidRequest), **error_response(ContactNotFound)},
)
async def update_contact_status(
    contact_id: str,
    data: ContactStatusUpdateModel,
    service: Annotated[AdminService, Depends(get_admin_service)]
) -> ContactUpdateResultModel:
    contact = await service.set_status(contact_id, data.status)
    return ContactUpdateResultModel(contact=contact)


@router.delete(
    "/contacts/{contact_id}",
    response_model=MessageResultModel,
    summary="Delete a request",
    responses={**error_response(InvalidRequest), **error_response(ContactNotFound)},
)
async def delete_contact(
    contact_id: str,
    service: Annotated[AdminService, Depends(get_admin_service)]
) -> MessageResultModel:
    await service.remove(contact_id)
    return MessageResultModel(message="Contact deleted")


@router.get(
    "/stats",
    response_model=ContactStatsModel,
    summary="Request counts by status",
)
async def get_stats(
    service: Annotated[AdminService, Depends(get_admin_service)]
) -> ContactStatsModel:
    return await service.get_stats()
