from typing import Annotated

from fastapi import Depends, Request

from app.core.storage.base import ContactStore
from app.infrastructure.errors.auth_errors import Unauthorized
from app.infrastructure.notifications.hub import NotificationHub
import app.core.services as services


def get_contact_store(request: Request) -> ContactStore:
    return request.app.state.contact_store


def get_notification_hub(request: Request) -> NotificationHub:
    return request.app.state.notification_hub


def get_authenticator(request: Request) -> services.SessionAuthenticator:
    return request.app.state.authenticator


def get_upload_service(request: Request) -> services.ImageUploadService:
    return request.app.state.upload_service


async def require_admin(
    request: Request,
    authenticator: Annotated[services.SessionAuthenticator, Depends(get_authenticator)],
) -> str:
    username = authenticator.current_username(request.session)
    if username is None:
        raise Unauthorized()
    return username


async def get_contact_form_service(
    store: Annotated[ContactStore, Depends(get_contact_store)],
    upload_service: Annotated[services.ImageUploadService, Depends(get_upload_service)],
    hub: Annotated[NotificationHub, Depends(get_notification_hub)],
) -> services.ContactFormService:
    return services.ContactFormService(
        store=store,
        upload_service=upload_service,
        notification_hub=hub,
    )


async def get_admin_service(
    _: Annotated[str, Depends(require_admin)],
    store: Annotated[ContactStore, Depends(get_contact_store)],
) -> services.AdminService:
    return services.AdminService(store=store)
