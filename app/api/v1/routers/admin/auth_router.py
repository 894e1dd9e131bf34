from typing import Annotated

from fastapi import APIRouter, Depends, Request

from app.api.v1.dependencies import get_authenticator
from app.core.dto.auth import AuthCheckModel, AuthUserModel
from app.core.dto.contact_form import MessageResultModel
from app.core.services.auth_service import SessionAuthenticator
from app.infrastructure.errors.auth_errors import InvalidCredentials, MissingCredentials
from app.utils.error_extra import error_response


router = APIRouter()


@router.post(
    "/login",
    responses={**error_response(MissingCredentials), **error_response(InvalidCredentials)}
)
async def login(
    form: AuthUserModel,
    request: Request,
    authenticator: Annotated[SessionAuthenticator, Depends(get_authenticator)]
) -> MessageResultModel:
    """
    Log the admin in and mark the browser session as authenticated.

    On success the session id is replaced with a fresh one. Any mismatch in
    username or password is answered after the same fixed delay with a
    generic 401.
    """
    await authenticator.login(request.session, form.username, form.password)
    return MessageResultModel(message="Login successful")


@router.post("/logout")
async def logout(
    request: Request,
    authenticator: Annotated[SessionAuthenticator, Depends(get_authenticator)]
) -> MessageResultModel:
    authenticator.logout(request.session)
    return MessageResultModel(message="Logged out successfully")


@router.get("/auth-check", response_model=AuthCheckModel)
async def auth_check(
    request: Request,
    authenticator: Annotated[SessionAuthenticator, Depends(get_authenticator)]
) -> AuthCheckModel:
    return authenticator.auth_status(request.session)
