from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.sessions import SessionMiddleware

from app.api.v1.routers import api_routers, uploads_routers
from app.core.services import ImageUploadService, SessionAuthenticator
from app.core.storage import ContactStore, build_contact_store
from app.infrastructure.config.config import (
    ADMIN_CONFIG,
    APP_CONFIG,
    STORAGE_CONFIG,
    AdminConfig,
    StorageConfig,
)
from app.infrastructure.errors.contact_errors import ContactValidationError
from app.infrastructure.errors.image_errors import ImageError
from app.infrastructure.logging.logger import configure_logging, get_logger
from app.infrastructure.middleware import LoggingMiddleware
from app.infrastructure.notifications.hub import NotificationHub


configure_logging()
logger = get_logger(__name__)

CONTACT_SUBMISSION_PATH = "/api/contact"


def _is_contact_submission(request: Request) -> bool:
    return request.url.path.rstrip("/") == CONTACT_SUBMISSION_PATH


def _error_body(request: Request, message: str) -> dict:
    # the public form expects {success, message}, the admin panel {error}
    if _is_contact_submission(request):
        return {"success": False, "message": message}
    return {"error": message}


async def submission_error_handler(request: Request, exc: ContactValidationError | ImageError) -> JSONResponse:
    logger.info("contact_rejected", reason=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content={"success": False, "message": exc.detail},
    )


async def http_error_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("request_failed", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
    return JSONResponse(
        status_code=exc.status_code,
        content=_error_body(request, str(exc.detail)),
        headers=getattr(exc, "headers", None),
    )


async def request_validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content=_error_body(request, "Invalid request"),
    )


async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.error("unhandled_error", path=request.url.path, error=str(exc), exc_info=exc)
    message = str(exc) if APP_CONFIG.DEBUG else "Internal server error"
    if _is_contact_submission(request) and not APP_CONFIG.DEBUG:
        message = "Failed to process request"
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=_error_body(request, message),
    )


def create_app(
    store: ContactStore | None = None,
    storage_config: StorageConfig = STORAGE_CONFIG,
    admin_config: AdminConfig = ADMIN_CONFIG,
) -> FastAPI:

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info(
            "application_startup",
            app_name=APP_CONFIG.APP_NAME,
            debug=APP_CONFIG.DEBUG,
            storage=storage_config.BACKEND.value,
        )

        contact_store = store or build_contact_store(storage_config)
        await contact_store.init_storage()
        if not await contact_store.check_connection():
            logger.warning("storage_unavailable", storage=storage_config.BACKEND.value)

        app.state.contact_store = contact_store
        app.state.notification_hub = NotificationHub()
        app.state.authenticator = SessionAuthenticator(admin_config)
        app.state.upload_service = ImageUploadService(storage_config)

        if not admin_config.PASSWORD_HASH:
            logger.warning("admin_password_hash_missing")

        logger.info("storage_ready", storage=storage_config.BACKEND.value)

        yield

        await contact_store.close()
        logger.info("application_shutdown")

    app = FastAPI(
        title=APP_CONFIG.APP_NAME,
        debug=APP_CONFIG.DEBUG,
        lifespan=lifespan
    )

    app.add_middleware(
        SessionMiddleware,
        secret_key=APP_CONFIG.SESSION_SECRET,
        session_cookie=APP_CONFIG.SESSION_COOKIE_NAME,
        max_age=APP_CONFIG.SESSION_MAX_AGE_SECONDS,
        same_site="strict",
        https_only=APP_CONFIG.SESSION_COOKIE_SECURE,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=APP_CONFIG.CORS_ALLOWED_ORIGINS.split(","),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_middleware(LoggingMiddleware)

    app.add_exception_handler(ContactValidationError, submission_error_handler)
    app.add_exception_handler(ImageError, submission_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_error_handler)
    app.add_exception_handler(RequestValidationError, request_validation_error_handler)
    app.add_exception_handler(Exception, unhandled_error_handler)

    app.include_router(api_routers)
    app.include_router(uploads_routers)

    @app.get("/health", tags=["health"])
    async def health(request: Request) -> dict:
        return {"status": "ok", "storage": storage_config.BACKEND.value}

    return app


app = create_app()
