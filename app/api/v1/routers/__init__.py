from fastapi import APIRouter

from app.api.v1.routers.admin import admin_routers
from app.api.v1.routers.contact_form import router as contact_form_router
from app.api.v1.routers.uploads import router as uploads_router
from app.infrastructure.config.config import STORAGE_CONFIG


api_routers = APIRouter(prefix="/api")
api_routers.include_router(contact_form_router, prefix="/contact", tags=["contact_form"])
api_routers.include_router(admin_routers)

uploads_routers = APIRouter(prefix=STORAGE_CONFIG.UPLOADS_URL.rstrip("/"))
uploads_routers.include_router(uploads_router, tags=["uploads"])
