from fastapi import APIRouter

from app.api.v1.routers.admin.auth_router import router as auth_router
from app.api.v1.routers.admin.contacts_router import router as contacts_router
from app.api.v1.routers.admin.stream_router import router as stream_router


admin_routers = APIRouter(prefix="/admin")


admin_routers.include_router(auth_router, tags=["AUTH"])
admin_routers.include_router(contacts_router, tags=["CONTACTS"])
admin_routers.include_router(stream_router, tags=["STREAM"])
