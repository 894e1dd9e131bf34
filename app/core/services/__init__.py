from app.core.services.admin_service import AdminService
from app.core.services.auth_service import SessionAuthenticator
from app.core.services.contact_form_service import ContactFormService
from app.core.services.upload_service import ImageUploadService


__all__ = [
    "AdminService",
    "ContactFormService",
    "ImageUploadService",
    "SessionAuthenticator",
]
