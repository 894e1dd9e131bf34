from app.core.repositories.contact_form_repository import ContactRepository


__all__ = ["ContactRepository"]
