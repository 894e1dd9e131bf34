from .base import Base
from .contact_form import Contact


__all__ = [
    "Base",
    "Contact",
]
