# noqa: F401 to ensure models are imported for metadata
from app.models.contact import Contact, Phone

__all__ = [
    "Contact",
    "Phone",
]
