from app.schemas import common, contact

__all__ = [
    "common",
    "contact",
]
