from typing import List, Optional
from uuid import UUID

from sqlmodel import Field, Relationship

from app.models.base import TimestampedModel, UUIDModel


class Contact(UUIDModel, TimestampedModel, table=True):
    __tablename__ = "contacts"

    name: str
    email: str = Field(unique=True, index=True)
    zip_code: str
    street: str
    number: str
    neighborhood: str
    city: str
    state: str
    complement: Optional[str] = Field(default=None)
    active: bool = Field(default=True)

    phones: List["Phone"] = Relationship(back_populates="contact", cascade_delete=True)


class Phone(UUIDModel, table=True):
    __tablename__ = "phones"

    number: str
    contact_id: UUID = Field(foreign_key="contacts.id", ondelete="CASCADE", index=True)

    contact: Optional[Contact] = Relationship(back_populates="phones")
