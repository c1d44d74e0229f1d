from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Any
from uuid import UUID

from sqlalchemy.exc import IntegrityError

from app.core.logging_setup import logger
from app.models.contact import Contact
from app.repositories.contact import ContactStore
from app.schemas.contact import ContactCreate, ContactUpdate
from app.services.results import (
    ContactCreated,
    ContactDeactivated,
    ContactDetail,
    ContactPage,
    ContactUpdated,
    ErrorKind,
    Pagination,
    ServiceError,
)
from app.services.weather import WeatherProvider

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10
MAX_LIMIT = 100


def format_timestamp(value: datetime) -> str:
    """ISO-8601 em UTC com sufixo Z (ex.: 2024-01-01T10:00:00.000Z)."""
    if value.tzinfo is not None:
        value = value.astimezone(timezone.utc).replace(tzinfo=None)
    return value.isoformat(timespec="milliseconds") + "Z"


def serialize_contact(contact: Contact) -> dict[str, Any]:
    return {
        "id": contact.id,
        "name": contact.name,
        "email": contact.email,
        "zip_code": contact.zip_code,
        "street": contact.street,
        "number": contact.number,
        "neighborhood": contact.neighborhood,
        "city": contact.city,
        "state": contact.state,
        "complement": contact.complement,
        "active": contact.active,
        "created_at": format_timestamp(contact.created_at),
        "updated_at": format_timestamp(contact.updated_at),
        "phones": [{"id": phone.id, "number": phone.number} for phone in contact.phones],
    }


class ContactService:
    def __init__(self, store: ContactStore, weather: WeatherProvider) -> None:
        self.store = store
        self.weather = weather

    def create(self, payload: ContactCreate) -> ContactCreated | ServiceError:
        data = payload.model_dump(exclude={"phones"})
        if self.store.exists_by_email(data["email"]):
            return ServiceError.of(ErrorKind.DUPLICATE_EMAIL)

        phone_numbers = [phone.number for phone in payload.phones or []]
        try:
            contact_id = self.store.create(data, phone_numbers)
        except IntegrityError:
            if self.store.exists_by_email(data["email"]):
                return ServiceError.of(ErrorKind.DUPLICATE_EMAIL)
            raise

        logger.info("Contato %s criado com %d telefone(s)", contact_id, len(phone_numbers))
        return ContactCreated(contact_id=contact_id)

    def list(
        self,
        search: str | None = None,
        active: bool | None = True,
        page: int | None = None,
        limit: int | None = None,
    ) -> ContactPage:
        current_page = max(page or DEFAULT_PAGE, 1)
        per_page = min(max(limit or DEFAULT_LIMIT, 1), MAX_LIMIT)
        offset = (current_page - 1) * per_page
        term = search.strip() if search else None

        items, total = self.store.list(search=term or None, active=active, limit=per_page, offset=offset)

        total_pages = math.ceil(total / per_page)
        return ContactPage(
            contacts=[serialize_contact(contact) for contact in items],
            pagination=Pagination(
                current_page=current_page,
                total_pages=total_pages,
                total_items=total,
                items_per_page=per_page,
                has_next_page=current_page < total_pages,
                has_prev_page=current_page > 1,
            ),
        )

    def get_with_weather(self, contact_id: UUID) -> ContactDetail | ServiceError:
        contact = self.store.find_by_id(contact_id)
        if contact is None or not contact.active:
            return ServiceError.of(ErrorKind.CONTACT_NOT_FOUND)

        formatted = serialize_contact(contact)
        formatted["weather"] = self.weather.get_weather(contact.city).to_dict()
        return ContactDetail(contact=formatted)

    def update(self, contact_id: UUID, payload: ContactUpdate) -> ContactUpdated | ServiceError:
        existing = self.store.find_by_id(contact_id)
        if existing is None:
            return ServiceError.of(ErrorKind.CONTACT_NOT_FOUND)

        fields = payload.model_dump(
            exclude_unset=True,
            exclude={"add_phone_numbers", "delete_phone_numbers"},
        )
        new_email = fields.get("email")
        if new_email and new_email != existing.email and self.store.exists_by_email(new_email):
            return ServiceError.of(ErrorKind.DUPLICATE_EMAIL)

        add_numbers = [phone.number for phone in payload.add_phone_numbers or []]
        delete_ids = list(payload.delete_phone_numbers or [])
        try:
            updated = self.store.update(contact_id, fields, add_numbers, delete_ids)
        except IntegrityError:
            if new_email and self.store.exists_by_email(new_email):
                return ServiceError.of(ErrorKind.DUPLICATE_EMAIL)
            raise
        if not updated:
            return ServiceError.of(ErrorKind.CONTACT_NOT_FOUND)

        logger.info("Contato %s atualizado (%s)", contact_id, ", ".join(sorted(fields)) or "telefones")
        return ContactUpdated(contact_id=contact_id)

    def soft_delete(self, contact_id: UUID) -> ContactDeactivated | ServiceError:
        existing = self.store.find_by_id(contact_id)
        if existing is None:
            return ServiceError.of(ErrorKind.CONTACT_NOT_FOUND)
        if not existing.active:
            return ServiceError.of(ErrorKind.CONTACT_ALREADY_INACTIVE)

        if not self.store.soft_delete(contact_id):
            return ServiceError.of(ErrorKind.CONTACT_NOT_FOUND)

        logger.info("Contato %s desativado", contact_id)
        return ContactDeactivated(contact_id=contact_id)
