from __future__ import annotations

from typing import Any, Iterable, Protocol, Sequence
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import selectinload
from sqlmodel import Session, select

from app.models.base import utc_now
from app.models.contact import Contact, Phone

SEARCHABLE_COLUMNS = (
    Contact.name,
    Contact.email,
    Contact.street,
    Contact.neighborhood,
    Contact.city,
    Contact.state,
    Contact.zip_code,
    Contact.complement,
)


class ContactStore(Protocol):
    """Persistência de contatos e telefones. Não filtra por ``active``."""

    def create(self, data: dict[str, Any], phone_numbers: Sequence[str] = ()) -> UUID:
        ...

    def find_by_id(self, contact_id: UUID) -> Contact | None:
        ...

    def list(
        self,
        *,
        search: str | None = None,
        active: bool | None = None,
        limit: int,
        offset: int,
    ) -> tuple[list[Contact], int]:
        ...

    def update(
        self,
        contact_id: UUID,
        fields: dict[str, Any],
        add_phone_numbers: Sequence[str] = (),
        delete_phone_ids: Sequence[UUID] = (),
    ) -> bool:
        ...

    def soft_delete(self, contact_id: UUID) -> bool:
        ...

    def exists_by_email(self, email: str) -> bool:
        ...


def _escape_like(value: str) -> str:
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


class SQLContactStore:
    def __init__(self, session: Session) -> None:
        self.session = session

    def create(self, data: dict[str, Any], phone_numbers: Sequence[str] = ()) -> UUID:
        contact = Contact(**data)
        try:
            self.session.add(contact)
            self.session.flush()
            self.session.add_all(Phone(number=number, contact_id=contact.id) for number in phone_numbers)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise
        return contact.id

    def find_by_id(self, contact_id: UUID) -> Contact | None:
        statement = (
            select(Contact)
            .where(Contact.id == contact_id)
            .options(selectinload(Contact.phones))
        )
        return self.session.exec(statement).first()

    def list(
        self,
        *,
        search: str | None = None,
        active: bool | None = None,
        limit: int,
        offset: int,
    ) -> tuple[list[Contact], int]:
        query = select(Contact)
        if active is not None:
            query = query.where(Contact.active == active)
        if search:
            query = query.where(self._search_clause(search))

        total = self.session.exec(
            select(func.count()).select_from(query.subquery())
        ).one()

        items = self.session.exec(
            query.options(selectinload(Contact.phones))
            .order_by(Contact.created_at.asc(), Contact.id.asc())
            .offset(offset)
            .limit(limit)
        ).all()
        return list(items), total

    def update(
        self,
        contact_id: UUID,
        fields: dict[str, Any],
        add_phone_numbers: Sequence[str] = (),
        delete_phone_ids: Sequence[UUID] = (),
    ) -> bool:
        contact = self.session.get(Contact, contact_id)
        if contact is None:
            return False

        for field, value in fields.items():
            setattr(contact, field, value)
        contact.updated_at = utc_now()
        try:
            self.session.add(contact)
            self.session.commit()
        except Exception:
            self.session.rollback()
            raise

        if delete_phone_ids:
            self._delete_owned_phones(contact_id, delete_phone_ids)

        if add_phone_numbers:
            self.session.add_all(Phone(number=number, contact_id=contact_id) for number in add_phone_numbers)
            self.session.commit()

        return True

    def soft_delete(self, contact_id: UUID) -> bool:
        contact = self.session.get(Contact, contact_id)
        if contact is None:
            return False
        contact.active = False
        contact.updated_at = utc_now()
        self.session.add(contact)
        self.session.commit()
        return True

    def exists_by_email(self, email: str) -> bool:
        statement = select(Contact.id).where(Contact.email == email).limit(1)
        return self.session.exec(statement).first() is not None

    def _delete_owned_phones(self, contact_id: UUID, phone_ids: Iterable[UUID]) -> None:
        owned = set(self.session.exec(select(Phone.id).where(Phone.contact_id == contact_id)).all())
        to_delete = [phone_id for phone_id in phone_ids if phone_id in owned]
        if not to_delete:
            return
        for phone_id in to_delete:
            phone = self.session.get(Phone, phone_id)
            if phone is not None:
                self.session.delete(phone)
        self.session.commit()

    @staticmethod
    def _search_clause(search: str):
        pattern = f"%{_escape_like(search)}%"
        phone_match = (
            select(Phone.id)
            .where(Phone.contact_id == Contact.id, Phone.number.ilike(pattern, escape="\\"))
            .exists()
        )
        return or_(*(column.ilike(pattern, escape="\\") for column in SEARCHABLE_COLUMNS), phone_match)
