"""Resultados tipados dos casos de uso de contatos.

Cada operação do ContactService devolve um valor de sucesso ou um ServiceError;
a camada HTTP decide o status a partir de ``ServiceError.kind``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from uuid import UUID


class ErrorKind(str, Enum):
    CONTACT_NOT_FOUND = "CONTACT_NOT_FOUND"
    CONTACT_ALREADY_INACTIVE = "CONTACT_ALREADY_INACTIVE"
    DUPLICATE_EMAIL = "DUPLICATE_EMAIL"


ERROR_MESSAGES: dict[ErrorKind, str] = {
    ErrorKind.CONTACT_NOT_FOUND: "Contato não encontrado",
    ErrorKind.CONTACT_ALREADY_INACTIVE: "Contato já está inativo",
    ErrorKind.DUPLICATE_EMAIL: "Este email já está cadastrado",
}


@dataclass(frozen=True)
class ServiceError:
    kind: ErrorKind
    message: str

    @classmethod
    def of(cls, kind: ErrorKind) -> "ServiceError":
        return cls(kind=kind, message=ERROR_MESSAGES[kind])

    def to_dict(self) -> dict[str, str]:
        return {"error": self.kind.value, "message": self.message}


@dataclass(frozen=True)
class ContactCreated:
    contact_id: UUID


@dataclass(frozen=True)
class ContactUpdated:
    contact_id: UUID


@dataclass(frozen=True)
class ContactDeactivated:
    contact_id: UUID


@dataclass(frozen=True)
class ContactDetail:
    contact: dict[str, Any]


@dataclass(frozen=True)
class Pagination:
    current_page: int
    total_pages: int
    total_items: int
    items_per_page: int
    has_next_page: bool
    has_prev_page: bool


@dataclass(frozen=True)
class ContactPage:
    contacts: list[dict[str, Any]] = field(default_factory=list)
    pagination: Pagination | None = None
