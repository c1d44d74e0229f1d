from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, EmailStr, Field, field_validator

from app.schemas.common import PaginationRead


class PhoneCreate(BaseModel):
    number: str = Field(min_length=10)


class PhoneRead(BaseModel):
    id: UUID
    number: str


class ContactBase(BaseModel):
    name: str = Field(min_length=2)
    email: EmailStr
    zip_code: str = Field(min_length=8)
    street: str = Field(min_length=1)
    number: str = Field(min_length=1)
    neighborhood: str = Field(min_length=1)
    city: str = Field(min_length=1)
    state: str = Field(min_length=2)
    complement: str | None = None


class ContactCreate(ContactBase):
    phones: Optional[List[PhoneCreate]] = None


class ContactUpdate(BaseModel):
    name: str | None = Field(default=None, min_length=2)
    email: EmailStr | None = None
    zip_code: str | None = Field(default=None, min_length=8)
    street: str | None = Field(default=None, min_length=1)
    number: str | None = Field(default=None, min_length=1)
    neighborhood: str | None = Field(default=None, min_length=1)
    city: str | None = Field(default=None, min_length=1)
    state: str | None = Field(default=None, min_length=2)
    complement: str | None = None
    add_phone_numbers: Optional[List[PhoneCreate]] = None
    delete_phone_numbers: Optional[List[UUID]] = None

    @field_validator(
        "name", "email", "zip_code", "street", "number", "neighborhood", "city", "state",
        mode="before",
    )
    @classmethod
    def reject_null(cls, value):
        # Campo omitido mantém o valor atual; null explícito não é aceito
        if value is None:
            raise ValueError("Campo não pode ser nulo")
        return value


class ContactRead(BaseModel):
    id: UUID
    name: str
    email: str
    zip_code: str
    street: str
    number: str
    neighborhood: str
    city: str
    state: str
    complement: str | None = None
    active: bool
    created_at: str
    updated_at: str
    phones: List[PhoneRead] = []


class WeatherRead(BaseModel):
    temperature: float
    condition_code: str
    condition: str
    currently: str
    city: str
    suggestion: str


class WeatherErrorRead(BaseModel):
    error: str
    message: str


class ContactWithWeatherRead(ContactRead):
    weather: WeatherRead | WeatherErrorRead


class ContactDetailResponse(BaseModel):
    contact: ContactWithWeatherRead


class ContactListResponse(BaseModel):
    contacts: List[ContactRead]
    pagination: PaginationRead


class ContactCreatedResponse(BaseModel):
    contact_id: UUID


class ContactActionResponse(BaseModel):
    success: bool = True
    message: str
    contact_id: UUID
