from dataclasses import asdict
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status

from app.api.deps import get_contact_service
from app.schemas.contact import (
    ContactActionResponse,
    ContactCreate,
    ContactCreatedResponse,
    ContactDetailResponse,
    ContactListResponse,
    ContactUpdate,
)
from app.services.contact import ContactService
from app.services.results import ErrorKind, ServiceError

router = APIRouter(prefix="/contacts", tags=["contacts"])

_ERROR_STATUS = {
    ErrorKind.CONTACT_NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorKind.CONTACT_ALREADY_INACTIVE: status.HTTP_404_NOT_FOUND,
    ErrorKind.DUPLICATE_EMAIL: status.HTTP_409_CONFLICT,
}


def _raise_for_error(error: ServiceError) -> None:
    raise HTTPException(status_code=_ERROR_STATUS[error.kind], detail=error.to_dict())


@router.post("", response_model=ContactCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_contact(
    payload: ContactCreate,
    service: ContactService = Depends(get_contact_service),
) -> ContactCreatedResponse:
    result = service.create(payload)
    if isinstance(result, ServiceError):
        _raise_for_error(result)
    return ContactCreatedResponse(contact_id=result.contact_id)


@router.get("", response_model=ContactListResponse)
def list_contacts(
    search: str | None = Query(None),
    active: bool = Query(True),
    page: int | None = Query(None, ge=1),
    limit: int | None = Query(None, ge=1),
    service: ContactService = Depends(get_contact_service),
) -> ContactListResponse:
    result = service.list(search=search, active=active, page=page, limit=limit)
    return ContactListResponse.model_validate(
        {"contacts": result.contacts, "pagination": asdict(result.pagination)}
    )


@router.get("/{contact_id}", response_model=ContactDetailResponse)
def get_contact(
    contact_id: UUID,
    service: ContactService = Depends(get_contact_service),
) -> ContactDetailResponse:
    result = service.get_with_weather(contact_id)
    if isinstance(result, ServiceError):
        _raise_for_error(result)
    return ContactDetailResponse.model_validate({"contact": result.contact})


@router.put("/{contact_id}", response_model=ContactActionResponse)
def update_contact(
    contact_id: UUID,
    payload: ContactUpdate,
    service: ContactService = Depends(get_contact_service),
) -> ContactActionResponse:
    result = service.update(contact_id, payload)
    if isinstance(result, ServiceError):
        _raise_for_error(result)
    return ContactActionResponse(message="Contato atualizado com sucesso", contact_id=result.contact_id)


@router.delete("/{contact_id}", response_model=ContactActionResponse)
def delete_contact(
    contact_id: UUID,
    service: ContactService = Depends(get_contact_service),
) -> ContactActionResponse:
    result = service.soft_delete(contact_id)
    if isinstance(result, ServiceError):
        _raise_for_error(result)
    return ContactActionResponse(message="Contato desativado com sucesso", contact_id=result.contact_id)
