from datetime import datetime, timezone
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError
from sqlmodel import Session, select

from app.models.contact import Contact, Phone
from app.repositories.contact import SQLContactStore
from app.services.contact import format_timestamp
from tests.conftest import contact_payload  # type: ignore


@pytest.fixture()
def store(db_session: Session) -> SQLContactStore:
    return SQLContactStore(db_session)


def test_create_persists_contact_and_phones(store: SQLContactStore, db_session: Session) -> None:
    contact_id = store.create(contact_payload(), ["11987654321", "11933334444"])

    contact = store.find_by_id(contact_id)
    assert contact is not None
    assert contact.active is True
    assert contact.created_at is not None
    assert contact.updated_at is not None
    assert {phone.number for phone in contact.phones} == {"11987654321", "11933334444"}


def test_create_rolls_back_contact_when_phone_insert_fails(store: SQLContactStore, db_session: Session) -> None:
    with pytest.raises(IntegrityError):
        store.create(contact_payload(email="rollback@example.com"), [None])  # type: ignore[list-item]

    assert db_session.exec(select(Contact).where(Contact.email == "rollback@example.com")).first() is None
    assert db_session.exec(select(Phone)).all() == []


def test_unique_email_is_enforced_by_storage(store: SQLContactStore) -> None:
    store.create(contact_payload(email="dup@example.com"))
    with pytest.raises(IntegrityError):
        store.create(contact_payload(email="dup@example.com"))


def test_find_by_id_ignores_active_state(store: SQLContactStore) -> None:
    contact_id = store.create(contact_payload())
    assert store.soft_delete(contact_id) is True

    contact = store.find_by_id(contact_id)
    assert contact is not None
    assert contact.active is False
    assert store.find_by_id(uuid4()) is None


def test_list_search_matches_fields_case_insensitively(store: SQLContactStore) -> None:
    sp = store.create(contact_payload(name="Maria Santos", city="São Paulo"))
    rj = store.create(contact_payload(name="Pedro Alves", city="Rio de Janeiro", neighborhood="Copacabana"))

    items, total = store.list(search="PAULO", limit=10, offset=0)
    assert total == 1
    assert [item.id for item in items] == [sp]

    items, total = store.list(search="copa", limit=10, offset=0)
    assert [item.id for item in items] == [rj]

    items, total = store.list(search="maria", limit=10, offset=0)
    assert [item.id for item in items] == [sp]


def test_list_search_matches_phone_numbers(store: SQLContactStore) -> None:
    with_phone = store.create(contact_payload(), ["11987654321"])
    store.create(contact_payload(), ["21912345678"])

    items, total = store.list(search="8765", limit=10, offset=0)
    assert total == 1
    assert items[0].id == with_phone


def test_list_search_treats_wildcards_literally(store: SQLContactStore) -> None:
    store.create(contact_payload(complement="Sala 5"))

    items, total = store.list(search="%", limit=10, offset=0)
    assert total == 0
    assert items == []


def test_null_complement_never_matches(store: SQLContactStore) -> None:
    store.create(contact_payload(name="Sem Complemento", complement=None))
    items, total = store.list(search="bloco", limit=10, offset=0)
    assert total == 0


def test_list_combines_search_with_active_filter(store: SQLContactStore) -> None:
    active_id = store.create(contact_payload(name="Lucas Ativo", city="Franca"))
    inactive_id = store.create(contact_payload(name="Lucas Inativo", city="Franca"))
    store.soft_delete(inactive_id)

    items, total = store.list(search="lucas", active=True, limit=10, offset=0)
    assert [item.id for item in items] == [active_id]
    items, total = store.list(search="lucas", active=False, limit=10, offset=0)
    assert [item.id for item in items] == [inactive_id]
    items, total = store.list(search="lucas", active=None, limit=10, offset=0)
    assert total == 2


def test_list_orders_by_creation_and_counts_before_pagination(store: SQLContactStore) -> None:
    ids = [store.create(contact_payload(name=f"Contato {index:02d}")) for index in range(7)]

    items, total = store.list(limit=3, offset=3)

    assert total == 7
    assert [item.id for item in items] == ids[3:6]


def test_update_only_touches_supplied_fields(store: SQLContactStore, db_session: Session) -> None:
    contact_id = store.create(contact_payload(name="Original", city="Franca"))
    before = store.find_by_id(contact_id)
    assert before is not None
    previous_updated_at = before.updated_at
    created_at = before.created_at

    assert store.update(contact_id, {"name": "Alterado"}) is True

    db_session.expire_all()
    after = store.find_by_id(contact_id)
    assert after is not None
    assert after.name == "Alterado"
    assert after.city == "Franca"
    assert after.created_at == created_at
    assert after.updated_at > previous_updated_at


def test_update_returns_false_for_unknown_contact(store: SQLContactStore) -> None:
    assert store.update(uuid4(), {"name": "Ninguém"}) is False


def test_update_only_deletes_phones_owned_by_contact(store: SQLContactStore, db_session: Session) -> None:
    owner_id = store.create(contact_payload(), ["11911111111", "11922222222"])
    other_id = store.create(contact_payload(), ["21933333333"])
    owner = store.find_by_id(owner_id)
    other = store.find_by_id(other_id)
    assert owner is not None and other is not None
    owned_phone_id = owner.phones[0].id
    owned_number = owner.phones[0].number
    foreign_phone_id = other.phones[0].id

    assert store.update(owner_id, {}, ["11944444444"], [owned_phone_id, foreign_phone_id, uuid4()]) is True

    db_session.expire_all()
    owner = store.find_by_id(owner_id)
    other = store.find_by_id(other_id)
    assert owner is not None and other is not None
    assert sorted(phone.number for phone in owner.phones) == sorted(
        {"11911111111", "11922222222", "11944444444"} - {owned_number}
    )
    assert [phone.id for phone in other.phones] == [foreign_phone_id]


def test_soft_delete_marks_inactive_and_keeps_phones(store: SQLContactStore, db_session: Session) -> None:
    contact_id = store.create(contact_payload(), ["11987654321"])

    assert store.soft_delete(contact_id) is True
    assert store.soft_delete(uuid4()) is False

    db_session.expire_all()
    contact = store.find_by_id(contact_id)
    assert contact is not None
    assert contact.active is False
    assert len(contact.phones) == 1


def test_exists_by_email_is_exact_and_includes_inactive(store: SQLContactStore) -> None:
    contact_id = store.create(contact_payload(email="Case@Example.com"))
    store.soft_delete(contact_id)

    assert store.exists_by_email("Case@Example.com") is True
    assert store.exists_by_email("case@example.com") is False
    assert store.exists_by_email("outro@example.com") is False


def test_hard_delete_cascades_to_phones(store: SQLContactStore, db_session: Session) -> None:
    contact_id = store.create(contact_payload(), ["11987654321", "11912345678"])

    contact = db_session.get(Contact, contact_id)
    db_session.delete(contact)
    db_session.commit()

    assert db_session.exec(select(Phone).where(Phone.contact_id == contact_id)).all() == []


def _as_utc(value: datetime) -> datetime:
    # SQLite devolve valores sem fuso; o banco guarda sempre UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def test_timestamps_round_trip_as_utc(store: SQLContactStore, db_session: Session) -> None:
    started = datetime.now(timezone.utc)
    contact_id = store.create(contact_payload())
    store.update(contact_id, {"city": "Campinas"})
    store.soft_delete(contact_id)
    finished = datetime.now(timezone.utc)

    db_session.expire_all()
    contact = store.find_by_id(contact_id)

    assert contact is not None
    created_at = _as_utc(contact.created_at)
    updated_at = _as_utc(contact.updated_at)
    assert started <= created_at <= updated_at <= finished
    assert format_timestamp(contact.created_at) == created_at.replace(tzinfo=None).isoformat(timespec="milliseconds") + "Z"


def test_list_search_folds_case_of_accented_letters(store: SQLContactStore) -> None:
    sp = store.create(contact_payload(name="Conceição Araújo", city="São Paulo"))
    store.create(contact_payload(name="Pedro Alves", city="Curitiba"))

    for term in ("SÃO", "são paulo", "CONCEIÇÃO", "araÚjo"):
        items, total = store.list(search=term, limit=10, offset=0)
        assert [item.id for item in items] == [sp], term
        assert total == 1
