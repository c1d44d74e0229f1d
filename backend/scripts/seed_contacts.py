# seed_contacts.py
# Uso: python scripts/seed_contacts.py
# Deve ser executado a partir de backend/ com DATABASE_URL definido (ou usando o dev.db padrão).

import sys
from pathlib import Path

BASE_DIR = Path(__file__).resolve().parents[1]
if str(BASE_DIR) not in sys.path:
    sys.path.insert(0, str(BASE_DIR))

from sqlmodel import Session  # noqa: E402

from app.core.logging_setup import logger  # noqa: E402
from app.db.session import engine, init_db  # noqa: E402
from app.repositories.contact import SQLContactStore  # noqa: E402

SAMPLE_CONTACTS = [
    (
        {
            "name": "Ana Beatriz Souza",
            "email": "ana.souza@example.com",
            "zip_code": "14400-000",
            "street": "Rua Voluntários da Franca",
            "number": "1200",
            "neighborhood": "Centro",
            "city": "Franca",
            "state": "SP",
            "complement": "Apto 12",
        },
        ["16991234567", "16998765432", "1637221100"],
    ),
    (
        {
            "name": "Carlos Eduardo Lima",
            "email": "carlos.lima@example.com",
            "zip_code": "01310-100",
            "street": "Avenida Paulista",
            "number": "1578",
            "neighborhood": "Bela Vista",
            "city": "São Paulo",
            "state": "SP",
            "complement": None,
        },
        ["11987654321"],
    ),
    (
        {
            "name": "Fernanda Oliveira",
            "email": "fernanda.oliveira@example.com",
            "zip_code": "22070-011",
            "street": "Avenida Atlântica",
            "number": "3000",
            "neighborhood": "Copacabana",
            "city": "Rio de Janeiro",
            "state": "RJ",
            "complement": "Bloco B",
        },
        ["21987654321", "2125470000"],
    ),
]


def main() -> None:
    init_db()
    created = 0
    with Session(engine) as session:
        store = SQLContactStore(session)
        for data, phones in SAMPLE_CONTACTS:
            if store.exists_by_email(data["email"]):
                logger.info("Contato %s já existe, ignorando", data["email"])
                continue
            contact_id = store.create(data, phones)
            created += 1
            logger.info("Contato %s criado (%s)", data["name"], contact_id)
    print(f"{created} contato(s) inserido(s).")


if __name__ == "__main__":
    main()
