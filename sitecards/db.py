"""
Card storage for Postgres and an in-memory implementation.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Iterator, Optional, Protocol

from sqlalchemy import (
    Column,
    DateTime,
    Text,
    create_engine,
    delete,
    func,
    insert,
    select,
    update,
)
from sqlalchemy.engine import make_url
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, declarative_base, sessionmaker

logger = logging.getLogger(__name__)

DEFAULT_STATUS = "estimate_request"


class StorageError(Exception):
    """Any failure reported by the backing store."""


class CardStore(Protocol):
    """Interface for card persistence."""

    backend_name: str

    def init_schema(self) -> None:
        ...

    def list_all(self) -> list["CardRecord"]:
        ...

    def create(self, card: "CardRecord") -> "CardRecord":
        ...

    def update(self, card_id: str, card: "CardRecord") -> "CardRecord":
        ...

    def delete(self, card_id: str) -> bool:
        ...


@dataclass
class CardRecord:
    id: Optional[str]
    site_name: Optional[str] = None
    product_name: Optional[str] = None
    company_name: Optional[str] = ""
    construction_date: Optional[str] = ""
    arrival_date: Optional[str] = ""
    status: Optional[str] = DEFAULT_STATUS
    notes: Optional[str] = ""

    def as_dict(self) -> dict:
        return {
            "id": self.id,
            "companyName": self.company_name,
            "siteName": self.site_name,
            "productName": self.product_name,
            "constructionDate": self.construction_date,
            "arrivalDate": self.arrival_date,
            "status": self.status,
            "notes": self.notes,
        }


class InMemoryCardStore:
    """Process-lifetime card list for development and tests."""

    backend_name = "In-Memory (no DATABASE_URL)"

    def __init__(self):
        self.cards: list[CardRecord] = []
        self._lock = threading.Lock()

    def init_schema(self) -> None:
        return None

    def list_all(self) -> list[CardRecord]:
        with self._lock:
            return list(self.cards)

    def create(self, card: CardRecord) -> CardRecord:
        with self._lock:
            self.cards.append(card)
        return card

    def update(self, card_id: str, card: CardRecord) -> CardRecord:
        card = replace(card, id=card_id)
        with self._lock:
            self.cards = [card if c.id == card_id else c for c in self.cards]
        return card

    def delete(self, card_id: str) -> bool:
        with self._lock:
            self.cards = [c for c in self.cards if c.id != card_id]
        return True

    def reset(self) -> None:
        """Clear all stored cards (useful in tests)."""
        with self._lock:
            self.cards.clear()


def normalize_database_url(database_url: str) -> str:
    """Point bare postgres URLs at the psycopg driver; leave others alone."""
    url = database_url.strip()
    for prefix in ("postgres://", "postgresql://"):
        if url.startswith(prefix):
            return "postgresql+psycopg://" + url[len(prefix):]
    return url


@contextmanager
def _storage_errors(operation: str) -> Iterator[None]:
    try:
        yield
    except SQLAlchemyError as exc:
        raise StorageError(f"{operation} failed: {exc.__class__.__name__}") from exc


def _blank(value: Optional[str]) -> str:
    return value or ""


class SqlCardStore:
    """
    SQLAlchemy-backed implementation. Accepts any SQLAlchemy URL (e.g., Postgres or SQLite for tests).
    """

    def __init__(self, database_url: str, *, sslmode: Optional[str] = None):
        if not database_url:
            raise ValueError("DATABASE_URL is required for SqlCardStore")
        with _storage_errors("engine setup"):
            url = make_url(normalize_database_url(database_url))
            connect_args = {}
            if url.get_backend_name() == "postgresql" and sslmode:
                connect_args["sslmode"] = sslmode
            self.engine = create_engine(
                url,
                future=True,
                pool_pre_ping=True,
                pool_recycle=1800,
                connect_args=connect_args,
            )
        self.backend_name = (
            "PostgreSQL" if url.get_backend_name() == "postgresql" else url.get_backend_name()
        )
        self.Session = sessionmaker(
            bind=self.engine, class_=Session, expire_on_commit=False, future=True
        )

    def init_schema(self) -> None:
        with _storage_errors("schema creation"):
            Base.metadata.create_all(self.engine)
        logger.info("%s connected & cards table ready", self.backend_name)

    def _to_record(self, row: "CardRow") -> CardRecord:
        return CardRecord(
            id=row.id,
            company_name=row.company_name,
            site_name=row.site_name,
            product_name=row.product_name,
            construction_date=row.construction_date,
            arrival_date=row.arrival_date,
            status=row.status,
            notes=row.notes,
        )

    def _column_values(self, card: CardRecord) -> dict:
        return {
            "company_name": _blank(card.company_name),
            "site_name": card.site_name,
            "product_name": card.product_name,
            "construction_date": _blank(card.construction_date),
            "arrival_date": _blank(card.arrival_date),
            "status": card.status,
            "notes": _blank(card.notes),
        }

    def list_all(self) -> list[CardRecord]:
        with _storage_errors("list cards"), self.Session() as session:
            stmt = select(CardRow).order_by(CardRow.created_at.asc())
            rows = session.execute(stmt).scalars().all()
            return [self._to_record(row) for row in rows]

    def _insert_values(self, card: CardRecord) -> dict:
        values = {"id": card.id, **self._column_values(card)}
        # Postgres stamps created_at with now(), matching rows written by
        # other clients. SQLite's CURRENT_TIMESTAMP only has second precision.
        if self.engine.dialect.name != "postgresql":
            values["created_at"] = _utcnow()
        return values

    def create(self, card: CardRecord) -> CardRecord:
        values = self._insert_values(card)
        with _storage_errors("create card"), self.Session() as session:
            session.execute(insert(CardRow).values(**values))
            session.commit()
        return CardRecord(id=card.id, **self._column_values(card))

    def update(self, card_id: str, card: CardRecord) -> CardRecord:
        with _storage_errors("update card"), self.Session() as session:
            session.execute(
                update(CardRow)
                .where(CardRow.id == card_id)
                .values(**self._column_values(card))
            )
            session.commit()
        return replace(card, id=card_id)

    def delete(self, card_id: str) -> bool:
        with _storage_errors("delete card"), self.Session() as session:
            session.execute(delete(CardRow).where(CardRow.id == card_id))
            session.commit()
        return True


Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CardRow(Base):
    __tablename__ = "cards"

    id = Column(Text, primary_key=True)
    company_name = Column(Text, server_default="")
    site_name = Column(Text, nullable=False)
    product_name = Column(Text, nullable=False)
    construction_date = Column(Text, server_default="")
    arrival_date = Column(Text, server_default="")
    status = Column(Text, nullable=False, server_default=DEFAULT_STATUS)
    notes = Column(Text, server_default="")
    created_at = Column(DateTime, server_default=func.now())
