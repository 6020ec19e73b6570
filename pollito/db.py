"""
pollito.db
==========

SQLite persistence layer for the farm records.

This module exposes:

* ``engine`` – a global SQLModel engine pointing at *pollito.db*
* ``SessionLocal`` – a session factory used via ``with SessionLocal() as s:``
* ``create_all()`` – helper to create tables at first run
* one table model per record in :pymod:`pollito.models`, each with a
  ``to_record`` converter
"""

from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from sqlalchemy import Column, DateTime
from sqlalchemy.engine import Engine
from sqlmodel import Field, Session, SQLModel, create_engine

from pollito.invoicing import money
from pollito.models import (
    Activity,
    ActivityType,
    Coop,
    CoopStatus,
    Expense,
    ExpenseCategory,
    Invoice,
    InvoiceStatus,
    Mortality,
    MortalityCause,
    Purchase,
    PurchaseType,
)
from pollito.settings import DB_ECHO, DB_URL


# ---------------------------------------------------------------------------
# Engine (SQLite file lives in project root unless POLLITO_DB_FILE says otherwise)
# ---------------------------------------------------------------------------
engine = create_engine(DB_URL, echo=DB_ECHO, connect_args={"check_same_thread": False})


# ---------------------------------------------------------------------------
# Session factory
# ---------------------------------------------------------------------------
def SessionLocal(bind: Optional[Engine] = None) -> Session:  # noqa: N802 (factory camel‑case for consistency with FastAPI docs)
    """
    Return a new Session bound to *bind* or the global engine.

    Loaded rows stay readable after commit so stores can convert them to
    plain records once the transaction is closed.
    """
    return Session(bind or engine, expire_on_commit=False)


# ---------------------------------------------------------------------------
# ORM models that mirror pollito.models
# ---------------------------------------------------------------------------
# Timestamps are naive local wall-clock values (see pollito.farm.local_naive),
# so their columns are plain DateTime rather than sqlmodel's default type.
class CoopDB(SQLModel, table=True):
    __tablename__ = "coops"

    id: Optional[int] = Field(default=None, primary_key=True)
    number: int = Field(index=True, sa_column_kwargs={"unique": True})
    quantity: int = 0
    entry_date: date
    status: CoopStatus = CoopStatus.ACTIVE

    def to_record(self) -> Coop:
        return Coop(id=self.id, number=self.number, quantity=self.quantity,
                    entry_date=self.entry_date, status=CoopStatus(self.status))


class PurchaseDB(SQLModel, table=True):
    __tablename__ = "purchases"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: PurchaseType
    quantity: int
    price: Decimal = Field(max_digits=10, decimal_places=2)
    supplier: str
    notes: Optional[str] = None
    date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    def to_record(self) -> Purchase:
        return Purchase(id=self.id, type=PurchaseType(self.type), quantity=self.quantity,
                        price=money(self.price), supplier=self.supplier, notes=self.notes,
                        date=self.date)


class ExpenseDB(SQLModel, table=True):
    __tablename__ = "expenses"

    id: Optional[int] = Field(default=None, primary_key=True)
    category: ExpenseCategory
    description: str
    amount: Decimal = Field(max_digits=10, decimal_places=2)
    date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    def to_record(self) -> Expense:
        return Expense(id=self.id, category=ExpenseCategory(self.category),
                       description=self.description, amount=money(self.amount), date=self.date)


class ActivityDB(SQLModel, table=True):
    __tablename__ = "activities"

    id: Optional[int] = Field(default=None, primary_key=True)
    type: ActivityType
    coop_number: Optional[int] = None  # None means all coops
    description: Optional[str] = None
    scheduled_date: datetime = Field(sa_column=Column(DateTime, nullable=False))
    completed: bool = False
    recurring: bool = False

    def to_record(self) -> Activity:
        return Activity(id=self.id, type=ActivityType(self.type), scheduled_date=self.scheduled_date,
                        coop_number=self.coop_number, description=self.description,
                        completed=self.completed, recurring=self.recurring)


class InvoiceDB(SQLModel, table=True):
    __tablename__ = "invoices"

    id: Optional[int] = Field(default=None, primary_key=True)
    invoice_number: str = Field(index=True, sa_column_kwargs={"unique": True})
    client_name: str
    client_phone: Optional[str] = None
    concept: str
    quantity: int
    pounds: Decimal = Field(max_digits=10, decimal_places=2)
    price_per_pound: Decimal = Field(max_digits=10, decimal_places=2)
    total: Decimal = Field(max_digits=12, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.PAID
    date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    def to_record(self) -> Invoice:
        return Invoice(id=self.id, invoice_number=self.invoice_number, client_name=self.client_name,
                       client_phone=self.client_phone, concept=self.concept, quantity=self.quantity,
                       pounds=money(self.pounds), price_per_pound=money(self.price_per_pound),
                       total=money(self.total), status=InvoiceStatus(self.status), date=self.date)


class MortalityDB(SQLModel, table=True):
    __tablename__ = "mortalities"

    id: Optional[int] = Field(default=None, primary_key=True)
    coop_number: int
    quantity: int
    cause: MortalityCause
    description: Optional[str] = None
    date: datetime = Field(sa_column=Column(DateTime, nullable=False))

    def to_record(self) -> Mortality:
        return Mortality(id=self.id, coop_number=self.coop_number, quantity=self.quantity,
                         cause=MortalityCause(self.cause), description=self.description, date=self.date)


class SequenceDB(SQLModel, table=True):
    """Named high‑water marks (e.g. the last invoice counter issued)."""
    __tablename__ = "sequences"

    name: str = Field(primary_key=True)
    value: int = 0


# ---------------------------------------------------------------------------
# Utility: create tables
# ---------------------------------------------------------------------------
def create_all(bind: Optional[Engine] = None) -> None:
    """Create all tables for the models above (safe if they already exist)."""
    SQLModel.metadata.create_all(bind or engine)


# ---------------------------------------------------------------------------
# Lightweight CLI
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    """
    Quick bootstrap helper.

    Examples
    --------
    $ python -m pollito.db --create        # first‑time table creation
    """
    import argparse
    import textwrap

    parser = argparse.ArgumentParser(
        prog="python -m pollito.db",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        description=textwrap.dedent(
            """\
            Pollito DB utilities
            --------------------
            --create   Create all SQLModel tables (safe if they already exist)
            """
        ),
    )
    parser.add_argument("--create", action="store_true", help="create tables")
    args = parser.parse_args()

    if args.create:
        create_all()
        print("✅ pollito.db schema initialised")

