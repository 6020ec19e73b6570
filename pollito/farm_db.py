"""
pollito.farm_db
===============

SQLite‑backed implementation of the FarmStore public surface.

Every command opens one session, performs its whole read‑modify‑write
(including coop rotation and stock deduction) and commits once, so a
chicken purchase either rotates all coops or none of them.  Code written
against the in‑memory :class:`pollito.farm.FarmStore` can switch to a
persistent store without changing its calls.
"""

from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from datetime import date, datetime
from typing import Any, Callable, Iterator, List, Optional

from sqlalchemy.engine import Engine
from sqlmodel import Session, select

from pollito.db import (
    ActivityDB,
    CoopDB,
    ExpenseDB,
    InvoiceDB,
    MortalityDB,
    PurchaseDB,
    SequenceDB,
    SessionLocal,
    create_all,
    engine as default_engine,
)
from pollito.errors import NotFoundError
from pollito.farm import ACTIVITY_FIELDS, COOP_FIELDS, INVOICE_FIELDS, clean_changes, local_naive
from pollito.invoicing import format_invoice_number, invoice_total, money, next_invoice_seq
from pollito.models import (
    Activity,
    ActivityType,
    Coop,
    Expense,
    ExpenseCategory,
    Invoice,
    InvoiceStatus,
    Mortality,
    MortalityCause,
    Purchase,
    PurchaseType,
)
from pollito.rotation import deduct_stock, rotate_coops
from pollito.settings import settings

logger = logging.getLogger(__name__)

INVOICE_SEQUENCE = "invoice"


class DBFarmStore:
    """
    Drop‑in replacement for FarmStore backed by SQLite.

    On construction the tables are created if needed and any missing coop
    slot 1..coop_count is added empty, so the coop invariant holds on a
    brand‑new database.
    """

    def __init__(
        self,
        engine: Optional[Engine] = None,
        *,
        coop_count: Optional[int] = None,
        sales_coop_number: Optional[int] = None,
        invoice_prefix: Optional[str] = None,
        invoice_number_width: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self._engine: Engine = engine or default_engine
        self.coop_count = coop_count or settings.coop_count
        self.sales_coop_number = sales_coop_number or settings.sales_coop_number
        self.invoice_prefix = invoice_prefix if invoice_prefix is not None else settings.invoice_prefix
        self.invoice_number_width = invoice_number_width or settings.invoice_number_width
        self._clock = clock
        self._lock = threading.RLock()

        create_all(self._engine)
        self._ensure_coops()

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    @contextmanager
    def _transaction(self) -> Iterator[Session]:
        """One session, one commit; roll back on any error."""
        with self._lock, SessionLocal(self._engine) as s:
            try:
                yield s
                s.commit()
            except Exception:
                s.rollback()
                raise

    def _ensure_coops(self) -> None:
        with self._transaction() as s:
            numbers = set(s.exec(select(CoopDB.number)).all())
            today = self.today()
            for number in range(1, self.coop_count + 1):
                if number not in numbers:
                    s.add(CoopDB(number=number, quantity=0, entry_date=today))
                    logger.info("created empty coop %d", number)
            extra = sorted(n for n in numbers if n > self.coop_count)
            if extra:
                logger.warning("coops %s exceed the configured coop count %d", extra, self.coop_count)

    @staticmethod
    def _coop_row(s: Session, number: int) -> Optional[CoopDB]:
        return s.exec(select(CoopDB).where(CoopDB.number == number)).first()

    @staticmethod
    def _deduct(row: CoopDB, quantity: int) -> bool:
        record = row.to_record()
        if not deduct_stock(record, quantity):
            return False
        row.quantity = record.quantity
        return True

    def _now(self) -> datetime:
        return local_naive(self._clock())

    def today(self) -> date:
        return self._now().date()

    # ------------------------------------------------------------------
    # Coops
    # ------------------------------------------------------------------
    def get_coops(self) -> List[Coop]:
        with self._transaction() as s:
            rows = s.exec(select(CoopDB).order_by(CoopDB.number)).all()
            return [row.to_record() for row in rows]

    def get_coop(self, coop_id: int) -> Coop:
        with self._transaction() as s:
            row = s.get(CoopDB, coop_id)
            if row is None:
                raise NotFoundError("Coop", coop_id)
            return row.to_record()

    def update_coop(self, coop_id: int, **changes: Any) -> Coop:
        with self._transaction() as s:
            row = s.get(CoopDB, coop_id)
            if row is None:
                raise NotFoundError("Coop", coop_id)
            for key, value in clean_changes(changes, COOP_FIELDS).items():
                setattr(row, key, value)
            s.add(row)
        return row.to_record()

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------
    def get_purchases(self) -> List[Purchase]:
        with self._transaction() as s:
            rows = s.exec(select(PurchaseDB).order_by(PurchaseDB.date.desc(), PurchaseDB.id.desc())).all()
            return [row.to_record() for row in rows]

    def create_purchase(self, type, quantity: int, price, supplier: str, notes: Optional[str] = None) -> Purchase:
        with self._transaction() as s:
            now = self._now()
            row = PurchaseDB(type=PurchaseType(type), quantity=quantity, price=money(price),
                             supplier=supplier, notes=notes or None, date=now)
            s.add(row)

            if row.type is PurchaseType.CHICKEN:
                coop_rows = {r.id: r for r in s.exec(select(CoopDB)).all()}
                records = [r.to_record() for r in coop_rows.values()]
                for changed in rotate_coops(records, quantity, now.date(), self.coop_count):
                    target = coop_rows[changed.id]
                    target.quantity = changed.quantity
                    target.entry_date = changed.entry_date
                    s.add(target)
            s.flush()
        return row.to_record()

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------
    def get_expenses(self) -> List[Expense]:
        with self._transaction() as s:
            rows = s.exec(select(ExpenseDB).order_by(ExpenseDB.date.desc(), ExpenseDB.id.desc())).all()
            return [row.to_record() for row in rows]

    def create_expense(self, category, description: str, amount) -> Expense:
        with self._transaction() as s:
            row = ExpenseDB(category=ExpenseCategory(category), description=description,
                            amount=money(amount), date=self._now())
            s.add(row)
            s.flush()
        return row.to_record()

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------
    def get_activities(self) -> List[Activity]:
        with self._transaction() as s:
            rows = s.exec(
                select(ActivityDB).order_by(ActivityDB.scheduled_date.desc(), ActivityDB.id.desc())
            ).all()
            return [row.to_record() for row in rows]

    def create_activity(
        self,
        type,
        scheduled_date: datetime,
        coop_number: Optional[int] = None,
        description: Optional[str] = None,
        completed: bool = False,
        recurring: bool = False,
    ) -> Activity:
        with self._transaction() as s:
            row = ActivityDB(type=ActivityType(type), scheduled_date=local_naive(scheduled_date),
                             coop_number=coop_number, description=description or None,
                             completed=bool(completed), recurring=bool(recurring))
            s.add(row)
            s.flush()
        return row.to_record()

    def update_activity(self, activity_id: int, **changes: Any) -> Activity:
        with self._transaction() as s:
            row = s.get(ActivityDB, activity_id)
            if row is None:
                raise NotFoundError("Activity", activity_id)
            for key, value in clean_changes(changes, ACTIVITY_FIELDS).items():
                setattr(row, key, value)
            s.add(row)
        return row.to_record()

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------
    def get_invoices(self) -> List[Invoice]:
        with self._transaction() as s:
            rows = s.exec(select(InvoiceDB).order_by(InvoiceDB.date.desc(), InvoiceDB.id.desc())).all()
            return [row.to_record() for row in rows]

    def create_invoice(
        self,
        client_name: str,
        concept: str,
        quantity: int,
        pounds,
        price_per_pound,
        client_phone: Optional[str] = None,
        status=InvoiceStatus.PAID,
    ) -> Invoice:
        with self._transaction() as s:
            sequence = s.get(SequenceDB, INVOICE_SEQUENCE) or SequenceDB(name=INVOICE_SEQUENCE, value=0)
            existing = s.exec(select(InvoiceDB.invoice_number)).all()
            seq = next_invoice_seq(existing, sequence.value, self.invoice_prefix)
            sequence.value = seq
            s.add(sequence)

            row = InvoiceDB(
                invoice_number=format_invoice_number(seq, self.invoice_prefix, self.invoice_number_width),
                client_name=client_name,
                client_phone=client_phone or None,
                concept=concept,
                quantity=quantity,
                pounds=money(pounds),
                price_per_pound=money(price_per_pound),
                total=invoice_total(pounds, price_per_pound),
                status=InvoiceStatus(status or InvoiceStatus.PAID),
                date=self._now(),
            )
            s.add(row)

            coop = self._coop_row(s, self.sales_coop_number)
            if coop is None:
                logger.warning("invoice %s: sales coop %d missing, stock not deducted",
                               row.invoice_number, self.sales_coop_number)
            elif self._deduct(coop, quantity):
                s.add(coop)
            else:
                logger.warning("invoice %s: coop %d holds %d, cannot deduct %d",
                               row.invoice_number, coop.number, coop.quantity, quantity)
            s.flush()
        return row.to_record()

    def get_invoice(self, invoice_id: int) -> Invoice:
        with self._transaction() as s:
            row = s.get(InvoiceDB, invoice_id)
            if row is None:
                raise NotFoundError("Invoice", invoice_id)
            return row.to_record()

    def update_invoice(self, invoice_id: int, **changes: Any) -> Invoice:
        with self._transaction() as s:
            row = s.get(InvoiceDB, invoice_id)
            if row is None:
                raise NotFoundError("Invoice", invoice_id)
            for key, value in clean_changes(changes, INVOICE_FIELDS).items():
                setattr(row, key, value)
            row.total = invoice_total(row.pounds, row.price_per_pound)
            s.add(row)
        return row.to_record()

    def delete_invoice(self, invoice_id: int) -> None:
        with self._transaction() as s:
            row = s.get(InvoiceDB, invoice_id)
            if row is None:
                raise NotFoundError("Invoice", invoice_id)
            s.delete(row)

    # ------------------------------------------------------------------
    # Mortalities
    # ------------------------------------------------------------------
    def get_mortalities(self) -> List[Mortality]:
        with self._transaction() as s:
            rows = s.exec(select(MortalityDB).order_by(MortalityDB.date.desc(), MortalityDB.id.desc())).all()
            return [row.to_record() for row in rows]

    def create_mortality(self, coop_number: int, quantity: int, cause, description: Optional[str] = None) -> Mortality:
        with self._transaction() as s:
            row = MortalityDB(coop_number=coop_number, quantity=quantity, cause=MortalityCause(cause),
                              description=description or None, date=self._now())
            s.add(row)
            s.flush()

            coop = self._coop_row(s, coop_number)
            if coop is None:
                logger.warning("mortality %d: coop %d does not exist", row.id, coop_number)
            elif self._deduct(coop, quantity):
                s.add(coop)
            else:
                logger.warning("mortality %d: coop %d holds %d, cannot deduct %d",
                               row.id, coop_number, coop.quantity, quantity)
        return row.to_record()

    # ------------------------------------------------------ dunder helpers
    def __len__(self) -> int:
        with self._transaction() as s:
            return len(s.exec(select(CoopDB.id)).all())
