"""
pollito.farm
============

An in‑memory store that owns every farm record: coops, purchases,
expenses, activities, invoices and mortality reports.

The store is the only writer of coop quantities.  Creating a chicken
purchase rotates the coops, creating an invoice or a mortality report
deducts stock, and every such read‑modify‑write runs under one lock so
concurrent requests cannot interleave.

The store itself needs no database, so the rules can be unit‑tested
without one.
:class:`pollito.farm_db.DBFarmStore` exposes the same surface over SQLite.
"""

from __future__ import annotations

import logging
import threading
from dataclasses import replace
from datetime import date, datetime
from typing import Any, Callable, Dict, Iterable, List, Mapping, Optional, TypeVar

from .errors import NotFoundError, ValidationFailure
from .invoicing import format_invoice_number, invoice_total, money, next_invoice_seq
from .models import (
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
from .rotation import deduct_stock, rotate_coops
from .settings import settings

logger = logging.getLogger(__name__)

R = TypeVar("R")


def local_naive(value: datetime) -> datetime:
    """
    Return *value* as a naive local wall‑clock time.

    Timezone‑aware values are converted to the host's local zone and then
    stripped, so every stored timestamp can be compared with every other.

    >>> local_naive(datetime(2024, 12, 3, 7, 0))
    datetime.datetime(2024, 12, 3, 7, 0)
    """
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


# Fields each update command may touch, with the coercion applied to them
COOP_FIELDS: Dict[str, Optional[Callable]] = {
    "quantity": int,
    "entry_date": None,
    "status": CoopStatus,
}
ACTIVITY_FIELDS: Dict[str, Optional[Callable]] = {
    "type": ActivityType,
    "coop_number": None,
    "description": None,
    "scheduled_date": local_naive,
    "completed": bool,
    "recurring": bool,
}
INVOICE_FIELDS: Dict[str, Optional[Callable]] = {
    "client_name": None,
    "client_phone": None,
    "concept": None,
    "quantity": int,
    "pounds": money,
    "price_per_pound": money,
    "status": InvoiceStatus,
}
NULLABLE_FIELDS = {"coop_number", "description", "client_phone"}

# Sample population used by the demo seed and the in‑memory API backend
SAMPLE_COOPS = [
    (1, 450, date(2024, 11, 15)),
    (2, 380, date(2024, 11, 10)),
    (3, 420, date(2024, 11, 5)),
    (4, 360, date(2024, 10, 28)),
    (5, 480, date(2024, 10, 20)),
    (6, 390, date(2024, 10, 15)),
    (7, 370, date(2024, 11, 25)),
]


def sample_coops() -> List[Coop]:
    """Seven coops with the demo population, ids equal to slot numbers."""
    return [Coop(id=n, number=n, quantity=q, entry_date=d) for n, q, d in SAMPLE_COOPS]


def blank_coops(coop_count: int, today: date) -> List[Coop]:
    """``coop_count`` empty coops numbered 1..coop_count."""
    return [Coop(id=n, number=n, quantity=0, entry_date=today) for n in range(1, coop_count + 1)]


# ---------------------------------------------------------------------------
# Helpers shared with the SQLite store
# ---------------------------------------------------------------------------
def clean_changes(changes: Mapping[str, Any], fields: Mapping[str, Optional[Callable]]) -> Dict[str, Any]:
    """
    Keep the keys listed in *fields* and coerce their values.

    Raises :class:`ValidationFailure` for a null in a required field or a
    negative quantity.
    """
    out: Dict[str, Any] = {}
    for key, value in changes.items():
        if key not in fields:
            continue
        if value is None:
            if key not in NULLABLE_FIELDS:
                raise ValidationFailure(f"{key} cannot be null")
            out[key] = None
            continue
        coerce = fields[key]
        out[key] = coerce(value) if coerce else value
    if out.get("quantity", 0) < 0:
        raise ValidationFailure("quantity must be zero or greater")
    return out


def newest_first(records: Iterable[R], key: Callable[[R], Any]) -> List[R]:
    """Sort by *key* descending, id descending as tie‑break."""
    return sorted(records, key=lambda r: (key(r), r.id), reverse=True)


class FarmStore:
    """
    Dictionary‑backed owner of all farm records.

    Example
    -------
    >>> store = FarmStore(sample_coops())
    >>> store.create_purchase("chicken", 500, 2500, "Granja Sur")
    Purchase(id=1, type=<PurchaseType.CHICKEN: 'chicken'>, ...)
    >>> [c.quantity for c in store.get_coops()]
    [380, 420, 360, 480, 390, 370, 500]
    """

    def __init__(
        self,
        coops: Optional[Iterable[Coop]] = None,
        *,
        coop_count: Optional[int] = None,
        sales_coop_number: Optional[int] = None,
        invoice_prefix: Optional[str] = None,
        invoice_number_width: Optional[int] = None,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.coop_count = coop_count or settings.coop_count
        self.sales_coop_number = sales_coop_number or settings.sales_coop_number
        self.invoice_prefix = invoice_prefix if invoice_prefix is not None else settings.invoice_prefix
        self.invoice_number_width = invoice_number_width or settings.invoice_number_width
        self._clock = clock
        self._lock = threading.RLock()

        if coops is None:
            coops = blank_coops(self.coop_count, self._now().date())
        self._coops: Dict[int, Coop] = {c.id: replace(c) for c in coops}
        self._purchases: Dict[int, Purchase] = {}
        self._expenses: Dict[int, Expense] = {}
        self._activities: Dict[int, Activity] = {}
        self._invoices: Dict[int, Invoice] = {}
        self._mortalities: Dict[int, Mortality] = {}

        self._next_ids: Dict[str, int] = {
            "purchase": 1,
            "expense": 1,
            "activity": 1,
            "invoice": 1,
            "mortality": 1,
        }
        # highest invoice counter ever issued, survives deletes
        self._invoice_high_water = 0

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------
    def _new_id(self, kind: str) -> int:
        ident = self._next_ids[kind]
        self._next_ids[kind] = ident + 1
        return ident

    def _coop_by_number(self, number: int) -> Optional[Coop]:
        return next((c for c in self._coops.values() if c.number == number), None)

    def _now(self) -> datetime:
        return local_naive(self._clock())

    def today(self) -> date:
        return self._now().date()

    # ------------------------------------------------------------------
    # Coops
    # ------------------------------------------------------------------
    def get_coops(self) -> List[Coop]:
        with self._lock:
            return [replace(c) for c in sorted(self._coops.values(), key=lambda c: c.number)]

    def get_coop(self, coop_id: int) -> Coop:
        with self._lock:
            coop = self._coops.get(coop_id)
            if coop is None:
                raise NotFoundError("Coop", coop_id)
            return replace(coop)

    def update_coop(self, coop_id: int, **changes: Any) -> Coop:
        """Overwrite quantity / entry_date / status of one coop."""
        with self._lock:
            coop = self._coops.get(coop_id)
            if coop is None:
                raise NotFoundError("Coop", coop_id)
            for key, value in clean_changes(changes, COOP_FIELDS).items():
                setattr(coop, key, value)
            return replace(coop)

    # ------------------------------------------------------------------
    # Purchases
    # ------------------------------------------------------------------
    def get_purchases(self) -> List[Purchase]:
        with self._lock:
            return [replace(p) for p in newest_first(self._purchases.values(), lambda p: p.date)]

    def create_purchase(self, type, quantity: int, price, supplier: str, notes: Optional[str] = None) -> Purchase:
        """Record a purchase; a chicken purchase also rotates the coops."""
        with self._lock:
            now = self._now()
            purchase = Purchase(
                id=self._new_id("purchase"),
                type=PurchaseType(type),
                quantity=quantity,
                price=money(price),
                supplier=supplier,
                notes=notes or None,
                date=now,
            )
            self._purchases[purchase.id] = purchase
            if purchase.type is PurchaseType.CHICKEN:
                rotate_coops(self._coops.values(), quantity, now.date(), self.coop_count)
            return replace(purchase)

    # ------------------------------------------------------------------
    # Expenses
    # ------------------------------------------------------------------
    def get_expenses(self) -> List[Expense]:
        with self._lock:
            return [replace(e) for e in newest_first(self._expenses.values(), lambda e: e.date)]

    def create_expense(self, category, description: str, amount) -> Expense:
        with self._lock:
            expense = Expense(
                id=self._new_id("expense"),
                category=ExpenseCategory(category),
                description=description,
                amount=money(amount),
                date=self._now(),
            )
            self._expenses[expense.id] = expense
            return replace(expense)

    # ------------------------------------------------------------------
    # Activities
    # ------------------------------------------------------------------
    def get_activities(self) -> List[Activity]:
        with self._lock:
            return [replace(a) for a in newest_first(self._activities.values(), lambda a: a.scheduled_date)]

    def create_activity(
        self,
        type,
        scheduled_date: datetime,
        coop_number: Optional[int] = None,
        description: Optional[str] = None,
        completed: bool = False,
        recurring: bool = False,
    ) -> Activity:
        with self._lock:
            activity = Activity(
                id=self._new_id("activity"),
                type=ActivityType(type),
                scheduled_date=local_naive(scheduled_date),
                coop_number=coop_number,
                description=description or None,
                completed=bool(completed),
                recurring=bool(recurring),
            )
            self._activities[activity.id] = activity
            return replace(activity)

    def update_activity(self, activity_id: int, **changes: Any) -> Activity:
        with self._lock:
            activity = self._activities.get(activity_id)
            if activity is None:
                raise NotFoundError("Activity", activity_id)
            for key, value in clean_changes(changes, ACTIVITY_FIELDS).items():
                setattr(activity, key, value)
            return replace(activity)

    # ------------------------------------------------------------------
    # Invoices
    # ------------------------------------------------------------------
    def get_invoices(self) -> List[Invoice]:
        with self._lock:
            return [replace(i) for i in newest_first(self._invoices.values(), lambda i: i.date)]

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
        """Issue the next invoice number and take the sold birds out of the sales coop."""
        with self._lock:
            seq = next_invoice_seq(
                (i.invoice_number for i in self._invoices.values()),
                self._invoice_high_water,
                self.invoice_prefix,
            )
            invoice = Invoice(
                id=self._new_id("invoice"),
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
            self._invoices[invoice.id] = invoice
            self._invoice_high_water = seq

            coop = self._coop_by_number(self.sales_coop_number)
            if coop is None:
                logger.warning("invoice %s: sales coop %d missing, stock not deducted",
                               invoice.invoice_number, self.sales_coop_number)
            elif not deduct_stock(coop, quantity):
                logger.warning("invoice %s: coop %d holds %d, cannot deduct %d",
                               invoice.invoice_number, coop.number, coop.quantity, quantity)
            return replace(invoice)

    def get_invoice(self, invoice_id: int) -> Invoice:
        with self._lock:
            invoice = self._invoices.get(invoice_id)
            if invoice is None:
                raise NotFoundError("Invoice", invoice_id)
            return replace(invoice)

    def update_invoice(self, invoice_id: int, **changes: Any) -> Invoice:
        """Edit invoice fields; the total follows pounds and price. Stock is not touched."""
        with self._lock:
            invoice = self._invoices.get(invoice_id)
            if invoice is None:
                raise NotFoundError("Invoice", invoice_id)
            for key, value in clean_changes(changes, INVOICE_FIELDS).items():
                setattr(invoice, key, value)
            invoice.total = invoice_total(invoice.pounds, invoice.price_per_pound)
            return replace(invoice)

    def delete_invoice(self, invoice_id: int) -> None:
        """Remove an invoice.  Deducted stock is not restored."""
        with self._lock:
            if self._invoices.pop(invoice_id, None) is None:
                raise NotFoundError("Invoice", invoice_id)

    # ------------------------------------------------------------------
    # Mortalities
    # ------------------------------------------------------------------
    def get_mortalities(self) -> List[Mortality]:
        with self._lock:
            return [replace(m) for m in newest_first(self._mortalities.values(), lambda m: m.date)]

    def create_mortality(self, coop_number: int, quantity: int, cause, description: Optional[str] = None) -> Mortality:
        """Record dead birds and take them out of *coop_number* if it holds enough."""
        with self._lock:
            mortality = Mortality(
                id=self._new_id("mortality"),
                coop_number=coop_number,
                quantity=quantity,
                cause=MortalityCause(cause),
                description=description or None,
                date=self._now(),
            )
            self._mortalities[mortality.id] = mortality

            coop = self._coop_by_number(coop_number)
            if coop is None:
                logger.warning("mortality %d: coop %d does not exist", mortality.id, coop_number)
            elif not deduct_stock(coop, quantity):
                logger.warning("mortality %d: coop %d holds %d, cannot deduct %d",
                               mortality.id, coop_number, coop.quantity, quantity)
            return replace(mortality)

    # ------------------------------------------------------------------
    # Dunder helpers for convenience
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return len(self._coops)
