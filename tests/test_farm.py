"""
tests/test_farm.py
==================

Unit tests for pollito.farm.FarmStore, the in‑memory store.
"""

from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from pollito.errors import NotFoundError, ValidationFailure
from pollito.farm import FarmStore, local_naive
from pollito.models import InvoiceStatus, MortalityCause, PurchaseType


def _quantities(store):
    return [c.quantity for c in store.get_coops()]


def _sell(store, quantity=20, pounds="100", price="12.50", **extra):
    return store.create_invoice("Comedor La Esquina", "Pollo entero", quantity, pounds, price, **extra)


# ---------------------------------------------------------------------------
# Coops
# ---------------------------------------------------------------------------
def test_blank_store_has_one_empty_coop_per_slot():
    store = FarmStore(coop_count=7)
    coops = store.get_coops()
    assert [c.number for c in coops] == [1, 2, 3, 4, 5, 6, 7]
    assert all(c.quantity == 0 for c in coops)


def test_update_coop_is_idempotent(store):
    first = store.update_coop(2, quantity=300, entry_date=date(2024, 12, 1))
    second = store.update_coop(2, quantity=300, entry_date=date(2024, 12, 1))
    assert first == second
    assert store.get_coop(2).quantity == 300


def test_update_coop_ignores_number(store):
    store.update_coop(2, number=9, quantity=10)
    assert store.get_coop(2).number == 2


def test_update_coop_rejects_negative_quantity(store):
    with pytest.raises(ValidationFailure):
        store.update_coop(2, quantity=-1)


def test_update_missing_coop_raises(store):
    with pytest.raises(NotFoundError) as exc:
        store.update_coop(99, quantity=1)
    assert str(exc.value) == "Coop not found"


def test_returned_records_are_copies(store):
    coop = store.get_coop(1)
    coop.quantity = 0
    assert store.get_coop(1).quantity == 450


# ---------------------------------------------------------------------------
# Purchases and rotation
# ---------------------------------------------------------------------------
def test_chicken_purchase_rotates_coops(store):
    store.create_purchase(PurchaseType.CHICKEN, 500, "2500.00", "Granja Sur")
    assert _quantities(store) == [380, 420, 360, 480, 390, 370, 500]
    assert store.get_coops()[-1].entry_date == date(2024, 12, 1)


def test_other_purchases_do_not_rotate(store):
    before = _quantities(store)
    for kind in ("feed", "medicine", "equipment"):
        store.create_purchase(kind, 10, "100", "Agroservicio")
    assert _quantities(store) == before


def test_purchase_fields(store):
    purchase = store.create_purchase("feed", 20, 850, "Agroservicio", notes="")
    assert purchase.id == 1
    assert purchase.type is PurchaseType.FEED
    assert purchase.price == Decimal("850.00")
    assert purchase.notes is None
    assert purchase.date == datetime(2024, 12, 1, 8, 0)


def test_purchases_newest_first(store):
    store.create_purchase("feed", 1, 1, "A")
    store.create_purchase("feed", 2, 1, "B")
    assert [p.supplier for p in store.get_purchases()] == ["B", "A"]


# ---------------------------------------------------------------------------
# Mortality
# ---------------------------------------------------------------------------
def test_mortality_deducts_from_coop(store):
    store.create_mortality(3, 50, MortalityCause.DISEASE)
    assert store.get_coop(3).quantity == 370


def test_mortality_larger_than_stock_is_recorded_but_not_deducted(store):
    store.create_mortality(3, 50, "disease")
    record = store.create_mortality(3, 1000, "unknown", description="count error?")
    assert store.get_coop(3).quantity == 370
    assert record.quantity == 1000
    assert len(store.get_mortalities()) == 2


def test_mortality_in_unknown_coop_is_recorded(store):
    before = _quantities(store)
    store.create_mortality(12, 5, "accident")
    assert _quantities(store) == before
    assert store.get_mortalities()[0].coop_number == 12


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------
def test_invoice_total_and_stock(store):
    invoice = _sell(store, quantity=20)
    assert invoice.total == Decimal("1250.00")
    assert invoice.status is InvoiceStatus.PAID
    assert store.get_coop(1).quantity == 430


def test_invoice_numbers_increment(store):
    numbers = [_sell(store, quantity=1).invoice_number for _ in range(3)]
    assert numbers == ["Fact-0001", "Fact-0002", "Fact-0003"]


def test_invoice_number_not_reused_after_delete(store):
    _sell(store, quantity=1)
    second = _sell(store, quantity=1)
    store.delete_invoice(second.id)
    assert _sell(store, quantity=1).invoice_number == "Fact-0003"


def test_invoice_larger_than_sales_coop_skips_deduction(store):
    _sell(store, quantity=451)
    assert store.get_coop(1).quantity == 450


def test_invoice_uses_configured_sales_coop(clock):
    from pollito.farm import sample_coops
    store = FarmStore(sample_coops(), sales_coop_number=2, clock=clock)
    _sell(store, quantity=80)
    assert _quantities(store)[:2] == [450, 300]


def test_delete_invoice_does_not_restore_stock(store):
    invoice = _sell(store, quantity=20)
    store.delete_invoice(invoice.id)
    assert store.get_invoices() == []
    assert store.get_coop(1).quantity == 430


def test_delete_missing_invoice_raises(store):
    with pytest.raises(NotFoundError):
        store.delete_invoice(5)


def test_update_invoice_recomputes_total(store):
    invoice = _sell(store)
    updated = store.update_invoice(invoice.id, pounds="80", status="pending")
    assert updated.total == Decimal("1000.00")
    assert updated.status is InvoiceStatus.PENDING
    assert updated.invoice_number == invoice.invoice_number


def test_update_invoice_rejects_null_required_field(store):
    invoice = _sell(store)
    with pytest.raises(ValidationFailure):
        store.update_invoice(invoice.id, client_name=None)


# ---------------------------------------------------------------------------
# Expenses and activities
# ---------------------------------------------------------------------------
def test_create_expense(store):
    expense = store.create_expense("utilities", "Electricity", "1850")
    assert expense.amount == Decimal("1850.00")
    assert store.get_expenses() == [expense]


def test_activities_sorted_by_schedule(store):
    store.create_activity("cleaning", datetime(2024, 12, 3))
    store.create_activity("feeding", datetime(2024, 12, 5), coop_number=2)
    assert [a.type.value for a in store.get_activities()] == ["feeding", "cleaning"]


def test_update_activity(store):
    activity = store.create_activity("vaccination", datetime(2024, 12, 3), coop_number=7)
    updated = store.update_activity(activity.id, completed=True, coop_number=None)
    assert updated.completed is True
    assert updated.coop_number is None


def test_update_missing_activity_raises(store):
    with pytest.raises(NotFoundError):
        store.update_activity(1, completed=True)


def test_local_naive_strips_offsets():
    aware = datetime(2024, 12, 3, 7, 0, tzinfo=timezone.utc)
    converted = local_naive(aware)
    assert converted.tzinfo is None
    assert converted == aware.astimezone().replace(tzinfo=None)
    assert local_naive(datetime(2024, 12, 4, 7, 0)) == datetime(2024, 12, 4, 7, 0)


def test_aware_and_naive_activities_list_together(store):
    store.create_activity("cleaning", datetime(2024, 12, 3, 7, 0, tzinfo=timezone.utc))
    store.create_activity("feeding", datetime(2024, 12, 4, 7, 0))
    activities = store.get_activities()
    assert [a.type.value for a in activities] == ["feeding", "cleaning"]
    assert all(a.scheduled_date.tzinfo is None for a in activities)


def test_update_activity_with_aware_date(store):
    first = store.create_activity("cleaning", datetime(2024, 12, 3, 7, 0))
    store.create_activity("feeding", datetime(2024, 12, 4, 7, 0))
    later = datetime(2024, 12, 6, 7, 0, tzinfo=timezone(timedelta(hours=-6)))
    store.update_activity(first.id, scheduled_date=later)
    activities = store.get_activities()
    assert [a.type.value for a in activities] == ["cleaning", "feeding"]
    assert activities[0].scheduled_date.tzinfo is None


def test_aware_clock_stamps_naive_dates():
    clock = lambda: datetime(2024, 12, 1, 14, 0, tzinfo=timezone.utc)  # noqa: E731
    store = FarmStore(coop_count=7, clock=clock)
    expense = store.create_expense("utilities", "Light", "1850")
    assert expense.date.tzinfo is None
    assert expense.date == clock().astimezone().replace(tzinfo=None)


def test_get_invoice(store):
    invoice = _sell(store)
    assert store.get_invoice(invoice.id) == invoice
    with pytest.raises(NotFoundError):
        store.get_invoice(99)
