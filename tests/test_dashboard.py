"""
tests/test_dashboard.py
=======================

Unit tests for pollito.dashboard.summarize
"""

from datetime import date, datetime
from decimal import Decimal

from pollito.dashboard import summarize
from pollito.models import AgeCategory


def test_summary_totals(store):
    store.create_invoice("A", "Pollo", 10, "50", "12.50")
    store.create_invoice("B", "Pollo", 5, "20", "10", status="pending")
    store.create_invoice("C", "Pollo", 5, "20", "10", status="cancelled")
    store.create_expense("transport", "Fuel", "400")
    store.create_purchase("feed", 10, "850", "Agroservicio")
    store.create_mortality(2, 5, "natural")
    store.create_activity("cleaning", datetime(2024, 12, 3))

    summary = summarize(store, today=date(2024, 12, 1))

    assert summary["total_chickens"] == 2850 - 20 - 5
    assert summary["chickens_sold"] == 15
    assert summary["sales_total"] == Decimal("825.00")
    assert summary["pending_sales_total"] == Decimal("200.00")
    assert summary["expenses_total"] == Decimal("400.00")
    assert summary["purchases_total"] == Decimal("850.00")
    assert summary["mortality_total"] == 5
    assert summary["pending_activities"] == 1


def test_summary_coop_ages(store):
    coops = summarize(store, today=date(2024, 12, 1))["coops"]
    assert [c["number"] for c in coops] == [1, 2, 3, 4, 5, 6, 7]
    assert coops[0]["age_in_days"] == 16
    assert coops[0]["age_category"] is AgeCategory.YOUNG
    assert coops[5]["age_category"] is AgeCategory.OLD
