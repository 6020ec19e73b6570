"""
pollito.dashboard
=================

Headline figures for the farm dashboard, computed from any store that
exposes the FarmStore query surface.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from .invoicing import money
from .models import InvoiceStatus


def summarize(store, today: Optional[date] = None) -> Dict[str, Any]:
    """
    Return totals and per‑coop ages.

    Cancelled invoices do not count towards ``sales_total``.
    """
    today = today or store.today()
    coops = store.get_coops()
    invoices = store.get_invoices()

    sales = [i for i in invoices if i.status is not InvoiceStatus.CANCELLED]
    return {
        "total_chickens": sum(c.quantity for c in coops),
        "coops": [
            {
                "number": c.number,
                "quantity": c.quantity,
                "age_in_days": c.age_in_days(today),
                "age_category": c.age_category(today),
            }
            for c in coops
        ],
        "pending_activities": sum(1 for a in store.get_activities() if not a.completed),
        "chickens_sold": sum(i.quantity for i in sales),
        "sales_total": money(sum((i.total for i in sales), Decimal("0"))),
        "pending_sales_total": money(sum(
            (i.total for i in sales if i.status is InvoiceStatus.PENDING), Decimal("0"))),
        "expenses_total": money(sum((e.amount for e in store.get_expenses()), Decimal("0"))),
        "purchases_total": money(sum((p.price for p in store.get_purchases()), Decimal("0"))),
        "mortality_total": sum(m.quantity for m in store.get_mortalities()),
    }
