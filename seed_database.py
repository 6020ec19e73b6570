#!/usr/bin/env python
"""
Seed database with sample farm data for testing.

This script loads the demo coop population and a handful of expenses,
activities and sales into the SQLite database so the dashboard has
meaningful data.  A database that already holds records is left alone.
Optional extra expenses can be supplied in ``sample_farm.json``.
"""

import json
from datetime import datetime, timedelta

from pollito.db import create_all
from pollito.farm import sample_coops
from pollito.farm_db import DBFarmStore
from pollito.models import ActivityType, ExpenseCategory

SAMPLE_EXPENSES = [
    (ExpenseCategory.UTILITIES, "Electricity bill", "1850.00"),
    (ExpenseCategory.MAINTENANCE, "Coop 4 roof repair", "950.00"),
    (ExpenseCategory.TRANSPORT, "Feed delivery", "400.00"),
]

SAMPLE_ACTIVITIES = [
    (ActivityType.CLEANING, 1, "Deep clean before next batch", 1),
    (ActivityType.VACCINATION, 7, "Newcastle vaccine", 3),
    (ActivityType.FEEDING, None, "Morning feed", 0),
]

# Add additional records from sample_farm.json if available
try:
    with open("sample_farm.json", "r") as f:
        sample_data = json.load(f)
    for rec in sample_data.get("expenses", []):
        SAMPLE_EXPENSES.append((ExpenseCategory(rec["category"]), rec["description"], rec["amount"]))
except (FileNotFoundError, json.JSONDecodeError):
    # Continue with default sample records
    pass


def seed_database(store=None):
    """
    Load the demo population and sample records.

    Returns False without writing anything when the database already holds
    expenses, activities or invoices, so running the script twice is safe.
    """
    if store is None:
        store = DBFarmStore()
    if store.get_expenses() or store.get_activities() or store.get_invoices():
        print("Database already holds farm records, skipping seed.")
        return False

    by_number = {c.number: c for c in store.get_coops()}
    for coop in sample_coops():
        target = by_number.get(coop.number)
        if target is None:
            continue
        store.update_coop(target.id, quantity=coop.quantity, entry_date=coop.entry_date)
        print(f"Coop {coop.number}: {coop.quantity} birds since {coop.entry_date}")

    for category, description, amount in SAMPLE_EXPENSES:
        store.create_expense(category, description, amount)
        print(f"Added expense: {description} ({amount})")

    now = datetime.now()
    for kind, coop_number, description, days_ahead in SAMPLE_ACTIVITIES:
        store.create_activity(kind, now + timedelta(days=days_ahead), coop_number, description)
        print(f"Scheduled: {description}")

    invoice = store.create_invoice("Comedor La Esquina", "Pollo entero", 20, "100.00", "12.50")
    print(f"Issued {invoice.invoice_number}: {invoice.total}")

    print(f"\nSeeded {len(store)} coops, {len(SAMPLE_EXPENSES)} expenses, "
          f"{len(SAMPLE_ACTIVITIES)} activities and 1 invoice.")
    return True


if __name__ == "__main__":
    print("Ensuring database tables exist...")
    create_all()

    print("Seeding database with sample farm data...")
    seed_database()

    print("\nDone! You can now run the API server with:")
    print("  uvicorn api.main:app --reload")
