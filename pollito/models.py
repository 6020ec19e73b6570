"""
pollito.models
==============

Dataclasses and enums for the records a poultry farm keeps: coops,
purchases, expenses, scheduled activities, sales invoices and mortality
reports.  These objects are intentionally lightweight; they carry **no**
external‑library dependencies so that importing `pollito` stays fast and
the domain rules can be unit‑tested without a database.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

# Age thresholds (days since the batch entered its coop)
YOUNG_MAX_DAYS = 21
MEDIUM_MAX_DAYS = 35


class _ValueEnum(str, Enum):
    def __str__(self) -> str:        # nicer REPL display
        return self.value


class CoopStatus(_ValueEnum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class PurchaseType(_ValueEnum):
    """What was bought.  Only ``CHICKEN`` purchases rotate the coops."""
    CHICKEN = "chicken"
    FEED = "feed"
    MEDICINE = "medicine"
    EQUIPMENT = "equipment"


class ExpenseCategory(_ValueEnum):
    MAINTENANCE = "maintenance"
    UTILITIES = "utilities"
    TRANSPORT = "transport"
    SALARIES = "salaries"
    OTHER = "other"


class ActivityType(_ValueEnum):
    CLEANING = "cleaning"
    FEEDING = "feeding"
    WATER = "water"
    VACCINATION = "vaccination"
    INSPECTION = "inspection"


class InvoiceStatus(_ValueEnum):
    PAID = "paid"
    PENDING = "pending"
    CANCELLED = "cancelled"


class MortalityCause(_ValueEnum):
    DISEASE = "disease"
    ACCIDENT = "accident"
    NATURAL = "natural"
    UNKNOWN = "unknown"


class AgeCategory(_ValueEnum):
    YOUNG = "young"
    MEDIUM = "medium"
    OLD = "old"


def age_category(days: int) -> AgeCategory:
    """Bucket a batch age in days into young / medium / old."""
    if days <= YOUNG_MAX_DAYS:
        return AgeCategory.YOUNG
    if days <= MEDIUM_MAX_DAYS:
        return AgeCategory.MEDIUM
    return AgeCategory.OLD


@dataclass
class Coop:
    """
    One physical coop slot and the batch currently housed in it.

    Parameters
    ----------
    id : int
        Store‑assigned identifier.
    number : int
        Slot number, 1..coop_count.  Slot 1 holds the oldest batch.
    quantity : int
        Live birds in the coop (never negative).
    entry_date : datetime.date
        Date the current batch entered the pipeline.
    status : CoopStatus, default=ACTIVE
    """
    id: int
    number: int
    quantity: int
    entry_date: date
    status: CoopStatus = CoopStatus.ACTIVE

    # Convenience helpers -------------------------------------------------
    def age_in_days(self, today: Optional[date] = None) -> int:
        """Return batch age in days (never negative)."""
        today = today or date.today()
        return abs((today - self.entry_date).days)

    def age_category(self, today: Optional[date] = None) -> AgeCategory:
        return age_category(self.age_in_days(today))


@dataclass
class Purchase:
    id: int
    type: PurchaseType
    quantity: int
    price: Decimal
    supplier: str
    date: datetime
    notes: Optional[str] = None


@dataclass
class Expense:
    id: int
    category: ExpenseCategory
    description: str
    amount: Decimal
    date: datetime


@dataclass
class Activity:
    """A scheduled chore.  ``coop_number=None`` means every coop."""
    id: int
    type: ActivityType
    scheduled_date: datetime
    coop_number: Optional[int] = None
    description: Optional[str] = None
    completed: bool = False
    recurring: bool = False


@dataclass
class Invoice:
    """
    Sales record for chickens sold by weight.

    ``total`` always equals ``pounds * price_per_pound`` rounded to cents;
    the store recomputes it whenever either factor changes.
    """
    id: int
    invoice_number: str
    client_name: str
    concept: str
    quantity: int
    pounds: Decimal
    price_per_pound: Decimal
    total: Decimal
    date: datetime
    client_phone: Optional[str] = None
    status: InvoiceStatus = InvoiceStatus.PAID


@dataclass
class Mortality:
    id: int
    coop_number: int
    quantity: int
    cause: MortalityCause
    date: datetime
    description: Optional[str] = None
