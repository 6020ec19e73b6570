"""
api.schemas
===========

Request and response bodies.  JSON uses camelCase field names
(``entryDate``, ``pricePerPound``); Python attributes stay snake_case.
"""

from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from pollito.models import (
    ActivityType,
    AgeCategory,
    CoopStatus,
    ExpenseCategory,
    InvoiceStatus,
    MortalityCause,
    PurchaseType,
)


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, from_attributes=True)


# ---------------------------------------------------------------------------
# Coops
# ---------------------------------------------------------------------------
class CoopOut(CamelModel):
    id: int
    number: int
    quantity: int
    entry_date: date
    status: CoopStatus


class CoopUpdate(CamelModel):
    """Partial update; ``number`` is fixed and cannot be changed."""
    quantity: Optional[int] = Field(None, ge=0)
    entry_date: Optional[date] = None
    status: Optional[CoopStatus] = None


# ---------------------------------------------------------------------------
# Purchases
# ---------------------------------------------------------------------------
class PurchaseCreate(CamelModel):
    type: PurchaseType
    quantity: int = Field(..., gt=0)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    supplier: str = Field(..., min_length=1)
    notes: Optional[str] = None


class PurchaseOut(CamelModel):
    id: int
    type: PurchaseType
    quantity: int
    price: Decimal
    supplier: str
    notes: Optional[str] = None
    date: datetime


# ---------------------------------------------------------------------------
# Expenses
# ---------------------------------------------------------------------------
class ExpenseCreate(CamelModel):
    category: ExpenseCategory
    description: str = Field(..., min_length=1)
    amount: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)


class ExpenseOut(CamelModel):
    id: int
    category: ExpenseCategory
    description: str
    amount: Decimal
    date: datetime


# ---------------------------------------------------------------------------
# Activities
# ---------------------------------------------------------------------------
class ActivityCreate(CamelModel):
    type: ActivityType
    coop_number: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    scheduled_date: datetime
    completed: bool = False
    recurring: bool = False


class ActivityUpdate(CamelModel):
    type: Optional[ActivityType] = None
    coop_number: Optional[int] = Field(None, ge=1)
    description: Optional[str] = None
    scheduled_date: Optional[datetime] = None
    completed: Optional[bool] = None
    recurring: Optional[bool] = None


class ActivityOut(CamelModel):
    id: int
    type: ActivityType
    coop_number: Optional[int] = None
    description: Optional[str] = None
    scheduled_date: datetime
    completed: bool
    recurring: bool


# ---------------------------------------------------------------------------
# Invoices
# ---------------------------------------------------------------------------
class InvoiceCreate(CamelModel):
    client_name: str = Field(..., min_length=1)
    client_phone: Optional[str] = None
    concept: str = Field(..., min_length=1)
    quantity: int = Field(..., gt=0)
    pounds: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    price_per_pound: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    status: InvoiceStatus = InvoiceStatus.PAID


class InvoiceUpdate(CamelModel):
    """Partial update; number and total are derived and cannot be set."""
    client_name: Optional[str] = Field(None, min_length=1)
    client_phone: Optional[str] = None
    concept: Optional[str] = Field(None, min_length=1)
    quantity: Optional[int] = Field(None, gt=0)
    pounds: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    price_per_pound: Optional[Decimal] = Field(None, ge=0, max_digits=10, decimal_places=2)
    status: Optional[InvoiceStatus] = None


class InvoiceOut(CamelModel):
    id: int
    invoice_number: str
    client_name: str
    client_phone: Optional[str] = None
    concept: str
    quantity: int
    pounds: Decimal
    price_per_pound: Decimal
    total: Decimal
    status: InvoiceStatus
    date: datetime


# ---------------------------------------------------------------------------
# Mortalities
# ---------------------------------------------------------------------------
class MortalityCreate(CamelModel):
    coop_number: int = Field(..., ge=1)
    quantity: int = Field(..., gt=0)
    cause: MortalityCause
    description: Optional[str] = None


class MortalityOut(CamelModel):
    id: int
    coop_number: int
    quantity: int
    cause: MortalityCause
    description: Optional[str] = None
    date: datetime


# ---------------------------------------------------------------------------
# Dashboard
# ---------------------------------------------------------------------------
class CoopAge(CamelModel):
    number: int
    quantity: int
    age_in_days: int
    age_category: AgeCategory


class DashboardOut(CamelModel):
    total_chickens: int
    coops: List[CoopAge]
    pending_activities: int
    chickens_sold: int
    sales_total: Decimal
    pending_sales_total: Decimal
    expenses_total: Decimal
    purchases_total: Decimal
    mortality_total: int


class Message(BaseModel):
    message: str


class WhatsAppShare(CamelModel):
    """Receipt text for an invoice and the ``wa.me`` link that sends it."""
    message: str
    url: str
