"""
api.expenses
============
"""

from typing import List

from fastapi import APIRouter, Depends

from .deps import Store, get_store
from .schemas import ExpenseCreate, ExpenseOut

router = APIRouter(prefix="/api/expenses", tags=["expenses"])


@router.get("", response_model=List[ExpenseOut])
def list_expenses(store: Store = Depends(get_store)):
    return store.get_expenses()


@router.post("", response_model=ExpenseOut)
def create_expense(body: ExpenseCreate, store: Store = Depends(get_store)):
    return store.create_expense(**body.model_dump())
