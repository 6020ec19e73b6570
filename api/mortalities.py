"""
api.mortalities
===============

Mortality reports.  Each report takes the dead birds out of its coop when
the coop holds enough of them.
"""

from typing import List

from fastapi import APIRouter, Depends

from .deps import Store, get_store
from .schemas import MortalityCreate, MortalityOut

router = APIRouter(prefix="/api/mortalities", tags=["mortalities"])


@router.get("", response_model=List[MortalityOut])
def list_mortalities(store: Store = Depends(get_store)):
    return store.get_mortalities()


@router.post("", response_model=MortalityOut)
def create_mortality(body: MortalityCreate, store: Store = Depends(get_store)):
    return store.create_mortality(**body.model_dump())
