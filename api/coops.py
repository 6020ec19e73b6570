"""
api.coops
=========

Coop inventory endpoints.  Coops are never created or deleted over HTTP:
the store keeps exactly one coop per slot.
"""

from typing import List

from fastapi import APIRouter, Depends

from .deps import Store, get_store
from .schemas import CoopOut, CoopUpdate

router = APIRouter(prefix="/api/coops", tags=["coops"])


@router.get("", response_model=List[CoopOut])
def list_coops(store: Store = Depends(get_store)):
    """All coops ordered by slot number."""
    return store.get_coops()


@router.get("/{coop_id}", response_model=CoopOut)
def get_coop(coop_id: int, store: Store = Depends(get_store)):
    return store.get_coop(coop_id)


@router.put("/{coop_id}", response_model=CoopOut)
def update_coop(coop_id: int, body: CoopUpdate, store: Store = Depends(get_store)):
    """
    Overwrite quantity, entry date or status.  Sending the same body twice
    leaves the coop in the same state.
    """
    return store.update_coop(coop_id, **body.model_dump(exclude_unset=True))
