"""
api.purchases
=============

Purchase endpoints.  Posting a ``chicken`` purchase rotates the coops.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from .deps import Store, get_store
from .schemas import PurchaseCreate, PurchaseOut

router = APIRouter(prefix="/api/purchases", tags=["purchases"])

logger = logging.getLogger(__name__)


@router.get("", response_model=List[PurchaseOut])
def list_purchases(store: Store = Depends(get_store)):
    return store.get_purchases()


@router.post("", response_model=PurchaseOut)
def create_purchase(body: PurchaseCreate, store: Store = Depends(get_store)):
    purchase = store.create_purchase(**body.model_dump())
    logger.info("purchase %d: %d x %s from %s", purchase.id, purchase.quantity, purchase.type, purchase.supplier)
    return purchase
