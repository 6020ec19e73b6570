"""
api.activities
==============

Scheduled chores (cleaning, feeding, vaccination, ...).  An activity
without ``coopNumber`` applies to every coop.
"""

from typing import List

from fastapi import APIRouter, Depends

from .deps import Store, get_store
from .schemas import ActivityCreate, ActivityOut, ActivityUpdate

router = APIRouter(prefix="/api/activities", tags=["activities"])


@router.get("", response_model=List[ActivityOut])
def list_activities(store: Store = Depends(get_store)):
    """Activities, latest scheduled date first."""
    return store.get_activities()


@router.post("", response_model=ActivityOut)
def create_activity(body: ActivityCreate, store: Store = Depends(get_store)):
    return store.create_activity(**body.model_dump())


@router.put("/{activity_id}", response_model=ActivityOut)
def update_activity(activity_id: int, body: ActivityUpdate, store: Store = Depends(get_store)):
    return store.update_activity(activity_id, **body.model_dump(exclude_unset=True))
