"""
api.dashboard
=============

Headline figures shown on the dashboard landing page.
"""

from fastapi import APIRouter, Depends

from pollito.dashboard import summarize
from .deps import Store, get_store
from .schemas import DashboardOut

router = APIRouter(prefix="/api/dashboard", tags=["dashboard"])


@router.get("", response_model=DashboardOut)
def dashboard(store: Store = Depends(get_store)):
    return summarize(store)
