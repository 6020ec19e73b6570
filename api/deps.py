"""
api.deps
========

FastAPI dependency providers.

`get_store` returns one shared store for the life of the process: the
SQLite‑backed **DBFarmStore** by default, or the in‑memory **FarmStore**
seeded with the demo population when ``POLLITO_STORAGE=memory``.
Tests swap it through ``app.dependency_overrides``.
"""

import logging
from functools import lru_cache
from typing import Union

from pollito.farm import FarmStore, sample_coops
from pollito.farm_db import DBFarmStore
from pollito.settings import STORAGE_BACKEND

logger = logging.getLogger(__name__)

Store = Union[FarmStore, DBFarmStore]


@lru_cache
def get_store() -> Store:
    """Singleton store (persists across requests)."""
    if STORAGE_BACKEND == "memory":
        logger.info("using in-memory store with demo coops")
        return FarmStore(sample_coops())
    logger.info("using SQLite store")
    return DBFarmStore()
