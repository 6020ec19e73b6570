"""
pollito.rotation
================

Stock rules for the coop pipeline.

The coops form a fixed chain of growth stages.  New chicks enter the last
slot; each chicken purchase ages every batch forward by one slot, and the
batch in slot 1 leaves the inventory.  Sales and mortality reports take
birds out of a single coop through :pyfunc:`deduct_stock`.

Both helpers mutate :class:`pollito.models.Coop` objects **in‑place**;
persisting the changes is the store's job.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Tuple

from .models import Coop

logger = logging.getLogger(__name__)


def deduct_stock(coop: Coop, quantity: int) -> bool:
    """
    Take *quantity* birds out of *coop* if it holds at least that many.

    Returns ``True`` when the quantity changed.  Insufficient stock is not
    an error: the coop is left untouched and ``False`` is returned.

    Examples
    --------
    >>> c = Coop(1, 3, 420, date(2024, 11, 5))
    >>> deduct_stock(c, 50), c.quantity
    (True, 370)
    >>> deduct_stock(c, 1000), c.quantity
    (False, 370)
    """
    if quantity < 0 or coop.quantity < quantity:
        return False
    coop.quantity -= quantity
    return True


def rotate_coops(coops: Iterable[Coop], new_quantity: int, today: date, coop_count: int) -> List[Coop]:
    """
    Shift every batch one slot towards slot 1 and put the new batch in the
    last slot (``coop_count``).

    Slot *i* inherits the quantity and entry date that slot *i+1* held
    before the rotation started, for i = 1..coop_count-1.  The values are
    read from a snapshot taken before any mutation, so updating the slots
    in order never reads an already overwritten neighbour.  A missing
    neighbour turns that step into a no‑op.

    Returns the coops that were changed, in slot order.
    """
    by_number: Dict[int, Coop] = {c.number: c for c in coops}
    snapshot: Dict[int, Tuple[int, date]] = {
        n: (c.quantity, c.entry_date) for n, c in by_number.items()
    }

    changed: List[Coop] = []
    for number in range(1, coop_count):
        coop = by_number.get(number)
        if coop is None or number + 1 not in snapshot:
            logger.warning("rotation: coop %d or its successor is missing, slot left as is", number)
            continue
        coop.quantity, coop.entry_date = snapshot[number + 1]
        changed.append(coop)

    last = by_number.get(coop_count)
    if last is None:
        logger.warning("rotation: last coop %d is missing, new batch not placed", coop_count)
    else:
        last.quantity = new_quantity
        last.entry_date = today
        changed.append(last)

    dropped = snapshot.get(1, (0, None))[0]
    logger.info("rotated %d coops: %d birds left slot 1, %d entered slot %d",
                len(changed), dropped, new_quantity, coop_count)
    return changed
