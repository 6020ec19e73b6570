"""
pollito.errors
==============

The two failure kinds the store raises.  Insufficient stock is *not* one
of them: stock rules skip the deduction and log a warning instead.
"""

from __future__ import annotations


class NotFoundError(KeyError):
    """An update/delete/get referenced an id that does not exist."""

    def __init__(self, kind: str, ident: int) -> None:
        super().__init__(ident)
        self.kind = kind
        self.ident = ident

    def __str__(self) -> str:
        return f"{self.kind} not found"


class ValidationFailure(ValueError):
    """Input rejected by a domain check (schema checks live in api.schemas)."""
