"""
Pollito
=======

Backend for a small poultry farm dashboard: coop inventory, purchases,
expenses, scheduled activities, sales invoices and mortality records.

Import structure
----------------
`import pollito` is intentionally cheap: only the stdlib-based
sub‑modules are imported by default.  Heavy dependencies such as
*sqlmodel* and *matplotlib* are only imported when you explicitly access
:pymod:`pollito.farm_db` or :pymod:`pollito.viz`.

Sub‑modules
~~~~~~~~~~~
- :pymod:`pollito.models`      – record dataclasses + enums
- :pymod:`pollito.rotation`    – coop rotation and stock deduction rules
- :pymod:`pollito.invoicing`   – invoice numbers, totals and WhatsApp share links
- :pymod:`pollito.farm`        – ``FarmStore`` in‑memory store
- :pymod:`pollito.farm_db`     – ``DBFarmStore`` SQLite store
- :pymod:`pollito.dashboard`   – headline figures
- :pymod:`pollito.viz`         – coop occupancy chart

Quick start
-----------
>>> from pollito.farm import FarmStore, sample_coops
>>> store = FarmStore(sample_coops())
>>> _ = store.create_purchase("chicken", 500, "2500.00", "Granja Sur")
>>> [c.quantity for c in store.get_coops()]
[380, 420, 360, 480, 390, 370, 500]

"""

__all__ = [
    "models",
    "rotation",
    "invoicing",
    "farm",
    "farm_db",
    "dashboard",
    "viz",
]

__version__ = "0.1.0"
