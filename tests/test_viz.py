"""
tests/test_viz.py
=================

Smoke test for the coop occupancy chart.
"""

from datetime import date

from pollito.viz import coop_occupancy


def test_coop_occupancy_writes_png(store, tmp_path):
    out = coop_occupancy(store, tmp_path / "coops.png", today=date(2024, 12, 1))
    assert out.exists()
    assert out.read_bytes()[:4] == b"\x89PNG"
