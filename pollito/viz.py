"""
pollito.viz
===========

Plotting helper used by the CLI demo and the dashboard screenshots.
Importing this module pulls in *matplotlib*, so :pymod:`pollito` does not
import it by default.

Outputs are PNGs written to the *images/* folder (auto‑created if
needed).  Filenames can be overridden via keyword argument.
"""
from __future__ import annotations

import os
from datetime import date
from pathlib import Path
from typing import Optional

import matplotlib

matplotlib.use("Agg")
import matplotlib.pyplot as plt  # noqa: E402

from .models import AgeCategory  # noqa: E402

# default output dir
_IMG_DIR = Path("images")

AGE_COLOURS = {
    AgeCategory.YOUNG: "#80b918",
    AgeCategory.MEDIUM: "#f4a261",
    AgeCategory.OLD: "#e76f51",
}


# ---------------------------------------------------------------------
# Bar chart of birds per coop, coloured by batch age
# ---------------------------------------------------------------------
def coop_occupancy(
    store,
    out_path: Optional[str | os.PathLike] = None,
    today: Optional[date] = None,
) -> Path:
    """
    Generate a bar chart of how many birds each coop holds.

    Parameters
    ----------
    store : FarmStore or DBFarmStore
        Any store exposing ``get_coops()``.
    out_path : str or Path, default='images/coop_occupancy.png'
        Where to save the PNG.
    today : datetime.date, optional
        Reference date for the age colouring.

    Returns
    -------
    pathlib.Path
        Final image path for convenience.
    """
    if out_path is None:
        _IMG_DIR.mkdir(exist_ok=True)
        out_path = _IMG_DIR / "coop_occupancy.png"
    today = today or date.today()
    coops = store.get_coops()

    labels = [f"Coop {c.number}" for c in coops]
    ys = [c.quantity for c in coops]
    colours = [AGE_COLOURS[c.age_category(today)] for c in coops]

    plt.figure()
    bars = plt.bar(labels, ys, color=colours, edgecolor="#333")
    # add counts on top of each bar
    for rect, cnt in zip(bars, ys):
        plt.text(rect.get_x() + rect.get_width() / 2,
                 cnt + 0.05,
                 str(cnt),
                 ha="center", va="bottom",
                 fontsize=8, color="#333")
    # subtle y‑axis grid for readability
    plt.grid(axis="y", linestyle=":", alpha=0.3)
    plt.title(f"Coop Occupancy – {sum(ys)} birds")
    plt.ylabel("Birds")
    plt.tight_layout()

    out_path = Path(out_path)
    plt.savefig(out_path, dpi=120, bbox_inches="tight")
    plt.close()
    return out_path


#
# ---------------------------------------------------------------------
# CLI demo:  python -m pollito.viz  [--memory]
# ---------------------------------------------------------------------
if __name__ == "__main__":
    import argparse

    parser = argparse.ArgumentParser(description="Generate coop_occupancy.png from the farm database.")
    parser.add_argument(
        "--memory",
        action="store_true",
        help="Plot the demo population instead of reading the SQLite database.",
    )
    args = parser.parse_args()

    if args.memory:
        from .farm import FarmStore, sample_coops
        store = FarmStore(sample_coops())
    else:
        from .farm_db import DBFarmStore
        store = DBFarmStore()

    out = coop_occupancy(store)
    print(f"coop_occupancy saved to {out}")
