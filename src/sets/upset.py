"""Upset chart rendering for aggregated set intersections.

Converts :class:`~sets.aggregate.IntersectionCount` records into the
boolean-MultiIndex series that ``upsetplot`` consumes and renders it with
the shared publication style. Counting happens in :mod:`sets.aggregate`;
this module only draws.
"""

from __future__ import annotations

import logging
import warnings
from collections.abc import Sequence
from pathlib import Path

import matplotlib

matplotlib.use("Agg")  # Non-interactive backend
import matplotlib.pyplot as plt  # noqa: E402
import pandas as pd  # noqa: E402
from upsetplot import UpSet  # noqa: E402

from plotting import PUB_STYLE, SET_FACECOLOR, save_dual_format  # noqa: E402
from sets.aggregate import IntersectionCount  # noqa: E402

logger = logging.getLogger(__name__)


def to_upset_series(
    counts: Sequence[IntersectionCount],
    sets: Sequence[str],
) -> pd.Series:
    """Build the upsetplot input: counts indexed by one boolean level per set."""
    sets = list(sets)
    index = pd.MultiIndex.from_tuples(
        [tuple(s in c.combination for s in sets) for c in counts],
        names=sets,
    )
    return pd.Series([c.count for c in counts], index=index, name="count")


def plot_upset(
    counts: Sequence[IntersectionCount],
    sets: Sequence[str],
    path_stem: str | Path,
    title: str | None = None,
    min_subset_size: int = 0,
) -> list[Path]:
    """Render an upset chart and save it as PNG and PDF.

    Intersections are ordered by size; sets keep the caller's order.

    Returns
    -------
    list[Path]
        Paths of the saved PNG and PDF files.

    Raises
    ------
    ValueError
        If there are no intersections to draw.
    """
    if not counts or not sets:
        raise ValueError("No intersections to plot")

    series = to_upset_series(counts, sets)

    # upsetplot triggers FutureWarnings from its own pandas usage
    with warnings.catch_warnings(), matplotlib.rc_context(PUB_STYLE):
        warnings.filterwarnings("ignore", category=FutureWarning, module="upsetplot")
        fig = plt.figure(figsize=(10, 6))
        upset = UpSet(
            series,
            sort_by="cardinality",
            sort_categories_by="input",
            show_counts=True,
            min_subset_size=min_subset_size,
            facecolor=SET_FACECOLOR,
        )
        axes = upset.plot(fig=fig)
        axes["intersections"].set_ylabel("Languages")
        axes["intersections"].grid(axis="y", color="lightgrey", linestyle="--", alpha=0.5)
        axes["intersections"].set_axisbelow(True)
        axes["totals"].set_xlabel("Total")
        if title:
            fig.suptitle(title)

        paths = save_dual_format(fig, path_stem)

    logger.info("Saved upset chart with %d intersections to %s", len(counts), path_stem)
    return paths
