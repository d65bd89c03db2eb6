"""Set-intersection aggregation over an indicator table.

Groups entities by their exact membership pattern across a chosen subset of
indicator columns and counts each pattern. This is the data an upset chart
(or an Euler/Venn renderer) draws: one bar per non-empty intersection.

Usage::

    from sets.aggregate import aggregate, intersections_to_frame

    counts = aggregate(table, ["SOV", "SVO", "ADJN", "NADJ"])
    intersections_to_frame(counts, ["SOV", "SVO", "ADJN", "NADJ"]).write_csv(path)
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass

import polars as pl

logger = logging.getLogger(__name__)

COUNT_COL = "count"


@dataclass(frozen=True)
class IntersectionCount:
    """Number of entities whose membership pattern is exactly *combination*.

    Attributes
    ----------
    combination : tuple[str, ...]
        Sets the entities belong to, in the caller's set order. Every other
        chosen set is implicitly excluded.
    count : int
        Number of matching entities.
    """

    combination: tuple[str, ...]
    count: int


def _validate_sets(table: pl.DataFrame, sets: Sequence[str]) -> list[str]:
    sets = list(sets)
    dupes = sorted({s for s in sets if sets.count(s) > 1})
    if dupes:
        raise ValueError(f"Duplicate set names: {dupes}")
    missing = [s for s in sets if s not in table.columns]
    if missing:
        raise ValueError(
            f"Sets not found in indicator table: {missing}. "
            f"Available columns: {table.columns}"
        )
    return sets


def aggregate(table: pl.DataFrame, sets: Sequence[str]) -> list[IntersectionCount]:
    """Count entities per exact membership pattern across *sets*.

    Rows belonging to none of the sets are excluded.

    Parameters
    ----------
    table : pl.DataFrame
        Indicator table (0/1 columns).
    sets : Sequence[str]
        Distinct indicator column names, in display order.

    Returns
    -------
    list[IntersectionCount]
        Ordered by count descending, then combination size ascending, then
        lexicographically by the members' positions in *sets*.

    Raises
    ------
    ValueError
        If *sets* has duplicates or names a column absent from *table*.
    """
    sets = _validate_sets(table, sets)
    if not sets:
        return []

    # Private name so a set called "count" does not collide.
    count_col = "_count"
    while count_col in sets:
        count_col = f"_{count_col}"

    grouped = (
        table.select([pl.col(s).cast(pl.Int8) for s in sets])
        .filter(pl.any_horizontal([pl.col(s) == 1 for s in sets]))
        .group_by(sets)
        .agg(pl.len().alias(count_col))
    )

    position = {s: i for i, s in enumerate(sets)}
    counts = [
        IntersectionCount(
            combination=tuple(s for s in sets if row[s] == 1),
            count=int(row[count_col]),
        )
        for row in grouped.iter_rows(named=True)
    ]
    counts.sort(
        key=lambda c: (
            -c.count,
            len(c.combination),
            tuple(position[s] for s in c.combination),
        )
    )

    logger.info(
        "Aggregated %d entities into %d intersections over %d sets",
        sum(c.count for c in counts),
        len(counts),
        len(sets),
    )
    return counts


def set_sizes(table: pl.DataFrame, sets: Sequence[str]) -> dict[str, int]:
    """Return the total membership of each set (the upset side bars)."""
    sets = _validate_sets(table, sets)
    if not sets:
        return {}
    totals = table.select([pl.col(s).cast(pl.Int64).sum() for s in sets]).row(0, named=True)
    return {s: int(totals[s] or 0) for s in sets}


def intersections_to_frame(
    counts: Sequence[IntersectionCount],
    sets: Sequence[str],
) -> pl.DataFrame:
    """Tabulate intersection counts: one Boolean column per set plus ``count``."""
    sets = list(sets)
    if COUNT_COL in sets:
        raise ValueError(f"Set name '{COUNT_COL}' collides with the count column")
    schema = {s: pl.Boolean for s in sets} | {COUNT_COL: pl.Int64}
    rows = [
        {**{s: s in c.combination for s in sets}, COUNT_COL: c.count}
        for c in counts
    ]
    return pl.DataFrame(rows, schema=schema)
