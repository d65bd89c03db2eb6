"""Language metadata join.

LEFT JOINs language metadata (name, coordinates, family, genus) onto the
indicator table by ``entity_id`` for downstream display. The indicator row
count is preserved; languages without metadata keep null metadata columns.

Usage::

    from typology.loader import load_language_metadata
    from typology.merge import join_metadata

    result = join_metadata(table, load_language_metadata("data/raw/wals/languages.csv"))
    print(result.merge_rate)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

import polars as pl

from typology.binarize import ENTITY_COL

logger = logging.getLogger(__name__)


@dataclass
class MergeResult:
    """Container for the metadata join output.

    Attributes
    ----------
    df : pl.DataFrame
        Indicator table with metadata columns appended.
    initial_rows : int
        Row count of the input indicator table.
    final_rows : int
        Row count after the join (equals ``initial_rows``).
    merge_rate : float
        Fraction of entities matched in the metadata (0.0 to 1.0).
    warnings : list[str]
        Non-fatal issues encountered during merging.
    """

    df: pl.DataFrame
    initial_rows: int = 0
    final_rows: int = 0
    merge_rate: float = 0.0
    warnings: list[str] = field(default_factory=list)


def _calculate_merge_rate(df: pl.DataFrame, indicator_col: str) -> float:
    """Fraction of rows where *indicator_col* is non-null after a LEFT JOIN."""
    if indicator_col not in df.columns:
        return 0.0
    non_null = df.height - df[indicator_col].null_count()
    return non_null / df.height if df.height > 0 else 0.0


def join_metadata(table: pl.DataFrame, metadata: pl.DataFrame) -> MergeResult:
    """Append metadata columns to the indicator table.

    Parameters
    ----------
    table : pl.DataFrame
        Indicator table keyed by ``entity_id``.
    metadata : pl.DataFrame
        Metadata keyed by ``entity_id``.

    Returns
    -------
    MergeResult
        Joined table plus merge statistics.

    Raises
    ------
    ValueError
        If a metadata column name clashes with an indicator column, or the
        join changes the row count (duplicate metadata ids).
    """
    warnings: list[str] = []
    initial_rows = table.height

    clashes = [c for c in metadata.columns if c != ENTITY_COL and c in table.columns]
    if clashes:
        raise ValueError(
            f"Metadata columns clash with indicator columns: {clashes}"
        )

    marker = "_matched"
    right = metadata.with_columns(pl.lit(True).alias(marker))
    df = (
        table.with_row_index("_row")
        .join(right, on=ENTITY_COL, how="left")
        .sort("_row")
        .drop("_row")
    )

    if df.height != initial_rows:
        raise ValueError(
            f"Row count changed after metadata join: {initial_rows} -> {df.height}. "
            "Metadata has duplicate entity ids."
        )

    merge_rate = _calculate_merge_rate(df, marker)
    unmatched = df[marker].null_count()
    df = df.drop(marker)

    if unmatched > 0:
        msg = f"{unmatched} entities have no metadata"
        logger.warning(msg)
        warnings.append(msg)

    logger.info("Metadata merge rate: %.2f%%", merge_rate * 100)

    return MergeResult(
        df=df,
        initial_rows=initial_rows,
        final_rows=df.height,
        merge_rate=merge_rate,
        warnings=warnings,
    )
