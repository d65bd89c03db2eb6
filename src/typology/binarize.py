"""Binarizer: labeled observations to a wide 0/1 indicator table.

Every distinct label becomes a column; each entity gets 1 in the columns of
the labels it carries and 0 elsewhere. Within a parameter exactly one label
column is 1 per entity; an entity carrying two labels for one parameter is
an upstream data defect and raises :class:`IncompleteEntityError`.

Column order is deterministic: parameters in declared order, then labels in
first-seen order within each parameter.

Usage::

    from typology.binarize import binarize

    table = binarize(labeled, parameters=["81A", "87A"])
    table.write_csv("data/processed/indicators.csv")
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import polars as pl

from typology.errors import IncompleteEntityError, UnknownParameterError

logger = logging.getLogger(__name__)

ENTITY_COL = "entity_id"
# Names the indicator and intersection tables use for their own columns.
RESERVED_COLUMNS = (ENTITY_COL, "count")


def parameter_label_map(
    labeled: pl.DataFrame,
    parameters: Sequence[str] | None = None,
) -> dict[str, list[str]]:
    """Return ``{parameter_id: [labels]}`` in indicator column order.

    Raises
    ------
    UnknownParameterError
        If *parameters* is given and a label's parameter is not in it.
    ValueError
        If one label string belongs to more than one parameter.
    """
    pairs = labeled.select("parameter_id", "label").unique(maintain_order=True)

    seen_params = pairs["parameter_id"].unique(maintain_order=True).to_list()
    if parameters is None:
        order = seen_params
    else:
        order = list(parameters)
        for parameter_id in seen_params:
            if parameter_id not in order:
                raise UnknownParameterError(parameter_id)

    shared = pairs.filter(pl.col("label").is_duplicated())
    if shared.height > 0:
        raise ValueError(
            f"Labels shared across parameters would collide as columns: "
            f"{shared.rows()}. Namespace them per parameter."
        )

    mapping: dict[str, list[str]] = {p: [] for p in order}
    for parameter_id, label in pairs.iter_rows():
        mapping[parameter_id].append(label)
    return mapping


def label_columns(table: pl.DataFrame) -> list[str]:
    """Return the indicator columns of *table* (everything but ``entity_id``)."""
    return [c for c in table.columns if c != ENTITY_COL]


def _check_exclusive(labeled: pl.DataFrame) -> None:
    conflicts = (
        labeled.group_by(["entity_id", "parameter_id"], maintain_order=True)
        .agg(pl.col("label").unique(maintain_order=True).alias("labels"))
        .filter(pl.col("labels").list.len() > 1)
    )
    if conflicts.height > 0:
        row = conflicts.row(0, named=True)
        logger.error(
            "%d entity/parameter pairs have more than one label", conflicts.height
        )
        raise IncompleteEntityError(row["entity_id"], row["parameter_id"], row["labels"])


def binarize(
    labeled: pl.DataFrame,
    parameters: Sequence[str] | None = None,
) -> pl.DataFrame:
    """Pivot labeled observations into a one-row-per-entity indicator table.

    Parameters
    ----------
    labeled : pl.DataFrame
        ``entity_id``, ``parameter_id``, ``label`` (output of ``recode``).
    parameters : Sequence[str], optional
        Declared parameter order for the columns. Defaults to first-seen order.

    Returns
    -------
    pl.DataFrame
        ``entity_id`` followed by one Int8 column per label, rows in entity
        first-seen order.

    Raises
    ------
    IncompleteEntityError
        If an entity has more than one label for a single parameter.
    UnknownParameterError
        If *parameters* is given and does not cover every labeled parameter.
    ValueError
        If a label collides with another parameter's label or with a
        reserved column name (``entity_id``, ``count``).
    """
    if labeled.height == 0:
        return pl.DataFrame(schema={ENTITY_COL: pl.Utf8})

    _check_exclusive(labeled)
    mapping = parameter_label_map(labeled, parameters)
    columns = [label for labels in mapping.values() for label in labels]
    for reserved in RESERVED_COLUMNS:
        if reserved in columns:
            raise ValueError(f"Label '{reserved}' collides with a reserved column name")

    grouped = labeled.group_by(ENTITY_COL, maintain_order=True).agg(
        pl.col("label").alias("_labels")
    )
    table = grouped.select(
        pl.col(ENTITY_COL),
        *[
            pl.col("_labels").list.contains(pl.lit(label)).cast(pl.Int8).alias(label)
            for label in columns
        ],
    )

    logger.info(
        "Binarized %d entities into %d indicator columns", table.height, len(columns)
    )
    return table
