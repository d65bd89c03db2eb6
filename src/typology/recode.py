"""Categorical recoder: raw parameter codes to display labels.

Maps each observation's ``(parameter_id, value)`` to a label through a code
table. Null or unmapped values, and entities with no observation for a
declared parameter, receive that parameter's reserved missing label
(e.g. ``woNA``), so every entity ends up with exactly one label per
declared parameter (unless the source has multi-valued entries).

Usage::

    from typology.recode import recode
    from typology.wals import CODE_LABELS, MISSING_LABELS

    labeled = recode(observations, CODE_LABELS, MISSING_LABELS)
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

import polars as pl

from typology.errors import UnknownParameterError
from typology.loader import code_table_from_mapping
from utils import normalize_id

logger = logging.getLogger(__name__)

LABELED_SCHEMA = {"entity_id": pl.Utf8, "parameter_id": pl.Utf8, "label": pl.Utf8}


def _as_code_frame(code_table: pl.DataFrame | Mapping[tuple[str, str], str]) -> pl.DataFrame:
    if not isinstance(code_table, pl.DataFrame):
        code_table = code_table_from_mapping(code_table)
    return code_table.select(
        normalize_id(pl.col("parameter_id")).alias("parameter_id"),
        normalize_id(pl.col("code")).alias("value"),
        pl.col("label").cast(pl.Utf8),
    ).unique(subset=["parameter_id", "value"], keep="first", maintain_order=True)


def recode(
    observations: pl.DataFrame,
    code_table: pl.DataFrame | Mapping[tuple[str, str], str],
    missing_labels: Mapping[str, str],
) -> pl.DataFrame:
    """Resolve observation codes to labels.

    Parameters
    ----------
    observations : pl.DataFrame
        Long table with ``entity_id``, ``parameter_id``, ``value``.
    code_table : pl.DataFrame or Mapping
        ``(parameter_id, code, label)`` frame, or a
        ``(parameter_id, code) -> label`` mapping.
    missing_labels : Mapping[str, str]
        Reserved label per parameter for null, unmapped or absent values.
        Its keys, in order, are the declared parameters.

    Returns
    -------
    pl.DataFrame
        ``entity_id``, ``parameter_id``, ``label``; one row per observation
        plus one missing-label row per (entity, declared parameter) pair
        without an observation. Ordered by entity first appearance, then
        declared parameter order.

    Raises
    ------
    UnknownParameterError
        If an observation's parameter has no entry in *missing_labels*.
    """
    declared = list(missing_labels)
    for parameter_id in observations["parameter_id"].unique(maintain_order=True).to_list():
        if parameter_id not in missing_labels:
            raise UnknownParameterError(parameter_id)

    if observations.height == 0:
        return pl.DataFrame(schema=LABELED_SCHEMA)

    obs = observations.select(
        pl.col("entity_id").cast(pl.Utf8),
        pl.col("parameter_id").cast(pl.Utf8),
        normalize_id(pl.col("value")).alias("value"),
    ).with_row_index("_obs_order")

    entities = obs.select("entity_id").unique(maintain_order=True).with_row_index("_entity_order")
    params = pl.DataFrame(
        {"parameter_id": declared, "missing_label": [missing_labels[p] for p in declared]},
        schema={"parameter_id": pl.Utf8, "missing_label": pl.Utf8},
    ).with_row_index("_param_order")

    # Every entity x declared parameter, so absent parameters get a row too.
    grid = entities.join(params, how="cross")

    labeled = (
        grid.join(obs, on=["entity_id", "parameter_id"], how="left")
        .join(_as_code_frame(code_table), on=["parameter_id", "value"], how="left")
        .with_columns(
            (pl.col("value").is_not_null() & pl.col("label").is_null()).alias("_unmapped")
        )
        .with_columns(pl.coalesce(pl.col("label"), pl.col("missing_label")).alias("label"))
        .sort(["_entity_order", "_param_order", "_obs_order"], nulls_last=True)
    )

    unmapped = labeled.filter(pl.col("_unmapped"))
    if unmapped.height > 0:
        examples = (
            unmapped.select("parameter_id", "value").unique(maintain_order=True).head(5).rows()
        )
        logger.warning(
            "%d non-null codes have no label and were recoded as missing. Examples: %s",
            unmapped.height,
            examples,
        )

    n_missing = labeled.filter(
        (pl.col("label") == pl.col("missing_label")) & ~pl.col("_unmapped")
    ).height
    logger.info(
        "Recoded %d observations for %d entities (%d missing, %d unmapped)",
        obs.height,
        entities.height,
        n_missing,
        unmapped.height,
    )

    return labeled.select(list(LABELED_SCHEMA))
