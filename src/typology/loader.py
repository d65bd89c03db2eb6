"""Loaders for WALS observation, code and language tables.

Reads CLDF-style CSVs (``values.csv``, ``codes.csv``, ``languages.csv``)
or plain tables that already use the pipeline's column names, from a URL
or a local path, and returns polars DataFrames with normalized string
identifiers.

Usage::

    from typology.loader import load_observations, exclude_entities_with

    result = load_observations("data/raw/wals/values.csv", parameters=["81A", "87A", "81B"])
    obs = exclude_entities_with(result.df, "81B")
    print(result.stats)
"""

from __future__ import annotations

import io
import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from pathlib import Path

import polars as pl

from typology.download import DEFAULT_TIMEOUT, fetch_table
from typology.errors import DataSourceError
from utils import normalize_id

logger = logging.getLogger(__name__)

# Target column -> accepted source column names (plain first, then CLDF).
_OBSERVATION_COLUMNS: dict[str, tuple[str, ...]] = {
    "entity_id": ("entity_id", "Language_ID"),
    "parameter_id": ("parameter_id", "Parameter_ID"),
    "value": ("value", "Value"),
}

_CODE_COLUMNS: dict[str, tuple[str, ...]] = {
    "parameter_id": ("parameter_id", "Parameter_ID"),
    "code": ("code", "Number"),
    "label": ("label", "Name"),
}

_METADATA_COLUMNS: dict[str, tuple[str, ...]] = {
    "entity_id": ("entity_id", "ID"),
    "name": ("name", "Name"),
    "latitude": ("latitude", "Latitude"),
    "longitude": ("longitude", "Longitude"),
    "family": ("family", "Family"),
    "genus": ("genus", "Genus"),
}


@dataclass
class ObservationResult:
    """Container for loaded observations.

    Attributes
    ----------
    df : pl.DataFrame
        Long table with ``entity_id``, ``parameter_id``, ``value`` (Utf8).
    stats : dict
        Summary statistics (total_rows, entities, per_parameter).
    warnings : list[str]
        Non-fatal issues, such as requested parameters absent from the source.
    """

    df: pl.DataFrame
    stats: dict = field(default_factory=dict)
    warnings: list[str] = field(default_factory=list)


def read_csv_table(
    source: str | Path,
    columns: Mapping[str, Sequence[str]],
    timeout: float = DEFAULT_TIMEOUT,
) -> pl.DataFrame:
    """Fetch a CSV and select/rename the requested columns.

    All columns are read as strings; callers cast where needed.

    Parameters
    ----------
    source : str or Path
        URL or local path of the CSV.
    columns : Mapping[str, Sequence[str]]
        Output column name -> accepted input column names, tried in order.
    timeout : float, optional
        Network timeout in seconds.

    Returns
    -------
    pl.DataFrame
        DataFrame with exactly the keys of *columns*, in that order.

    Raises
    ------
    DataSourceError
        If the source cannot be fetched, is not valid CSV, or lacks a
        required column.
    """
    content = fetch_table(source, timeout=timeout)
    try:
        df = pl.read_csv(io.BytesIO(content), infer_schema_length=0)
    except pl.exceptions.PolarsError as e:
        raise DataSourceError(source, f"malformed CSV ({e})") from e

    selected: list[pl.Expr] = []
    for target, aliases in columns.items():
        found = next((a for a in aliases if a in df.columns), None)
        if found is None:
            raise DataSourceError(
                source,
                f"expected one of columns {list(aliases)} for '{target}'. "
                f"Available columns: {df.columns}",
            )
        selected.append(pl.col(found).alias(target))

    return df.select(selected)


def load_observations(
    source: str | Path,
    parameters: Sequence[str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> ObservationResult:
    """Load (entity, parameter, value) observations, optionally filtered.

    Parameters
    ----------
    source : str or Path
        CLDF ``values.csv`` or a plain ``entity_id,parameter_id,value`` table.
    parameters : Sequence[str], optional
        Parameter identifiers to keep. ``None`` keeps every parameter.
    timeout : float, optional
        Network timeout in seconds.

    Returns
    -------
    ObservationResult
        Filtered observations with summary stats.

    Raises
    ------
    DataSourceError
        If the source cannot be loaded or parsed.
    """
    warnings: list[str] = []

    df = read_csv_table(source, _OBSERVATION_COLUMNS, timeout=timeout)
    df = df.with_columns(
        normalize_id(pl.col("entity_id")).alias("entity_id"),
        normalize_id(pl.col("parameter_id")).alias("parameter_id"),
        normalize_id(pl.col("value")).alias("value"),
    )

    bad_ids = df.filter(pl.col("entity_id").is_null() | pl.col("parameter_id").is_null())
    if bad_ids.height > 0:
        raise DataSourceError(
            source, f"{bad_ids.height} rows have an empty entity or parameter id"
        )

    total_rows = df.height
    if parameters is not None:
        df = df.filter(pl.col("parameter_id").is_in(list(parameters)))
        present = set(df["parameter_id"].unique().to_list())
        for parameter_id in parameters:
            if parameter_id not in present:
                msg = f"Parameter {parameter_id} not found in {source}"
                logger.warning(msg)
                warnings.append(msg)

    per_parameter = {
        row["parameter_id"]: row["len"]
        for row in df.group_by("parameter_id", maintain_order=True)
        .agg(pl.len().alias("len"))
        .to_dicts()
    }
    stats = {
        "source_rows": total_rows,
        "total_rows": df.height,
        "entities": df["entity_id"].n_unique(),
        "per_parameter": per_parameter,
    }

    logger.info(
        "Loaded %d observations for %d entities (%d source rows)",
        stats["total_rows"],
        stats["entities"],
        total_rows,
    )

    return ObservationResult(df=df, stats=stats, warnings=warnings)


def exclude_entities_with(observations: pl.DataFrame, parameter_id: str) -> pl.DataFrame:
    """Drop every entity that has any observation for *parameter_id*.

    Used for 81B (two dominant orders): those languages would carry two
    word-order labels, so they are removed along with the 81B rows.

    Parameters
    ----------
    observations : pl.DataFrame
        Long observation table.
    parameter_id : str
        Parameter marking entities to exclude.

    Returns
    -------
    pl.DataFrame
        New DataFrame without the flagged entities or *parameter_id* rows.
    """
    flagged = (
        observations.filter(pl.col("parameter_id") == parameter_id)
        .select("entity_id")
        .unique()
    )
    result = observations.join(flagged, on="entity_id", how="anti").filter(
        pl.col("parameter_id") != parameter_id
    )
    logger.info(
        "Excluded %d entities with parameter %s",
        flagged.height,
        parameter_id,
    )
    return result


def load_code_table(
    source: str | Path,
    parameters: Sequence[str] | None = None,
    timeout: float = DEFAULT_TIMEOUT,
) -> pl.DataFrame:
    """Load a ``(parameter_id, code, label)`` code table.

    Accepts CLDF ``codes.csv`` (``Parameter_ID``, ``Number``, ``Name``).

    Raises
    ------
    DataSourceError
        If the source cannot be loaded, or a (parameter, code) pair is
        duplicated.
    """
    df = read_csv_table(source, _CODE_COLUMNS, timeout=timeout)
    df = df.with_columns(
        normalize_id(pl.col("parameter_id")).alias("parameter_id"),
        normalize_id(pl.col("code")).alias("code"),
    )
    if parameters is not None:
        df = df.filter(pl.col("parameter_id").is_in(list(parameters)))

    dupes = df.filter(pl.struct("parameter_id", "code").is_duplicated())
    if dupes.height > 0:
        examples = dupes.head(5).rows()
        raise DataSourceError(
            source, f"{dupes.height} duplicate (parameter_id, code) rows. Examples: {examples}"
        )
    return df


def code_table_from_mapping(mapping: Mapping[tuple[str, str], str]) -> pl.DataFrame:
    """Build a code table DataFrame from a ``(parameter_id, code) -> label`` mapping."""
    return pl.DataFrame(
        {
            "parameter_id": [str(p) for p, _ in mapping],
            "code": [str(c) for _, c in mapping],
            "label": list(mapping.values()),
        },
        schema={"parameter_id": pl.Utf8, "code": pl.Utf8, "label": pl.Utf8},
    )


def load_language_metadata(
    source: str | Path,
    timeout: float = DEFAULT_TIMEOUT,
) -> pl.DataFrame:
    """Load per-language metadata (name, coordinates, family, genus).

    Accepts CLDF ``languages.csv``. Coordinates are cast to Float64 with
    blanks as null.

    Raises
    ------
    DataSourceError
        If the source cannot be loaded, coordinates are not numeric, or
        language ids are duplicated.
    """
    df = read_csv_table(source, _METADATA_COLUMNS, timeout=timeout)
    try:
        df = df.with_columns(
            normalize_id(pl.col("entity_id")).alias("entity_id"),
            normalize_id(pl.col("latitude")).cast(pl.Float64).alias("latitude"),
            normalize_id(pl.col("longitude")).cast(pl.Float64).alias("longitude"),
        )
    except pl.exceptions.PolarsError as e:
        raise DataSourceError(source, f"non-numeric coordinates ({e})") from e

    n_unique = df["entity_id"].n_unique()
    if n_unique != df.height:
        raise DataSourceError(
            source,
            f"{df.height - n_unique} duplicate language ids found",
        )

    logger.info("Loaded metadata for %d languages", df.height)
    return df
