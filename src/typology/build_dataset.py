#!/usr/bin/env python3
"""Build the word-order indicator table and set-intersection counts.

Loads WALS observations for the chosen parameters, drops languages with
two dominant word orders (81B), recodes codes to labels, binarizes to one
indicator column per label, joins language metadata, aggregates the
intersections of the chosen sets and renders an upset chart.

Usage::

    uv run python src/typology/build_dataset.py

Output::

    data/processed/indicators.csv
    data/processed/intersections.csv
    data/exports/figures/upset_word_order.{png,pdf}
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Sequence
from dataclasses import dataclass, field
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import polars as pl  # noqa: E402

from sets.aggregate import (  # noqa: E402
    IntersectionCount,
    aggregate,
    intersections_to_frame,
    set_sizes,
)
from typology.binarize import binarize  # noqa: E402
from typology.download import WALS_TABLES, download_wals  # noqa: E402
from typology.errors import DataSourceError  # noqa: E402
from typology.loader import (  # noqa: E402
    exclude_entities_with,
    load_code_table,
    load_language_metadata,
    load_observations,
)
from typology.merge import join_metadata  # noqa: E402
from typology.recode import recode  # noqa: E402
from typology.wals import (  # noqa: E402
    CODE_LABELS,
    DEFAULT_PARAMETERS,
    DEFAULT_SETS,
    DUAL_ORDER_PARAMETER,
    missing_label_for,
)
from plotting import LABEL_NAMES  # noqa: E402
from utils import find_project_root  # noqa: E402

logger = logging.getLogger(__name__)


@dataclass
class BuildResult:
    """Container for a pipeline run.

    Attributes
    ----------
    indicators : pl.DataFrame
        Indicator table with metadata columns.
    intersections : list[IntersectionCount]
        Aggregated intersections over the chosen sets.
    set_sizes : dict[str, int]
        Total membership per chosen set.
    paths : list[Path]
        Every file written by the run.
    warnings : list[str]
        Non-fatal issues collected from each stage.
    """

    indicators: pl.DataFrame
    intersections: list[IntersectionCount] = field(default_factory=list)
    set_sizes: dict[str, int] = field(default_factory=dict)
    paths: list[Path] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def build_dataset(
    source_dir: str | Path,
    output_dir: Path,
    parameters: Sequence[str] = DEFAULT_PARAMETERS,
    sets: Sequence[str] = DEFAULT_SETS,
    exclude_parameter: str | None = DUAL_ORDER_PARAMETER,
    figures_dir: Path | None = None,
    timeout: float = 60,
) -> BuildResult:
    """Run the full pipeline against a directory (or base URL) of CLDF tables.

    Parameters
    ----------
    source_dir : str or Path
        Directory or base URL holding ``values.csv``, ``codes.csv`` and
        ``languages.csv``.
    output_dir : Path
        Where ``indicators.csv`` and ``intersections.csv`` are written.
    parameters : Sequence[str]
        Parameters to binarize, in column order.
    sets : Sequence[str]
        Indicator columns to aggregate, in display order.
    exclude_parameter : str, optional
        Entities with any observation of this parameter are dropped.
    figures_dir : Path, optional
        When given, the upset chart is rendered there.
    timeout : float
        Network timeout for URL sources.

    Raises
    ------
    DataSourceError
        If any source table cannot be loaded.
    """
    source = str(source_dir).rstrip("/")
    parameters = list(parameters)
    warnings: list[str] = []

    # Step 1: Load and filter observations
    wanted = parameters + ([exclude_parameter] if exclude_parameter else [])
    obs_result = load_observations(f"{source}/values.csv", wanted, timeout=timeout)
    warnings.extend(obs_result.warnings)
    observations = obs_result.df
    if exclude_parameter:
        observations = exclude_entities_with(observations, exclude_parameter)

    # Step 2: Recode with the shipped labels, falling back to codes.csv names
    codes = load_code_table(f"{source}/codes.csv", parameters, timeout=timeout)
    overrides = pl.DataFrame(
        {
            "parameter_id": [p for p, _ in CODE_LABELS],
            "code": [c for _, c in CODE_LABELS],
            "label": list(CODE_LABELS.values()),
        }
    )
    code_table = pl.concat([overrides, codes.select(overrides.columns)]).unique(
        subset=["parameter_id", "code"], keep="first", maintain_order=True
    )
    missing_labels = {p: missing_label_for(p) for p in parameters}
    labeled = recode(observations, code_table, missing_labels)

    # Step 3: Binarize
    table = binarize(labeled, parameters)

    # Step 4: Join metadata
    metadata = load_language_metadata(f"{source}/languages.csv", timeout=timeout)
    merge_result = join_metadata(table, metadata)
    warnings.extend(merge_result.warnings)

    # Step 5: Aggregate
    chosen = [s for s in sets if s in table.columns]
    for s in sets:
        if s not in table.columns:
            msg = f"Set {s} has no members; skipped"
            logger.warning(msg)
            warnings.append(msg)
    counts = aggregate(table, chosen)
    sizes = set_sizes(table, chosen)

    # Step 6: Write artifacts
    output_dir.mkdir(parents=True, exist_ok=True)
    indicators_path = output_dir / "indicators.csv"
    intersections_path = output_dir / "intersections.csv"
    merge_result.df.write_csv(indicators_path)
    intersections_to_frame(counts, chosen).write_csv(intersections_path)
    paths = [indicators_path, intersections_path]

    # Step 7: Render
    if figures_dir is not None and counts:
        from sets.upset import plot_upset

        paths.extend(
            plot_upset(
                counts,
                chosen,
                figures_dir / "upset_word_order",
                title="Word order and adjective order (WALS 81A x 87A)",
            )
        )

    return BuildResult(
        indicators=merge_result.df,
        intersections=counts,
        set_sizes=sizes,
        paths=paths,
        warnings=warnings,
    )


def main() -> None:
    """Download (if needed) and run the pipeline on the WALS tables."""
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    root = find_project_root()
    raw_dir = root / "data" / "raw" / "wals"

    logger.info("=" * 60)
    logger.info("Building word-order set dataset")
    logger.info("=" * 60)

    try:
        if not all((raw_dir / f"{t}.csv").exists() for t in WALS_TABLES):
            download_wals(raw_dir)
        result = build_dataset(
            raw_dir,
            root / "data" / "processed",
            figures_dir=root / "data" / "exports" / "figures",
        )
    except DataSourceError as e:
        logger.error("%s", e)
        sys.exit(1)

    logger.info("=" * 60)
    logger.info("DATASET BUILD COMPLETE")
    logger.info("=" * 60)
    logger.info("  Languages: %d", result.indicators.height)
    logger.info("  Intersections: %d", len(result.intersections))
    logger.info("  Set sizes:")
    for name, size in result.set_sizes.items():
        logger.info("    %s (%s): %d", name, LABEL_NAMES.get(name, name), size)
    logger.info("  Top intersections:")
    for c in result.intersections[:10]:
        logger.info("    %-20s %d", " & ".join(c.combination), c.count)
    if result.warnings:
        logger.info("  Warnings:")
        for w in result.warnings:
            logger.info("    %s", w)
    for p in result.paths:
        logger.info("  Wrote %s", p)


if __name__ == "__main__":
    main()
