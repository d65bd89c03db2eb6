"""Shared utility functions for the word-order set pipeline.

Provides project root discovery and identifier normalization used across
loaders, the recoder and tests.
"""

from pathlib import Path

import polars as pl


def find_project_root() -> Path:
    """Walk up from this file to find the project root.

    The project root is identified as the first ancestor directory that
    contains a ``pyproject.toml`` file.

    Returns
    -------
    Path
        Absolute path to the project root directory.

    Raises
    ------
    RuntimeError
        If no ``pyproject.toml`` is found before reaching the filesystem root.
    """
    path = Path(__file__).resolve().parent
    while path != path.parent:
        if (path / "pyproject.toml").exists():
            return path
        path = path.parent
    raise RuntimeError("Could not find project root (no pyproject.toml found)")


def normalize_id(col: pl.Expr) -> pl.Expr:
    """Return a polars expression casting identifiers and codes to clean strings.

    Casts to Utf8 and strips surrounding whitespace so that codes parsed as
    integers (``1``), as floats (``1.0``) and as text (``" 1"``) compare
    equal. Empty strings and NaN become null.

    Parameters
    ----------
    col : pl.Expr
        A polars column expression (string or numeric).

    Returns
    -------
    pl.Expr
        Expression producing stripped Utf8 values, null for blanks.
    """
    stripped = (
        col.cast(pl.Utf8)
        .str.strip_chars()
        .str.replace(r"^(-?\d+)\.0+$", "${1}")
    )
    blank = (stripped == "") | (stripped == "NaN")
    return pl.when(blank).then(pl.lit(None, dtype=pl.Utf8)).otherwise(stripped)
