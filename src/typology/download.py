#!/usr/bin/env python3
"""
Download the WALS CLDF tables used by the word-order set pipeline.

Fetches ``values.csv``, ``languages.csv``, ``codes.csv`` and
``parameters.csv`` from the WALS CLDF repository and caches them under
``data/raw/wals/``.

Usage:
    uv run python src/typology/download.py

Output structure:
    data/raw/wals/
    ├── values.csv       # Language_ID, Parameter_ID, Value, Code_ID, ...
    ├── languages.csv    # ID, Name, Latitude, Longitude, Family, Genus, ...
    ├── codes.csv        # ID, Parameter_ID, Name, Number, ...
    └── parameters.csv   # ID, Name, ...
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import requests

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))
from typology.errors import DataSourceError  # noqa: E402
from typology.wals import WALS_CLDF_URL  # noqa: E402
from utils import find_project_root  # noqa: E402

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Configuration
# ---------------------------------------------------------------------------

WALS_TABLES = ("values", "languages", "codes", "parameters")

DEFAULT_TIMEOUT = 60


def _is_url(source: str | Path) -> bool:
    return str(source).startswith(("http://", "https://"))


def fetch_table(source: str | Path, timeout: float = DEFAULT_TIMEOUT) -> bytes:
    """Return the raw bytes of a tabular source.

    Parameters
    ----------
    source : str or Path
        An ``http(s)`` URL or a local file path.
    timeout : float, optional
        Network timeout in seconds (default 60). Ignored for local files.

    Returns
    -------
    bytes
        File contents.

    Raises
    ------
    DataSourceError
        If the request fails, times out, returns an error status, or the
        local file cannot be read. There is no retry.
    """
    if _is_url(source):
        logger.info("Fetching %s", source)
        try:
            resp = requests.get(str(source), timeout=timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            raise DataSourceError(source, str(e)) from e
        logger.info("Fetched %s (%d KB)", source, len(resp.content) // 1024)
        return resp.content

    path = Path(source)
    try:
        return path.read_bytes()
    except OSError as e:
        raise DataSourceError(source, str(e)) from e


def download_wals(
    dest_dir: Path,
    tables: tuple[str, ...] = WALS_TABLES,
    base_url: str = WALS_CLDF_URL,
    timeout: float = DEFAULT_TIMEOUT,
    overwrite: bool = False,
) -> list[Path]:
    """Download WALS CLDF tables into *dest_dir*.

    Existing files are kept unless *overwrite* is set.

    Returns
    -------
    list[Path]
        Paths of all requested tables (downloaded or already present).

    Raises
    ------
    DataSourceError
        On the first table that cannot be fetched.
    """
    dest_dir.mkdir(parents=True, exist_ok=True)
    paths: list[Path] = []

    for table in tables:
        dest = dest_dir / f"{table}.csv"
        if dest.exists() and not overwrite:
            logger.info("%s already exists, skipping", dest.name)
            paths.append(dest)
            continue

        content = fetch_table(f"{base_url.rstrip('/')}/{table}.csv", timeout=timeout)
        dest.write_bytes(content)
        logger.info("Saved %s (%d KB)", dest, len(content) // 1024)
        paths.append(dest)

    return paths


def main() -> None:
    logging.basicConfig(
        level=logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )

    dest_dir = find_project_root() / "data" / "raw" / "wals"
    try:
        paths = download_wals(dest_dir)
    except DataSourceError as e:
        logger.error("%s", e)
        print(f"\nDownload manually from: {WALS_CLDF_URL}")
        print(f"Place the CSV files in: {dest_dir}")
        sys.exit(1)

    print(f"\nWALS tables ready in {dest_dir}:")
    for p in paths:
        print(f"  {p.name}")


if __name__ == "__main__":
    main()
