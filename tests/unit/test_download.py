"""Unit tests for the WALS table fetcher.

Network access is mocked; local-file sources use tmp_path.
"""

import sys

sys.path.insert(0, "src")

import pytest
import requests
from unittest.mock import MagicMock, patch

from typology.download import download_wals, fetch_table
from typology.errors import DataSourceError


def _response(content: bytes) -> MagicMock:
    resp = MagicMock()
    resp.content = content
    resp.raise_for_status.return_value = None
    return resp


# ---------------------------------------------------------------------------
# fetch_table
# ---------------------------------------------------------------------------


class TestFetchTable:
    """Tests for fetching a single table from a URL or path."""

    def test_local_file(self, tmp_path):
        """Local paths are read directly."""
        path = tmp_path / "values.csv"
        path.write_text("entity_id,parameter_id,value\nL1,81A,1\n")
        assert fetch_table(path).startswith(b"entity_id")

    def test_missing_local_file_raises(self, tmp_path):
        """A missing local file surfaces as DataSourceError."""
        with pytest.raises(DataSourceError, match="missing.csv"):
            fetch_table(tmp_path / "missing.csv")

    def test_url_uses_timeout(self):
        """URLs are fetched with the caller's timeout."""
        with patch("typology.download.requests.get", return_value=_response(b"a,b\n")) as get:
            content = fetch_table("https://example.org/values.csv", timeout=5)
        assert content == b"a,b\n"
        get.assert_called_once_with("https://example.org/values.csv", timeout=5)

    def test_timeout_raises_data_source_error(self):
        """A network timeout becomes DataSourceError with no retry."""
        with patch(
            "typology.download.requests.get",
            side_effect=requests.Timeout("read timed out"),
        ) as get:
            with pytest.raises(DataSourceError, match="timed out"):
                fetch_table("https://example.org/values.csv", timeout=1)
        assert get.call_count == 1

    def test_http_error_raises_data_source_error(self):
        """HTTP error statuses become DataSourceError."""
        resp = _response(b"")
        resp.raise_for_status.side_effect = requests.HTTPError("404 Not Found")
        with patch("typology.download.requests.get", return_value=resp):
            with pytest.raises(DataSourceError, match="404"):
                fetch_table("https://example.org/values.csv")

    def test_error_keeps_source(self):
        """The raised error records the failing source."""
        with patch(
            "typology.download.requests.get",
            side_effect=requests.ConnectionError("unreachable"),
        ):
            with pytest.raises(DataSourceError) as excinfo:
                fetch_table("https://example.org/codes.csv")
        assert excinfo.value.source == "https://example.org/codes.csv"


# ---------------------------------------------------------------------------
# download_wals
# ---------------------------------------------------------------------------


class TestDownloadWals:
    """Tests for caching the CLDF tables."""

    def test_downloads_requested_tables(self, tmp_path):
        """Each table is fetched from the base URL and saved."""
        with patch(
            "typology.download.requests.get",
            return_value=_response(b"ID\n"),
        ) as get:
            paths = download_wals(
                tmp_path, tables=("values", "codes"), base_url="https://example.org/cldf/"
            )
        assert [p.name for p in paths] == ["values.csv", "codes.csv"]
        assert all(p.read_bytes() == b"ID\n" for p in paths)
        urls = [call.args[0] for call in get.call_args_list]
        assert urls == [
            "https://example.org/cldf/values.csv",
            "https://example.org/cldf/codes.csv",
        ]

    def test_existing_files_skipped(self, tmp_path):
        """Existing files are kept without a request."""
        (tmp_path / "values.csv").write_text("cached")
        with patch("typology.download.requests.get") as get:
            paths = download_wals(tmp_path, tables=("values",))
        get.assert_not_called()
        assert paths[0].read_text() == "cached"

    def test_overwrite_refetches(self, tmp_path):
        (tmp_path / "values.csv").write_text("cached")
        with patch("typology.download.requests.get", return_value=_response(b"fresh")):
            download_wals(tmp_path, tables=("values",), overwrite=True)
        assert (tmp_path / "values.csv").read_text() == "fresh"
