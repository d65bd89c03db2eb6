"""Unit tests for normalize_id and find_project_root utilities."""

import polars as pl

from utils import find_project_root, normalize_id


# ---------------------------------------------------------------------------
# normalize_id tests
# ---------------------------------------------------------------------------


class TestNormalizeId:
    """Tests for the normalize_id polars expression helper."""

    def test_strips_whitespace(self):
        """Surrounding whitespace is removed: ' 81A ' -> '81A'."""
        df = pl.DataFrame({"id": [" 81A "]})
        result = df.with_columns(normalize_id(pl.col("id")).alias("id"))
        assert result["id"][0] == "81A"

    def test_integer_codes_become_strings(self):
        """Integer codes are cast to Utf8: 1 -> '1'."""
        df = pl.DataFrame({"code": [1, 7]})
        result = df.with_columns(normalize_id(pl.col("code")).alias("code"))
        assert result["code"].to_list() == ["1", "7"]
        assert result["code"].dtype == pl.Utf8

    def test_integral_floats_lose_fraction(self):
        """Float codes compare equal to integer codes: 2.0 -> '2'."""
        df = pl.DataFrame({"code": [2.0, 81.0]})
        result = df.with_columns(normalize_id(pl.col("code")).alias("code"))
        assert result["code"].to_list() == ["2", "81"]

    def test_non_integral_text_kept(self):
        """Only a trailing zero fraction is dropped."""
        df = pl.DataFrame({"code": ["2.5", "2.0", "81A"]})
        result = df.with_columns(normalize_id(pl.col("code")).alias("code"))
        assert result["code"].to_list() == ["2.5", "2", "81A"]

    def test_blank_becomes_null(self):
        """Empty and whitespace-only strings become null."""
        df = pl.DataFrame({"value": ["", "  ", "2"]})
        result = df.with_columns(normalize_id(pl.col("value")).alias("value"))
        assert result["value"].to_list() == [None, None, "2"]

    def test_null_stays_null(self):
        df = pl.DataFrame({"value": [None, "1"]}, schema={"value": pl.Utf8})
        result = df.with_columns(normalize_id(pl.col("value")).alias("value"))
        assert result["value"].to_list() == [None, "1"]


class TestFindProjectRoot:
    """Tests for project root discovery."""

    def test_root_has_pyproject(self):
        """The discovered root contains pyproject.toml."""
        root = find_project_root()
        assert (root / "pyproject.toml").exists()
        assert (root / "src" / "utils.py").exists()
