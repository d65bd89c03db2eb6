"""End-to-end test of the pipeline on synthetic CLDF tables."""

import sys

sys.path.insert(0, "src")

import polars as pl
import pytest

from sets.aggregate import IntersectionCount
from typology.build_dataset import build_dataset
from typology.errors import DataSourceError

VALUES_CSV = (
    "ID,Language_ID,Parameter_ID,Value\n"
    "81A-L1,L1,81A,1\n"
    "87A-L1,L1,87A,1\n"
    "81A-L2,L2,81A,2\n"
    "87A-L2,L2,87A,2\n"
    "81A-L3,L3,81A,1\n"
    "81A-L4a,L4,81A,1\n"
    "81A-L4b,L4,81A,2\n"
    "81B-L4,L4,81B,1\n"
    "87A-L5,L5,87A,2\n"
)

CODES_CSV = (
    "ID,Parameter_ID,Name,Number\n"
    "81A-1,81A,SOV,1\n"
    "81A-2,81A,SVO,2\n"
    "87A-1,87A,Adjective-Noun,1\n"
    "87A-2,87A,Noun-Adjective,2\n"
)

LANGUAGES_CSV = (
    "ID,Name,Latitude,Longitude,Family,Genus\n"
    "L1,One,1.0,1.0,F1,G1\n"
    "L2,Two,2.0,2.0,F2,G2\n"
    "L3,Three,3.0,3.0,F3,G3\n"
    "L4,Four,4.0,4.0,F4,G4\n"
    "L5,Five,5.0,5.0,F5,G5\n"
)


@pytest.fixture
def source_dir(tmp_path):
    raw = tmp_path / "raw"
    raw.mkdir()
    (raw / "values.csv").write_text(VALUES_CSV)
    (raw / "codes.csv").write_text(CODES_CSV)
    (raw / "languages.csv").write_text(LANGUAGES_CSV)
    return raw


class TestBuildDataset:
    """Tests for the full load -> recode -> binarize -> aggregate run."""

    def test_dual_order_language_excluded(self, source_dir, tmp_path):
        """L4 (81B) is dropped before binarizing."""
        result = build_dataset(source_dir, tmp_path / "out")
        assert result.indicators["entity_id"].to_list() == ["L1", "L2", "L3", "L5"]

    def test_indicator_columns(self, source_dir, tmp_path):
        """Short labels override codes.csv names; missing labels are namespaced."""
        result = build_dataset(source_dir, tmp_path / "out")
        assert result.indicators.columns == [
            "entity_id", "SOV", "SVO", "woNA", "ADJN", "NADJ", "adjNA",
            "name", "latitude", "longitude", "family", "genus",
        ]
        l3 = result.indicators.filter(pl.col("entity_id") == "L3").row(0, named=True)
        assert l3["SOV"] == 1 and l3["adjNA"] == 1 and l3["name"] == "Three"

    def test_intersections(self, source_dir, tmp_path):
        result = build_dataset(source_dir, tmp_path / "out")
        assert result.intersections == [
            IntersectionCount(("SOV",), 1),
            IntersectionCount(("NADJ",), 1),
            IntersectionCount(("SOV", "ADJN"), 1),
            IntersectionCount(("SVO", "NADJ"), 1),
        ]
        assert result.set_sizes == {"SOV": 2, "SVO": 1, "ADJN": 1, "NADJ": 2}

    def test_absent_sets_warned(self, source_dir, tmp_path):
        """Default sets without members (VSO...) are skipped with a warning."""
        result = build_dataset(source_dir, tmp_path / "out")
        assert any("VSO" in w for w in result.warnings)

    def test_artifacts_written(self, source_dir, tmp_path):
        out = tmp_path / "out"
        result = build_dataset(source_dir, out)
        assert (out / "indicators.csv").exists()
        intersections = pl.read_csv(out / "intersections.csv")
        assert intersections["count"].sum() == 4
        assert result.paths == [out / "indicators.csv", out / "intersections.csv"]

    def test_renders_figure(self, source_dir, tmp_path):
        result = build_dataset(source_dir, tmp_path / "out", figures_dir=tmp_path / "fig")
        assert (tmp_path / "fig" / "upset_word_order.png").exists()
        assert len(result.paths) == 4

    def test_missing_source_aborts(self, tmp_path):
        with pytest.raises(DataSourceError):
            build_dataset(tmp_path / "nowhere", tmp_path / "out")
