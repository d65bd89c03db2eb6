"""Unit tests for upset chart rendering."""

import sys
import warnings

sys.path.insert(0, "src")

import pytest

from sets.aggregate import IntersectionCount
from sets.upset import plot_upset, to_upset_series

SETS = ["SOV", "SVO", "ADJN", "NADJ"]
COUNTS = [
    IntersectionCount(("SOV", "ADJN"), 5),
    IntersectionCount(("SVO", "NADJ"), 3),
    IntersectionCount(("SOV",), 1),
]


class TestToUpsetSeries:
    """Tests for the upsetplot input conversion."""

    def test_index_levels_follow_sets(self):
        series = to_upset_series(COUNTS, SETS)
        assert list(series.index.names) == SETS

    def test_values_and_membership(self):
        series = to_upset_series(COUNTS, SETS)
        assert series.tolist() == [5, 3, 1]
        assert series.index[0] == (True, False, True, False)
        assert series.index[2] == (True, False, False, False)


class TestPlotUpset:
    """Tests for writing the figure."""

    def test_writes_png_and_pdf(self, tmp_path):
        paths = plot_upset(COUNTS, SETS, tmp_path / "figures" / "upset", title="Test")
        assert [p.suffix for p in paths] == [".png", ".pdf"]
        assert all(p.exists() and p.stat().st_size > 0 for p in paths)

    def test_warning_filters_restored(self, tmp_path):
        """Rendering leaves the global warning filters untouched."""
        before = list(warnings.filters)
        plot_upset(COUNTS, SETS, tmp_path / "upset")
        assert warnings.filters == before

    def test_empty_counts_raise(self, tmp_path):
        with pytest.raises(ValueError, match="No intersections"):
            plot_upset([], SETS, tmp_path / "upset")
