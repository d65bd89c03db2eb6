"""Shared publication styling constants and helpers.

Provides consistent figure styling across the set-membership figures.
"""

from __future__ import annotations

from pathlib import Path

import matplotlib.pyplot as plt

# ---------------------------------------------------------------------------
# Publication style defaults
# ---------------------------------------------------------------------------

PUB_STYLE: dict = {
    "font.family": "serif",
    "font.size": 9,
    "axes.titlesize": 12,
    "axes.labelsize": 10,
    "xtick.labelsize": 9,
    "ytick.labelsize": 9,
    "legend.fontsize": 9,
    "axes.spines.top": False,
    "axes.spines.right": False,
    "figure.dpi": 300,
}

# Bar colour for intersection and set-size bars
SET_FACECOLOR = "#8eaec0"

# Human-readable names for the word-order labels
LABEL_NAMES: dict[str, str] = {
    "SOV": "Subject-Object-Verb",
    "SVO": "Subject-Verb-Object",
    "VSO": "Verb-Subject-Object",
    "VOS": "Verb-Object-Subject",
    "OVS": "Object-Verb-Subject",
    "OSV": "Object-Subject-Verb",
    "woND": "No dominant order",
    "woNA": "Word order not coded",
    "ADJN": "Adjective-Noun",
    "NADJ": "Noun-Adjective",
    "adjND": "No dominant adjective order",
    "adjIHRC": "Only internally-headed relative clauses",
    "adjNA": "Adjective order not coded",
}


def save_dual_format(fig: plt.Figure, path_stem: str | Path) -> list[Path]:
    """Save figure as both PNG (300dpi) and PDF (vector), then close it."""
    path_stem = Path(path_stem)
    path_stem.parent.mkdir(parents=True, exist_ok=True)
    paths = [Path(f"{path_stem}.png"), Path(f"{path_stem}.pdf")]
    fig.savefig(paths[0], dpi=300, bbox_inches="tight")
    fig.savefig(paths[1], bbox_inches="tight")
    plt.close(fig)
    return paths
