"""WALS word-order configuration.

Parameter identifiers, code-to-label tables and namespaced missing labels
for the constituent-order features used in the set comparison.

Codes follow the WALS CLDF ``codes.csv`` numbering:

    81A  Order of Subject, Object and Verb
    87A  Order of Adjective and Noun
    81B  Languages with two Dominant Orders of Subject, Object, and Verb
"""

from __future__ import annotations

WALS_CLDF_URL = "https://raw.githubusercontent.com/cldf-datasets/wals/master/cldf"

WORD_ORDER_PARAMETER = "81A"
ADJECTIVE_ORDER_PARAMETER = "87A"
# Entities listed under 81B have two dominant orders and are excluded.
DUAL_ORDER_PARAMETER = "81B"

DEFAULT_PARAMETERS: list[str] = [WORD_ORDER_PARAMETER, ADJECTIVE_ORDER_PARAMETER]

CODE_LABELS: dict[tuple[str, str], str] = {
    ("81A", "1"): "SOV",
    ("81A", "2"): "SVO",
    ("81A", "3"): "VSO",
    ("81A", "4"): "VOS",
    ("81A", "5"): "OVS",
    ("81A", "6"): "OSV",
    ("81A", "7"): "woND",
    ("87A", "1"): "ADJN",
    ("87A", "2"): "NADJ",
    ("87A", "3"): "adjND",
    ("87A", "4"): "adjIHRC",
}

_LABEL_PREFIXES: dict[str, str] = {
    WORD_ORDER_PARAMETER: "wo",
    ADJECTIVE_ORDER_PARAMETER: "adj",
}


def missing_label_for(parameter_id: str, prefix: str | None = None) -> str:
    """Return the reserved missing label for *parameter_id*.

    Labels are namespaced (``woNA``, ``adjNA``) so that they stay unique
    once they become column names.
    """
    if prefix is None:
        prefix = _LABEL_PREFIXES.get(parameter_id, parameter_id)
    return f"{prefix}NA"


MISSING_LABELS: dict[str, str] = {
    parameter_id: missing_label_for(parameter_id)
    for parameter_id in DEFAULT_PARAMETERS
}

# Sets compared in the upset chart: the six basic orders plus both
# adjective orders.
DEFAULT_SETS: list[str] = ["SOV", "SVO", "VSO", "VOS", "OVS", "OSV", "ADJN", "NADJ"]
