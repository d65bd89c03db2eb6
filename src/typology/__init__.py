"""Loading, recoding and binarizing WALS word-order data.

Usage::

    from typology.loader import load_observations, exclude_entities_with
    from typology.recode import recode
    from typology.binarize import binarize
    from typology.merge import join_metadata
"""

from typology.errors import (
    DataSourceError,
    IncompleteEntityError,
    TypologyError,
    UnknownParameterError,
)
from typology.loader import (
    ObservationResult,
    code_table_from_mapping,
    exclude_entities_with,
    load_code_table,
    load_language_metadata,
    load_observations,
)
from typology.recode import recode
from typology.binarize import binarize, label_columns, parameter_label_map
from typology.merge import MergeResult, join_metadata

__all__ = [
    # Errors
    "TypologyError",
    "DataSourceError",
    "UnknownParameterError",
    "IncompleteEntityError",
    # Loader
    "ObservationResult",
    "load_observations",
    "exclude_entities_with",
    "load_code_table",
    "code_table_from_mapping",
    "load_language_metadata",
    # Recode / binarize
    "recode",
    "binarize",
    "label_columns",
    "parameter_label_map",
    # Merge
    "MergeResult",
    "join_metadata",
]
