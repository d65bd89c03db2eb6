"""Exception taxonomy for the word-order set pipeline.

Every error is fatal for a run: the pipeline either produces a complete
indicator table or aborts.
"""

from __future__ import annotations


class TypologyError(Exception):
    """Base class for pipeline errors."""


class DataSourceError(TypologyError):
    """A source table could not be fetched or parsed."""

    def __init__(self, source: object, reason: str) -> None:
        self.source = str(source)
        self.reason = reason
        super().__init__(f"Could not load {self.source}: {reason}")


class UnknownParameterError(TypologyError):
    """A parameter has no declared missing label (or is not declared at all)."""

    def __init__(self, parameter_id: str) -> None:
        self.parameter_id = parameter_id
        super().__init__(
            f"Parameter '{parameter_id}' has no declared missing label"
        )


class IncompleteEntityError(TypologyError):
    """An entity carries more than one label for a single parameter."""

    def __init__(
        self,
        entity_id: str,
        parameter_id: str,
        labels: list[str] | None = None,
    ) -> None:
        self.entity_id = entity_id
        self.parameter_id = parameter_id
        self.labels = list(labels or [])
        super().__init__(
            f"Entity '{entity_id}' has {len(self.labels) or 'multiple'} labels "
            f"for parameter '{parameter_id}': {self.labels}. "
            "Filter multi-valued entries before binarizing."
        )
