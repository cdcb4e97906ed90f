from __future__ import annotations


class TableLegendError(RuntimeError):
    pass


class MissingInputError(TableLegendError):
    """Raised when a builder is handed nothing to work from (e.g. an empty ramp)."""
