"""Exceptions raised at the caller level of the pipeline."""


class EmptyGeometryError(ValueError):
    """Raised when an import or generation request yields no XY geometry."""
