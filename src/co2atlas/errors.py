from __future__ import annotations


class Co2AtlasError(Exception):
    """Base class for fatal pipeline errors."""


class DataLoadError(Co2AtlasError):
    """A source could not be fetched or parsed."""

    def __init__(self, source: object, reason: str) -> None:
        self.source = str(source)
        self.reason = reason
        super().__init__(f"{self.source}: {reason}")


class NoDataError(Co2AtlasError):
    """Normalization left nothing to draw."""


class ProjectionError(Co2AtlasError):
    """Feature geometry could not be projected onto the map canvas."""
