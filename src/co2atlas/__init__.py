"""Per-capita CO2 choropleth: data pipeline, color scale and map session."""

from .errors import Co2AtlasError, DataLoadError, NoDataError, ProjectionError

__all__ = ["Co2AtlasError", "DataLoadError", "NoDataError", "ProjectionError"]
__version__ = "0.1.0"
