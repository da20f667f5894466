from .loader import RawData, load_features, load_sources, load_table
from .normalize import EmissionData, EmissionRecord, normalize

__all__ = [
    "EmissionData",
    "EmissionRecord",
    "RawData",
    "load_features",
    "load_sources",
    "load_table",
    "normalize",
]
