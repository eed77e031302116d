from .loader import iter_observations, load_observations
from .observation import RawObservation
from .pipeline import load_projected, prepare_source, resolve_source
from .projection import project_columns

__all__ = [
    "RawObservation",
    "iter_observations",
    "load_observations",
    "load_projected",
    "prepare_source",
    "project_columns",
    "resolve_source",
]
