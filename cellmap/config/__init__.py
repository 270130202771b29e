from .loader import ConfigError, load_config
from .store import CellMapStore

__all__ = [
    "CellMapStore",
    "ConfigError",
    "load_config",
]
