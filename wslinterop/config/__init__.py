from .config import InteropConfig, user_cache_dir, user_config_dir
from .tables import DefaultParameterTable, EnvironmentTable

__all__ = [
    "DefaultParameterTable",
    "EnvironmentTable",
    "InteropConfig",
    "user_cache_dir",
    "user_config_dir",
]
