"""Configuration access for the service layer and CLI."""
from icofr.config.loader import (
    ConfigLoader,
    get_config,
    get_log_level,
    get_default_role,
    get_materiality_defaults,
)

__all__ = [
    "ConfigLoader",
    "get_config",
    "get_log_level",
    "get_default_role",
    "get_materiality_defaults",
]
