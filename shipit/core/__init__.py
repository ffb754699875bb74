"""Core types shared by every layer."""

from .config import Config, ConfigError, load_config, load_project_config
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "Config",
    "ConfigError",
    "load_config",
    "load_project_config",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
