"""Core types shared by every layer."""

from .config import ConfigError, ReleaseOptions, load_options
from .errors import ErrorCode
from .result import Err, Ok, Result

__all__ = [
    # config
    "ConfigError",
    "ReleaseOptions",
    "load_options",
    # errors
    "ErrorCode",
    # result
    "Err",
    "Ok",
    "Result",
]
