"""Core infrastructure: exception hierarchy, result type and error decorators."""
from __future__ import annotations

from .exceptions import (
    ConfigurationError,
    ConversionError,
    EnvirotronException,
    InvalidTargetError,
    UnsupportedFieldError,
)
from .result import Failure, Result, Success

__all__ = [
    "EnvirotronException",
    "InvalidTargetError",
    "ConversionError",
    "UnsupportedFieldError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
