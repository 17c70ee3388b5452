"""Override dataclass configuration from environment variables.

Fields name their variable through metadata or an ``Annotated`` marker::

    from dataclasses import dataclass
    from envirotron import env_field, override

    @dataclass
    class Config:
        url: str = env_field("THING_URL", default="http://localhost")

    config = Config()
    override(config)

Logging goes through loguru and is disabled for this package by default;
call ``logger.enable("envirotron")`` to see it.
"""
from __future__ import annotations

from loguru import logger

from .config import ConfigLoader, OverrideOptions, load_options
from .core.exceptions import (
    ConfigurationError,
    ConversionError,
    EnvirotronException,
    InvalidTargetError,
    UnsupportedFieldError,
)
from .core.result import Failure, Result, Success
from .fields import EnvVar, FieldDescriptor, describe_fields, env_field
from .overrider import Overrider, override, try_override

logger.disable(__name__)

__version__ = "0.1.0"

__all__ = [
    "override",
    "try_override",
    "Overrider",
    "OverrideOptions",
    "ConfigLoader",
    "load_options",
    "env_field",
    "EnvVar",
    "FieldDescriptor",
    "describe_fields",
    "EnvirotronException",
    "InvalidTargetError",
    "ConversionError",
    "UnsupportedFieldError",
    "ConfigurationError",
    "Result",
    "Success",
    "Failure",
]
