"""Custom exception hierarchy for environment overrides."""
from __future__ import annotations

from typing import Optional


class EnvirotronException(Exception):
    """Base exception for all envirotron errors."""
    pass


class InvalidTargetError(EnvirotronException, TypeError):
    """Raised when override is given something other than a mutable dataclass instance."""
    pass


class ConversionError(EnvirotronException, ValueError):
    """Raised when an environment value cannot be converted to its field's type.

    Attributes:
        path: Dotted field path from the top-level target (``outer.inner.name``)
        env_name: Environment variable that supplied the value
        kind: Name of the declared field type
    """

    def __init__(self, path: str, env_name: str, kind: str, reason: Optional[str] = None):
        self.path = path
        self.env_name = env_name
        self.kind = kind
        self.reason = reason
        message = f"cannot convert ${env_name} into {kind} for field '{path}'"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class UnsupportedFieldError(EnvirotronException, TypeError):
    """Raised in strict mode for an annotated field with no conversion rule."""
    pass


class ConfigurationError(EnvirotronException):
    """Raised when override options are invalid."""
    pass
