"""Options controlling an override pass.

Options are resolved with the following precedence:
1. Default values (lowest priority)
2. ENVIROTRON_* environment variables
3. Explicit keyword arguments (highest priority)
"""
from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from envirotron.converters import parse_bool
from envirotron.core.exceptions import ConfigurationError
from envirotron.fields import DEFAULT_METADATA_KEY


@dataclass(frozen=True)
class OverrideOptions:
    """Behaviour of the overrider.

    Attributes:
        metadata_key: Dataclass field metadata key holding the variable name
        strict: Raise on annotated fields with no conversion rule instead of skipping them
    """
    metadata_key: str = DEFAULT_METADATA_KEY
    strict: bool = False

    def __post_init__(self):
        if not self.metadata_key:
            raise ConfigurationError("metadata_key must not be empty")


class ConfigLoader:
    """Builds OverrideOptions from defaults, the environment and explicit values."""

    def __init__(self, environ: Optional[Mapping[str, str]] = None):
        self.environ = os.environ if environ is None else environ

    def load(self, **explicit: Any) -> OverrideOptions:
        """Load options with hierarchy: defaults → env → explicit.

        Keyword arguments set to None are treated as not given.

        Raises:
            ConfigurationError: If a value is invalid
        """
        options = self._get_defaults()
        options.update(self._load_env_overrides())
        options.update({key: value for key, value in explicit.items() if value is not None})

        unknown = set(options) - set(OverrideOptions.__dataclass_fields__)
        if unknown:
            raise ConfigurationError(f"Unknown option(s): {', '.join(sorted(unknown))}")
        return OverrideOptions(**options)

    def _get_defaults(self) -> Dict[str, Any]:
        return {
            "metadata_key": DEFAULT_METADATA_KEY,
            "strict": False,
        }

    def _load_env_overrides(self) -> Dict[str, Any]:
        """Load overrides from environment variables.

        Supported environment variables:
        - ENVIROTRON_STRICT: Fail on unsupported field kinds
        - ENVIROTRON_METADATA_KEY: Field metadata key to read variable names from
        """
        overrides: Dict[str, Any] = {}

        strict = self._env_bool("ENVIROTRON_STRICT")
        if strict is not None:
            overrides["strict"] = strict

        metadata_key = self.environ.get("ENVIROTRON_METADATA_KEY")
        if metadata_key:
            overrides["metadata_key"] = metadata_key

        return overrides

    def _env_bool(self, name: str) -> Optional[bool]:
        """Parse a boolean environment variable, None when unset."""
        val = self.environ.get(name)
        if val is None:
            return None
        try:
            return parse_bool(val)
        except ValueError as e:
            raise ConfigurationError(f"{name}: {e}") from e


def load_options(**explicit: Any) -> OverrideOptions:
    """Convenience function for creating a ConfigLoader and loading options."""
    return ConfigLoader().load(**explicit)


__all__ = ["OverrideOptions", "ConfigLoader", "load_options"]
