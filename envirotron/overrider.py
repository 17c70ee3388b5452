"""Override dataclass fields from environment variables.

The overrider walks every field of a dataclass instance in declaration order:

1. private (underscore-prefixed) fields are skipped
2. dataclass-typed fields without an ``unmarshal_env`` hook are descended
   into, whether or not they carry an annotation themselves
3. annotated fields whose variable is set are converted and assigned,
   using the type's ``unmarshal_env`` hook when present and the built-in
   boolean/integer/float/string rules otherwise

Assignments happen one field at a time. When a conversion fails the error
propagates immediately: fields handled before it keep their new values, the
failing field and everything after it keep their old ones. A frozen nested
dataclass is only an error once a variable for one of its fields is set.
"""
from __future__ import annotations

import dataclasses
import os
from typing import Any, Mapping, Optional

from loguru import logger

from envirotron.config.config import ConfigLoader, OverrideOptions
from envirotron.converters import Converter, builtin_converter, custom_converter, kind_name
from envirotron.core.error_handler import as_result, log_execution_time
from envirotron.core.exceptions import (
    ConversionError,
    EnvirotronException,
    InvalidTargetError,
    UnsupportedFieldError,
)
from envirotron.fields import FieldDescriptor, describe_fields, is_structured


class Overrider:
    """Applies environment variables to annotated dataclass fields.

    Example:
        overrider = Overrider()
        overrider.override(config)

    Attributes:
        options: Resolved OverrideOptions
        environ: Mapping read at each call; None means the live os.environ
    """

    def __init__(self, options: Optional[OverrideOptions] = None,
                 environ: Optional[Mapping[str, str]] = None):
        self.options = options if options is not None else ConfigLoader(environ).load()
        self.environ = environ

    @log_execution_time()
    def override(self, target: Any) -> None:
        """Override fields of ``target`` in place.

        Raises:
            InvalidTargetError: If target is not a mutable dataclass instance
            ConversionError: If a set variable does not parse into its field's type
            UnsupportedFieldError: In strict mode, for annotated fields of unknown kind
        """
        environ = os.environ if self.environ is None else self.environ
        path = type(target).__name__
        _check_target(target, path)
        _check_mutable(target, path)
        self._override_struct(target, environ, path)

    def _override_struct(self, target: Any, environ: Mapping[str, str], path: str) -> None:
        _check_target(target, path)
        for descriptor in describe_fields(type(target), self.options.metadata_key):
            field_path = f"{path}.{descriptor.name}"
            if not descriptor.accessible:
                continue

            custom = custom_converter(descriptor.type)
            nested = getattr(target, descriptor.name)
            if custom is None and _is_nested(descriptor.type, nested):
                if nested is None:
                    logger.debug(f"Skipping {field_path}: nested structure is None")
                    continue
                self._override_struct(nested, environ, field_path)
                continue

            if descriptor.env_name is None:
                continue
            raw = environ.get(descriptor.env_name)
            if raw is None:
                continue

            converter = custom or builtin_converter(descriptor.type)
            if converter is None:
                message = (f"No conversion for {field_path} of type "
                           f"{kind_name(descriptor.type)} (${descriptor.env_name})")
                if self.options.strict:
                    raise UnsupportedFieldError(message)
                logger.warning(f"{message}; leaving it unchanged")
                continue

            value = _convert(converter, raw, descriptor, field_path, custom is not None)
            _check_mutable(target, path)
            setattr(target, descriptor.name, value)
            logger.debug(f"Overrode {field_path} from ${descriptor.env_name}")


def _check_target(target: Any, path: str) -> None:
    if target is None:
        raise InvalidTargetError(f"{path}: cannot override None")
    if isinstance(target, type) or not dataclasses.is_dataclass(target):
        raise InvalidTargetError(f"{path}: expected a dataclass instance, got {type(target).__name__}")


def _check_mutable(target: Any, path: str) -> None:
    if target.__dataclass_params__.frozen:
        raise InvalidTargetError(f"{path}: {type(target).__name__} is frozen")


def _is_nested(kind: Any, value: Any) -> bool:
    """Declared as a dataclass, or an unresolved annotation holding a dataclass instance."""
    if is_structured(kind):
        return True
    return isinstance(kind, str) and dataclasses.is_dataclass(value) and not isinstance(value, type)


def _convert(converter: Converter, raw: str, descriptor: FieldDescriptor,
             path: str, custom: bool) -> Any:
    try:
        return converter(raw)
    except EnvirotronException:
        raise
    except (ValueError, TypeError, ArithmeticError) as e:
        # Hooks may echo the raw value in their messages
        reason = f"unmarshal_env raised {type(e).__name__}" if custom else str(e)
        raise ConversionError(path, descriptor.env_name, kind_name(descriptor.type), reason) from e


def override(target: Any, *, strict: Optional[bool] = None, metadata_key: Optional[str] = None,
             environ: Optional[Mapping[str, str]] = None) -> None:
    """Override ``target`` in place from the environment.

    Args:
        target: Dataclass instance to mutate
        strict: Fail on unsupported field kinds (defaults to $ENVIROTRON_STRICT or False)
        metadata_key: Field metadata key naming the variable (defaults to "env")
        environ: Mapping to read instead of os.environ
    """
    options = ConfigLoader(environ).load(strict=strict, metadata_key=metadata_key)
    Overrider(options, environ=environ).override(target)


@as_result
def try_override(target: Any, **kwargs: Any) -> Any:
    """Like :func:`override`, returning Success(target) or Failure(error) instead of raising."""
    override(target, **kwargs)
    return target


__all__ = ["Overrider", "override", "try_override"]
