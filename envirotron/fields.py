"""Field annotations and descriptors for dataclass targets.

A field is bound to an environment variable either through dataclass field
metadata::

    @dataclass
    class Config:
        url: str = env_field("THING_URL", default="http://localhost")

or through an ``Annotated`` marker on its type::

    @dataclass
    class Config:
        url: Annotated[str, EnvVar("THING_URL")] = "http://localhost"
"""
from __future__ import annotations

import builtins
import dataclasses
import re
import sys
import types
import typing
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from loguru import logger

DEFAULT_METADATA_KEY = "env"

_MISSING = dataclasses.MISSING
_UNION_TYPES = tuple(t for t in (typing.Union, getattr(types, "UnionType", None)) if t is not None)
_OPTIONAL_TEXT = re.compile(r"(?:typing\.)?Optional\[(.+)\]|(.+?)\s*\|\s*None|None\s*\|\s*(.+)")


@dataclass(frozen=True)
class EnvVar:
    """``Annotated`` marker naming the environment variable for a field."""
    name: str


@dataclass(frozen=True)
class FieldDescriptor:
    """What the overrider needs to know about one dataclass field.

    Attributes:
        name: Attribute name on the instance
        type: Declared type with ``Annotated`` and ``Optional`` wrappers removed
        env_name: Environment variable bound to the field, if any
        accessible: False for private (underscore-prefixed) fields
    """
    name: str
    type: Any
    env_name: Optional[str]
    accessible: bool


def env_field(name: str, *, default: Any = _MISSING, default_factory: Any = _MISSING,
              metadata_key: str = DEFAULT_METADATA_KEY, **kwargs: Any) -> Any:
    """Declare a dataclass field overridable from environment variable ``name``.

    Extra keyword arguments are passed through to ``dataclasses.field``.
    """
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[metadata_key] = name
    return dataclasses.field(default=default, default_factory=default_factory,
                             metadata=metadata, **kwargs)


def is_structured(kind: Any) -> bool:
    """True for dataclass types (not instances)."""
    return isinstance(kind, type) and dataclasses.is_dataclass(kind)


def unwrap_optional(kind: Any) -> Any:
    """Reduce ``Optional[T]`` and ``T | None`` to ``T``; other unions are left alone."""
    if typing.get_origin(kind) in _UNION_TYPES:
        args = [arg for arg in typing.get_args(kind) if arg is not type(None)]
        if len(args) == 1:
            return args[0]
    return kind


def _split_annotated(kind: Any) -> tuple:
    """Return (bare type, EnvVar marker or None) for a possibly ``Annotated`` type."""
    marker = None
    if typing.get_origin(kind) is typing.Annotated:
        kind, *extras = typing.get_args(kind)
        for extra in extras:
            if isinstance(extra, EnvVar):
                marker = extra
    return kind, marker


def _resolve_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except (NameError, TypeError) as e:
        logger.debug(f"Resolving {cls.__qualname__} hints field by field: {e}")
    namespace = vars(sys.modules[cls.__module__]) if cls.__module__ in sys.modules else {}
    return {f.name: _resolve_name(f.type, namespace) for f in dataclasses.fields(cls)}


def _resolve_name(annotation: Any, namespace: Dict[str, Any]) -> Any:
    """Resolve a plain or dotted name annotation, optionally wrapped in Optional.

    Names that cannot be found (classes local to a function) stay strings.
    """
    if not isinstance(annotation, str):
        return annotation
    text = annotation.strip()
    match = _OPTIONAL_TEXT.fullmatch(text)
    if match:
        text = next(group for group in match.groups() if group).strip()
    head, *rest = text.split(".")
    if head in namespace:
        resolved = namespace[head]
    elif hasattr(builtins, head):
        resolved = getattr(builtins, head)
    else:
        return annotation
    for part in rest:
        resolved = getattr(resolved, part, None)
        if resolved is None:
            return annotation
    return resolved


def describe_fields(cls: type, metadata_key: str = DEFAULT_METADATA_KEY) -> List[FieldDescriptor]:
    """Build descriptors for every field of dataclass ``cls`` in declaration order."""
    hints = _resolve_hints(cls)
    descriptors = []
    for f in dataclasses.fields(cls):
        kind, marker = _split_annotated(unwrap_optional(hints.get(f.name, f.type)))
        kind = unwrap_optional(kind)
        env_name = f.metadata.get(metadata_key)
        if env_name is None and marker is not None:
            env_name = marker.name
        descriptors.append(FieldDescriptor(
            name=f.name,
            type=kind,
            env_name=env_name,
            accessible=not f.name.startswith("_"),
        ))
    return descriptors


__all__ = [
    "DEFAULT_METADATA_KEY",
    "EnvVar",
    "FieldDescriptor",
    "env_field",
    "is_structured",
    "unwrap_optional",
    "describe_fields",
]
