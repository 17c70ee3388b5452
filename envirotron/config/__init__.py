"""Configuration package for the override engine.

Main components:
- config.py: OverrideOptions dataclass and its loader
"""
from __future__ import annotations

from .config import ConfigLoader, OverrideOptions, load_options

__all__ = ["ConfigLoader", "OverrideOptions", "load_options"]
