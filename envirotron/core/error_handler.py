"""Decorators around override passes: exception capture and timing."""
from __future__ import annotations

import functools
import time
from typing import Callable, TypeVar

from loguru import logger

from envirotron.core.exceptions import EnvirotronException
from envirotron.core.result import Failure, Result, Success

T = TypeVar('T')


def as_result(func: Callable[..., T]) -> Callable[..., Result[T, Exception]]:
    """Return Success(value) from ``func``, or Failure for envirotron errors.

    Exceptions outside the envirotron hierarchy still propagate.
    """
    @functools.wraps(func)
    def wrapper(*args, **kwargs) -> Result[T, Exception]:
        try:
            value = func(*args, **kwargs)
        except EnvirotronException as e:
            return Failure(e)
        return Success(value)
    return wrapper


def log_execution_time(logger_instance=logger, level: str = "DEBUG"):
    """Log how long each call to the decorated function took, in milliseconds."""
    level = level.upper()

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            started = time.perf_counter_ns()
            try:
                return func(*args, **kwargs)
            finally:
                elapsed_ms = (time.perf_counter_ns() - started) / 1_000_000
                logger_instance.log(level, f"{func.__qualname__} took {elapsed_ms:.3f}ms")
        return wrapper
    return decorator
