#!/usr/bin/env python3

"""Logger lookup and timing helpers."""

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager
from functools import wraps
from time import perf_counter
from typing import Any, TypeVar, cast

F = TypeVar("F", bound=Callable[..., Any])


def get_logger(name: str) -> logging.Logger:
    """Return the logger for a module; pass ``__name__``."""
    return logging.getLogger(name)


@contextmanager
def timed(logger: logging.Logger, operation: str) -> Iterator[None]:
    """Log how long the enclosed block took, in milliseconds.

    Success is logged at DEBUG. An exception is logged at ERROR with the
    elapsed time and then re-raised unchanged.

    Example:
        with timed(logger, "clang++ input.cpp"):
            subprocess.run(...)
    """
    logger.debug(f"Starting {operation}")
    start = perf_counter()
    try:
        yield
    except Exception as e:
        logger.error(f"Failed {operation} after {(perf_counter() - start) * 1000:.1f}ms: {e}")
        raise
    logger.debug(f"Completed {operation} in {(perf_counter() - start) * 1000:.1f}ms")


def log_timing(func: F) -> F:
    """Decorator form of :func:`timed`, labelled with the function's qualified name."""

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        with timed(get_logger(func.__module__), func.__qualname__):
            return func(*args, **kwargs)

    return cast("F", wrapper)
