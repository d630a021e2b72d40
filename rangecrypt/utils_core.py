"""Utility functions for rangecrypt."""

import dataclasses
import logging
import os
import typing
from typing import Any
from typing import Callable
from typing import TypeVar


T = TypeVar("T")

logger = logging.getLogger(__name__)


def env(key: str, convert: Callable[[str], T] = typing.cast(Callable[[str], T], str), **kwargs: Any) -> T:
    """Load a value from environment variables with optional default and type conversion.

    The key may carry a default after a colon, e.g. ``"LOG_LEVEL:INFO"``. An empty
    default (``"LOKI_URL:"``) is still a default; a key without a colon is required.
    """
    key, partition, default = key.partition(":")

    def default_factory(
        key_val: str = key, default_val: str = default, convert_func: Callable[[str], T] = convert
    ) -> T:
        if key_val in os.environ:
            return convert_func(os.environ[key_val])

        if partition == ":":
            return convert_func(default_val)

        raise KeyError(key_val)

    return typing.cast(T, dataclasses.field(default_factory=default_factory, **kwargs))


def to_bool(value: str) -> bool:
    return value.strip().lower() in ("1", "true", "yes", "on")
