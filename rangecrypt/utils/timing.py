"""Timing instrumentation for range fetches and chunk decryption.

Each timed block yields a dict the caller can enrich while the block runs
(e.g. ``ctx["bytes"] = len(data)``). On exit it gains ``duration_ms`` and,
when a byte count is known, ``mib_per_s``. The clock itself never lives in
that dict, so caller keys cannot disturb the measurement.
"""

from __future__ import annotations

import logging
import time
from contextlib import asynccontextmanager
from contextlib import contextmanager
from typing import Any
from typing import AsyncGenerator
from typing import Generator


logger = logging.getLogger(__name__)

_BYTES_KEY = "bytes"


def _finish(operation: str, started: float, ctx: dict[str, Any], log_threshold_ms: float) -> None:
    duration_ms = (time.perf_counter() - started) * 1000.0
    ctx["duration_ms"] = duration_ms

    size = ctx.get(_BYTES_KEY)
    if isinstance(size, int) and duration_ms > 0:
        ctx["mib_per_s"] = (size / 1024 / 1024) / (duration_ms / 1000.0)

    if duration_ms < log_threshold_ms:
        return

    fields = " ".join(f"{k}={v}" for k, v in ctx.items() if k not in ("duration_ms", "mib_per_s"))
    line = f"TIMING {operation} duration_ms={duration_ms:.2f}"
    if "mib_per_s" in ctx:
        line += f" mib_per_s={ctx['mib_per_s']:.2f}"
    logger.info(f"{line} {fields}".strip())


@contextmanager
def timing_context(
    operation: str, *, log_threshold_ms: float = 0.0, extra: dict[str, Any] | None = None
) -> Generator[dict[str, Any], None, None]:
    """Time a synchronous block and log a ``TIMING`` line.

    Args:
        operation: Name of the operation being timed
        log_threshold_ms: Only log if duration reaches this threshold (ms). 0 = always log.
        extra: Context fields to include in the log line

    Example:
        with timing_context("decrypt_chunk", extra={"range_start": 0, "bytes": 1024}):
            plaintext = decrypt_chunk(ciphertext, key, 0)
        # Logs: "TIMING decrypt_chunk duration_ms=0.12 mib_per_s=8.14 range_start=0 bytes=1024"
    """
    ctx: dict[str, Any] = dict(extra or {})
    started = time.perf_counter()
    try:
        yield ctx
    finally:
        _finish(operation, started, ctx, log_threshold_ms)


@asynccontextmanager
async def async_timing_context(
    operation: str, *, log_threshold_ms: float = 0.0, extra: dict[str, Any] | None = None
) -> AsyncGenerator[dict[str, Any], None]:
    """Async counterpart of :func:`timing_context`."""
    ctx: dict[str, Any] = dict(extra or {})
    started = time.perf_counter()
    try:
        yield ctx
    finally:
        _finish(operation, started, ctx, log_threshold_ms)
