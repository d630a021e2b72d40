from __future__ import annotations

import logging

from rangecrypt.errors import AlignmentError
from rangecrypt.reader.decrypter import decrypt_chunk
from rangecrypt.reader.fetcher import RangeFetcher
from rangecrypt.reader.types import BLOCK_SIZE
from rangecrypt.reader.types import ByteRange
from rangecrypt.reader.types import KeyMaterial
from rangecrypt.utils.timing import async_timing_context
from rangecrypt.utils.timing import timing_context


logger = logging.getLogger(__name__)


async def read_chunk(fetcher: RangeFetcher, byte_range: ByteRange, key: KeyMaterial) -> bytes:
    """Fetch one ciphertext range and return its plaintext.

    The alignment precondition is checked before any request is made, so a
    misaligned range never costs a round trip.
    """
    if not byte_range.is_block_aligned:
        logger.error(f"misaligned_range start={byte_range.start} end={byte_range.end}")
        raise AlignmentError(byte_range.start, BLOCK_SIZE)

    extra = {"range_start": byte_range.start, "range_end": byte_range.end}
    threshold = fetcher.config.timing_log_threshold_ms

    async with async_timing_context("fetch_range", log_threshold_ms=threshold, extra=extra) as fetch_timing:
        ciphertext = await fetcher.fetch_range(byte_range)
        fetch_timing["bytes"] = len(ciphertext)

    with timing_context("decrypt_chunk", log_threshold_ms=threshold, extra={**extra, "bytes": len(ciphertext)}):
        return decrypt_chunk(ciphertext, key, byte_range.start)
