import re

import pytest

from rangecrypt.utils.timing import async_timing_context
from rangecrypt.utils.timing import timing_context


def test_timing_context_logs_operation_and_extra(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        with timing_context("decrypt_chunk", extra={"offset": 16, "size": 32}) as ctx:
            pass

    assert ctx["duration_ms"] >= 0
    assert ctx["offset"] == 16
    [record] = caplog.records
    assert record.getMessage().startswith("TIMING decrypt_chunk duration_ms=")
    assert record.getMessage().endswith("offset=16 size=32")


def test_timing_context_respects_threshold(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        with timing_context("fast_op", log_threshold_ms=60_000):
            pass

    assert caplog.records == []


def test_timing_context_logs_on_error(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        with pytest.raises(RuntimeError):
            with timing_context("failing_op"):
                raise RuntimeError("boom")

    assert "TIMING failing_op" in caplog.text


@pytest.mark.asyncio
async def test_async_timing_context(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        async with async_timing_context("fetch_range", extra={"range_start": 0, "range_end": 16}) as ctx:
            pass

    assert "duration_ms" in ctx
    assert "TIMING fetch_range" in caplog.text
    assert "range_start=0 range_end=16" in caplog.text
    assert ctx["duration_ms"] < 1_000


def test_extra_fields_do_not_disturb_the_clock(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        with timing_context("decrypt_chunk", extra={"start": 16, "started": 16}) as ctx:
            pass

    assert 0 <= ctx["duration_ms"] < 1_000
    assert ctx["start"] == 16
    duration = float(re.search(r"duration_ms=([\d.]+)", caplog.records[0].getMessage()).group(1))
    assert duration < 1_000


def test_throughput_logged_when_byte_count_known(caplog):
    with caplog.at_level("INFO", logger="rangecrypt.utils.timing"):
        with timing_context("fetch_range", extra={"range_start": 0}) as ctx:
            ctx["bytes"] = 1024 * 1024

    assert ctx["mib_per_s"] > 0
    message = caplog.records[0].getMessage()
    assert " mib_per_s=" in message
    assert message.endswith("range_start=0 bytes=1048576")
