"""Tests for trace and span identifier generation"""
import random
from concurrent.futures import ThreadPoolExecutor

from app.telemetry.ids import (
    SPAN_ID_LENGTH,
    TRACE_ID_LENGTH,
    is_trace_id,
    new_span_id,
    new_trace_id,
)

HEX = set("0123456789abcdef")


class FailingRandom:
    """Random source whose bits are unavailable"""

    def getrandbits(self, bits):
        raise OSError("entropy source unavailable")


class TestIdentifierFormat:

    def test_trace_id_has_prefix_and_32_hex_chars(self):
        trace_id = new_trace_id()
        assert trace_id.startswith("trace_")
        assert len(trace_id) == TRACE_ID_LENGTH == 38
        assert set(trace_id[len("trace_"):]) <= HEX

    def test_span_id_has_prefix_and_16_hex_chars(self):
        span_id = new_span_id()
        assert span_id.startswith("span_")
        assert len(span_id) == SPAN_ID_LENGTH == 21
        assert set(span_id[len("span_"):]) <= HEX

    def test_small_values_are_zero_padded(self):
        class ZeroRandom:
            def getrandbits(self, bits):
                return 0

        assert new_span_id(ZeroRandom()) == "span_" + "0" * 16
        assert new_trace_id(ZeroRandom()) == "trace_" + "0" * 32

    def test_injected_source_is_deterministic(self):
        assert new_trace_id(random.Random(42)) == new_trace_id(random.Random(42))
        assert new_span_id(random.Random(7)) == new_span_id(random.Random(7))


class TestIdentifierUniqueness:

    def test_unique_on_single_worker(self):
        trace_ids = {new_trace_id() for _ in range(5000)}
        span_ids = {new_span_id() for _ in range(5000)}
        assert len(trace_ids) == 5000
        assert len(span_ids) == 5000

    def test_unique_across_concurrent_workers(self):
        def batch(_):
            return [(new_trace_id(), new_span_id()) for _ in range(500)]

        with ThreadPoolExecutor(max_workers=8) as pool:
            results = [pair for chunk in pool.map(batch, range(8)) for pair in chunk]

        assert len({trace_id for trace_id, _ in results}) == 4000
        assert len({span_id for _, span_id in results}) == 4000


class TestFallbackGeneration:

    def test_failing_source_still_produces_ids(self):
        trace_id = new_trace_id(FailingRandom())
        span_id = new_span_id(FailingRandom())
        assert len(trace_id) == TRACE_ID_LENGTH
        assert len(span_id) == SPAN_ID_LENGTH

    def test_fallback_ids_are_unique(self):
        source = FailingRandom()
        span_ids = {new_span_id(source) for _ in range(1000)}
        trace_ids = {new_trace_id(source) for _ in range(1000)}
        assert len(span_ids) == 1000
        assert len(trace_ids) == 1000


class TestIsTraceId:

    def test_generated_trace_id_is_valid(self):
        assert is_trace_id(new_trace_id())

    def test_rejects_other_shapes(self):
        assert not is_trace_id(None)
        assert not is_trace_id("")
        assert not is_trace_id(new_span_id())
        assert not is_trace_id("trace_" + "G" * 32)
        assert not is_trace_id("trace_" + "a" * 31)
        assert not is_trace_id("trace_" + "a" * 32 + "\n")
