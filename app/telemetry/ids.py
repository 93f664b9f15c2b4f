"""
Trace and span identifier generation.

Trace ids are ``trace_`` followed by 128 random bits as 32 lowercase hex
characters. Span ids are ``span_`` followed by 64 random bits as 16 lowercase
hex characters. Both functions take the random source as a parameter; the
default is the module-level ``random`` generator, whose ``getrandbits`` is
safe to call from concurrent threads.
"""

import itertools
import random
import re
import threading
import time
from typing import Optional

TRACE_ID_PREFIX = "trace_"
SPAN_ID_PREFIX = "span_"

TRACE_ID_BITS = 128
SPAN_ID_BITS = 64

TRACE_ID_LENGTH = len(TRACE_ID_PREFIX) + TRACE_ID_BITS // 4
SPAN_ID_LENGTH = len(SPAN_ID_PREFIX) + SPAN_ID_BITS // 4

_TRACE_ID_PATTERN = re.compile(r"trace_[0-9a-f]{32}")

_fallback_counter = itertools.count(1)
_fallback_lock = threading.Lock()


def _fallback_bits(bits: int) -> int:
    """Timestamp + counter value used when the random source is unusable"""
    with _fallback_lock:
        counter = next(_fallback_counter)
    return ((time.time_ns() << 24) | (counter & 0xFFFFFF)) & ((1 << bits) - 1)


def _random_hex(bits: int, rng: Optional[random.Random]) -> str:
    source = rng if rng is not None else random
    try:
        value = source.getrandbits(bits)
    except Exception:
        value = _fallback_bits(bits)
    return format(value & ((1 << bits) - 1), f"0{bits // 4}x")


def new_trace_id(rng: Optional[random.Random] = None) -> str:
    """Generate a trace id, e.g. ``trace_4bf92f3577b34da6a3ce929d0e0e4736``"""
    return TRACE_ID_PREFIX + _random_hex(TRACE_ID_BITS, rng)


def new_span_id(rng: Optional[random.Random] = None) -> str:
    """Generate a span id, e.g. ``span_00f067aa0ba902b7``"""
    return SPAN_ID_PREFIX + _random_hex(SPAN_ID_BITS, rng)


def is_trace_id(value: Optional[str]) -> bool:
    """Check that an externally supplied value has the trace id shape"""
    return bool(value) and _TRACE_ID_PATTERN.fullmatch(value) is not None
