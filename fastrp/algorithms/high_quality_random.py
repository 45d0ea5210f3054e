"""64-bit combined pseudorandom generator used to draw seed vectors.

The generator combines a linear congruential step, a xorshift register and a
multiply-with-carry word. Each instance is owned by a single worker task, so
it carries no lock.
"""

from __future__ import annotations

import threading
import time

MASK_64 = (1 << 64) - 1
MASK_32 = (1 << 32) - 1

_V_INIT = 4101842887655102017
_LCG_MULTIPLIER = 2862933555777941757
_LCG_INCREMENT = 7046029254386353087
_MWC_MULTIPLIER = 4294957665
_DOUBLE_UNIT = 1.0 / (1 << 53)
_GOLDEN_GAMMA = 0x9E3779B97F4A7C15


def default_seed() -> int:
    """Seed from the high resolution clock mixed with the current thread id."""
    return (time.perf_counter_ns() ^ (threading.get_ident() * _GOLDEN_GAMMA)) & MASK_64


def derive_seed(base_seed: int, stream: int) -> int:
    """Derive an independent seed for ``stream`` (e.g. a node id) from base_seed."""
    z = (base_seed + (stream + 1) * _GOLDEN_GAMMA) & MASK_64
    z = ((z ^ (z >> 30)) * 0xBF58476D1CE4E5B9) & MASK_64
    z = ((z ^ (z >> 27)) * 0x94D049BB133111EB) & MASK_64
    return z ^ (z >> 31)


class HighQualityRandom:
    """Long-period generator with three interacting 64-bit state words."""

    __slots__ = ("_u", "_v", "_w")

    def __init__(self, seed: int | None = None):
        self._u = 0
        self._v = _V_INIT
        self._w = 1
        self.seed(default_seed() if seed is None else seed)

    def seed(self, seed: int) -> None:
        """Reset the state from seed. Identical seeds give identical streams."""
        self._v = _V_INIT
        self._w = 1
        self._u = (seed & MASK_64) ^ self._v
        self.next_long()
        self._v = self._u
        self.next_long()
        self._w = self._v
        self.next_long()

    def next_long(self) -> int:
        """Next unsigned 64-bit word."""
        u = (self._u * _LCG_MULTIPLIER + _LCG_INCREMENT) & MASK_64
        self._u = u

        v = self._v
        v ^= v >> 17
        v ^= (v << 31) & MASK_64
        v ^= v >> 8
        self._v = v

        w = self._w
        w = (_MWC_MULTIPLIER * (w & MASK_32) + (w >> 32)) & MASK_64
        self._w = w

        x = u ^ ((u << 21) & MASK_64)
        x ^= x >> 35
        x ^= (x << 4) & MASK_64
        return ((x + v) & MASK_64) ^ w

    def next_bits(self, bits: int) -> int:
        """The ``bits`` most significant bits of the next word."""
        return self.next_long() >> (64 - bits)

    def next_double(self) -> float:
        """Uniform double in ``[0, 1)``."""
        return (self.next_long() >> 11) * _DOUBLE_UNIT
