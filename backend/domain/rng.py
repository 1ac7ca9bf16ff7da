"""
Seeded pseudo-random number generator shared with the web client.

The same string seed must yield the same draws on every client, so both the
string hash and the linear congruential step are reproduced exactly rather
than delegated to Python's Mersenne Twister.
"""

_UINT32 = 0xFFFFFFFF
_MODULUS = 4294967296  # 2 ** 32

_HASH_START = 0xDEADBEEF
_HASH_MULTIPLIER = 2654435761

_LCG_MULTIPLIER = 1664525
_LCG_INCREMENT = 1013904223


def hash_seed(seed: str) -> int:
    """
    Fold a string into an unsigned 32-bit integer.

    Characters are consumed as UTF-16 code units so that seeds outside the
    Basic Multilingual Plane hash the same way a browser would hash them.
    """
    h = _HASH_START
    encoded = seed.encode("utf-16-le")
    for i in range(0, len(encoded), 2):
        code_unit = encoded[i] | (encoded[i + 1] << 8)
        h = ((h ^ code_unit) * _HASH_MULTIPLIER) & _UINT32
    return (h ^ (h >> 16)) & _UINT32


class SeededRNG:
    """
    Deterministic generator seeded from an arbitrary string.

    Attributes:
        state: current 32-bit LCG state
    """

    def __init__(self, seed: str):
        self.seed = seed
        self.state = hash_seed(seed)

    def next(self) -> float:
        """Return the next float in [0, 1)."""
        self.state = (self.state * _LCG_MULTIPLIER + _LCG_INCREMENT) % _MODULUS
        return self.state / _MODULUS

    def next_int(self, min_value: int, max_value: int) -> int:
        """Return an integer in [min_value, max_value], both inclusive."""
        return int(self.next() * (max_value - min_value + 1)) + min_value

    def __repr__(self):
        return f"<SeededRNG seed={self.seed!r} state={self.state}>"
