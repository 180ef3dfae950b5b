"""
Arithmetic in GF(257).

257 is the smallest prime greater than 255 (max pixel value), so every byte
has its own field representative. The one extra element, 256, is what causes
the storage gap when a field value is written back into a byte.

add, sub and mul accept Python ints or numpy integer arrays.
"""

import numpy as np

from sss_errors import FieldArithmeticError

# Define the prime number for the finite field
PRIME = 257


def _widen(value):
    if isinstance(value, np.ndarray):
        return value.astype(np.int64)
    return value


def add(a, b):
    """(a + b) mod PRIME"""
    return (_widen(a) + _widen(b)) % PRIME


def sub(a, b):
    """(a - b + PRIME) mod PRIME"""
    return (_widen(a) - _widen(b) + PRIME) % PRIME


def mul(a, b):
    """(a * b) mod PRIME, computed in 64-bit for arrays."""
    return (_widen(a) * _widen(b)) % PRIME


def mod_inverse(num, mod=PRIME):
    """
    Calculate the modular multiplicative inverse using Extended Euclidean Algorithm

    Args:
        num: Value to invert
        mod: Modulus (defaults to the field prime)

    Returns:
        m in [0, mod) with num * m == 1 (mod mod)

    Raises:
        FieldArithmeticError: If num is 0 mod `mod` or shares a factor with it
    """
    num = int(num) % mod
    if num == 0:
        raise FieldArithmeticError(f"Inverse of 0 does not exist mod {mod}")

    # Iterative extended Euclid: track coefficients of num only
    old_r, r = num, mod
    old_s, s = 1, 0
    while r != 0:
        quotient = old_r // r
        old_r, r = r, old_r - quotient * r
        old_s, s = s, old_s - quotient * s

    if old_r != 1:
        raise FieldArithmeticError(f"Modular inverse does not exist for {num} mod {mod}")
    return old_s % mod


# Pre-calculated modular inverse of 4, used by the block average on shares
INV_4 = mod_inverse(4)


def to_byte(value):
    """
    Store a field value in one byte by keeping its low 8 bits.

    256 becomes 0. This is the lossy boundary between GF(257) and byte storage.
    """
    if isinstance(value, np.ndarray):
        return (value & 0xFF).astype(np.uint8)
    return int(value) & 0xFF
