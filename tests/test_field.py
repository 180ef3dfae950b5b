import itertools

import numpy as np
import pytest

from sss_errors import FieldArithmeticError
from sss_field import INV_4, PRIME, add, mod_inverse, mul, sub, to_byte

SAMPLE = range(0, PRIME, 16)


def test_basic_operations():
    assert add(200, 100) == 43
    assert sub(3, 5) == 255
    assert sub(5, 3) == 2
    assert mul(256, 256) == 1
    assert mul(16, 17) == 15


def test_add_and_mul_are_commutative_and_associative():
    for a, b, c in itertools.product(SAMPLE, repeat=3):
        assert add(a, b) == add(b, a)
        assert mul(a, b) == mul(b, a)
        assert add(add(a, b), c) == add(a, add(b, c))
        assert mul(mul(a, b), c) == mul(a, mul(b, c))


def test_sub_undoes_add():
    for a, b in itertools.product(SAMPLE, repeat=2):
        assert sub(add(a, b), b) == a


def test_inverse_of_every_non_zero_element():
    for n in range(1, PRIME):
        m = mod_inverse(n)
        assert 0 <= m < PRIME
        assert (n * m) % PRIME == 1


def test_inverse_of_zero_fails():
    with pytest.raises(FieldArithmeticError):
        mod_inverse(0)
    with pytest.raises(ValueError):
        mod_inverse(PRIME)


def test_inverse_of_four():
    assert INV_4 == 193
    assert mul(4, INV_4) == 1


def test_array_mul_does_not_overflow_narrow_dtypes():
    a = np.array([256, 256, 200], dtype=np.uint16)
    b = np.array([256, 2, 200], dtype=np.uint16)
    result = mul(a, b)
    assert result.tolist() == [1, 255, (200 * 200) % PRIME]


def test_array_add_and_sub():
    a = np.array([250, 0, 10], dtype=np.uint8)
    b = np.array([10, 1, 10], dtype=np.uint8)
    assert add(a, b).tolist() == [3, 1, 20]
    assert sub(a, b).tolist() == [240, 256, 0]


def test_to_byte_truncates_256():
    assert to_byte(256) == 0
    assert to_byte(255) == 255
    assert to_byte(np.array([0, 255, 256])).tolist() == [0, 255, 0]
