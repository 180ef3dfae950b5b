import itertools
import logging
import random
import secrets

import pytest

from sss_config import SharingConfig
from sss_core import (
    Share,
    default_rng,
    evaluate_polynomial,
    lagrange_basis,
    lagrange_interpolation,
    make_shares,
    recover_bytes,
    recover_secret,
    split_bytes,
    split_secret,
)
from sss_errors import ConfigurationError, ShareSetError
from sss_field import PRIME

PAIRS = list(itertools.combinations([1, 2, 3], 2))


def _pick(shares, xs):
    by_x = {share.x: share for share in shares}
    return [by_x[x] for x in xs]


def test_evaluate_polynomial():
    assert evaluate_polynomial([3, 2], 5) == 13
    assert evaluate_polynomial([254, 2], 1) == 256
    assert evaluate_polynomial([254, 2], 2) == 1


def test_split_secret_returns_raw_field_values(fixed_rng):
    assert split_secret(254, 2, 3, rng=fixed_rng(2)) == [(1, 256), (2, 1), (3, 3)]


def test_split_secret_rejects_out_of_range():
    with pytest.raises(ValueError):
        split_secret(PRIME, 2, 3, rng=random.Random(0))
    with pytest.raises(ValueError):
        split_secret(-1, 2, 3, rng=random.Random(0))


def test_split_bytes_shape(fixed_rng):
    rng = fixed_rng(7)
    shares = split_bytes(b"\x00\x01\x02\x03\x04", rng=rng)
    assert [share.x for share in shares] == [1, 2, 3]
    assert all(len(share) == 5 for share in shares)
    assert shares[0].data == bytes([7, 8, 9, 10, 11])
    assert shares[2].data == bytes([21, 22, 23, 24, 25])


def test_one_coefficient_per_secret_byte(fixed_rng):
    rng = fixed_rng(1)
    split_bytes(bytes(100), rng=rng)
    assert rng.draws == 100


def test_split_bytes_accepts_int_sequences(fixed_rng):
    shares = split_bytes([0, 128, 255, 1], rng=fixed_rng(5))
    assert shares[1].data == bytes([10, 138, 8, 11])


def test_end_to_end_all_pairs(fixed_rng):
    secret = bytes([0, 128, 255, 1])
    shares = split_bytes(secret, rng=fixed_rng(5))
    for xs in PAIRS:
        assert recover_bytes(_pick(shares, xs)) == secret


def test_round_trip_every_byte_every_pair(sequence_rng):
    coefficients = [(i * 37 + 11) % PRIME for i in range(256)]
    secret = bytes(range(256))
    shares = split_bytes(secret, rng=sequence_rng(coefficients))

    for xs in PAIRS:
        recovered = recover_bytes(_pick(shares, xs))
        for s, a1 in zip(range(256), coefficients):
            collided = any((s + a1 * x) % PRIME == 256 for x in xs)
            if not collided:
                assert recovered[s] == s, (s, xs)


def test_reconstruction_clamps_256_to_255(fixed_rng, caplog):
    # f(x) = 254 + 2x: f(1) = 256 is stored as 0, f(2) = 1, f(3) = 3
    shares = split_bytes([254], rng=fixed_rng(2))
    assert [share.data for share in shares] == [b"\x00", b"\x01", b"\x03"]

    with caplog.at_level(logging.WARNING, logger="sss_core"):
        assert recover_bytes(_pick(shares, (1, 2))) == b"\xff"
    assert "Clamped 1 reconstructed value" in caplog.text

    # Neither stored value was truncated
    assert recover_bytes(_pick(shares, (2, 3))) == b"\xfe"


def test_truncated_share_without_clamp(fixed_rng, caplog):
    shares = split_bytes([254], rng=fixed_rng(2))
    with caplog.at_level(logging.WARNING, logger="sss_core"):
        assert recover_bytes(_pick(shares, (1, 3))) == bytes([127])
    assert "Clamped" not in caplog.text


def test_recover_secret_returns_unclamped_value():
    assert recover_secret([(1, 0), (2, 1)]) == 256


def test_single_share_is_uniform_over_the_field(fixed_rng):
    for secret in (0, 77, 255):
        for x in (1, 2, 3):
            values = {split_secret(secret, 2, 3, rng=fixed_rng(a1))[x - 1][1] for a1 in range(PRIME)}
            assert values == set(range(PRIME))


def test_lagrange_basis_weights():
    assert lagrange_basis([1, 2]) == [2, 256]
    assert lagrange_basis([1, 3]) == [130, 128]
    assert lagrange_basis([2, 3]) == [3, 255]


def test_lagrange_interpolation_single_value():
    assert lagrange_interpolation([(1, 15), (3, 35)]) == 5


def test_lagrange_rejects_duplicates():
    with pytest.raises(ShareSetError):
        lagrange_basis([2, 2])
    with pytest.raises(ShareSetError):
        lagrange_interpolation([])


def test_more_than_k_shares_uses_first_k(fixed_rng):
    secret = b"homomorphic"
    shares = split_bytes(secret, rng=fixed_rng(3))
    assert recover_bytes(shares) == secret


def test_insufficient_shares_fail(fixed_rng):
    shares = split_bytes(b"abc", rng=fixed_rng(1))
    with pytest.raises(ShareSetError):
        recover_bytes(shares[:1])
    with pytest.raises(ShareSetError):
        recover_secret([(1, 5)])


def test_duplicate_x_fails():
    with pytest.raises(ShareSetError):
        recover_bytes([Share(1, b"ab"), Share(1, b"cd")])


def test_x_out_of_range_fails():
    with pytest.raises(ShareSetError):
        recover_bytes([Share(1, b"ab"), Share(4, b"cd")])
    with pytest.raises(ShareSetError):
        recover_bytes([Share(0, b"ab"), Share(2, b"cd")])


def test_length_mismatch_fails():
    with pytest.raises(ShareSetError):
        recover_bytes([Share(1, b"abc"), Share(2, b"ab")])


def test_make_shares_count_mismatch():
    with pytest.raises(ShareSetError):
        make_shares([1, 2, 3], [b"a", b"b"])
    shares = make_shares([1, 3], [b"a", bytearray(b"b")])
    assert shares == [Share(1, b"a"), Share(3, b"b")]


def test_config_validation():
    assert SharingConfig().x_values == (1, 2, 3)
    assert SharingConfig(2, 5).x_values == (1, 2, 3, 4, 5)
    with pytest.raises(ConfigurationError):
        SharingConfig(threshold=3, num_shares=5)
    with pytest.raises(ConfigurationError):
        SharingConfig(threshold=2, num_shares=1)
    with pytest.raises(ConfigurationError):
        SharingConfig(threshold=2, num_shares=300)
    with pytest.raises(ConfigurationError):
        split_secret(10, 3, 3)


def test_default_rng_is_os_backed():
    assert isinstance(default_rng(), secrets.SystemRandom)
