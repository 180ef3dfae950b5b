"""
Shamir's Secret Sharing over GF(257) for byte sequences.

Every secret byte gets its own random polynomial f(x) = s + a1*x and each
share stores f(x) for a fixed x in 1..n. Any k=2 shares recover f(0) = s by
Lagrange interpolation.

Two lossy boundaries are part of the format and are kept as is:
  * generation stores f(x) in one byte, so 256 is written as 0
  * reconstruction clamps a recovered 256 to 255 and logs a warning
"""

import logging
import secrets
from dataclasses import dataclass

import numpy as np

from sss_config import SharingConfig
from sss_errors import ShareSetError
from sss_field import PRIME, add, mod_inverse, mul, sub, to_byte

logger = logging.getLogger(__name__)

MAX_BYTE = 255


@dataclass(frozen=True)
class Share:
    """One share of a byte sequence: its x-coordinate and stored values."""
    x: int
    data: bytes

    def __len__(self):
        return len(self.data)

    @property
    def values(self):
        """Stored values as an int64 array, ready for field arithmetic."""
        return np.frombuffer(self.data, dtype=np.uint8).astype(np.int64)


def default_rng():
    """Cryptographically secure source backed by the OS."""
    return secrets.SystemRandom()


def evaluate_polynomial(coefficients, x, prime=PRIME):
    """
    Evaluate a polynomial with given coefficients at point x in a finite field with given prime.

    Coefficients are ordered from the constant term upwards.
    """
    result = 0
    for coefficient in reversed(coefficients):
        result = (result * x + coefficient) % prime
    return result


def split_secret(secret, threshold, num_shares, rng=None):
    """
    Split a single secret value into n shares.

    Args:
        secret: The secret to share (0-256)
        threshold: Minimum number of shares required to reconstruct the secret
        num_shares: Total number of shares to generate
        rng: Random source with a ``randrange`` method (defaults to the OS CSPRNG)

    Returns:
        List of tuples (x_i, y_i) with raw field values, not truncated to a byte
    """
    config = SharingConfig(threshold, num_shares)

    if not 0 <= secret < PRIME:
        raise ValueError(f"Secret must be in range [0, {PRIME - 1}]")

    if rng is None:
        rng = default_rng()

    # First coefficient is the secret
    coefficients = [secret]
    for _ in range(config.threshold - 1):
        coefficients.append(rng.randrange(PRIME))

    return [(x, evaluate_polynomial(coefficients, x)) for x in config.x_values]


def _as_byte_array(secret_bytes):
    if isinstance(secret_bytes, np.ndarray):
        return np.asarray(secret_bytes, dtype=np.uint8).reshape(-1)
    return np.frombuffer(bytes(secret_bytes), dtype=np.uint8)


def draw_coefficients(rng, count):
    """Draw `count` independent coefficients uniformly from [0, PRIME)."""
    return np.fromiter((rng.randrange(PRIME) for _ in range(count)), dtype=np.int64, count=count)


def split_bytes(secret_bytes, config=None, rng=None):
    """
    Split every byte of a sequence into shares.

    Args:
        secret_bytes: bytes, bytearray, iterable of ints in 0-255 or a uint8 array
        config: SharingConfig (defaults to 2-of-3)
        rng: Random source with a ``randrange`` method (defaults to the OS CSPRNG)

    Returns:
        List of Share, one per x-coordinate, each as long as the input
    """
    if config is None:
        config = SharingConfig()
    if rng is None:
        rng = default_rng()

    data = _as_byte_array(secret_bytes).astype(np.int64)

    # One fresh a1 per secret byte
    coefficients = draw_coefficients(rng, data.size)

    shares = []
    for x in config.x_values:
        y = add(data, mul(coefficients, x))
        shares.append(Share(x=x, data=to_byte(y).tobytes()))

    logger.debug("Split %d bytes into %d shares (k=%d)", data.size, config.num_shares, config.threshold)
    return shares


def make_shares(x_values, payloads):
    """
    Pair x-coordinates with share payloads.

    Raises:
        ShareSetError: If the two lists differ in length
    """
    x_values = list(x_values)
    payloads = list(payloads)
    if len(x_values) != len(payloads):
        raise ShareSetError(
            f"Got {len(payloads)} share payloads but {len(x_values)} x-coordinates"
        )
    return [Share(x=int(x), data=bytes(payload)) for x, payload in zip(x_values, payloads)]


def lagrange_basis(x_values):
    """
    Lagrange basis weights at x=0 for the given coordinates.

    basis_i = prod_{j != i} x_j * inverse(x_j - x_i) mod PRIME
    """
    x_values = [int(x) % PRIME for x in x_values]
    if len(set(x_values)) != len(x_values):
        raise ShareSetError(f"Duplicate x-coordinates: {x_values}")

    basis = []
    for i, x_i in enumerate(x_values):
        weight = 1
        for j, x_j in enumerate(x_values):
            if i != j:
                weight = mul(weight, mul(x_j, mod_inverse(sub(x_j, x_i))))
        basis.append(weight)
    return basis


def lagrange_interpolation(points):
    """
    Reconstruct the secret (y-intercept) using Lagrange interpolation.

    Args:
        points: List of tuples (x_i, y_i)

    Returns:
        The interpolated field value in [0, PRIME)
    """
    if not points:
        raise ShareSetError("No shares provided")

    basis = lagrange_basis([x for x, _ in points])
    secret = 0
    for (_, y), weight in zip(points, basis):
        secret = add(secret, mul(y, weight))
    return secret


def _check_share_set(shares, config):
    if len(shares) < config.threshold:
        raise ShareSetError(f"Need at least k={config.threshold} shares, got {len(shares)}")

    chosen = list(shares[:config.threshold])
    if len(shares) > config.threshold:
        logger.debug("Using the first %d of %d shares", config.threshold, len(shares))

    xs = [share.x for share in chosen]
    for x in xs:
        if not 1 <= x <= config.num_shares:
            raise ShareSetError(f"x-coordinate {x} outside 1..{config.num_shares}")
    if len(set(xs)) != len(xs):
        raise ShareSetError(f"Duplicate x-coordinates: {xs}")
    return chosen


def recover_secret(points, config=None):
    """
    Recover a single field value from at least k (x, y) points.

    No byte clamping is applied; the result may be 256.
    """
    if config is None:
        config = SharingConfig()
    if len(points) < config.threshold:
        raise ShareSetError(f"Need at least k={config.threshold} shares, got {len(points)}")
    return lagrange_interpolation(list(points[:config.threshold]))


def recover_bytes(shares, config=None):
    """
    Recover a byte sequence from at least k shares.

    Args:
        shares: Sequence of Share; only the first k are used
        config: SharingConfig (defaults to 2-of-3)

    Returns:
        The reconstructed bytes. Positions whose value comes out as 256 are
        clamped to 255 and reported with a warning.
    """
    if config is None:
        config = SharingConfig()

    chosen = _check_share_set(list(shares), config)

    length = len(chosen[0])
    for share in chosen[1:]:
        if len(share) != length:
            raise ShareSetError(
                f"Share data lengths mismatch: {length} (x={chosen[0].x}) vs {len(share)} (x={share.x})"
            )

    basis = lagrange_basis([share.x for share in chosen])
    accum = np.zeros(length, dtype=np.int64)
    for share, weight in zip(chosen, basis):
        accum = add(accum, mul(share.values, weight))

    clamped = np.flatnonzero(accum > MAX_BYTE)
    if clamped.size:
        for index in clamped:
            logger.debug("Clamping reconstructed value %d > 255 at index %d", accum[index], index)
        logger.warning(
            "Clamped %d reconstructed value(s) > 255 to 255 (first at index %d)",
            clamped.size,
            clamped[0],
        )
        accum[clamped] = MAX_BYTE

    return accum.astype(np.uint8).tobytes()
