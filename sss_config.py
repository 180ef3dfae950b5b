"""
Sharing parameters and output layout for the image pipeline.
"""

from dataclasses import dataclass

from sss_errors import ConfigurationError
from sss_field import PRIME

# Only degree-1 polynomials are implemented
SUPPORTED_THRESHOLD = 2
DEFAULT_THRESHOLD = 2
DEFAULT_NUM_SHARES = 3


@dataclass(frozen=True)
class SharingConfig:
    """
    k-of-n sharing parameters.

    x-coordinates are always 1..n. n is capped at PRIME - 1 so every
    coordinate is a distinct non-zero field element.
    """
    threshold: int = DEFAULT_THRESHOLD
    num_shares: int = DEFAULT_NUM_SHARES

    def __post_init__(self):
        if self.threshold != SUPPORTED_THRESHOLD:
            raise ConfigurationError(
                f"Only threshold k={SUPPORTED_THRESHOLD} is supported, got k={self.threshold}"
            )
        if self.num_shares < self.threshold:
            raise ConfigurationError("Threshold cannot be greater than the number of shares")
        if self.num_shares > PRIME - 1:
            raise ConfigurationError(f"At most {PRIME - 1} shares fit in GF({PRIME})")

    @property
    def x_values(self):
        return tuple(range(1, self.num_shares + 1))


@dataclass(frozen=True)
class OutputLayout:
    """File names written by the homomorphic downscaling experiment."""
    output_dir: str = "homomorphic_output"
    original_downscaled: str = "I_o_original_downscaled.bmp"
    share_prefix: str = "share_I"
    downscaled_share_prefix: str = "share_I_s"
    reconstructed_downscaled: str = "I_s_reconstructed_downscaled.bmp"

    def share_name(self, x):
        return f"{self.share_prefix}_{x}.bmp"

    def downscaled_share_name(self, x):
        return f"{self.downscaled_share_prefix}_{x}.bmp"
