"""
Homomorphic downscaling experiment.

  1. downscale the original image I -> I_o (integer average)
  2. share I -> I_1..I_n
  3. downscale every share in GF(257) -> I_s1..I_sn
  4. reconstruct I_s from the selected downscaled shares
  5. SAE between I_o and I_s
"""

import logging
from dataclasses import dataclass
from pathlib import Path

from bmp_codec import write_bmp
from image_utils import image_to_shares, shares_to_image
from sss_config import OutputLayout, SharingConfig
from sss_errors import ShareSetError
from sss_homomorphic import downscale_image, downscale_share_image
from sss_metrics import compare_bitmaps, mean_absolute_error

logger = logging.getLogger(__name__)

DEFAULT_RECONSTRUCT_XS = (1, 3)


@dataclass
class ExperimentResult:
    original_downscaled: object
    shares: list
    downscaled_shares: list
    reconstructed: object
    reconstruct_xs: tuple
    sae: int
    mae: float

    def save(self, layout=None):
        """Write every intermediate image into layout.output_dir."""
        if layout is None:
            layout = OutputLayout()
        out_dir = Path(layout.output_dir)
        out_dir.mkdir(parents=True, exist_ok=True)

        written = [write_bmp(out_dir / layout.original_downscaled, self.original_downscaled)]
        for x, bitmap in self.shares:
            written.append(write_bmp(out_dir / layout.share_name(x), bitmap))
        for x, bitmap in self.downscaled_shares:
            written.append(write_bmp(out_dir / layout.downscaled_share_name(x), bitmap))
        written.append(write_bmp(out_dir / layout.reconstructed_downscaled, self.reconstructed))

        logger.info("Wrote %d files to %s", len(written), out_dir)
        return written


def run_experiment(bitmap, config=None, rng=None, reconstruct_xs=DEFAULT_RECONSTRUCT_XS):
    """
    Run the five-step experiment on a 24-bit, even-sized Bitmap.

    Args:
        bitmap: Input image I
        config: SharingConfig (defaults to 2-of-3)
        rng: Random source for share generation
        reconstruct_xs: x-coordinates of the downscaled shares to combine

    Returns:
        ExperimentResult
    """
    if config is None:
        config = SharingConfig()

    original_downscaled = downscale_image(bitmap)
    logger.info("Step 1: downscaled original to %d x %d", original_downscaled.width, original_downscaled.height)

    shares = image_to_shares(bitmap, config, rng)
    logger.info("Step 2: created shares x=%s", [x for x, _ in shares])

    downscaled_shares = [(x, downscale_share_image(share)) for x, share in shares]
    logger.info("Step 3: downscaled %d shares", len(downscaled_shares))

    by_x = dict(downscaled_shares)
    missing = [x for x in reconstruct_xs if x not in by_x]
    if missing:
        raise ShareSetError(f"No share with x-coordinate(s) {missing}")
    selected = [(x, by_x[x]) for x in reconstruct_xs]
    reconstructed = shares_to_image(selected, config)
    logger.info("Step 4: reconstructed from x=%s", list(reconstruct_xs))

    sae = compare_bitmaps(original_downscaled, reconstructed)
    mae = mean_absolute_error(sae, original_downscaled.width, original_downscaled.height)
    logger.info("Step 5: SAE=%d, MAE per byte=%.4f", sae, mae)

    return ExperimentResult(
        original_downscaled=original_downscaled,
        shares=shares,
        downscaled_shares=downscaled_shares,
        reconstructed=reconstructed,
        reconstruct_xs=tuple(reconstruct_xs),
        sae=sae,
        mae=mae,
    )
