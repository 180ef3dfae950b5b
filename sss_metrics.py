"""Sum of absolute errors between images or raw byte sequences."""

import logging

import numpy as np

from bmp_codec import BITS_PER_PIXEL
from sss_errors import DimensionError

logger = logging.getLogger(__name__)


def sum_absolute_error(first, second):
    """
    SAE = sum(|a_i - b_i|), each byte read as unsigned 0-255.

    If the lengths differ only the overlapping prefix is compared and a
    warning is logged.
    """
    a = np.frombuffer(bytes(first), dtype=np.uint8)
    b = np.frombuffer(bytes(second), dtype=np.uint8)
    if a.size != b.size:
        logger.warning(
            "Data sizes differ (%d vs %d bytes), comparing the first %d",
            a.size,
            b.size,
            min(a.size, b.size),
        )
    length = min(a.size, b.size)
    diff = np.abs(a[:length].astype(np.int64) - b[:length].astype(np.int64))
    return int(diff.sum())


def compare_bitmaps(first, second):
    """
    SAE between the payloads of two Bitmaps of the same reported size.

    Raises:
        DimensionError: If width or height differ
    """
    if (first.width, first.height) != (second.width, second.height):
        raise DimensionError(
            f"Image dimensions mismatch: {first.width}x{first.height} "
            f"vs {second.width}x{second.height}"
        )
    return sum_absolute_error(first.payload, second.payload)


def mean_absolute_error(sae, width, height):
    """SAE averaged over width * height * 3 bytes (row padding ignored)."""
    num_bytes = width * height * (BITS_PER_PIXEL // 8)
    if num_bytes == 0:
        return 0.0
    return sae / num_bytes
