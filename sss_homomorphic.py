"""
2x2 block-average downscaling, in the integer domain and in GF(257).

Shamir shares are additive: summing four shares and scaling by inverse(4)
gives a share of the field-average of the four secrets. The plaintext path
uses truncating integer division instead, so the two results can differ
after reconstruction whenever the four-pixel sum is not a multiple of 4.
"""

import logging

import numpy as np

from bmp_codec import BITS_PER_PIXEL, Bitmap, create_header, row_stride
from sss_errors import DimensionError, InvalidInputSizeError
from sss_field import INV_4, add, mul, to_byte

logger = logging.getLogger(__name__)

CHANNELS = BITS_PER_PIXEL // 8


def _check_dimensions(width, height):
    if width <= 0 or height <= 0:
        raise DimensionError(f"Image dimensions must be positive, got {width} x {height}")
    if width % 2 != 0 or height % 2 != 0:
        raise DimensionError(f"Image width and height must be even, got {width} x {height}")


def _blocks(payload, width, height):
    """
    Split a padded payload into the four corner planes of every 2x2 block.

    Returns four int64 arrays of shape (height/2, width/2, CHANNELS).
    """
    _check_dimensions(width, height)
    stride = row_stride(width)
    needed = stride * height
    if len(payload) < needed:
        raise InvalidInputSizeError(
            f"Payload has {len(payload)} bytes, a {width} x {height} image needs {needed}"
        )

    rows = np.frombuffer(bytes(payload[:needed]), dtype=np.uint8).reshape(height, stride)
    pixels = rows[:, :width * CHANNELS].reshape(height, width, CHANNELS).astype(np.int64)

    p1 = pixels[0::2, 0::2]  # (2x, 2y)
    p2 = pixels[0::2, 1::2]  # (2x+1, 2y)
    p3 = pixels[1::2, 0::2]  # (2x, 2y+1)
    p4 = pixels[1::2, 1::2]  # (2x+1, 2y+1)
    return p1, p2, p3, p4


def _pack(values, width, height):
    """Lay out (height, width, CHANNELS) uint8 values with zeroed row padding."""
    stride = row_stride(width)
    out = np.zeros((height, stride), dtype=np.uint8)
    out[:, :width * CHANNELS] = values.reshape(height, width * CHANNELS)
    return out.tobytes()


def downscale_plain(payload, width, height):
    """
    Halve a plaintext raster with an integer 2x2 average.

    Args:
        payload: Padded pixel bytes of a width x height 24-bit image
        width: Input width in pixels (even)
        height: Input height in pixels (even)

    Returns:
        Padded payload of the (width/2) x (height/2) image
    """
    p1, p2, p3, p4 = _blocks(payload, width, height)
    avg = (p1 + p2 + p3 + p4) // 4
    # Cannot exceed 255 by construction
    avg = np.clip(avg, 0, 255).astype(np.uint8)
    return _pack(avg, width // 2, height // 2)


def downscale_share(payload, width, height):
    """
    Halve a share raster with the GF(257) average sum * inverse(4).

    The stored result keeps the low 8 bits, so a field value of 256 is
    written as 0.
    """
    p1, p2, p3, p4 = _blocks(payload, width, height)
    total = add(add(p1, p2), add(p3, p4))
    avg_share = mul(total, INV_4)
    return _pack(to_byte(avg_share), width // 2, height // 2)


def _downscale_bitmap(bitmap, transform):
    bitmap.require_24_bit()
    width, height = bitmap.width, bitmap.height
    payload = transform(bitmap.payload, width, height)
    new_width, new_height = width // 2, height // 2
    logger.debug("Downscaled %d x %d -> %d x %d", width, height, new_width, new_height)
    return Bitmap(header=create_header(new_width, new_height), payload=payload)


def downscale_image(bitmap):
    """Plaintext downscale of a 24-bit Bitmap; returns a Bitmap with a new header."""
    return _downscale_bitmap(bitmap, downscale_plain)


def downscale_share_image(bitmap):
    """Field-domain downscale of a share Bitmap; returns a Bitmap with a new header."""
    return _downscale_bitmap(bitmap, downscale_share)
