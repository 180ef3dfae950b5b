import base64
import io
import logging
import re

from PIL import Image

from bmp_codec import Bitmap
from sss_config import SharingConfig
from sss_core import make_shares, recover_bytes, split_bytes
from sss_errors import ShareSetError

logger = logging.getLogger(__name__)

_SHARE_INDEX = re.compile(r"share_(?:I_s_|I_)?(\d+)")


def load_bitmap(source):
    """
    Load any image Pillow can read as a 24-bit BMP.

    Args:
        source: Path, file-like object or PIL Image

    Returns:
        Bitmap: 54-byte header plus padded BGR payload
    """
    image = source if isinstance(source, Image.Image) else Image.open(source)
    # Alpha and palettes are dropped; the sharing works on 3 bytes per pixel
    rgb = image.convert("RGB")
    buffer = io.BytesIO()
    rgb.save(buffer, format="BMP")
    return Bitmap.from_bytes(buffer.getvalue())


def crop_to_even(image):
    """Drop the last column and/or row so both dimensions are even."""
    width, height = image.size
    even_width, even_height = width - width % 2, height - height % 2
    if (even_width, even_height) == (width, height):
        return image
    logger.info("Cropping %d x %d to %d x %d", width, height, even_width, even_height)
    return image.crop((0, 0, even_width, even_height))


def bitmap_to_image(bitmap):
    """Decode a Bitmap back into an RGB PIL Image for display."""
    image = Image.open(io.BytesIO(bitmap.to_bytes()))
    return image.convert("RGB")


def create_preview_image(bitmap):
    """
    Create a preview image from share data

    A share is stored exactly like a normal 24-bit image, so the preview is
    just the decoded bitmap (it looks like noise).
    """
    return bitmap_to_image(bitmap)


def image_to_shares(bitmap, config=None, rng=None, progress_callback=None):
    """
    Convert an image to Shamir's Secret Sharing shares

    Args:
        bitmap: 24-bit Bitmap
        config: SharingConfig (defaults to 2-of-3)
        rng: Random source passed to split_bytes
        progress_callback: Function to call with progress updates (0.0-1.0)

    Returns:
        list: (x, Bitmap) pairs, each share reusing the input header
    """
    bitmap.require_24_bit()
    if config is None:
        config = SharingConfig()

    if progress_callback:
        progress_callback(0.0)

    shares = split_bytes(bitmap.payload, config, rng)
    result = []
    for i, share in enumerate(shares, start=1):
        result.append((share.x, bitmap.with_payload(share.data)))
        if progress_callback:
            progress_callback(i / len(shares))

    logger.info(
        "Created %d shares of a %d x %d image",
        len(result),
        bitmap.width,
        bitmap.height,
    )
    return result


def shares_to_image(shares, config=None):
    """
    Reconstruct an image from its shares

    Args:
        shares: List of tuples (x, Bitmap); the first k are used

    Returns:
        Bitmap: Reconstructed image with the first share's header
    """
    if not shares:
        raise ShareSetError("No shares provided")

    x_values = [x for x, _ in shares]
    bitmaps = [bitmap for _, bitmap in shares]
    data = recover_bytes(make_shares(x_values, [b.payload for b in bitmaps]), config)
    return bitmaps[0].with_payload(data)


def parse_share_index(filename):
    """
    Extract the share x-coordinate from names like 'share_2.bmp',
    'share_I_3.bmp' or 'share_I_s_1 (1).bmp'. Returns None if absent.
    """
    match = _SHARE_INDEX.search(filename)
    if match:
        return int(match.group(1))
    return None


def download_button(object_to_download, download_filename, button_text):
    """
    Generate a link to download the given object.

    Args:
        object_to_download: The object to be downloaded (file or bytes)
        download_filename: Filename to download as
        button_text: Text to display on the download button

    Returns:
        HTML string containing the download link
    """
    try:
        # If object is a file or bytes-like object
        b64 = base64.b64encode(object_to_download).decode()
    except TypeError:
        # If object is a string
        b64 = base64.b64encode(object_to_download.encode()).decode()

    button_uuid = str(id(button_text))
    button_id = f"download-button-{button_uuid}"

    custom_css = f"""
        <style>
            #{button_id} {{
                background-color: #d90429;
                color: white;
                padding: 0.5rem 1rem;
                border-radius: 5px;
                border: none;
                text-decoration: none;
                font-size: 0.9rem;
                text-align: center;
                display: inline-block;
                margin: 0.25rem 0;
                cursor: pointer;
            }}
            #{button_id}:hover {{
                background-color: #ef233c;
            }}
        </style>
    """

    download_link = custom_css + f"""
        <a id="{button_id}" href="data:application/octet-stream;base64,{b64}" download="{download_filename}">{button_text}</a>
    """

    return download_link
