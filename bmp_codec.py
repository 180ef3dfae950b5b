"""
Minimal 24-bit BMP container codec.

Only the fixed 54-byte layout (BITMAPFILEHEADER + BITMAPINFOHEADER) is
handled. Pixel data is kept as an opaque payload: rows bottom-up, BGR order,
each row padded to a multiple of 4 bytes.
"""

import struct
from dataclasses import dataclass
from pathlib import Path

from sss_errors import DimensionError, InvalidInputSizeError

HEADER_SIZE = 54
DIB_HEADER_SIZE = 40
BITS_PER_PIXEL = 24
PIXELS_PER_METER = 2835  # ~72 DPI

_WIDTH_OFFSET = 18
_HEIGHT_OFFSET = 22
_BPP_OFFSET = 28


def row_stride(width, bits_per_pixel=BITS_PER_PIXEL):
    """Bytes per stored row, padded to a multiple of 4."""
    bytes_per_pixel = bits_per_pixel // 8
    return ((width * bytes_per_pixel) + 3) & ~3


def create_header(width, height):
    """
    Build a fresh 54-byte header for a 24-bit image of the given size.
    """
    data_size = row_stride(width) * height
    file_size = HEADER_SIZE + data_size

    file_header = struct.pack("<2sIHHI", b"BM", file_size, 0, 0, HEADER_SIZE)
    dib_header = struct.pack(
        "<IiiHHIIiiII",
        DIB_HEADER_SIZE,
        width,
        height,
        1,  # colour planes
        BITS_PER_PIXEL,
        0,  # BI_RGB
        data_size,
        PIXELS_PER_METER,
        PIXELS_PER_METER,
        0,  # palette colours
        0,  # important colours
    )
    return file_header + dib_header


@dataclass(frozen=True)
class BitmapHeader:
    width: int
    height: int
    bits_per_pixel: int

    @classmethod
    def parse(cls, raw):
        if len(raw) < HEADER_SIZE:
            raise InvalidInputSizeError(
                f"Input too small: {len(raw)} bytes, a BMP header needs {HEADER_SIZE}"
            )
        width, height = struct.unpack_from("<ii", raw, _WIDTH_OFFSET)
        (bits_per_pixel,) = struct.unpack_from("<H", raw, _BPP_OFFSET)
        return cls(width=width, height=height, bits_per_pixel=bits_per_pixel)


@dataclass(frozen=True)
class Bitmap:
    """A raw header plus the pixel payload that follows it."""
    header: bytes
    payload: bytes

    @classmethod
    def from_bytes(cls, raw):
        raw = bytes(raw)
        if len(raw) < HEADER_SIZE:
            raise InvalidInputSizeError(
                f"Input too small: {len(raw)} bytes, a BMP header needs {HEADER_SIZE}"
            )
        return cls(header=raw[:HEADER_SIZE], payload=raw[HEADER_SIZE:])

    @classmethod
    def blank(cls, width, height):
        """Zero-filled 24-bit bitmap with a freshly built header."""
        return cls(header=create_header(width, height), payload=bytes(row_stride(width) * height))

    def to_bytes(self):
        return self.header + self.payload

    @property
    def info(self):
        return BitmapHeader.parse(self.header)

    @property
    def width(self):
        return self.info.width

    @property
    def height(self):
        return self.info.height

    @property
    def bits_per_pixel(self):
        return self.info.bits_per_pixel

    def with_payload(self, payload):
        return Bitmap(header=self.header, payload=bytes(payload))

    def require_24_bit(self):
        if self.bits_per_pixel != BITS_PER_PIXEL:
            raise DimensionError(
                f"Only 24-bit BMPs are supported, got {self.bits_per_pixel} bits per pixel"
            )


def read_bmp(path):
    return Bitmap.from_bytes(Path(path).read_bytes())


def write_bmp(path, bitmap):
    path = Path(path)
    path.write_bytes(bitmap.to_bytes())
    return path
