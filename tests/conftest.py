import numpy as np
import pytest
from PIL import Image

from image_utils import load_bitmap


class FixedCoefficients:
    """Random source that always returns the same coefficient."""

    def __init__(self, value):
        self.value = value
        self.draws = 0

    def randrange(self, stop):
        assert 0 <= self.value < stop
        self.draws += 1
        return self.value


class SequenceCoefficients:
    """Random source that replays a list of coefficients in order."""

    def __init__(self, values):
        self.values = list(values)
        self.position = 0

    def randrange(self, stop):
        value = self.values[self.position]
        assert 0 <= value < stop
        self.position += 1
        return value


@pytest.fixture
def fixed_rng():
    return FixedCoefficients


@pytest.fixture
def sequence_rng():
    return SequenceCoefficients


@pytest.fixture
def make_bitmap():
    """Build a 24-bit Bitmap from an (height, width) grey-level array or an RGB array."""

    def _make(pixels):
        arr = np.asarray(pixels, dtype=np.uint8)
        if arr.ndim == 2:
            arr = np.repeat(arr[:, :, None], 3, axis=2)
        return load_bitmap(Image.fromarray(arr))

    return _make
