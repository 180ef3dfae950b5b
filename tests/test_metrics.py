import logging

import pytest

from bmp_codec import Bitmap
from sss_errors import DimensionError
from sss_metrics import compare_bitmaps, mean_absolute_error, sum_absolute_error


def test_sum_absolute_error():
    assert sum_absolute_error([10, 20, 30], [15, 18, 33]) == 10
    assert sum_absolute_error(b"\x00\xff", b"\xff\x00") == 510
    assert sum_absolute_error(b"", b"") == 0


def test_length_mismatch_compares_prefix(caplog):
    with caplog.at_level(logging.WARNING, logger="sss_metrics"):
        assert sum_absolute_error(b"\x01\x02\x03", b"\x01\x05") == 3
    assert "Data sizes differ" in caplog.text


def test_compare_bitmaps():
    a = Bitmap.blank(2, 2)
    b = a.with_payload(bytes([1] * len(a.payload)))
    assert compare_bitmaps(a, b) == len(a.payload)


def test_compare_bitmaps_dimension_mismatch():
    with pytest.raises(DimensionError):
        compare_bitmaps(Bitmap.blank(2, 2), Bitmap.blank(4, 1))


def test_mean_absolute_error():
    assert mean_absolute_error(30, 2, 5) == 1.0
    assert mean_absolute_error(0, 0, 0) == 0.0
