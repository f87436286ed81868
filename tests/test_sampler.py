import numpy as np
import pytest

from palette_extract.sampler import buffer_to_rgba_rows, sample_pixels

from conftest import make_rgba


def test_every_eighth_pixel_by_default() -> None:
    rows = np.zeros((16, 4), dtype=np.uint8)
    rows[:, 0] = np.arange(16)
    rows[:, 3] = 255
    samples = sample_pixels(rows.reshape(-1))
    assert samples.tolist() == [[0, 0, 0], [8, 0, 0]]


def test_alpha_threshold_is_strict() -> None:
    rows = np.array(
        [[1, 1, 1, 128], [2, 2, 2, 129], [3, 3, 3, 0], [4, 4, 4, 255]],
        dtype=np.uint8,
    )
    samples = sample_pixels(rows, stride=4)
    assert samples.tolist() == [[2, 2, 2], [4, 4, 4]]


def test_fully_transparent_gives_empty_set() -> None:
    samples = sample_pixels(make_rgba((10, 10), (200, 10, 10), alpha=0))
    assert samples.shape == (0, 3)
    assert samples.dtype == np.uint8


def test_accepts_bytes() -> None:
    data = bytes([10, 20, 30, 255] * 8)
    assert sample_pixels(data).tolist() == [[10, 20, 30]]


def test_accepts_image_shaped_array() -> None:
    surface = make_rgba((8, 2), (5, 6, 7))
    assert sample_pixels(surface).tolist() == [[5, 6, 7], [5, 6, 7]]


def test_length_not_multiple_of_four_raises() -> None:
    with pytest.raises(ValueError, match="multiple of 4"):
        buffer_to_rgba_rows(bytes(7))


@pytest.mark.parametrize("stride", [0, -4, 6])
def test_bad_stride_raises(stride: int) -> None:
    with pytest.raises(ValueError, match="stride"):
        sample_pixels(bytes(32), stride=stride)


def test_non_uint8_array_raises() -> None:
    with pytest.raises(TypeError):
        sample_pixels(np.zeros(16, dtype=np.float32))
