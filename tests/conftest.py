import numpy as np
import pytest


def make_rgba(
    size: tuple[int, int], color: tuple[int, int, int], alpha: int = 255
) -> np.ndarray:
    """Solid (H, W, 4) uint8 surface; size is (W, H) like Pillow."""
    w, h = size
    out = np.empty((h, w, 4), dtype=np.uint8)
    out[..., :3] = color
    out[..., 3] = alpha
    return out


@pytest.fixture
def two_colour_samples() -> np.ndarray:
    red = np.tile(np.array([[255, 0, 0]], dtype=np.uint8), (50, 1))
    blue = np.tile(np.array([[0, 0, 255]], dtype=np.uint8), (50, 1))
    return np.concatenate([red, blue], axis=0)
