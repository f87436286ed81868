# palette_extract/core_types.py
from __future__ import annotations

"""
Core type aliases, small value objects, and lightweight helpers.
"""

import math
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple, Union

import numpy as np
from numpy.typing import NDArray

# Basic aliases

RGBTuple = Tuple[int, int, int]
Centroid = Tuple[float, float, float]
HexStr = str

U8Image = NDArray[np.uint8]  # (H, W, 4) RGBA surface
SampleSet = NDArray[np.uint8]  # (N, 3) opaque RGB samples
PixelBuffer = Union[bytes, bytearray, memoryview, NDArray[np.uint8]]

# Value objects


@dataclass(frozen=True)
class Cluster:
    """Final k-means cluster: continuous centroid and member count."""

    centroid: Centroid
    count: int


@dataclass(frozen=True)
class ColorRecord:
    """One palette entry as shown to the user and written by exports."""

    hex: HexStr  # "#rrggbb"
    rgb: str  # "rgb(r, g, b)"
    count: Optional[int] = None
    frame: Optional[int] = None  # 1-based, frame variant only

    @classmethod
    def from_rgb(
        cls, rgb: RGBTuple, count: Optional[int] = None, frame: Optional[int] = None
    ) -> "ColorRecord":
        return cls(
            hex=rgb_to_hex(rgb), rgb=rgb_to_css(rgb), count=count, frame=frame
        )

    @property
    def rgb_tuple(self) -> RGBTuple:
        return hex_to_rgb(self.hex)


# Small helpers


def round_half_up(value: float) -> int:
    """Round to nearest integer, halves towards +inf."""
    return int(math.floor(value + 0.5))


def centroid_to_rgb(centroid: Sequence[float]) -> RGBTuple:
    """Round a continuous centroid channel-wise into an RGB tuple."""
    return (
        round_half_up(centroid[0]),
        round_half_up(centroid[1]),
        round_half_up(centroid[2]),
    )


def rgb_to_hex(rgb: RGBTuple) -> HexStr:
    """RGB tuple to lowercase hex string '#rrggbb'."""
    for channel in rgb:
        if not 0 <= channel <= 255:
            raise ValueError(f"channel out of range: {channel}")
    return f"#{rgb[0]:02x}{rgb[1]:02x}{rgb[2]:02x}"


def rgb_to_css(rgb: RGBTuple) -> str:
    """RGB tuple to 'rgb(r, g, b)'."""
    return f"rgb({rgb[0]}, {rgb[1]}, {rgb[2]})"


def hex_to_rgb(hex_str: str) -> RGBTuple:
    """Parse '#rgb' or '#rrggbb' (case-insensitive) into an RGB tuple."""
    s = hex_str.strip().lower()
    if not s.startswith("#"):
        raise ValueError("hex must start with '#'")
    if len(s) == 4:
        r, g, b = s[1], s[2], s[3]
        s = f"#{r}{r}{g}{g}{b}{b}"
    if len(s) != 7:
        raise ValueError("hex must be '#rrggbb' or '#rgb'")
    return (int(s[1:3], 16), int(s[3:5], 16), int(s[5:7], 16))


def as_sample_set(samples: Union[SampleSet, Sequence[Sequence[int]]]) -> SampleSet:
    """Coerce a list of RGB triples or an array into a (N,3) uint8 sample set."""
    arr = np.asarray(samples)
    if arr.size == 0:
        return np.zeros((0, 3), dtype=np.uint8)
    if arr.ndim != 2 or arr.shape[1] != 3:
        raise ValueError(f"expected (N,3) samples, got shape {arr.shape}")
    if arr.dtype != np.uint8:
        if np.any(arr < 0) or np.any(arr > 255):
            raise ValueError("sample channels must lie in [0, 255]")
        arr = arr.astype(np.uint8)
    return arr


__all__ = [
    # aliases / types
    "RGBTuple",
    "Centroid",
    "HexStr",
    "U8Image",
    "SampleSet",
    "PixelBuffer",
    # value objects
    "Cluster",
    "ColorRecord",
    # helpers
    "round_half_up",
    "centroid_to_rgb",
    "rgb_to_hex",
    "rgb_to_css",
    "hex_to_rgb",
    "as_sample_set",
]
