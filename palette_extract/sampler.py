# palette_extract/sampler.py
from __future__ import annotations

"""
Pixel sampling: strided, alpha-gated RGB samples from an RGBA buffer.

Exports:
- buffer_to_rgba_rows(buffer) -> (P,4) uint8 view of the buffer
- sample_pixels(buffer, stride=32, alpha_threshold=128) -> SampleSet
"""

import numpy as np

from .constants import ALPHA_THRESHOLD, SAMPLE_STRIDE_BYTES
from .core_types import PixelBuffer, SampleSet


def buffer_to_rgba_rows(buffer: PixelBuffer) -> np.ndarray:
    """
    Interpret a flat RGBA byte sequence (or uint8 array of any shape) as (P,4) rows.
    Raises ValueError when the byte length is not a multiple of 4.
    """
    if isinstance(buffer, np.ndarray):
        if buffer.dtype != np.uint8:
            raise TypeError(f"expected uint8 pixel buffer, got {buffer.dtype}")
        flat = np.ascontiguousarray(buffer).reshape(-1)
    else:
        flat = np.frombuffer(bytes(buffer), dtype=np.uint8)
    if flat.size % 4 != 0:
        raise ValueError(
            f"pixel buffer length {flat.size} is not a multiple of 4 (RGBA)"
        )
    return flat.reshape(-1, 4)


def sample_pixels(
    buffer: PixelBuffer,
    stride: int = SAMPLE_STRIDE_BYTES,
    alpha_threshold: int = ALPHA_THRESHOLD,
) -> SampleSet:
    """
    Take every pixel whose byte offset is a multiple of `stride` and keep its RGB
    when alpha > alpha_threshold. No averaging or deduplication.

    Returns:
      uint8 [N,3]; N may be 0 for fully transparent input.
    """
    if stride <= 0 or stride % 4 != 0:
        raise ValueError(f"stride must be a positive multiple of 4 bytes, got {stride}")
    rows = buffer_to_rgba_rows(buffer)
    picked = rows[:: stride // 4]
    opaque = picked[:, 3] > alpha_threshold
    return np.ascontiguousarray(picked[opaque, :3])


__all__ = ["buffer_to_rgba_rows", "sample_pixels"]
