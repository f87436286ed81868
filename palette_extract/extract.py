# palette_extract/extract.py
from __future__ import annotations

"""
End-to-end extraction: pixel buffer -> samples -> clusters -> ColorRecords.

Exports:
- extract_palette(buffer, k=5, *, stride=32, seed=None, debug=False)
- extract_image_palette(source, k=5, *, stride=32, seed=None, debug=False)
- extract_frame_palette(path, frame_rate=2, *, stride=32, debug=False)
"""

import time
from pathlib import Path
from typing import List, Union

from .constants import (
    DEFAULT_COLOURS,
    DEFAULT_FRAME_RATE,
    FRAME_MAX_SIZE,
    IMAGE_MAX_SIZE,
    SAMPLE_STRIDE_BYTES,
)
from .core_types import ColorRecord, PixelBuffer
from .frames import AnimatedImageSource, sample_frame_colors
from .image_io import ImageLike, load_image_rgba
from .kmeans import SeedLike, run_kmeans
from .palette import build_palette
from .sampler import sample_pixels
from .utils import debug_log, format_seconds_compact, key_value_pairs_to_string


def extract_palette(
    buffer: PixelBuffer,
    k: int = DEFAULT_COLOURS,
    *,
    stride: int = SAMPLE_STRIDE_BYTES,
    seed: SeedLike = None,
    debug: bool = False,
) -> List[ColorRecord]:
    """
    Palette of at most k colours for a raw RGBA buffer, heaviest first.
    Fully transparent input yields [].
    """
    if k < 0:
        raise ValueError(f"k must be >= 0, got {k}")
    t0 = time.perf_counter()
    samples = sample_pixels(buffer, stride=stride)
    if samples.shape[0] == 0:
        if debug:
            debug_log("no opaque samples; empty palette")
        return []

    result = run_kmeans(samples, k, seed=seed, debug=debug)
    records = build_palette(result.clusters)

    if debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Samples", int(samples.shape[0])),
                    ("Colours", len(records)),
                    ("Time", format_seconds_compact(time.perf_counter() - t0)),
                ]
            )
        )
    return records


def extract_image_palette(
    source: ImageLike,
    k: int = DEFAULT_COLOURS,
    *,
    stride: int = SAMPLE_STRIDE_BYTES,
    seed: SeedLike = None,
    debug: bool = False,
) -> List[ColorRecord]:
    """Decode an image, draw it on the <=800x600 surface, and extract its palette."""
    surface = load_image_rgba(source, IMAGE_MAX_SIZE)
    if debug:
        debug_log(f"surface {surface.shape[1]}x{surface.shape[0]}")
    return extract_palette(surface, k, stride=stride, seed=seed, debug=debug)


def extract_frame_palette(
    path: Union[str, Path],
    frame_rate: float = DEFAULT_FRAME_RATE,
    *,
    stride: int = SAMPLE_STRIDE_BYTES,
    progress: bool = False,
    debug: bool = False,
) -> List[ColorRecord]:
    """Dominant colour per sampled frame of an animated image, in frame order."""
    with AnimatedImageSource(path, FRAME_MAX_SIZE) as source:
        return sample_frame_colors(
            source, frame_rate, stride=stride, progress=progress, debug=debug
        )


__all__ = ["extract_palette", "extract_image_palette", "extract_frame_palette"]
