"""
Global tunables used across the project.

- Sampling (SAMPLE_*, ALPHA_*)
- Clustering (DEFAULT_COLOURS, KMEANS_*)
- Drawing surfaces and swatch geometry (IMAGE_*, FRAME_*, SWATCH_*)
- Frame mode (FRAME_RATES)
"""
from __future__ import annotations

from typing import Tuple

# =========================
# Sampling
# =========================
# Byte stride over the RGBA buffer: 32 bytes = every 8th pixel.
SAMPLE_STRIDE_BYTES: int = 32
# Pixels with alpha <= this are transparent and skipped.
ALPHA_THRESHOLD: int = 128

# =========================
# Clustering
# =========================
DEFAULT_COLOURS: int = 5
KMEANS_MAX_ITERATIONS: int = 20
# Max centroid shift (RGB units) still counted as converged.
KMEANS_TOLERANCE: float = 1.0

# =========================
# Drawing surfaces
# =========================
IMAGE_MAX_SIZE: Tuple[int, int] = (800, 600)
FRAME_MAX_SIZE: Tuple[int, int] = (400, 300)

# =========================
# Swatch
# =========================
SWATCH_BANDS: int = 5
SWATCH_BAND_SIZE: Tuple[int, int] = (100, 100)
SWATCH_SIZE: Tuple[int, int] = (
    SWATCH_BANDS * SWATCH_BAND_SIZE[0],
    SWATCH_BAND_SIZE[1],
)

# =========================
# Frame mode
# =========================
FRAME_RATES: Tuple[int, ...] = (1, 2, 5)
DEFAULT_FRAME_RATE: int = 2
EMPTY_FRAME_HEX: str = "#000000"
# Used when an animation frame carries no (or a zero) duration.
DEFAULT_FRAME_DURATION_MS: int = 100

__all__ = [
    "SAMPLE_STRIDE_BYTES",
    "ALPHA_THRESHOLD",
    "DEFAULT_COLOURS",
    "KMEANS_MAX_ITERATIONS",
    "KMEANS_TOLERANCE",
    "IMAGE_MAX_SIZE",
    "FRAME_MAX_SIZE",
    "SWATCH_BANDS",
    "SWATCH_BAND_SIZE",
    "SWATCH_SIZE",
    "FRAME_RATES",
    "DEFAULT_FRAME_RATE",
    "EMPTY_FRAME_HEX",
    "DEFAULT_FRAME_DURATION_MS",
]
