"""
palette_extract package.

Purpose:
  Extract a representative colour palette from an image by k-means clustering
  of sampled pixels, or one dominant colour per frame of an animation.
  See extract_palette.py for the CLI.

Public API:
  extract_palette       : raw RGBA buffer -> list[ColorRecord].
  extract_image_palette : image path / PIL image -> list[ColorRecord].
  extract_frame_palette : animated image -> per-frame list[ColorRecord].
  sampler               : strided, alpha-gated pixel sampling.
  kmeans                : RGB k-means with injectable seed.
  palette               : ColorRecord building, swatch rendering, text export.
  frames                : frame timestamps, dominant colour, frame sources.
  core_types            : shared type aliases and value objects (Cluster, ColorRecord).
  utils                 : shared helpers (formatting, logging).

Quick start:
  from palette_extract import extract_image_palette, render_swatch
  records = extract_image_palette("photo.jpg", k=5, seed=0)
"""

__version__ = "0.1.0"

# Re-export namespaces for convenience.
from . import constants
from . import core_types
from . import sampler
from . import kmeans
from . import palette
from . import frames
from . import image_io
from . import utils

from .core_types import Cluster, ColorRecord  # noqa: E402,F401
from .sampler import sample_pixels  # noqa: E402,F401
from .kmeans import kmeans_cluster, run_kmeans  # noqa: E402,F401
from .palette import build_palette, format_palette_text, render_swatch  # noqa: E402,F401
from .frames import dominant_color, sample_frame_colors  # noqa: E402,F401
from .extract import (  # noqa: E402,F401
    extract_frame_palette,
    extract_image_palette,
    extract_palette,
)

__all__ = [
    "__version__",
    "constants",
    "core_types",
    "sampler",
    "kmeans",
    "palette",
    "frames",
    "image_io",
    "utils",
    "Cluster",
    "ColorRecord",
    "sample_pixels",
    "kmeans_cluster",
    "run_kmeans",
    "build_palette",
    "format_palette_text",
    "render_swatch",
    "dominant_color",
    "sample_frame_colors",
    "extract_palette",
    "extract_image_palette",
    "extract_frame_palette",
]
