# palette_extract/image_io.py
from __future__ import annotations

import io
from pathlib import Path
from typing import Tuple, Union

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from .constants import IMAGE_MAX_SIZE
from .core_types import U8Image

"""
Image I/O helpers (RGBA in sRGB), drawing-surface fitting, and export writers.
"""

try:
    from PIL import ImageCms  # ICC conversion if profile present
except ImportError:  # pragma: no cover
    ImageCms = None  # type: ignore[assignment]

ImageLike = Union[str, Path, Image.Image]


def convert_to_srgb_rgba(im: Image.Image) -> Image.Image:
    """EXIF-orient, convert embedded ICC profiles to sRGB, return an RGBA image."""
    im = ImageOps.exif_transpose(im)
    icc_bytes = im.info.get("icc_profile")

    if icc_bytes and ImageCms is not None:
        try:
            src_prof = ImageCms.ImageCmsProfile(io.BytesIO(icc_bytes))
            dst_prof = ImageCms.createProfile("sRGB")
            im2 = ImageCms.profileToProfile(
                im,
                src_prof,
                dst_prof,
                renderingIntent=ImageCms.Intent.PERCEPTUAL,
                outputMode="RGBA",
            )
            if im2 is None:
                return im.convert("RGBA")
            return im2
        except (ImageCms.PyCMSError, OSError, ValueError):
            return im.convert("RGBA")

    return im.convert("RGBA")


def surface_size(size: Tuple[int, int], max_size: Tuple[int, int]) -> Tuple[int, int]:
    """Clamp each axis independently: (min(W, max_W), min(H, max_H))."""
    return (min(size[0], max_size[0]), min(size[1], max_size[1]))


def draw_on_surface(
    im: Image.Image, max_size: Tuple[int, int] = IMAGE_MAX_SIZE
) -> U8Image:
    """
    Stretch an RGBA image onto a drawing surface no larger than max_size.
    Axes are clamped independently, so aspect ratio is not preserved.

    Returns:
      uint8 [H,W,4]
    """
    rgba = im if im.mode == "RGBA" else im.convert("RGBA")
    dst = surface_size(rgba.size, max_size)
    if dst != rgba.size:
        rgba = rgba.resize(dst, resample=Image.Resampling.BILINEAR)
    return np.array(rgba, dtype=np.uint8)


def load_image_rgba(
    source: ImageLike, max_size: Tuple[int, int] = IMAGE_MAX_SIZE
) -> U8Image:
    """Decode an image (path or PIL image) into an sRGB RGBA surface array."""
    if isinstance(source, Image.Image):
        return draw_on_surface(convert_to_srgb_rgba(source), max_size)
    with Image.open(source) as im0:
        im = convert_to_srgb_rgba(im0)
        return draw_on_surface(im, max_size)


def is_animated(path: Path) -> bool:
    """True for multi-frame images (animated GIF / WebP / PNG)."""
    try:
        with Image.open(path) as im:
            return bool(getattr(im, "is_animated", False)) and getattr(
                im, "n_frames", 1
            ) > 1
    except (UnidentifiedImageError, OSError):
        return False


def save_swatch_png(path: Path, swatch: Image.Image) -> Path:
    if path.suffix.lower() != ".png":
        path = path.with_suffix(".png")
    swatch.save(path, format="PNG")
    return path


def write_palette_text(path: Path, text: str) -> Path:
    path.write_text(text, encoding="utf-8")
    return path


__all__ = [
    "ImageLike",
    "convert_to_srgb_rgba",
    "surface_size",
    "draw_on_surface",
    "load_image_rgba",
    "is_animated",
    "save_swatch_png",
    "write_palette_text",
]
