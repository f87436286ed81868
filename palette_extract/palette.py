# palette_extract/palette.py
from __future__ import annotations

"""
Clusters -> ordered ColorRecords, the swatch bitmap, and the text export.

Exports:
- build_palette(clusters) -> list[ColorRecord]   (descending by count, stable)
- render_swatch(records) -> PIL.Image (RGBA 500x100, up to 5 bands)
- format_record_line(record, index) -> str
- format_palette_text(records) -> str
"""

from typing import List, Sequence

from PIL import Image, ImageDraw

from .constants import SWATCH_BAND_SIZE, SWATCH_BANDS, SWATCH_SIZE
from .core_types import Cluster, ColorRecord, centroid_to_rgb


def build_palette(clusters: Sequence[Cluster]) -> List[ColorRecord]:
    """
    One record per cluster: centroid rounded half-up per channel, hex and rgb()
    strings derived from the same triple, count attached as weight.
    Sorted by count descending; equal counts keep clusterer order.
    """
    records = [
        ColorRecord.from_rgb(centroid_to_rgb(c.centroid), count=int(c.count))
        for c in clusters
    ]
    return sorted(records, key=lambda r: -(r.count or 0))


def render_swatch(records: Sequence[ColorRecord]) -> Image.Image:
    """
    Draw the first SWATCH_BANDS records as equal vertical bands, left to right.
    Bands with no record stay fully transparent.
    """
    band_w, band_h = SWATCH_BAND_SIZE
    canvas = Image.new("RGBA", SWATCH_SIZE, (0, 0, 0, 0))
    draw = ImageDraw.Draw(canvas)
    for index, record in enumerate(records[:SWATCH_BANDS]):
        r, g, b = record.rgb_tuple
        x0 = index * band_w
        draw.rectangle(
            (x0, 0, x0 + band_w - 1, band_h - 1), fill=(r, g, b, 255)
        )
    return canvas


def format_record_line(record: ColorRecord, index: int) -> str:
    """
    'Color N: #rrggbb (rgb(r, g, b))' with N = index + 1, or
    'Frame N: ...' for frame records (N = the record's frame number).
    """
    if record.frame is not None:
        return f"Frame {record.frame}: {record.hex} ({record.rgb})"
    return f"Color {index + 1}: {record.hex} ({record.rgb})"


def format_palette_text(records: Sequence[ColorRecord]) -> str:
    """Plain-text export, one line per record in the given order."""
    return "\n".join(format_record_line(r, i) for i, r in enumerate(records))


__all__ = [
    "build_palette",
    "render_swatch",
    "format_record_line",
    "format_palette_text",
]
