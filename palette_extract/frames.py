# palette_extract/frames.py
from __future__ import annotations

"""
Frame mode: one dominant colour per sampled frame of an animation.

Exports:
- frame_timestamps(duration, frame_rate) -> list[float]
- dominant_color(samples) -> ColorRecord
- FrameSource (protocol), AnimatedImageSource (Pillow-backed)
- sample_frame_colors(source, frame_rate=2, *, stride=32) -> list[ColorRecord]

Notes:
- Frames are drawn and reduced strictly in order; frame N+1 is not decoded
  until frame N's colour has been computed.
- No clustering here: the dominant colour is the most frequent exact RGB among
  the strided opaque samples, first-seen colour winning ties.
"""

import bisect
import math
from pathlib import Path
from typing import List, Optional, Protocol, Tuple, Union

import numpy as np
from PIL import Image

from .constants import (
    DEFAULT_FRAME_DURATION_MS,
    DEFAULT_FRAME_RATE,
    EMPTY_FRAME_HEX,
    FRAME_MAX_SIZE,
    SAMPLE_STRIDE_BYTES,
)
from .core_types import ColorRecord, SampleSet, U8Image, as_sample_set, hex_to_rgb
from .image_io import draw_on_surface
from .sampler import sample_pixels
from .utils import debug_log, print_progress_line


class FrameSource(Protocol):
    """Anything that can draw the frame shown at a given time onto an RGBA surface."""

    @property
    def duration(self) -> float:
        """Total running time in seconds."""
        ...

    def draw_frame(self, timestamp: float) -> U8Image:
        """Seek to `timestamp` seconds and return the drawn uint8 (H,W,4) surface."""
        ...


def frame_timestamps(duration: float, frame_rate: float) -> List[float]:
    """
    floor(duration * frame_rate) evenly spaced timestamps starting at 0:
    t_i = i / n * duration.
    """
    if frame_rate <= 0:
        raise ValueError(f"frame_rate must be > 0, got {frame_rate}")
    if duration <= 0 or not math.isfinite(duration):
        return []
    n = int(math.floor(duration * frame_rate))
    return [(i / n) * duration for i in range(n)]


def dominant_color(samples: SampleSet) -> ColorRecord:
    """
    Most frequent exact colour in the sample set.
    Empty input yields black with a zero count.
    """
    pts = as_sample_set(samples)
    if pts.shape[0] == 0:
        return ColorRecord.from_rgb(hex_to_rgb(EMPTY_FRAME_HEX), count=0)

    keys = (
        (pts[:, 0].astype(np.int32) << 16)
        | (pts[:, 1].astype(np.int32) << 8)
        | pts[:, 2].astype(np.int32)
    )
    uniq, first_idx, counts = np.unique(keys, return_index=True, return_counts=True)
    top = counts == counts.max()
    best = int(np.argmin(np.where(top, first_idx, np.iinfo(np.int64).max)))
    key = int(uniq[best])
    rgb = ((key >> 16) & 0xFF, (key >> 8) & 0xFF, key & 0xFF)
    return ColorRecord.from_rgb(rgb, count=int(counts[best]))


def _scan_frame_starts(im: Image.Image) -> Tuple[List[float], float]:
    """Start time (ms) of every frame and the total running time (0 for stills)."""
    starts: List[float] = []
    total = 0.0
    n_frames = int(getattr(im, "n_frames", 1))
    for index in range(n_frames):
        im.seek(index)
        frame_ms = float(im.info.get("duration") or 0)
        if frame_ms <= 0:
            frame_ms = float(DEFAULT_FRAME_DURATION_MS)
        starts.append(total)
        total += frame_ms
    return starts, (total if n_frames > 1 else 0.0)


class AnimatedImageSource:
    """
    FrameSource over a multi-frame image (GIF, WebP, APNG) decoded with Pillow.
    Timestamps map to the frame being displayed at that moment.
    """

    def __init__(
        self,
        path: Union[str, Path],
        max_size: Tuple[int, int] = FRAME_MAX_SIZE,
    ) -> None:
        self.path = Path(path)
        self.max_size = max_size
        self._im: Optional[Image.Image] = Image.open(self.path)
        try:
            self._starts_ms, self._total_ms = _scan_frame_starts(self._im)
        except BaseException:
            self._im.close()
            self._im = None
            raise

    @property
    def duration(self) -> float:
        return self._total_ms / 1000.0

    @property
    def n_frames(self) -> int:
        return len(self._starts_ms)

    def frame_index_at(self, timestamp: float) -> int:
        # Nudge past float noise so t == start lands on that frame.
        idx = bisect.bisect_right(self._starts_ms, timestamp * 1000.0 + 1e-6) - 1
        return max(0, min(idx, len(self._starts_ms) - 1))

    def draw_frame(self, timestamp: float) -> U8Image:
        if self._im is None:
            raise ValueError("frame source is closed")
        self._im.seek(self.frame_index_at(timestamp))
        return draw_on_surface(self._im.convert("RGBA"), self.max_size)

    def close(self) -> None:
        if self._im is not None:
            self._im.close()
            self._im = None

    def __enter__(self) -> "AnimatedImageSource":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()


def sample_frame_colors(
    source: FrameSource,
    frame_rate: float = DEFAULT_FRAME_RATE,
    *,
    stride: int = SAMPLE_STRIDE_BYTES,
    progress: bool = False,
    debug: bool = False,
) -> List[ColorRecord]:
    """
    Dominant colour for each timestamp of frame_timestamps(), in order.
    Records carry 1-based frame numbers.
    """
    timestamps = frame_timestamps(source.duration, frame_rate)
    if debug:
        debug_log(
            f"frames  duration={source.duration:.3f}s  rate={frame_rate}  "
            f"frames={len(timestamps)}"
        )

    records: List[ColorRecord] = []
    for index, ts in enumerate(timestamps):
        surface = source.draw_frame(ts)
        colour = dominant_color(sample_pixels(surface, stride=stride))
        records.append(
            ColorRecord(
                hex=colour.hex, rgb=colour.rgb, count=colour.count, frame=index + 1
            )
        )
        if progress:
            print_progress_line(
                f"frame {index + 1}/{len(timestamps)}",
                final=index + 1 == len(timestamps),
            )
    return records


__all__ = [
    "FrameSource",
    "AnimatedImageSource",
    "frame_timestamps",
    "dominant_color",
    "sample_frame_colors",
]
