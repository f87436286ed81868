#!/usr/bin/env python3
"""
extract_palette.py
Extract a colour palette from image(s) by k-means over sampled pixels, or one
dominant colour per frame from animated images.

Usage:
  python extract_palette.py INPUT --colors K --seed N --mode [auto|image|frames] --frame-rate [1|2|5] --outdir DIR --debug

Modes:
  image  : k-means palette (default 5 colours), heaviest first, plus a 500x100 swatch PNG.
  frames : dominant colour per sampled frame (frame-rate samples per second).
  auto   : frames for multi-frame images, image otherwise.

Input:
  Any Pillow-readable image, or a folder of them. Pixels with alpha <= 128 are ignored.

Output:
  color-palette-<stem>.txt (one 'Color N: #rrggbb (rgb(r, g, b))' line per colour)
  and, in image mode, color-palette-<stem>.png next to INPUT or in --outdir.

Notes:
  Without --seed the initial centroids differ run to run, as do palettes.
  CPU bound. ThreadPoolExecutor is used for folders when --jobs > 1.
"""

from __future__ import annotations

import argparse
import io
import os
import sys
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import List, Optional, Sequence, TextIO, Tuple

from PIL import UnidentifiedImageError

from palette_extract.constants import (
    DEFAULT_COLOURS,
    DEFAULT_FRAME_RATE,
    FRAME_RATES,
    SAMPLE_STRIDE_BYTES,
)
from palette_extract.core_types import ColorRecord
from palette_extract.extract import extract_frame_palette, extract_image_palette
from palette_extract.image_io import is_animated, save_swatch_png, write_palette_text
from palette_extract.palette import format_palette_text, format_record_line, render_swatch
from palette_extract.utils import (
    # formatting
    format_total_duration_compact,
    # pretty logging
    print_banner,
    log,
    debug_log,
    error,
    warn,
    print_config_line,
    key_value_pairs_to_string,
    enable_line_buffered_stdout,
)

OUTPUT_PREFIX = "color-palette-"
IMAGE_EXTS = {".png", ".jpg", ".jpeg", ".webp", ".gif", ".bmp", ".tif", ".tiff"}

# CLI args & small helpers


def parse_cli_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    """
    Parse CLI arguments for palette extraction.

    Returns:
      argparse.Namespace with:
        src: Path to image or folder
        outdir: optional Path for outputs
        colors: max palette size (k)
        seed: optional int for reproducible palettes
        stride: sampling stride in bytes
        mode: "auto" | "image" | "frames"
        frame_rate: samples per second in frames mode
        no_text / no_swatch: skip the respective export
        jobs: parallel file workers
        debug: bool for verbose details
    """
    parser = argparse.ArgumentParser(
        prog="extract_palette",
        description="Extract colour palettes from image(s) with tidy, readable output.",
    )
    parser.add_argument("src", type=Path, help="Input image or folder")
    parser.add_argument(
        "--outdir", type=Path, default=None, help="Output directory (optional)"
    )
    parser.add_argument(
        "--colors",
        "--colours",
        dest="colors",
        type=int,
        default=DEFAULT_COLOURS,
        help="Maximum number of palette colours (k).",
    )
    parser.add_argument(
        "--seed",
        type=int,
        default=None,
        help="Seed for centroid initialisation. Omit for varied palettes.",
    )
    parser.add_argument(
        "--stride",
        type=int,
        default=SAMPLE_STRIDE_BYTES,
        help="Sampling stride in bytes (multiple of 4; 32 = every 8th pixel).",
    )
    parser.add_argument(
        "--mode",
        choices=["auto", "image", "frames"],
        default="auto",
        help='Extraction mode. "auto" => frames for animated images.',
    )
    parser.add_argument(
        "--frame-rate",
        type=int,
        choices=list(FRAME_RATES),
        default=DEFAULT_FRAME_RATE,
        help="Frames sampled per second in frames mode.",
    )
    parser.add_argument("--no-text", action="store_true", help="Skip the .txt export")
    parser.add_argument(
        "--no-swatch", action="store_true", help="Skip the swatch .png export"
    )
    parser.add_argument(
        "--jobs", type=int, default=2, help="Files processed in parallel"
    )
    parser.add_argument("--debug", action="store_true", help="Verbose details")
    args = parser.parse_args(argv)
    if args.colors < 0:
        parser.error("--colors must be >= 0")
    if args.stride <= 0 or args.stride % 4 != 0:
        parser.error("--stride must be a positive multiple of 4")
    if args.jobs < 1:
        parser.error("--jobs must be >= 1")
    return args


def output_paths(src_path: Path, outdir: Optional[Path]) -> Tuple[Path, Path]:
    """(text path, swatch path) for an input file."""
    base = outdir if outdir is not None else src_path.parent
    stem = f"{OUTPUT_PREFIX}{src_path.stem}"
    return base / f"{stem}.txt", base / f"{stem}.png"


def _report_records(records: List[ColorRecord], out: Optional[TextIO] = None) -> None:
    total = sum(r.count or 0 for r in records)
    for index, record in enumerate(records):
        line = f"  {format_record_line(record, index)}"
        if record.frame is None and record.count is not None and total:
            line += f"  pixels={record.count:,}  share={record.count / total:.1%}"
        log(line, file=out)


# Per-file processing


def _resolve_mode(
    src_path: Path, requested: str, debug: bool, out: Optional[TextIO] = None
) -> str:
    """
    "auto" -> frames for animated inputs, image otherwise.
    "frames" on a still image falls back to image with a warning.
    """
    animated = is_animated(src_path)
    if requested == "auto":
        mode = "frames" if animated else "image"
        if debug:
            debug_log(f"auto picked mode: {mode}", file=out)
        return mode
    if requested == "frames" and not animated:
        warn("not an animated image; using image mode", file=out)
        return "image"
    return requested


def _process_single_image(
    src_path: Path,
    args: argparse.Namespace,
    progress: bool = True,
    out: Optional[TextIO] = None,
) -> bool:
    """
    Process a single image path end-to-end:
      decode -> sample -> cluster (or per-frame dominant) -> export -> report.
    Report lines go to `out` (current stdout when None).
    Returns False when the file could not be processed.
    """
    t_start = time.perf_counter()
    print_banner(src_path.name, file=out)

    mode_effective = _resolve_mode(src_path, args.mode, args.debug, out)

    try:
        if mode_effective == "frames":
            records = extract_frame_palette(
                src_path,
                args.frame_rate,
                stride=args.stride,
                progress=progress and not args.debug,
                debug=args.debug,
            )
        else:
            records = extract_image_palette(
                src_path,
                args.colors,
                stride=args.stride,
                seed=args.seed,
                debug=args.debug,
            )
    except (UnidentifiedImageError, OSError, ValueError) as e:
        error(f"{src_path.name}: {e}")
        return False

    log(f"Mode: {mode_effective}", file=out)
    if not records:
        if mode_effective == "frames":
            warn("animation too short for the frame rate; no frames sampled", file=out)
        else:
            warn("no opaque pixels sampled; palette is empty", file=out)
    else:
        log("Colours:" if mode_effective == "image" else "Frames:", file=out)
        _report_records(records, out)

    text_path, swatch_path = output_paths(src_path, args.outdir)
    if records and not args.no_text:
        write_palette_text(text_path, format_palette_text(records))
        log(f"Wrote {text_path.name}", file=out)
    if records and mode_effective == "image" and not args.no_swatch:
        save_swatch_png(swatch_path, render_swatch(records))
        log(f"Wrote {swatch_path.name}", file=out)

    log(
        f"Total time {format_total_duration_compact(time.perf_counter() - t_start)}",
        file=out,
    )
    return True


def _process_one_captured(path: Path, args: argparse.Namespace) -> Tuple[bool, str]:
    """
    Process a single file into a private buffer.

    Used by worker threads; the main thread prints the blocks in input order.
    """
    buf = io.StringIO()
    ok = _process_single_image(path, args, progress=False, out=buf)
    return ok, buf.getvalue()


def _collect_inputs(src: Path, debug: bool) -> List[Path]:
    all_entries = list(src.iterdir())
    files = [
        p
        for p in all_entries
        if p.is_file()
        and p.suffix.lower() in IMAGE_EXTS
        and not p.stem.startswith(OUTPUT_PREFIX)
    ]
    files.sort(key=lambda p: p.name.lower())
    if debug:
        debug_log(
            key_value_pairs_to_string(
                [("Folder entries", len(all_entries)), ("Images", len(files))]
            )
        )
    return files


# Entry point


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    CLI entry point.

    Handles single file or folder. In folder mode supports --jobs parallelism
    while preserving readable output ordering.
    """
    enable_line_buffered_stdout()
    args = parse_cli_args(argv)

    print_config_line(
        "run",
        [
            ("CPU cores", os.cpu_count() or 1),
            ("Jobs", args.jobs),
            ("Colours", args.colors),
            ("Seed", "random" if args.seed is None else args.seed),
        ],
        debug=False,
    )
    if args.debug:
        debug_log(
            key_value_pairs_to_string(
                [
                    ("Mode", args.mode),
                    ("Stride", args.stride),
                    ("Frame rate", args.frame_rate),
                ]
            )
        )

    src = args.src
    if not src.exists():
        error(f"not found: {src}")
        sys.exit(2)
    if args.outdir is not None:
        args.outdir.mkdir(parents=True, exist_ok=True)

    if src.is_dir():
        files = _collect_inputs(src, args.debug)
        if args.jobs == 1:
            results = [_process_single_image(p, args) for p in files]
        else:
            with ThreadPoolExecutor(max_workers=args.jobs) as ex:
                futures = [ex.submit(_process_one_captured, p, args) for p in files]
                captured = [f.result() for f in futures]
            print("".join(out for _ok, out in captured), end="", flush=True)
            results = [ok for ok, _out in captured]
    else:
        results = [_process_single_image(src, args)]

    if not all(results):
        sys.exit(1)


if __name__ == "__main__":
    main()
