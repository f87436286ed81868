from pathlib import Path

import sys

import numpy as np
import pytest
from PIL import Image

import extract_palette as cli


def _solid_png(path: Path, colour: tuple[int, int, int]) -> Path:
    Image.new("RGB", (64, 32), colour).save(path)
    return path


def test_single_image_writes_exports(tmp_path: Path, capsys) -> None:
    src = _solid_png(tmp_path / "sky.png", (10, 20, 30))
    cli.main([str(src), "--seed", "0"])
    out = capsys.readouterr().out
    assert "Color 1: #0a141e (rgb(10, 20, 30))" in out

    text = (tmp_path / "color-palette-sky.txt").read_text(encoding="utf-8")
    assert text == "Color 1: #0a141e (rgb(10, 20, 30))"
    with Image.open(tmp_path / "color-palette-sky.png") as swatch:
        assert swatch.size == (500, 100)
        assert swatch.convert("RGBA").getpixel((50, 50)) == (10, 20, 30, 255)


def test_outdir_and_no_swatch(tmp_path: Path) -> None:
    src = _solid_png(tmp_path / "a.png", (1, 2, 3))
    outdir = tmp_path / "out"
    cli.main([str(src), "--outdir", str(outdir), "--no-swatch", "--seed", "1"])
    assert (outdir / "color-palette-a.txt").exists()
    assert not (outdir / "color-palette-a.png").exists()


def test_folder_skips_previous_outputs(tmp_path: Path, capsys) -> None:
    _solid_png(tmp_path / "one.png", (255, 0, 0))
    _solid_png(tmp_path / "two.png", (0, 255, 0))
    _solid_png(tmp_path / "color-palette-old.png", (0, 0, 0))
    cli.main([str(tmp_path), "--jobs", "2", "--seed", "0"])
    out = capsys.readouterr().out
    assert "=== one.png ===" in out
    assert "=== two.png ===" in out
    assert "color-palette-old.png ===" not in out
    assert out.index("=== one.png") < out.index("=== two.png")


def test_animated_input_uses_frames_mode(tmp_path: Path) -> None:
    path = tmp_path / "anim.gif"
    frames = [Image.new("RGB", (20, 20), c) for c in [(255, 0, 0), (0, 0, 255)]]
    frames[0].save(path, save_all=True, append_images=frames[1:], duration=500)
    cli.main([str(path), "--frame-rate", "2"])
    text = (tmp_path / "color-palette-anim.txt").read_text(encoding="utf-8")
    assert text.splitlines() == [
        "Frame 1: #ff0000 (rgb(255, 0, 0))",
        "Frame 2: #0000ff (rgb(0, 0, 255))",
    ]
    assert not (tmp_path / "color-palette-anim.png").exists()


def test_missing_input_exits_2(tmp_path: Path) -> None:
    with pytest.raises(SystemExit) as exc:
        cli.main([str(tmp_path / "nope.png")])
    assert exc.value.code == 2


def test_undecodable_file_exits_1(tmp_path: Path, capsys) -> None:
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    with pytest.raises(SystemExit) as exc:
        cli.main([str(bad)])
    assert exc.value.code == 1
    assert "[error] bad.png" in capsys.readouterr().err


def test_bad_stride_rejected(tmp_path: Path) -> None:
    src = _solid_png(tmp_path / "x.png", (0, 0, 0))
    with pytest.raises(SystemExit):
        cli.main([str(src), "--stride", "6"])


def test_parallel_folder_keeps_stdout_and_every_report(tmp_path: Path, capsys) -> None:
    rng = np.random.default_rng(0)
    names = [f"f{i}.png" for i in range(8)]
    for name in names:
        arr = rng.integers(0, 256, size=(600, 800, 3), dtype=np.uint8)
        Image.fromarray(arr).save(tmp_path / name)

    stdout_before = sys.stdout
    cli.main([str(tmp_path), "--jobs", "4", "--seed", "0", "--no-swatch"])
    assert sys.stdout is stdout_before

    out = capsys.readouterr().out
    positions = [out.index(f"=== {name} ===") for name in names]
    assert positions == sorted(positions)
    assert out.count("Colours:") == len(names)
    assert out.count("Total time") == len(names)


def test_frames_mode_on_still_image_falls_back_to_image(tmp_path: Path, capsys) -> None:
    src = _solid_png(tmp_path / "still.png", (10, 20, 30))
    cli.main([str(src), "--mode", "frames", "--seed", "0"])
    out = capsys.readouterr().out
    assert "[warn] not an animated image; using image mode" in out
    assert "Mode: image" in out
    text = (tmp_path / "color-palette-still.txt").read_text(encoding="utf-8")
    assert text == "Color 1: #0a141e (rgb(10, 20, 30))"
