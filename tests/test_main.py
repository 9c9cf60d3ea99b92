import io

import numpy as np
from PIL import Image

import main


def _write_png(path, width=20, height=10):
    rgba = np.zeros((height, width, 4), dtype=np.uint8)
    rgba[..., 1] = 200
    rgba[..., 3] = 255
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, format="PNG")
    path.write_bytes(buf.getvalue())


def test_cli_converts_image(tmp_path, capsys):
    image = tmp_path / "in.png"
    _write_png(image)
    out = tmp_path / "out.svg"

    assert main._cli(["-i", str(image), "-o", str(out), "-w", "12"]) == 0
    assert out.read_text(encoding="utf-8").count("<text") == 6
    assert "Saved SVG to" in capsys.readouterr().out


def test_cli_suggests_width(tmp_path, capsys):
    image = tmp_path / "in.png"
    _write_png(image, width=40, height=10)

    assert main._cli(["-i", str(image)]) == 0
    assert (tmp_path / "in.svg").is_file()
    assert "Using suggested width: 200" in capsys.readouterr().out


def test_cli_reports_errors(tmp_path, capsys):
    bad = tmp_path / "bad.png"
    bad.write_bytes(b"not an image")
    assert main._cli(["-i", str(bad), "-w", "10"]) == 2
    assert "Error processing image" in capsys.readouterr().out

    assert main._cli(["-i", str(tmp_path / "missing.png"), "-w", "10"]) == 2
    assert main._cli(["-i", str(bad), "-w", "0"]) == 2


def test_cli_reports_unreadable_path_without_width(tmp_path, capsys):
    assert main._cli(["-i", str(tmp_path)]) == 2
    assert "Could not read image" in capsys.readouterr().out
    assert main._cli(["-i", str(tmp_path / "missing.png")]) == 2
