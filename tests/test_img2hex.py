import pytest
from PIL import Image

import img2hex


@pytest.fixture
def stripes_png(tmp_path):
    img = Image.new("RGB", (8, 2))
    for y in range(2):
        for x in range(8):
            img.putpixel((x, y), (255, 255, 255) if x % 2 == 0 else (0, 0, 0))
    path = tmp_path / "stripes.png"
    img.save(path)
    return path


def test_bin_default_output_path(stripes_png, capsys):
    assert img2hex.main([str(stripes_png)]) == 0
    assert stripes_png.with_suffix(".bin").read_bytes() == bytes([0xAA, 0xAA])
    assert "Wrote 2 bytes" in capsys.readouterr().out


def test_hex_text(stripes_png, tmp_path):
    out = tmp_path / "out.txt"
    assert img2hex.main([str(stripes_png), "--format", "hex", "--reverse-bits", "-o", str(out)]) == 0
    assert out.read_text() == "0x55, 0x55\n"


def test_c_header(stripes_png):
    assert img2hex.main([str(stripes_png), "--format", "c", "--name", "stripes", "--mode", "col-row"]) == 0
    text = stripes_png.with_suffix(".h").read_text()
    assert "static const uint8_t stripes[8] = {" in text
    assert "0x00, 0x03, 0x00, 0x03" in text


def test_color(stripes_png, tmp_path):
    out = tmp_path / "c.bin"
    assert img2hex.main([str(stripes_png), "--color", "-o", str(out)]) == 0
    assert out.read_bytes()[:4] == bytes([0xFF, 0xFF, 0x00, 0x00])


def test_missing_input(tmp_path, capsys):
    assert img2hex.main([str(tmp_path / "nope.png")]) == 3
    assert "not found" in capsys.readouterr().err


def test_bad_threshold(stripes_png, capsys):
    assert img2hex.main([str(stripes_png), "--threshold", "999"]) == 2
    assert "threshold" in capsys.readouterr().err


def test_unreadable_image(tmp_path):
    bogus = tmp_path / "bogus.png"
    bogus.write_bytes(b"definitely not an image")
    assert img2hex.main([str(bogus)]) == 3
