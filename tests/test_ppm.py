from parlab.image import Image
from parlab.ppm import encode_ppm, write_ppm


def _header(w, h):
    return f"P6\n{w} {h}\n255\n".encode("ascii")


def test_header_and_length():
    img = Image(3, 2)
    data = encode_ppm(img)
    assert data.startswith(_header(3, 2))
    assert len(data) == len(_header(3, 2)) + 3 * 3 * 2


def test_white_image_is_all_ff():
    img = Image(2, 2)
    img.clear(1.0, 1.0, 1.0, 1.0)
    body = encode_ppm(img)[len(_header(2, 2)):]
    assert body == b"\xff" * 12


def test_values_are_clamped():
    img = Image(1, 1)
    img.clear(2.0, -1.0, 1.0, 0.0)
    body = encode_ppm(img)[len(_header(1, 1)):]
    assert body == bytes([255, 0, 255])


def test_half_truncates():
    img = Image(1, 1)
    img.clear(0.5, 0.0, 0.0, 1.0)
    body = encode_ppm(img)[len(_header(1, 1)):]
    assert body[0] == 127


def test_rows_written_bottom_first():
    img = Image(1, 2)
    img.clear(0.0, 0.0, 0.0, 1.0)
    img.pixel(0, 0)[0] = 1.0
    body = encode_ppm(img)[len(_header(1, 2)):]
    assert body == bytes([0, 0, 0, 255, 0, 0])


def test_write_ppm_matches_encoding(tmp_path, capsys):
    img = Image(2, 3)
    img.clear(0.25, 0.75, 1.0, 1.0)
    path = tmp_path / "frame.ppm"
    write_ppm(img, path)
    assert path.read_bytes() == encode_ppm(img)
    assert f"Wrote image file {path}" in capsys.readouterr().out