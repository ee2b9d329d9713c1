import numpy as np
import pytest
from PIL import Image

from lumentrace.common import RenderError
from lumentrace.texture_map import (
    ImageTexture,
    NormalMap,
    load_float_texture,
    load_normal_map,
    load_texture,
    srgb_to_linear,
)


def test_srgb_endpoints():
    assert srgb_to_linear(0.0) == pytest.approx(0.0)
    assert srgb_to_linear(1.0) == pytest.approx(1.0)


def test_srgb_monotonic_and_darkening():
    values = np.linspace(0.01, 0.99, 50)
    linear = srgb_to_linear(values)
    assert len(linear) == 50
    assert float(np.diff(linear).min()) > 0.0
    assert float((values - linear).min()) > 0.0


def test_constant_texture_everywhere():
    tex = ImageTexture(np.full((4, 5), 0.3))
    for uv in [(0.1, 0.2), (-3.7, 2.25), (0.99, 0.01)]:
        assert tex.eval(uv) == pytest.approx(0.3)


def test_exact_pixel_lookup():
    pixels = np.arange(9, dtype=float).reshape(3, 3)
    tex = ImageTexture(pixels)
    # u=0 selects column 0; v=0.5 selects the middle row
    assert tex.eval((0.0, 0.5)) == pytest.approx(pixels[1, 0])


def test_uv_origin_is_bottom_left():
    pixels = np.array([[1.0, 2.0], [3.0, 4.0]])
    tex = ImageTexture(pixels)
    assert tex.eval((0.0, 0.0)) == pytest.approx(pixels[1, 0])


def test_periodic_in_uv():
    rng = np.random.default_rng(1)
    tex = ImageTexture(rng.random((6, 7, 3)))
    np.testing.assert_allclose(tex.eval((0.25, 0.25)), tex.eval((1.25, 2.25)))


def test_bilinear_midpoint():
    tex = ImageTexture(np.array([[0.2, 0.6]]))
    assert tex.eval((0.5, 0.3)) == pytest.approx((0.2 + 0.6) / 2)


def test_srgb_texture_linearizes():
    pixels = np.full((2, 2, 3), 0.5)
    tex = ImageTexture(pixels, srgb=True)
    np.testing.assert_allclose(tex.eval((0.3, 0.3)), np.full(3, srgb_to_linear(0.5)))


def test_zero_scale_rejected():
    with pytest.raises(RenderError):
        ImageTexture(np.ones((2, 2)), scale=(0.0, 1.0))


def test_bad_shape_rejected():
    with pytest.raises(RenderError):
        ImageTexture(np.ones((2, 2, 4)))
    with pytest.raises(RenderError):
        NormalMap(np.ones((2, 2)))


def test_normal_map_eval_interpolates():
    normals = np.array([[[1.0, 0.0, 0.0], [0.0, 1.0, 0.0]]])
    nmap = NormalMap(normals)
    np.testing.assert_allclose(nmap.eval((0.5, 0.3)), [0.5, 0.5, 0.0])


def _write_rgb(path, rows):
    Image.fromarray(np.array(rows, dtype=np.uint8), "RGB").save(path)


def test_load_texture_png(tmp_path):
    path = tmp_path / "tex.png"
    _write_rgb(
        path,
        [
            [[255, 0, 0], [0, 255, 0]],
            [[0, 0, 255], [255, 255, 255]],
        ],
    )
    tex = load_texture(path)
    np.testing.assert_allclose(tex.eval((0.0, 0.0)), [0.0, 0.0, 1.0], atol=1e-9)
    np.testing.assert_allclose(tex.eval((0.99999, 0.99999)), [0.0, 1.0, 0.0], atol=1e-3)
    assert "Color3f" in str(tex)


def test_load_float_texture(tmp_path):
    path = tmp_path / "gray.png"
    Image.fromarray(np.full((3, 3), 51, dtype=np.uint8), "L").save(path)
    tex = load_float_texture(path)
    assert tex.eval((0.4, 0.7)) == pytest.approx(51 / 255)


def test_float_texture_requires_png(tmp_path):
    path = tmp_path / "gray.jpg"
    Image.fromarray(np.full((3, 3), 51, dtype=np.uint8), "L").save(path)
    with pytest.raises(RenderError):
        load_float_texture(path)


def test_missing_file(tmp_path):
    with pytest.raises(RenderError, match="Unable to open"):
        load_texture(tmp_path / "absent.png")


def test_no_extension(tmp_path):
    path = tmp_path / "noext"
    path.write_bytes(b"data")
    with pytest.raises(RenderError, match="Unable to read"):
        load_texture(path)


def test_load_normal_map_points_up(tmp_path):
    path = tmp_path / "normal.png"
    _write_rgb(path, [[[128, 128, 255]] * 2] * 2)
    nmap = load_normal_map(path)
    n = nmap.eval((0.3, 0.6))
    assert np.linalg.norm(n) == pytest.approx(1.0)
    assert n[2] > 0.999
    assert "NormalMap" in str(nmap)


def test_load_normal_map_along_x(tmp_path):
    path = tmp_path / "normal.png"
    _write_rgb(path, [[[255, 128, 128]]])
    nmap = load_normal_map(path)
    n = nmap.eval((0.0, 0.0))
    assert n[0] > 0.999