"""Image-backed textures and tangent-space normal maps with bilinear lookup."""

from __future__ import annotations

import math
from pathlib import Path
from typing import Union

import numpy as np
from PIL import Image

from .common import RenderError

_ArrayOrFloat = Union[float, np.ndarray]


def srgb_to_linear(value) -> _ArrayOrFloat:
    """Convert sRGB-encoded values in ``[0, 1]`` to linear RGB."""
    arr = np.asarray(value, dtype=float)
    low = arr / 12.92
    high = np.power((np.maximum(arr, 0.0) + 0.055) / 1.055, 2.4)
    result = np.where(arr <= 0.04045, low, high)
    if result.ndim == 0:
        return float(result)
    return result


def _check_scale(scale) -> np.ndarray:
    arr = np.asarray(scale, dtype=float).reshape(-1)
    if arr.size == 1:
        arr = np.repeat(arr, 2)
    if arr.size != 2:
        raise RenderError("texture scale must have two components")
    if np.any(arr == 0.0):
        raise RenderError("texture scale components must be non-zero")
    return arr


class ImageTexture:
    """A texture sampled from a pixel grid with wrap-around bilinear filtering.

    ``pixels`` has shape ``(height, width)`` for a scalar texture or
    ``(height, width, 3)`` for a colour texture. When ``srgb`` is true the
    stored values are sRGB-encoded and lookups return linear RGB.
    """

    def __init__(self, pixels, scale=(1.0, 1.0), filename: str = "", srgb: bool = False) -> None:
        data = np.asarray(pixels, dtype=float)
        if data.ndim not in (2, 3) or (data.ndim == 3 and data.shape[2] != 3):
            raise RenderError("pixels must have shape (h, w) or (h, w, 3)")
        if data.shape[0] == 0 or data.shape[1] == 0:
            raise RenderError("texture image is empty")
        self.pixels = data
        self.scale = _check_scale(scale)
        self.filename = filename
        self.srgb = srgb
        self._values = srgb_to_linear(data) if srgb else data

    @property
    def width(self) -> int:
        return self.pixels.shape[1]

    @property
    def height(self) -> int:
        return self.pixels.shape[0]

    def eval(self, uv) -> _ArrayOrFloat:
        """Look up the texture at ``uv``; UV origin is the bottom-left corner."""
        u, v = float(uv[0]), float(uv[1])
        nu = u - math.floor(u)
        nv = 1.0 - (v - math.floor(v))

        x = nu / self.scale[0] * (self.width - 1)
        y = nv / self.scale[1] * (self.height - 1)
        x_int = math.floor(x)
        y_int = math.floor(y)
        x_frac = x - x_int
        y_frac = y - y_int

        x0 = x_int % self.width
        y0 = y_int % self.height
        x1 = (x0 + 1) % self.width
        y1 = (y0 + 1) % self.height

        vals = self._values
        result = (
            (1 - x_frac) * (1 - y_frac) * vals[y0, x0]
            + x_frac * (1 - y_frac) * vals[y0, x1]
            + (1 - x_frac) * y_frac * vals[y1, x0]
            + x_frac * y_frac * vals[y1, x1]
        )
        if vals.ndim == 2:
            return float(result)
        return np.asarray(result, dtype=float)

    def __str__(self) -> str:
        kind = "Color3f" if self.pixels.ndim == 3 else "float"
        return (
            "TextureMap[\n"
            f"  scale = {self.scale.tolist()},\n"
            f"  image_texture = {self.filename},\n"
            f"  type = {kind}"
            "]"
        )


class NormalMap(ImageTexture):
    """A grid of unit normals in tangent space; lookups are not renormalised."""

    def __init__(self, normals, scale=(1.0, 1.0), filename: str = "") -> None:
        data = np.asarray(normals, dtype=float)
        if data.ndim != 3 or data.shape[2] != 3:
            raise RenderError("normals must have shape (h, w, 3)")
        super().__init__(data, scale, filename, srgb=False)

    def eval(self, uv) -> np.ndarray:
        """Bilinearly interpolated tangent-space normal at ``uv``."""
        return np.asarray(super().eval(uv), dtype=float)

    def __str__(self) -> str:
        return (
            "NormalMap[\n"
            f"  scale = {self.scale.tolist()},\n"
            f"  normal_map = {self.filename},\n"
            "]"
        )


def _open_image(filename, allowed: tuple[str, ...], kind: str, mode: str) -> Image.Image:
    name = str(filename)
    path = Path(name)
    if not path.is_file():
        raise RenderError(f'Unable to open {kind} file "{name}"!')
    pos = name.rfind(".")
    if pos < 0 or name[pos + 1:] not in allowed:
        raise RenderError(f'Unable to read {kind} file "{name}"!')
    try:
        with Image.open(path) as img:
            img.load()
            converted = img.convert(mode)
    except OSError as exc:
        raise RenderError(f'Unable to read {kind} file "{name}"!') from exc
    if converted.width == 0 or converted.height == 0:
        raise RenderError(f'Unable to read {kind} file "{name}"!')
    return converted


def load_texture(filename, scale=(1.0, 1.0)) -> ImageTexture:
    """Load an sRGB colour texture from a PNG or JPEG file."""
    img = _open_image(filename, ("png", "jpg", "jpeg"), "texture", "RGB")
    pixels = np.asarray(img, dtype=float) / 255.0
    return ImageTexture(pixels, scale, str(filename), srgb=True)


def load_float_texture(filename, scale=(1.0, 1.0)) -> ImageTexture:
    """Load a single-channel texture in ``[0, 1]`` from a PNG file."""
    img = _open_image(filename, ("png",), "texture", "L")
    pixels = np.asarray(img, dtype=float) / 255.0
    return ImageTexture(pixels, scale, str(filename), srgb=False)


def load_normal_map(filename, scale=(1.0, 1.0)) -> NormalMap:
    """Load a tangent-space normal map from a PNG or JPEG file."""
    img = _open_image(filename, ("png", "jpg", "jpeg"), "normal map", "RGB")
    rgb = np.asarray(img, dtype=float) / 255.0
    normals = 2.0 * rgb - 1.0
    lengths = np.linalg.norm(normals, axis=2, keepdims=True)
    with np.errstate(invalid="ignore", divide="ignore"):
        normals = normals / lengths
    return NormalMap(normals, scale, str(filename))