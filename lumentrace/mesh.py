"""Rays and triangle meshes with per-triangle geometric queries."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .common import EPSILON, RenderError


def _indent(text: str, amount: int = 2) -> str:
    return text.replace("\n", "\n" + " " * amount)


@dataclass(eq=False)
class Ray:
    """A ray ``origin + t * direction`` valid for ``mint <= t <= maxt``."""

    origin: Any
    direction: Any
    mint: float = EPSILON
    maxt: float = math.inf
    medium: Any = None

    def __post_init__(self) -> None:
        self.origin = np.asarray(self.origin, dtype=float).reshape(3)
        self.direction = np.asarray(self.direction, dtype=float).reshape(3)

    def point_at(self, t: float) -> np.ndarray:
        """Return the point at parameter ``t`` along the ray."""
        return self.origin + t * self.direction


class TriangleMesh:
    """Indexed triangle mesh with optional per-vertex normals and UVs."""

    def __init__(
        self,
        vertices,
        faces,
        normals=None,
        uvs=None,
        name: str = "",
        bsdf: Any = None,
        emitter: Any = None,
    ) -> None:
        self.vertices = np.asarray(vertices, dtype=float)
        self.faces = np.asarray(faces, dtype=np.int64)
        if self.vertices.ndim != 2 or self.vertices.shape[1] != 3:
            raise RenderError("vertices must have shape (n, 3)")
        if self.faces.ndim != 2 or self.faces.shape[1] != 3:
            raise RenderError("faces must have shape (m, 3)")
        if self.faces.size and (
            self.faces.min() < 0 or self.faces.max() >= len(self.vertices)
        ):
            raise RenderError("face index refers to a missing vertex")
        self.normals = None if normals is None else np.asarray(normals, dtype=float)
        if self.normals is not None and self.normals.shape != self.vertices.shape:
            raise RenderError("normals must match the vertex array in shape")
        self.uvs = None if uvs is None else np.asarray(uvs, dtype=float)
        if self.uvs is not None and self.uvs.shape != (len(self.vertices), 2):
            raise RenderError("uvs must have shape (n, 2)")
        self.name = name
        self.bsdf = bsdf
        self.emitter = emitter

    def primitive_count(self) -> int:
        """Return the number of triangles."""
        return len(self.faces)

    def _face(self, index: int) -> np.ndarray:
        if not 0 <= index < len(self.faces):
            raise IndexError(f"triangle index {index} out of range")
        return self.faces[index]

    def _corners(self, index: int):
        i0, i1, i2 = self._face(index)
        return self.vertices[i0], self.vertices[i1], self.vertices[i2]

    def surface_area(self, index: int) -> float:
        """Return the area of triangle ``index``."""
        p0, p1, p2 = self._corners(index)
        return 0.5 * float(np.linalg.norm(np.cross(p1 - p0, p2 - p0)))

    def ray_intersect(self, index: int, ray: Ray) -> Optional[tuple[float, float, float]]:
        """Intersect ``ray`` with triangle ``index``.

        Returns ``(u, v, t)`` with barycentric ``u``, ``v`` and ray parameter
        ``t``, or ``None`` when there is no hit inside ``[mint, maxt]``.
        """
        p0, p1, p2 = self._corners(index)
        edge1 = p1 - p0
        edge2 = p2 - p0
        pvec = np.cross(ray.direction, edge2)
        det = float(edge1 @ pvec)
        if -1e-8 < det < 1e-8:
            return None
        inv_det = 1.0 / det
        tvec = ray.origin - p0
        u = float(tvec @ pvec) * inv_det
        if u < 0.0 or u > 1.0:
            return None
        qvec = np.cross(tvec, edge1)
        v = float(ray.direction @ qvec) * inv_det
        if v < 0.0 or u + v > 1.0:
            return None
        t = float(edge2 @ qvec) * inv_det
        if ray.mint <= t <= ray.maxt:
            return u, v, t
        return None

    def interpolated_vertex(self, index: int, bc) -> np.ndarray:
        """Return the point with barycentric coordinates ``bc`` on a triangle."""
        weights = np.asarray(bc, dtype=float).reshape(3)
        corners = np.stack(self._corners(index))
        return weights @ corners

    def interpolated_normal(self, index: int, bc) -> np.ndarray:
        """Return the normalised barycentric blend of the vertex normals."""
        if self.normals is None:
            raise RenderError("mesh has no vertex normals")
        weights = np.asarray(bc, dtype=float).reshape(3)
        n = weights @ self.normals[self._face(index)]
        return n / np.linalg.norm(n)

    def bounding_box(self, index: int) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(min_corner, max_corner)`` of triangle ``index``."""
        corners = np.stack(self._corners(index))
        return corners.min(axis=0), corners.max(axis=0)

    def centroid(self, index: int) -> np.ndarray:
        """Return the centroid of triangle ``index``."""
        p0, p1, p2 = self._corners(index)
        return (1.0 / 3.0) * (p0 + p1 + p2)

    def __str__(self) -> str:
        bsdf = _indent(str(self.bsdf)) if self.bsdf is not None else "null"
        emitter = _indent(str(self.emitter)) if self.emitter is not None else "null"
        return (
            "Mesh[\n"
            f'  name = "{self.name}",\n'
            f"  vertexCount = {len(self.vertices)},\n"
            f"  triangleCount = {len(self.faces)},\n"
            f"  bsdf = {bsdf},\n"
            f"  emitter = {emitter}\n"
            "]"
        )