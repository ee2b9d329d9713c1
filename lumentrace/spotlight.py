"""Spot light: a point light restricted to a cone with a linear falloff."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional

import numpy as np

from .common import EPSILON, RenderError, deg_to_rad
from .mesh import Ray


@dataclass(eq=False)
class EmitterSample:
    """Query record describing a light sample as seen from ``ref``."""

    ref: Any
    p: Optional[np.ndarray] = None
    n: Optional[np.ndarray] = None
    wi: Optional[np.ndarray] = None
    pdf: float = 0.0
    shadow_ray: Optional[Ray] = None

    def __post_init__(self) -> None:
        self.ref = np.asarray(self.ref, dtype=float).reshape(3)


class SpotLight:
    """Point light emitting along the local -z axis inside a cone.

    Angles are given in degrees. Full intensity is reached inside
    ``theta_fall``; it drops linearly to zero at ``theta_max``.
    """

    BASE_DIRECTION = np.array([0.0, 0.0, -1.0])

    def __init__(
        self,
        position=(0.0, 0.0, 0.0),
        intensity=(1000.0, 1000.0, 1000.0),
        to_world=None,
        theta_max: float = 30.0,
        theta_fall: float = 5.0,
        base_color=(1.0, 1.0, 1.0),
    ) -> None:
        self.position = np.asarray(position, dtype=float).reshape(3)
        self.intensity = np.asarray(intensity, dtype=float).reshape(3)
        self.to_world = (
            np.eye(4) if to_world is None else np.asarray(to_world, dtype=float).reshape(4, 4)
        )
        try:
            self.to_local = np.linalg.inv(self.to_world)
        except np.linalg.LinAlgError as exc:
            raise RenderError("light transform is not invertible") from exc
        self.theta_max = deg_to_rad(theta_max)
        self.cos_theta_max = math.cos(self.theta_max)
        self.theta_fall = deg_to_rad(theta_fall)
        self.cos_theta_fall = math.cos(self.theta_fall)
        self.base_color = np.asarray(base_color, dtype=float).reshape(3)

    def sample(self, ref) -> tuple[EmitterSample, np.ndarray]:
        """Sample the light from ``ref``; return the record and the weighted radiance."""
        record = EmitterSample(ref)
        offset = self.position - record.ref
        distance = float(np.linalg.norm(offset))
        if distance == 0.0:
            raise RenderError("reference point coincides with the light position")
        record.p = self.position.copy()
        record.wi = offset / distance
        record.pdf = 1.0
        record.shadow_ray = Ray(record.ref, record.wi, EPSILON, distance - EPSILON)

        local = self.to_local[:3, :3] @ record.wi
        local = -local / np.linalg.norm(local)
        cos_theta = float(self.BASE_DIRECTION @ local)

        if cos_theta < self.cos_theta_max:
            return record, np.zeros(3)
        ratio = 1.0
        if cos_theta < self.cos_theta_fall:
            theta = math.acos(min(1.0, max(-1.0, cos_theta)))
            ratio = (self.theta_max - theta) / (self.theta_max - self.theta_fall)
        radiance = ratio * self.intensity * self.base_color / (distance * distance)
        return record, radiance

    def eval(self, record: EmitterSample) -> np.ndarray:
        """A delta light cannot be hit by chance: always black."""
        return np.zeros(3)

    def pdf(self, record: EmitterSample) -> float:
        """A delta light has zero density with respect to solid angle."""
        return 0.0

    def is_delta(self) -> bool:
        """Return True: the light is a single point."""
        return True

    def __str__(self) -> str:
        return (
            "SpotLight[\n"
            f"  position = {self.position.tolist()},\n"
            f"  intensity = {self.intensity.tolist()},\n"
            f"  toWorld = {self.to_world.tolist()},\n"
            f"  cosThetaMax = {self.cos_theta_max:f},\n"
            f"  ThetaMax = {self.theta_max:f},\n"
            f"  cosThetaFall = {self.cos_theta_fall:f},\n"
            f"  ThetaFall = {self.theta_fall:f},\n"
            "]"
        )