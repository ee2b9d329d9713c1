"""Homogeneous participating medium with absorption, scattering and emission."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Optional, Protocol

import numpy as np

from .common import S_EPSILON, RenderError
from .mesh import Ray

_FLOAT_MAX = float(np.finfo(np.float32).max)


class _Sampler(Protocol):
    def next_1d(self) -> float: ...


def _indent(text: str, amount: int = 2) -> str:
    return text.replace("\n", "\n" + " " * amount)


@dataclass(eq=False)
class MediumInteraction:
    """A scattering event inside a medium."""

    p: np.ndarray
    wo: np.ndarray
    phase: Any = None


class HomogeneousMedium:
    """A medium with constant absorption, scattering and emitted radiance."""

    def __init__(
        self,
        sigma_a=(0.5, 0.5, 0.5),
        sigma_s=(0.5, 0.5, 0.5),
        sample_emitter: bool = True,
        le=(0.0, 0.0, 0.0),
        phase_function: Any = None,
    ) -> None:
        self.sigma_a = np.broadcast_to(np.asarray(sigma_a, dtype=float), (3,)).copy()
        self.sigma_s = np.broadcast_to(np.asarray(sigma_s, dtype=float), (3,)).copy()
        self.sigma_t = self.sigma_a + self.sigma_s
        self.sample_emitter = sample_emitter
        self.le = np.broadcast_to(np.asarray(le, dtype=float), (3,)).copy()
        self.phase_function = phase_function

    @staticmethod
    def _optical_length(ray: Ray) -> float:
        return min(ray.maxt * float(np.linalg.norm(ray.direction)), _FLOAT_MAX)

    def transmittance(self, ray: Ray) -> np.ndarray:
        """Fraction of light surviving along the ray up to ``maxt``."""
        return np.exp(-self.sigma_t * self._optical_length(ray))

    def emission(self, ray: Ray) -> np.ndarray:
        """Radiance emitted by the medium along the ray up to ``maxt``."""
        z = self._optical_length(ray)
        with np.errstate(divide="ignore", invalid="ignore"):
            return self.sigma_a * self.le * (1.0 - np.exp(-self.sigma_t * z)) / self.sigma_t

    def sample(self, ray: Ray, sampler: _Sampler) -> tuple[np.ndarray, Optional[MediumInteraction]]:
        """Sample a free-flight distance along ``ray``.

        Returns the weight and a :class:`MediumInteraction` when the sample
        lands inside the medium before ``maxt``, otherwise ``None``.
        """
        channel = min(int(sampler.next_1d() * 3), 2)
        xi = sampler.next_1d()
        sigma = float(self.sigma_t[channel])
        survival = 1.0 - xi
        if survival <= 0.0 or sigma == 0.0:
            dist = math.inf
        else:
            dist = -math.log(survival) / sigma

        norm = float(np.linalg.norm(ray.direction))
        t = min(dist / norm, ray.maxt)
        sampled = t < ray.maxt
        interaction = None
        if sampled:
            interaction = MediumInteraction(ray.point_at(t), -ray.direction, self.phase_function)

        tr = np.exp(-self.sigma_t * min(t, _FLOAT_MAX) * norm)
        density = self.sigma_t * tr if sampled else tr
        pdf = float(np.sum(density)) / 3.0
        if pdf == 0.0:
            if not np.all(np.abs(tr) <= S_EPSILON):
                raise RenderError("Tr is not Zero! when pdf is 0.f")
            pdf = 1.0

        if sampled:
            return tr * self.sigma_s / pdf, interaction
        return tr / pdf, None

    def __str__(self) -> str:
        phase = _indent(str(self.phase_function)) if self.phase_function is not None else "null"
        return (
            "HomogeneousMedium[\n"
            f"  m_sigma_a = {self.sigma_a.tolist()},\n"
            f"  m_sigma_s = {self.sigma_s.tolist()},\n"
            f"  m_sigma_t = {self.sigma_t.tolist()},\n"
            f"  sampleEmitter = {int(self.sample_emitter)},\n"
            f"  phaseFunction = {phase}\n"
            "]"
        )