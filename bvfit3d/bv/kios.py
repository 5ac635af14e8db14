# bvfit3d/bv/kios.py
"""
kIOS – набор из 1, 3 или 5 сфер плюс OBB.

spheres[0] – «главная» сфера, содержащая все точки; остальные
сферы – пары вдоль axis2 (и axis1 для k = 5).
"""

from __future__ import annotations

from typing import List

import numpy as np

from bvfit3d.bv._common import resolve_eps
from bvfit3d.bv.obb import OBB, merge_obb

MAX_SPHERES = 5


class Sphere:
    """Сфера (центр, радиус)."""

    __slots__ = ("center", "radius")

    def __init__(self, center=None, radius: float = 0.0):
        self.center = np.zeros(3) if center is None else np.array(center, dtype=np.float64)
        self.radius = max(float(radius), 0.0)

    def distance(self, points) -> np.ndarray:
        return np.linalg.norm(np.atleast_2d(points) - self.center, axis=1)

    def contains(self, point, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        return bool(self.distance(point)[0] <= self.radius + eps)

    def contains_all(self, points, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        return bool(np.all(self.distance(points) <= self.radius + eps))

    def copy(self) -> "Sphere":
        return Sphere(self.center, self.radius)

    def __repr__(self):
        c = self.center
        return f"Sphere(({c[0]:.3f}, {c[1]:.3f}, {c[2]:.3f}), r={self.radius:.3f})"


class KIOS:
    """k‑discrete‑orientation spheres."""

    __slots__ = ("obb", "spheres")

    def __init__(self, obb: OBB = None, spheres: List[Sphere] = None):
        self.obb = OBB() if obb is None else obb
        self.spheres = [] if spheres is None else list(spheres)
        if len(self.spheres) > MAX_SPHERES:
            raise ValueError(f"kIOS holds at most {MAX_SPHERES} spheres, got {len(self.spheres)}")

    @property
    def num_spheres(self) -> int:
        return len(self.spheres)

    @property
    def center(self) -> np.ndarray:
        return self.obb.center

    def contains(self, point, eps: float = None) -> bool:
        """Точка в пределах radius + eps хотя бы одной сферы."""
        return any(s.contains(point, eps) for s in self.spheres)

    def contains_all(self, points, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        pts = np.atleast_2d(points)
        covered = np.zeros(len(pts), dtype=bool)
        for s in self.spheres:
            covered |= s.distance(pts) <= s.radius + eps
        return bool(np.all(covered))

    def volume(self) -> float:
        return self.obb.volume()

    def size(self) -> float:
        return self.obb.size()

    def merge(self, other: "KIOS") -> "KIOS":
        return merge_kios(self, other)

    def __repr__(self):
        return f"KIOS(k={self.num_spheres}, obb={self.obb!r})"


def enclose_sphere(s0: Sphere, s1: Sphere) -> Sphere:
    """Наименьшая сфера, содержащая обе сферы."""
    d = s1.center - s0.center
    dist2 = float(d @ d)
    diff_r = s1.radius - s0.radius

    # одна сфера внутри другой
    if diff_r * diff_r >= dist2:
        return s1.copy() if s1.radius > s0.radius else s0.copy()

    dist = np.sqrt(dist2)
    radius = 0.5 * (dist + s0.radius + s1.radius)
    if dist > 0.0:
        center = s0.center + d * ((radius - s0.radius) / dist)
    else:
        center = s0.center.copy()
    return Sphere(center, radius)


def merge_kios(b1: KIOS, b2: KIOS, solver: str = None) -> KIOS:
    """k = min(k1, k2), сфера i охватывает обе сферы i, OBB – слияние OBB."""
    k = min(b1.num_spheres, b2.num_spheres)
    spheres = [enclose_sphere(b1.spheres[i], b2.spheres[i]) for i in range(k)]
    return KIOS(merge_obb(b1.obb, b2.obb, solver), spheres)
