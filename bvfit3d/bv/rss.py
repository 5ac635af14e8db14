# bvfit3d/bv/rss.py
"""
Rectangle‑swept sphere (RSS): прямоугольник, «раздутый» сферой.

    origin – (3,) угол прямоугольника;
    axis   – (3, 3) правый ортонормированный базис (оси – столбцы);
    length – (2,) стороны прямоугольника вдоль axis0 и axis1;
    radius – радиус заметания.

Точка принадлежит RSS, если её расстояние до прямоугольника
origin + [0, l0]·axis0 + [0, l1]·axis1 не больше radius.
"""

from __future__ import annotations

import numpy as np

from bvfit3d.geometry.source import PointSource
from bvfit3d.bv._common import resolve_eps

_CORNER_SIGNS = np.array([[sx, sy, sz]
                          for sx in (0, 1)
                          for sy in (0, 1)
                          for sz in (0, 1)], dtype=np.float64)


class RSS:
    """Rectangle swept sphere."""

    __slots__ = ("origin", "axis", "length", "radius")

    def __init__(self, origin=None, axis=None, length=None, radius: float = 0.0):
        self.origin = np.zeros(3) if origin is None else np.array(origin, dtype=np.float64)
        self.axis = np.identity(3) if axis is None else np.array(axis, dtype=np.float64)
        self.length = np.zeros(2) if length is None else np.array(length, dtype=np.float64)
        self.radius = float(radius)

    # -----------------------------------------------------------------
    @property
    def center(self) -> np.ndarray:
        """Центр прямоугольника."""
        return (self.origin
                + self.axis[:, 0] * (0.5 * self.length[0])
                + self.axis[:, 1] * (0.5 * self.length[1]))

    def distance(self, points) -> np.ndarray:
        """Расстояние от точек до прямоугольника (не до поверхности RSS)."""
        q = (np.atleast_2d(points) - self.origin) @ self.axis
        dx = q[:, 0] - np.clip(q[:, 0], 0.0, self.length[0])
        dy = q[:, 1] - np.clip(q[:, 1], 0.0, self.length[1])
        return np.sqrt(dx * dx + dy * dy + q[:, 2] * q[:, 2])

    def contains(self, point, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        return bool(self.distance(point)[0] <= self.radius + eps)

    def contains_all(self, points, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        return bool(np.all(self.distance(points) <= self.radius + eps))

    def vertices(self) -> np.ndarray:
        """8 вершин коробки, описанной вокруг RSS."""
        r = self.radius
        lo = np.array([-r, -r, -r])
        span = np.array([self.length[0] + 2.0 * r,
                         self.length[1] + 2.0 * r,
                         2.0 * r])
        local = lo + _CORNER_SIGNS * span
        return self.origin + local @ self.axis.T

    def volume(self) -> float:
        l0, l1 = self.length
        r = self.radius
        return float(l0 * l1 * 2.0 * r + 4.0 * np.pi * r ** 3 / 3.0
                     + (l0 + l1) * np.pi * r * r)

    def size(self) -> float:
        """Квадрат «диагонали» – мера размера для сравнения узлов."""
        return float(np.sqrt(self.length @ self.length) + 2.0 * self.radius) ** 2

    def merge(self, other: "RSS") -> "RSS":
        return merge_rss(self, other)

    def copy(self) -> "RSS":
        return RSS(self.origin, self.axis, self.length, self.radius)

    def __repr__(self):
        o = self.origin
        return (f"RSS(origin=({o[0]:.3f}, {o[1]:.3f}, {o[2]:.3f}), "
                f"length=({self.length[0]:.3f}, {self.length[1]:.3f}), r={self.radius:.3f})")


def rss_from_axes(points, axis) -> RSS:
    """RSS заданной ориентации вокруг точек (n, 3)."""
    origin, length, radius = PointSource.from_points(points).rss_frame(axis)
    return RSS(origin, axis, length, radius)


def merge_rss(b1: RSS, b2: RSS, solver: str = None) -> RSS:
    """RSS, содержащий обе RSS: главные оси 16 вершин описанных коробок."""
    corners = np.vstack([b2.vertices(), b1.vertices()])
    source = PointSource.from_points(corners)
    axis = source.principal_axes(solver)
    origin, length, radius = source.rss_frame(axis)
    return RSS(origin, axis, length, radius)


# для OBBRSS: ось уже выбрана OBB‑слиянием
def merge_rss_on_axes(b1: RSS, b2: RSS, axis) -> RSS:
    corners = np.vstack([b2.vertices(), b1.vertices()])
    return rss_from_axes(corners, axis)
