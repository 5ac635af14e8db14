# bvfit3d/bv/obb.py
"""
Ориентированный ограничивающий параллелепипед (OBB).

    center – (3,) центр;
    axis   – (3, 3) правый ортонормированный базис, оси – столбцы;
    extent – (3,) неотрицательные полуразмеры вдоль осей.
"""

from __future__ import annotations

import numpy as np

from bvfit3d.geometry.source import PointSource
from bvfit3d.math.eigen import eigen
from bvfit3d.math.frame import axis_from_eigen, generate_coordinate_system, safe_normalize
from bvfit3d.math.quat import Quat
from bvfit3d.bv._common import resolve_eps

# знаки 8 вершин параллелепипеда
_CORNER_SIGNS = np.array([[sx, sy, sz]
                          for sx in (-1.0, 1.0)
                          for sy in (-1.0, 1.0)
                          for sz in (-1.0, 1.0)])


class OBB:
    """Oriented bounding box."""

    __slots__ = ("center", "axis", "extent")

    def __init__(self, center=None, axis=None, extent=None):
        self.center = np.zeros(3) if center is None else np.array(center, dtype=np.float64)
        self.axis = np.identity(3) if axis is None else np.array(axis, dtype=np.float64)
        self.extent = np.zeros(3) if extent is None else np.array(extent, dtype=np.float64)

    # -----------------------------------------------------------------
    def vertices(self) -> np.ndarray:
        """8 вершин (8, 3)."""
        return self.center + (_CORNER_SIGNS * self.extent) @ self.axis.T

    def local(self, points) -> np.ndarray:
        """Координаты точек в базисе коробки относительно центра."""
        return (np.atleast_2d(points) - self.center) @ self.axis

    def contains(self, point, eps: float = None) -> bool:
        """Точка внутри (с допуском eps по каждой оси)."""
        eps = resolve_eps(eps)
        q = self.local(point)[0]
        return bool(np.all(np.abs(q) <= self.extent + eps))

    def contains_all(self, points, eps: float = None) -> bool:
        eps = resolve_eps(eps)
        q = self.local(points)
        return bool(np.all(np.abs(q) <= self.extent + eps))

    def volume(self) -> float:
        return float(8.0 * np.prod(self.extent))

    def size(self) -> float:
        """Квадрат диагонали – мера «размера» для сравнения узлов."""
        return float(4.0 * (self.extent @ self.extent))

    def merge(self, other: "OBB") -> "OBB":
        return merge_obb(self, other)

    def copy(self) -> "OBB":
        return OBB(self.center, self.axis, self.extent)

    def __repr__(self):
        c, e = self.center, self.extent
        return (f"OBB(center=({c[0]:.3f}, {c[1]:.3f}, {c[2]:.3f}), "
                f"extent=({e[0]:.3f}, {e[1]:.3f}, {e[2]:.3f}))")


# -----------------------------------------------------------------
# Слияние
# -----------------------------------------------------------------
def _fit_axes_to(corners: np.ndarray, axis: np.ndarray) -> OBB:
    source = PointSource.from_points(corners)
    center, extent = source.extent_and_center(axis)
    return OBB(center, axis, extent)


def merge_obb_largedist(b1: OBB, b2: OBB, solver: str = None) -> OBB:
    """Слияние далёких коробок: axis0 вдоль разности центров,
    остальные оси – главные оси проекций 16 вершин на плоскость ⟂ axis0."""
    corners = np.vstack([b1.vertices(), b2.vertices()])
    axis0 = safe_normalize(b1.center - b2.center)

    projected = corners - np.outer(corners @ axis0, axis0)
    _, cov = PointSource.from_points(projected).covariance()
    values, vectors = eigen(cov, solver)
    ordered = axis_from_eigen(values, vectors)

    # главная ось проекций ⟂ axis0 (до округления)
    axis1 = ordered[:, 0] - axis0 * (ordered[:, 0] @ axis0)
    n1 = float(np.linalg.norm(axis1))
    if n1 < 1e-9:
        axis = generate_coordinate_system(axis0)
    else:
        axis = np.empty((3, 3))
        axis[:, 0] = axis0
        axis[:, 1] = axis1 / n1
        axis[:, 2] = np.cross(axis0, axis[:, 1])
    return _fit_axes_to(corners, axis)


def merge_obb_smalldist(b1: OBB, b2: OBB) -> OBB:
    """Слияние близких коробок: средняя ориентация (сумма кватернионов)."""
    q0 = Quat.from_matrix(b1.axis)
    q1 = Quat.from_matrix(b2.axis)
    if q0.dot(q1) < 0:
        q1 = -q1
    axis = (q0 + q1).normalized().to_mat3()

    corners = np.vstack([b1.vertices(), b2.vertices()])
    return _fit_axes_to(corners, axis)


def merge_obb(b1: OBB, b2: OBB, solver: str = None) -> OBB:
    """OBB, содержащий обе коробки."""
    center_diff = b1.center - b2.center
    max_extent = float(np.max(b1.extent))
    max_extent2 = float(np.max(b2.extent))
    if np.linalg.norm(center_diff) > 2.0 * (max_extent + max_extent2):
        return merge_obb_largedist(b1, b2, solver)
    return merge_obb_smalldist(b1, b2)
