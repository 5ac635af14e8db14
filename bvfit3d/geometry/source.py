# bvfit3d/geometry/source.py
"""
PointSource – набор точек для общего пути подгонки.

Один и тот же объект описывает и «плоский» массив точек, и подмножество
примитивов в общем вершинном буфере (при необходимости – с предыдущим
кадром для swept‑подгонки). Семейные подгонщики работают только
через него.
"""

from __future__ import annotations

import numpy as np

from bvfit3d.geometry import kernels
from bvfit3d.math.eigen import eigen
from bvfit3d.math.frame import axis_from_eigen
from bvfit3d.utils.logger import logger

_NO_FRAME = np.empty((0, 3), dtype=np.float64)


def as_points(points) -> np.ndarray:
    """Привести вход к (n, 3) float64, n ≥ 1 (копия – вход не меняется)."""
    pts = np.array(points, dtype=np.float64, order="C")
    if pts.ndim == 1 and pts.shape[0] == 3:
        pts = pts.reshape((1, 3))
    if pts.ndim != 2 or pts.shape[1] != 3:
        raise ValueError(f"Expected an (n, 3) point array, got shape {pts.shape}")
    if pts.shape[0] == 0:
        raise ValueError("Cannot fit a bounding volume to an empty point set")
    if not np.all(np.isfinite(pts)):
        raise ValueError("Point array contains non-finite coordinates")
    return pts


class PointSource:
    """Точки подмножества, читаемые сквозь таблицу примитивов."""

    __slots__ = ("vertices", "prev_vertices", "primitives", "indices")

    def __init__(self, vertices, primitives, indices, prev_vertices=None):
        self.vertices = vertices
        self.primitives = primitives
        self.indices = indices
        self.prev_vertices = _NO_FRAME if prev_vertices is None else prev_vertices

    @classmethod
    def from_points(cls, points) -> "PointSource":
        pts = as_points(points)
        n = pts.shape[0]
        ids = np.arange(n, dtype=np.int64)
        return cls(pts, ids.reshape((n, 1)), ids)

    # -----------------------------------------------------------------
    @property
    def swept(self) -> bool:
        return self.prev_vertices.shape[0] > 0

    def __len__(self) -> int:
        return int(kernels.point_count(self.prev_vertices, self.primitives, self.indices))

    def _args(self):
        return self.vertices, self.prev_vertices, self.primitives, self.indices

    # -----------------------------------------------------------------
    def covariance(self):
        """(центроид, ковариация 3×3)."""
        return kernels.covariance(*self._args())

    def principal_axes(self, solver: str = None) -> np.ndarray:
        """Ковариация → собственное разложение → упорядоченный базис."""
        _, cov = self.covariance()
        if not np.any(cov):
            logger.debug("PointSource: zero covariance (all points coincide)")
        values, vectors = eigen(cov, solver)
        return axis_from_eigen(values, vectors)

    def extent_and_center(self, axis):
        return kernels.extent_and_center(*self._args(), np.ascontiguousarray(axis))

    def project(self, axis) -> np.ndarray:
        return kernels.project(*self._args(), np.ascontiguousarray(axis))

    def rss_frame(self, axis):
        """(origin, length (2,), radius) RSS для заданного базиса."""
        axis = np.ascontiguousarray(axis)
        P = self.project(axis)
        minx, maxx, miny, maxy, cz, r = kernels.rss_rectangle(P)
        origin = axis[:, 0] * minx + axis[:, 1] * miny + axis[:, 2] * cz
        length = np.array([max(maxx - minx, 0.0), max(maxy - miny, 0.0)])
        return origin, length, max(float(r), 0.0)

    def maximum_distance(self, query) -> float:
        return float(kernels.maximum_distance(*self._args(),
                                              np.asarray(query, dtype=np.float64)))
