# bvfit3d/fitting/fitter.py
# -*- coding: utf-8 -*-
"""
Подгонка ограничивающих объёмов по массиву точек.

Для каждого семейства – свой класс с одинаковым контрактом:

    fit1 / fit2 / fit3 / fit6 – точные формулы для 1, 2, 3 и 6 точек
                                (6 точек = два треугольника);
    fitn(source)              – общий путь: ковариация → собственные
                                векторы → упорядоченный базис → проекции;
    fit(points)               – выбор по числу точек;
    merge(a, b)               – слияние двух объёмов семейства.
"""

from __future__ import annotations

import logging
from math import sqrt

import numpy as np

from bvfit3d.bv import BVKind
from bvfit3d.bv.obb import OBB, merge_obb
from bvfit3d.bv.rss import RSS, merge_rss
from bvfit3d.bv.kios import KIOS, Sphere, merge_kios
from bvfit3d.bv.obbrss import OBBRSS, merge_obbrss
from bvfit3d.geometry.source import PointSource, as_points
from bvfit3d.math.frame import (
    FALLBACK_AXIS,
    circumcircle,
    generate_coordinate_system,
    triangle_frame,
)
from bvfit3d.utils.logger import logger

# порог вытянутости для выбора k в kIOS
KIOS_RATIO = 1.5
# угол покрытия 60°: 1/sin(30°) и cos(30°)
INV_SIN_A = 2.0
COS_A = sqrt(3.0) / 2.0


def pair_frame(p0: np.ndarray, p1: np.ndarray):
    """Базис по направлению p0 − p1 и расстояние между точками."""
    d = p0 - p1
    length = float(np.linalg.norm(d))
    if length == 0.0:
        logger.debug("pair_frame: coincident points, using fallback axis")
        axis0 = FALLBACK_AXIS
    else:
        axis0 = d / length
    return generate_coordinate_system(axis0), length


def kios_sphere_count(extent) -> int:
    """k = 1, 3 или 5 по соотношению полуразмеров OBB."""
    if extent[0] > KIOS_RATIO * extent[2]:
        if extent[0] > KIOS_RATIO * extent[1]:
            return 5
        return 3
    return 1


class BaseFitter:
    """Общая диспетчеризация по числу точек."""

    kind: BVKind = None

    def __init__(self, solver: str = None):
        self.solver = solver

    def fit(self, points):
        pts = as_points(points)
        n = pts.shape[0]
        if n == 1:
            return self.fit1(pts)
        if n == 2:
            return self.fit2(pts)
        if n == 3:
            return self.fit3(pts)
        if n == 6:
            return self.fit6(pts)
        return self.fitn(PointSource.from_points(pts))

    def fit_source(self, source: PointSource):
        return self.fitn(source)

    def fit1(self, pts):
        raise NotImplementedError

    def fit2(self, pts):
        raise NotImplementedError

    def fit3(self, pts):
        raise NotImplementedError

    def fit6(self, pts):
        return self.merge(self.fit3(pts[0:3]), self.fit3(pts[3:6]))

    def fitn(self, source: PointSource):
        raise NotImplementedError

    def merge(self, a, b):
        raise NotImplementedError


# ---------------------------------------------------------------------
# OBB
# ---------------------------------------------------------------------
class OBBFitter(BaseFitter):
    kind = BVKind.OBB

    def fit1(self, pts) -> OBB:
        return OBB(pts[0], np.identity(3), np.zeros(3))

    def fit2(self, pts) -> OBB:
        axis, length = pair_frame(pts[0], pts[1])
        return OBB(0.5 * (pts[0] + pts[1]), axis, [0.5 * length, 0.0, 0.0])

    def fit3(self, pts) -> OBB:
        axis = triangle_frame(pts[0], pts[1], pts[2])
        center, extent = PointSource.from_points(pts).extent_and_center(axis)
        return OBB(center, axis, extent)

    def fitn(self, source: PointSource) -> OBB:
        axis = source.principal_axes(self.solver)
        center, extent = source.extent_and_center(axis)
        return OBB(center, axis, extent)

    def merge(self, a: OBB, b: OBB) -> OBB:
        return merge_obb(a, b, self.solver)


# ---------------------------------------------------------------------
# RSS
# ---------------------------------------------------------------------
class RSSFitter(BaseFitter):
    kind = BVKind.RSS

    def fit1(self, pts) -> RSS:
        return RSS(pts[0], np.identity(3), [0.0, 0.0], 0.0)

    def fit2(self, pts) -> RSS:
        # прямоугольник вырождается в отрезок p1 → p0
        axis, length = pair_frame(pts[0], pts[1])
        return RSS(pts[1], axis, [length, 0.0], 0.0)

    def fit3(self, pts) -> RSS:
        axis = triangle_frame(pts[0], pts[1], pts[2])
        origin, length, radius = PointSource.from_points(pts).rss_frame(axis)
        return RSS(origin, axis, length, radius)

    def fitn(self, source: PointSource) -> RSS:
        axis = source.principal_axes(self.solver)
        origin, length, radius = source.rss_frame(axis)
        return RSS(origin, axis, length, radius)

    def merge(self, a: RSS, b: RSS) -> RSS:
        return merge_rss(a, b, self.solver)


# ---------------------------------------------------------------------
# kIOS
# ---------------------------------------------------------------------
class KIOSFitter(BaseFitter):
    kind = BVKind.KIOS

    def fit1(self, pts) -> KIOS:
        obb = OBB(pts[0], np.identity(3), np.zeros(3))
        return KIOS(obb, [Sphere(pts[0], 0.0)])

    def fit2(self, pts) -> KIOS:
        axis, length = pair_frame(pts[0], pts[1])
        r0 = 0.5 * length
        center = 0.5 * (pts[0] + pts[1])
        obb = OBB(center, axis, [r0, 0.0, 0.0])

        r1 = r0 * INV_SIN_A
        r1cos_a = r1 * COS_A
        spheres = [Sphere(center, r0)]
        for k in (1, 2):
            delta = axis[:, k] * r1cos_a
            spheres.append(Sphere(center - delta, r1))
            spheres.append(Sphere(center + delta, r1))
        return KIOS(obb, spheres)

    def fit3(self, pts) -> KIOS:
        axis = triangle_frame(pts[0], pts[1], pts[2])
        center, extent = PointSource.from_points(pts).extent_and_center(axis)
        obb = OBB(center, axis, extent)

        c0, r0 = circumcircle(pts[0], pts[1], pts[2])
        r1 = r0 * INV_SIN_A
        delta = axis[:, 2] * (r1 * COS_A)
        spheres = [Sphere(c0, r0), Sphere(c0 - delta, r1), Sphere(c0 + delta, r1)]
        return KIOS(obb, spheres)

    def fitn(self, source: PointSource) -> KIOS:
        axis = source.principal_axes(self.solver)
        center, extent = source.extent_and_center(axis)
        obb = OBB(center, axis, extent)

        r0 = source.maximum_distance(center)
        k = kios_sphere_count(extent)
        spheres = [Sphere(center, r0)]

        if k >= 3:
            r10 = sqrt(max(r0 * r0 - extent[2] * extent[2], 0.0)) * INV_SIN_A
            spheres += self._sphere_pair(
                source, center, axis[:, 2], r10, r10 * COS_A - extent[2])

        if k >= 5:
            r10 = spheres[1].radius
            offset = sqrt(max(r10 * r10 - extent[0] * extent[0] - extent[2] * extent[2], 0.0)) \
                - extent[1]
            spheres += self._sphere_pair(source, center, axis[:, 1], r10, offset)

        if logger.isEnabledFor(logging.DEBUG):
            self._report_uncovered(source, spheres)
        return KIOS(obb, spheres)

    @staticmethod
    def _sphere_pair(source, center, direction, radius, offset):
        """Пара сфер center ∓ direction·offset и один шаг коррекции.

        После расстановки каждая сфера сдвигается вдоль direction так,
        чтобы её самая дальняя точка оказалась на расстоянии radius.
        """
        delta = direction * offset
        lo = center - delta
        hi = center + delta
        r_lo = source.maximum_distance(lo)
        r_hi = source.maximum_distance(hi)
        lo = lo + direction * (r_lo - radius)
        hi = hi + direction * (radius - r_hi)
        return [Sphere(lo, radius), Sphere(hi, radius)]

    @staticmethod
    def _report_uncovered(source, spheres):
        for i, s in enumerate(spheres[1:], start=1):
            miss = source.maximum_distance(s.center) - s.radius
            if miss > 0.0:
                logger.debug(f"kIOS: auxiliary sphere {i} misses points by {miss:.3g}")

    def merge(self, a: KIOS, b: KIOS) -> KIOS:
        return merge_kios(a, b, self.solver)


# ---------------------------------------------------------------------
# OBBRSS
# ---------------------------------------------------------------------
class OBBRSSFitter(BaseFitter):
    kind = BVKind.OBBRSS

    def __init__(self, solver: str = None):
        super().__init__(solver)
        self._obb = OBBFitter(solver)
        self._rss = RSSFitter(solver)

    def fit1(self, pts) -> OBBRSS:
        return OBBRSS(self._obb.fit1(pts), self._rss.fit1(pts))

    def fit2(self, pts) -> OBBRSS:
        return OBBRSS(self._obb.fit2(pts), self._rss.fit2(pts))

    def fit3(self, pts) -> OBBRSS:
        return OBBRSS(self._obb.fit3(pts), self._rss.fit3(pts))

    def fitn(self, source: PointSource) -> OBBRSS:
        axis = source.principal_axes(self.solver)
        center, extent = source.extent_and_center(axis)
        origin, length, radius = source.rss_frame(axis)
        return OBBRSS(OBB(center, axis, extent), RSS(origin, axis, length, radius))

    def merge(self, a: OBBRSS, b: OBBRSS) -> OBBRSS:
        return merge_obbrss(a, b, self.solver)


_FITTERS = {
    BVKind.OBB: OBBFitter,
    BVKind.RSS: RSSFitter,
    BVKind.KIOS: KIOSFitter,
    BVKind.OBBRSS: OBBRSSFitter,
}


def get_fitter(kind, solver: str = None) -> BaseFitter:
    """Подгонщик для семейства `kind` (BVKind, строка или класс объёма)."""
    return _FITTERS[BVKind.parse(kind)](solver)


def fit(points, kind=BVKind.OBB, solver: str = None):
    """Подогнать объём семейства `kind` к массиву точек (n, 3), n ≥ 1."""
    return get_fitter(kind, solver).fit(points)
