# bvfit3d/bv/obbrss.py
"""
OBBRSS – пара OBB + RSS с общими осями.
"""

from __future__ import annotations

import numpy as np

from bvfit3d.bv.obb import OBB, merge_obb
from bvfit3d.bv.rss import RSS, merge_rss_on_axes


class OBBRSS:
    """Гибрид: OBB и RSS на одном базисе."""

    __slots__ = ("obb", "rss")

    def __init__(self, obb: OBB = None, rss: RSS = None):
        self.obb = OBB() if obb is None else obb
        self.rss = RSS() if rss is None else rss

    @property
    def axis(self) -> np.ndarray:
        return self.obb.axis

    @property
    def center(self) -> np.ndarray:
        return self.obb.center

    def contains(self, point, eps: float = None) -> bool:
        return self.obb.contains(point, eps) and self.rss.contains(point, eps)

    def contains_all(self, points, eps: float = None) -> bool:
        return self.obb.contains_all(points, eps) and self.rss.contains_all(points, eps)

    def volume(self) -> float:
        return self.obb.volume()

    def size(self) -> float:
        return self.obb.size()

    def merge(self, other: "OBBRSS") -> "OBBRSS":
        return merge_obbrss(self, other)

    def __repr__(self):
        return f"OBBRSS({self.obb!r}, {self.rss!r})"


def merge_obbrss(b1: OBBRSS, b2: OBBRSS, solver: str = None) -> OBBRSS:
    """OBB – слияние OBB; RSS строится на осях нового OBB."""
    obb = merge_obb(b1.obb, b2.obb, solver)
    rss = merge_rss_on_axes(b1.rss, b2.rss, obb.axis)
    return OBBRSS(obb, rss)
