"""
Пакет geometry – источник точек и numba‑ядра (ковариация, проекции,
расстояния), общие для всех семейств BV.
"""

from bvfit3d.geometry.source import PointSource, as_points

__all__ = ["PointSource", "as_points"]
