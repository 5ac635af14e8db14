# bvfit3d/fitting/indexed.py
"""
BVFitter – подгонка BV по подмножеству примитивов общего вершинного буфера.

Используется построителем BVH: буферы задаются один раз, затем для
каждого узла вызывается fit(primitive_indices). Промежуточный массив
точек не собирается – ядра читают вершины через таблицу примитивов.
Если задан предыдущий кадр (prev_vertices), объём покрывает обе позы
(swept‑подгонка).
"""

from __future__ import annotations

from typing import Iterable, List, Optional

import numpy as np

from bvfit3d.bv import BVKind
from bvfit3d.fitting.fitter import get_fitter
from bvfit3d.geometry.source import PointSource
from bvfit3d.multithread.task_pool import TaskPool
from bvfit3d.utils.logger import logger
from bvfit3d.utils.profiler import Profiler


class BVFitter:
    """Подгонщик BV для модели (треугольники или облако точек)."""

    def __init__(self,
                 kind=BVKind.OBB,
                 vertices: Optional[np.ndarray] = None,
                 tri_indices: Optional[np.ndarray] = None,
                 prev_vertices: Optional[np.ndarray] = None,
                 solver: str = None):
        self.kind = BVKind.parse(kind)
        self._fitter = get_fitter(self.kind, solver)
        self.vertices = None
        self.prev_vertices = None
        self.primitives = None
        if vertices is not None:
            self.set(vertices, tri_indices, prev_vertices)

    # -----------------------------------------------------------------
    def set(self, vertices, tri_indices=None, prev_vertices=None) -> None:
        """Задать буферы.

        vertices      – (V, 3) вершины;
        tri_indices   – (M, 3) индексы треугольников; None – облако точек
                        (примитив i – вершина i);
        prev_vertices – (V, 3) те же вершины в предыдущий момент времени.
        """
        verts = np.array(vertices, dtype=np.float64, order="C")
        if verts.ndim != 2 or verts.shape[1] != 3:
            raise ValueError(f"vertices must have shape (V, 3), got {verts.shape}")

        prev = None
        if prev_vertices is not None:
            prev = np.array(prev_vertices, dtype=np.float64, order="C")
            if prev.shape != verts.shape:
                raise ValueError(
                    f"prev_vertices shape {prev.shape} does not match vertices {verts.shape}"
                )

        if tri_indices is None:
            prims = np.arange(verts.shape[0], dtype=np.int64).reshape((-1, 1))
        else:
            prims = np.array(tri_indices, dtype=np.int64, order="C")
            if prims.ndim == 1 and prims.shape[0] % 3 == 0:
                prims = prims.reshape((-1, 3))
            if prims.ndim != 2 or prims.shape[1] != 3:
                raise ValueError(f"tri_indices must have shape (M, 3), got {prims.shape}")
            if prims.size and (prims.min() < 0 or prims.max() >= verts.shape[0]):
                raise ValueError("tri_indices reference vertices outside the buffer")

        self.vertices = verts
        self.prev_vertices = prev
        self.primitives = prims
        logger.debug(
            f"[BVFitter] {self.kind.value}: {verts.shape[0]} vertices, "
            f"{prims.shape[0]} primitives, swept={prev is not None}"
        )

    def clear(self) -> None:
        self.vertices = None
        self.prev_vertices = None
        self.primitives = None

    @property
    def is_pointcloud(self) -> bool:
        return self.primitives is not None and self.primitives.shape[1] == 1

    # -----------------------------------------------------------------
    def source(self, primitive_indices) -> PointSource:
        """PointSource для подмножества примитивов."""
        if self.vertices is None:
            raise RuntimeError("BVFitter has no vertex buffer; call set() first")
        idx = np.array(primitive_indices, dtype=np.int64, order="C").reshape(-1)
        if idx.shape[0] == 0:
            raise ValueError("Cannot fit a bounding volume to an empty primitive set")
        if idx.min() < 0 or idx.max() >= self.primitives.shape[0]:
            raise ValueError("primitive index out of range")
        return PointSource(self.vertices, self.primitives, idx, self.prev_vertices)

    def fit(self, primitive_indices):
        """BV для подмножества примитивов (всегда общий путь)."""
        src = self.source(primitive_indices)
        with Profiler(f"BVFitter.fit[{self.kind.value}, n={len(src)}]"):
            return self._fitter.fit_source(src)

    def fit_many(self, subsets: Iterable, pool: TaskPool = None) -> List:
        """BV для нескольких независимых подмножеств (порядок сохраняется)."""
        subsets = list(subsets)
        if pool is None:
            return [self.fit(s) for s in subsets]
        return pool.map(self.fit, subsets)
