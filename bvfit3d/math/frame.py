# bvfit3d/math/frame.py
"""
Ортонормированные правые базисы (оси – столбцы матрицы 3×3).

* axis_from_eigen – упорядочивание собственных векторов по убыванию
  дисперсии, третья ось – строго axis0 × axis1;
* generate_coordinate_system – достройка базиса по одной оси;
* triangle_frame – базис треугольника (нормаль + самое длинное ребро).
"""

from __future__ import annotations

import numpy as np

from bvfit3d.utils.logger import logger

# ось по‑умолчанию для вырожденных направлений
FALLBACK_AXIS = np.array([1.0, 0.0, 0.0])


def safe_normalize(v: np.ndarray, fallback: np.ndarray = FALLBACK_AXIS) -> np.ndarray:
    """Нормализованный вектор; для нулевой длины – копия `fallback`."""
    n = float(np.linalg.norm(v))
    if n == 0.0 or not np.isfinite(n):
        return np.array(fallback, dtype=np.float64)
    return np.asarray(v, dtype=np.float64) / n


def axis_from_eigen(values, vectors) -> np.ndarray:
    """Собрать базис из неупорядоченных собственных пар.

    values  – (3,) собственные значения;
    vectors – (3, 3), vectors[:, i] соответствует values[i].

    При равных значениях выигрывает меньший индекс.
    """
    s = values
    if s[0] > s[1]:
        imax, imin = 0, 1
    else:
        imin, imax = 0, 1

    if s[2] < s[imin]:
        imid = imin
        imin = 2
    elif s[2] > s[imax]:
        imid = imax
        imax = 2
    else:
        imid = 2

    axis = np.empty((3, 3), dtype=np.float64)
    axis[:, 0] = vectors[:, imax]
    axis[:, 1] = vectors[:, imid]
    axis[:, 2] = np.cross(axis[:, 0], axis[:, 1])
    return axis


def generate_coordinate_system(axis0) -> np.ndarray:
    """Достроить правый базис (w, u, v) по единичному вектору w."""
    w = np.asarray(axis0, dtype=np.float64)
    if abs(w[0]) >= abs(w[1]):
        inv_length = 1.0 / np.sqrt(w[0] * w[0] + w[2] * w[2])
        u = np.array([-w[2] * inv_length, 0.0, w[0] * inv_length])
    else:
        inv_length = 1.0 / np.sqrt(w[1] * w[1] + w[2] * w[2])
        u = np.array([0.0, w[2] * inv_length, -w[1] * inv_length])
    v = np.cross(w, u)

    axis = np.empty((3, 3), dtype=np.float64)
    axis[:, 0] = w
    axis[:, 1] = u
    axis[:, 2] = v
    return axis


def longest_edge(p0, p1, p2):
    """Рёбра e0 = p0‑p1, e1 = p1‑p2, e2 = p2‑p0 и индекс самого длинного."""
    edges = (p0 - p1, p1 - p2, p2 - p0)
    lengths = [float(e @ e) for e in edges]
    imax = 0
    if lengths[1] > lengths[0]:
        imax = 1
    if lengths[2] > lengths[imax]:
        imax = 2
    return edges, imax


def triangle_frame(p0, p1, p2) -> np.ndarray:
    """Базис треугольника: axis2 – нормаль, axis0 – самое длинное ребро."""
    edges, imax = longest_edge(p0, p1, p2)
    axis0 = safe_normalize(edges[imax])
    normal = np.cross(edges[0], edges[1])
    nn = float(np.linalg.norm(normal))

    # коллинеарность: |n| мала относительно квадрата длины ребра
    scale = float(edges[imax] @ edges[imax])
    if nn == 0.0 or nn <= 1e-12 * scale:
        logger.debug("triangle_frame: degenerate triangle, completing frame from longest edge")
        return generate_coordinate_system(axis0)

    axis = np.empty((3, 3), dtype=np.float64)
    axis[:, 2] = normal / nn
    axis[:, 0] = axis0
    axis[:, 1] = np.cross(axis[:, 2], axis[:, 0])
    return axis


def circumcircle(a, b, c):
    """Описанная окружность треугольника: (центр, радиус).

    Для вырожденного (коллинеарного) треугольника – окружность на
    самом длинном ребре как на диаметре.
    """
    e1 = a - c
    e2 = b - c
    e1_len2 = float(e1 @ e1)
    e2_len2 = float(e2 @ e2)
    e3 = np.cross(e1, e2)
    e3_len2 = float(e3 @ e3)

    if e3_len2 <= 1e-12 * e1_len2 * e2_len2:
        logger.debug("circumcircle: collinear triangle, using the longest edge as diameter")
        edges, imax = longest_edge(a, b, c)
        ends = ((a, b), (b, c), (c, a))[imax]
        center = 0.5 * (ends[0] + ends[1])
        return center, 0.5 * float(np.linalg.norm(edges[imax]))

    diff = e1 - e2
    radius = 0.5 * float(np.sqrt(e1_len2 * e2_len2 * float(diff @ diff) / e3_len2))
    center = np.cross(e2 * e1_len2 - e1 * e2_len2, e3) * (0.5 / e3_len2) + c
    return center, radius


def is_orthonormal(axis, tol: float = 1e-9) -> bool:
    """Проверка: столбцы ортонормированы и базис правый."""
    axis = np.asarray(axis, dtype=np.float64)
    if not np.allclose(axis.T @ axis, np.eye(3), atol=tol):
        return False
    return bool(np.linalg.det(axis) > 0.0)
