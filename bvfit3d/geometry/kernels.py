# bvfit3d/geometry/kernels.py
"""
Numba‑ядра общего пути подгонки.

Все ядра читают точки «сквозь» таблицу примитивов, не собирая
промежуточный массив точек:

    vertices      – (V, 3) float64, текущий кадр;
    prev_vertices – (V, 3) float64 предыдущий кадр или (0, 3) – нет кадра;
    primitives    – (M, k) int64, k = 3 для треугольников, 1 для облака точек;
    indices       – (N,) int64, номера примитивов подмножества.

Точка подмножества – vertices[primitives[indices[i], j]] (и та же
вершина из prev_vertices, если он задан).
"""

import numpy as np
from numba import njit


@njit(nogil=True)
def point_count(prev_vertices, primitives, indices):
    n = indices.shape[0] * primitives.shape[1]
    if prev_vertices.shape[0] > 0:
        n *= 2
    return n


@njit(nogil=True)
def covariance(vertices, prev_vertices, primitives, indices):
    """Центроид и ковариационная матрица 3×3 (два прохода)."""
    nframes = 2 if prev_vertices.shape[0] > 0 else 1
    mean = np.zeros(3)
    n = 0
    for f in range(nframes):
        buf = vertices if f == 0 else prev_vertices
        for i in range(indices.shape[0]):
            prim = primitives[indices[i]]
            for j in range(prim.shape[0]):
                p = buf[prim[j]]
                mean[0] += p[0]
                mean[1] += p[1]
                mean[2] += p[2]
                n += 1
    mean /= n

    cov = np.zeros((3, 3))
    for f in range(nframes):
        buf = vertices if f == 0 else prev_vertices
        for i in range(indices.shape[0]):
            prim = primitives[indices[i]]
            for j in range(prim.shape[0]):
                p = buf[prim[j]]
                d0 = p[0] - mean[0]
                d1 = p[1] - mean[1]
                d2 = p[2] - mean[2]
                cov[0, 0] += d0 * d0
                cov[0, 1] += d0 * d1
                cov[0, 2] += d0 * d2
                cov[1, 1] += d1 * d1
                cov[1, 2] += d1 * d2
                cov[2, 2] += d2 * d2
    cov /= n
    cov[1, 0] = cov[0, 1]
    cov[2, 0] = cov[0, 2]
    cov[2, 1] = cov[1, 2]
    return mean, cov


@njit(nogil=True)
def project(vertices, prev_vertices, primitives, indices, axis):
    """Локальные координаты точек в базисе axis (оси – столбцы)."""
    nframes = 2 if prev_vertices.shape[0] > 0 else 1
    P = np.empty((point_count(prev_vertices, primitives, indices), 3))
    row = 0
    for f in range(nframes):
        buf = vertices if f == 0 else prev_vertices
        for i in range(indices.shape[0]):
            prim = primitives[indices[i]]
            for j in range(prim.shape[0]):
                p = buf[prim[j]]
                for k in range(3):
                    P[row, k] = p[0] * axis[0, k] + p[1] * axis[1, k] + p[2] * axis[2, k]
                row += 1
    return P


@njit(nogil=True)
def extent_and_center(vertices, prev_vertices, primitives, indices, axis):
    """Центр и полуразмеры по осям axis (min/max проекций)."""
    nframes = 2 if prev_vertices.shape[0] > 0 else 1
    lo = np.full(3, np.inf)
    hi = np.full(3, -np.inf)
    for f in range(nframes):
        buf = vertices if f == 0 else prev_vertices
        for i in range(indices.shape[0]):
            prim = primitives[indices[i]]
            for j in range(prim.shape[0]):
                p = buf[prim[j]]
                for k in range(3):
                    proj = p[0] * axis[0, k] + p[1] * axis[1, k] + p[2] * axis[2, k]
                    if proj < lo[k]:
                        lo[k] = proj
                    if proj > hi[k]:
                        hi[k] = proj

    center = np.zeros(3)
    extent = np.empty(3)
    for k in range(3):
        o = 0.5 * (lo[k] + hi[k])
        extent[k] = max(0.5 * (hi[k] - lo[k]), 0.0)
        for r in range(3):
            center[r] += axis[r, k] * o
    return center, extent


@njit(nogil=True)
def maximum_distance(vertices, prev_vertices, primitives, indices, query):
    """Максимальное расстояние от query до точек подмножества."""
    nframes = 2 if prev_vertices.shape[0] > 0 else 1
    maxd = 0.0
    for f in range(nframes):
        buf = vertices if f == 0 else prev_vertices
        for i in range(indices.shape[0]):
            prim = primitives[indices[i]]
            for j in range(prim.shape[0]):
                p = buf[prim[j]]
                d0 = p[0] - query[0]
                d1 = p[1] - query[1]
                d2 = p[2] - query[2]
                d = d0 * d0 + d1 * d1 + d2 * d2
                if d > maxd:
                    maxd = d
    return np.sqrt(maxd)


# -----------------------------------------------------------------
# RSS: прямоугольник в плоскости (axis0, axis1) + радиус по axis2
# -----------------------------------------------------------------
@njit(nogil=True)
def _shrunk_interval(P, c, cz, radsqr):
    """Интервал прямоугольника по оси c с учётом «шапки» сферы."""
    n = P.shape[0]
    minindex = 0
    maxindex = 0
    mintmp = P[0, c]
    maxtmp = P[0, c]
    for i in range(1, n):
        x = P[i, c]
        if x < mintmp:
            minindex = i
            mintmp = x
        elif x > maxtmp:
            maxindex = i
            maxtmp = x

    dz = P[minindex, 2] - cz
    lo = P[minindex, c] + np.sqrt(max(radsqr - dz * dz, 0.0))
    dz = P[maxindex, 2] - cz
    hi = P[maxindex, c] - np.sqrt(max(radsqr - dz * dz, 0.0))

    for i in range(n):
        if P[i, c] < lo:
            dz = P[i, 2] - cz
            x = P[i, c] + np.sqrt(max(radsqr - dz * dz, 0.0))
            if x < lo:
                lo = x

    for i in range(n):
        if P[i, c] > hi:
            dz = P[i, 2] - cz
            x = P[i, c] - np.sqrt(max(radsqr - dz * dz, 0.0))
            if x > hi:
                hi = x

    # перевёрнутый интервал: любая точка между hi и lo покрывает всё
    if lo > hi:
        mid = 0.5 * (lo + hi)
        lo = mid
        hi = mid
    return lo, hi


@njit(nogil=True)
def rss_rectangle(P):
    """(minx, maxx, miny, maxy, cz, r) по локальным координатам P."""
    n = P.shape[0]
    minz = P[0, 2]
    maxz = P[0, 2]
    for i in range(1, n):
        z = P[i, 2]
        if z < minz:
            minz = z
        elif z > maxz:
            maxz = z

    cz = 0.5 * (minz + maxz)
    r = max(0.5 * (maxz - minz), 0.0)
    radsqr = r * r

    minx, maxx = _shrunk_interval(P, 0, cz, radsqr)
    miny, maxy = _shrunk_interval(P, 1, cz, radsqr)

    # углы прямоугольника: точки за двумя сторонами сразу требуют сдвига
    # угла по диагонали. Сдвиг каждого угла – максимум по точкам его
    # квадранта относительно исходного прямоугольника, затем все четыре
    # сдвига применяются разом (результат не зависит от порядка точек).
    a = np.sqrt(0.5)
    grow_pp = 0.0  # (+x, +y)
    grow_pm = 0.0  # (+x, -y)
    grow_mp = 0.0  # (-x, +y)
    grow_mm = 0.0  # (-x, -y)
    for i in range(n):
        px = P[i, 0]
        py = P[i, 1]
        dzz = cz - P[i, 2]
        if px > maxx:
            if py > maxy:
                dx = px - maxx
                dy = py - maxy
                u = dx * a + dy * a
                t = (a * u - dx) ** 2 + (a * u - dy) ** 2 + dzz * dzz
                u = u - np.sqrt(max(radsqr - t, 0.0))
                if u > grow_pp:
                    grow_pp = u
            elif py < miny:
                dx = px - maxx
                dy = py - miny
                u = dx * a - dy * a
                t = (a * u - dx) ** 2 + (-a * u - dy) ** 2 + dzz * dzz
                u = u - np.sqrt(max(radsqr - t, 0.0))
                if u > grow_pm:
                    grow_pm = u
        elif px < minx:
            if py > maxy:
                dx = px - minx
                dy = py - maxy
                u = dy * a - dx * a
                t = (-a * u - dx) ** 2 + (a * u - dy) ** 2 + dzz * dzz
                u = u - np.sqrt(max(radsqr - t, 0.0))
                if u > grow_mp:
                    grow_mp = u
            elif py < miny:
                dx = px - minx
                dy = py - miny
                u = -dx * a - dy * a
                t = (-a * u - dx) ** 2 + (-a * u - dy) ** 2 + dzz * dzz
                u = u - np.sqrt(max(radsqr - t, 0.0))
                if u > grow_mm:
                    grow_mm = u

    # больший прямоугольник содержит каждый сдвинутый угол
    maxx += a * max(grow_pp, grow_pm)
    minx -= a * max(grow_mp, grow_mm)
    maxy += a * max(grow_pp, grow_mp)
    miny -= a * max(grow_pm, grow_mm)

    return minx, maxx, miny, maxy, cz, r
