# bvfit3d/math/eigen.py
"""
Собственные значения/векторы симметричной матрицы 3×3.

Узкий интерфейс: eigen(matrix) -> (values (3,), vectors (3, 3)),
vectors[:, i] соответствует values[i]. Порядок значений не
гарантируется – упорядочивает bvfit3d.math.frame.axis_from_eigen.

Решатели регистрируются по имени:
    * "numpy"  – numpy.linalg.eigh;
    * "jacobi" – циклические вращения Якоби (numba‑ядро).
"""

from __future__ import annotations

from typing import Callable, Dict

import numpy as np
from numba import njit

from bvfit3d.utils.config import Config

_SOLVERS: Dict[str, Callable] = {}


def register_solver(name: str, fn: Callable) -> None:
    """Зарегистрировать решатель под именем `name`."""
    _SOLVERS[name] = fn


def get_solver(name: str) -> Callable:
    if name not in _SOLVERS:
        raise ValueError(
            f"Unknown eigen solver: {name!r}. Available: {available_solvers()}"
        )
    return _SOLVERS[name]


def available_solvers() -> list:
    return list(_SOLVERS.keys())


def eigen(matrix, solver: str = None):
    """Разложить симметричную 3×3 матрицу выбранным решателем.

    solver=None – берётся из Config()["eigen_solver"].
    """
    if solver is None:
        solver = Config()["eigen_solver"]
    m = np.ascontiguousarray(matrix, dtype=np.float64)
    if m.shape != (3, 3):
        raise ValueError(f"eigen() expects a 3x3 matrix, got shape {m.shape}")
    return get_solver(solver)(m)


# -----------------------------------------------------------------
# numpy
# -----------------------------------------------------------------
def _eigh(m: np.ndarray):
    values, vectors = np.linalg.eigh(m)
    return values, vectors


# -----------------------------------------------------------------
# Якоби
# -----------------------------------------------------------------
@njit(nogil=True)
def jacobi_eigen(m):
    """Циклический метод Якоби для симметричной 3×3 матрицы.

    Возвращает (d, v): d – собственные значения, v[:, i] – векторы.
    """
    a = m.copy()
    v = np.eye(3)
    d = np.empty(3)
    b = np.empty(3)
    z = np.zeros(3)
    for i in range(3):
        d[i] = a[i, i]
        b[i] = a[i, i]

    for it in range(1, 51):
        sm = abs(a[0, 1]) + abs(a[0, 2]) + abs(a[1, 2])
        if sm == 0.0:
            break

        if it < 4:
            tresh = 0.2 * sm / 9.0
        else:
            tresh = 0.0

        for ip in range(2):
            for iq in range(ip + 1, 3):
                g = 100.0 * abs(a[ip, iq])
                if it > 4 and abs(d[ip]) + g == abs(d[ip]) \
                        and abs(d[iq]) + g == abs(d[iq]):
                    a[ip, iq] = 0.0
                elif abs(a[ip, iq]) > tresh:
                    h = d[iq] - d[ip]
                    if abs(h) + g == abs(h):
                        t = a[ip, iq] / h
                    else:
                        theta = 0.5 * h / a[ip, iq]
                        t = 1.0 / (abs(theta) + np.sqrt(1.0 + theta * theta))
                        if theta < 0.0:
                            t = -t
                    c = 1.0 / np.sqrt(1.0 + t * t)
                    s = t * c
                    tau = s / (1.0 + c)
                    h = t * a[ip, iq]
                    z[ip] -= h
                    z[iq] += h
                    d[ip] -= h
                    d[iq] += h
                    a[ip, iq] = 0.0

                    for j in range(ip):
                        g0 = a[j, ip]
                        h0 = a[j, iq]
                        a[j, ip] = g0 - s * (h0 + g0 * tau)
                        a[j, iq] = h0 + s * (g0 - h0 * tau)
                    for j in range(ip + 1, iq):
                        g0 = a[ip, j]
                        h0 = a[j, iq]
                        a[ip, j] = g0 - s * (h0 + g0 * tau)
                        a[j, iq] = h0 + s * (g0 - h0 * tau)
                    for j in range(iq + 1, 3):
                        g0 = a[ip, j]
                        h0 = a[iq, j]
                        a[ip, j] = g0 - s * (h0 + g0 * tau)
                        a[iq, j] = h0 + s * (g0 - h0 * tau)
                    for j in range(3):
                        g0 = v[j, ip]
                        h0 = v[j, iq]
                        v[j, ip] = g0 - s * (h0 + g0 * tau)
                        v[j, iq] = h0 + s * (g0 - h0 * tau)

        for ip in range(3):
            b[ip] += z[ip]
            d[ip] = b[ip]
            z[ip] = 0.0

    return d, v


register_solver("numpy", _eigh)
register_solver("jacobi", jacobi_eigen)
