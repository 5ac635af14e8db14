# bvfit3d/math/quat.py
# ---------------------------------------------------------------
# Кватернионы (x, y, z, w): построение из матрицы поворота 3×3,
# сложение и скалярное произведение, нормализация, обратно в 3×3.
# Используется при слиянии двух OBB с близкими центрами.
# ---------------------------------------------------------------

import numpy as np
from math import sqrt


class Quat:
    __slots__ = ("x", "y", "z", "w")

    def __init__(self, x=0.0, y=0.0, z=0.0, w=1.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)

    @staticmethod
    def from_matrix(m):
        """Кватернион из ортонормированной правой матрицы 3×3 (оси – столбцы)."""
        m = np.asarray(m, dtype=np.float64)
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0.0:
            root = sqrt(trace + 1.0)
            w = 0.5 * root
            root = 0.5 / root
            return Quat((m[2, 1] - m[1, 2]) * root,
                        (m[0, 2] - m[2, 0]) * root,
                        (m[1, 0] - m[0, 1]) * root,
                        w)

        # наибольший диагональный элемент – для устойчивости
        i = 0
        if m[1, 1] > m[0, 0]:
            i = 1
        if m[2, 2] > m[i, i]:
            i = 2
        j = (i + 1) % 3
        k = (j + 1) % 3

        root = sqrt(m[i, i] - m[j, j] - m[k, k] + 1.0)
        q = [0.0, 0.0, 0.0]
        q[i] = 0.5 * root
        root = 0.5 / root
        w = (m[k, j] - m[j, k]) * root
        q[j] = (m[j, i] + m[i, j]) * root
        q[k] = (m[k, i] + m[i, k]) * root
        return Quat(q[0], q[1], q[2], w)

    def __add__(self, other: "Quat") -> "Quat":
        return Quat(self.x + other.x, self.y + other.y,
                    self.z + other.z, self.w + other.w)

    def __neg__(self) -> "Quat":
        return Quat(-self.x, -self.y, -self.z, -self.w)

    def dot(self, other: "Quat") -> float:
        return (self.x * other.x + self.y * other.y
                + self.z * other.z + self.w * other.w)

    def normalized(self) -> "Quat":
        n = sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2)
        if n == 0:
            return Quat()
        inv = 1.0 / n
        return Quat(self.x*inv, self.y*inv, self.z*inv, self.w*inv)

    # -----------------------------------------------------------
    #  Преобразования
    # -----------------------------------------------------------
    def to_mat3(self) -> np.ndarray:
        """Возвращает 3×3 матрицу вращения (float64, оси – столбцы)."""
        x, y, z, w = self.x, self.y, self.z, self.w
        xx, yy, zz = x*x, y*y, z*z
        xy, xz, yz = x*y, x*z, y*z
        wx, wy, wz = w*x, w*y, w*z

        m = np.identity(3, dtype=np.float64)
        m[0, 0] = 1 - 2*(yy + zz)
        m[0, 1] = 2*(xy - wz)
        m[0, 2] = 2*(xz + wy)

        m[1, 0] = 2*(xy + wz)
        m[1, 1] = 1 - 2*(xx + zz)
        m[1, 2] = 2*(yz - wx)

        m[2, 0] = 2*(xz - wy)
        m[2, 1] = 2*(yz + wx)
        m[2, 2] = 1 - 2*(xx + yy)

        return m

    def __repr__(self):
        return f"Quat({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, {self.w:.3f})"
