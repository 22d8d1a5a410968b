# pbrtscene/math/quat.py
# ---------------------------------------------------------------
# Кватернион (x, y, z, w):
# - создание из угла/оси и из матрицы поворота,
# - умножение и нормализация,
# - обратно в угол/ось для директивы Rotate.
# ---------------------------------------------------------------

import numpy as np
from math import sin, cos, acos, radians, degrees, sqrt


class Quat:
    __slots__ = ("x", "y", "z", "w")

    def __init__(self, x=0.0, y=0.0, z=0.0, w=1.0):
        self.x = float(x)
        self.y = float(y)
        self.z = float(z)
        self.w = float(w)

    @staticmethod
    def from_axis_angle(axis, angle_deg):
        """axis – 3‑элементный iterable, angle – в градусах."""
        a = radians(angle_deg) / 2.0
        s = sin(a)
        ax = np.array(axis, dtype=np.float64)
        ax = ax / np.linalg.norm(ax)
        return Quat(ax[0] * s, ax[1] * s, ax[2] * s, cos(a))

    @staticmethod
    def from_matrix(m):
        """Кватернион из 3×3 (или 4×4) матрицы поворота, метод следа."""
        m = np.asarray(m, dtype=np.float64)
        trace = m[0, 0] + m[1, 1] + m[2, 2]
        if trace > 0.0:
            s = sqrt(trace + 1.0)
            w = s / 2.0
            s = 0.5 / s
            x = (m[2, 1] - m[1, 2]) * s
            y = (m[0, 2] - m[2, 0]) * s
            z = (m[1, 0] - m[0, 1]) * s
        else:
            # наибольший диагональный элемент
            nxt = [1, 2, 0]
            i = 0
            if m[1, 1] > m[0, 0]:
                i = 1
            if m[2, 2] > m[i, i]:
                i = 2
            j = nxt[i]
            k = nxt[j]
            s = sqrt((m[i, i] - (m[j, j] + m[k, k])) + 1.0)
            q = [0.0, 0.0, 0.0]
            q[i] = s * 0.5
            if s != 0.0:
                s = 0.5 / s
            w = (m[k, j] - m[j, k]) * s
            q[j] = (m[j, i] + m[i, j]) * s
            q[k] = (m[k, i] + m[i, k]) * s
            x, y, z = q
        q = Quat(x, y, z, w).normalized()
        if q.w < 0.0:
            q = Quat(-q.x, -q.y, -q.z, -q.w)
        return q

    def __mul__(self, other: "Quat") -> "Quat":
        x = self.w * other.x + self.x * other.w + self.y * other.z - self.z * other.y
        y = self.w * other.y - self.x * other.z + self.y * other.w + self.z * other.x
        z = self.w * other.z + self.x * other.y - self.y * other.x + self.z * other.w
        w = self.w * other.w - self.x * other.x - self.y * other.y - self.z * other.z
        return Quat(x, y, z, w)

    def normalized(self) -> "Quat":
        n = sqrt(self.x**2 + self.y**2 + self.z**2 + self.w**2)
        if n == 0:
            return Quat()
        inv = 1.0 / n
        return Quat(self.x*inv, self.y*inv, self.z*inv, self.w*inv)

    def to_axis_angle(self):
        """(угол в градусах, нормированная ось)."""
        w = min(1.0, max(-1.0, self.w))
        angle = degrees(2.0 * acos(w))
        axis = np.array([self.x, self.y, self.z], dtype=np.float64)
        n = np.linalg.norm(axis)
        if n == 0.0:
            return 0.0, np.array([0.0, 0.0, 1.0])
        return angle, axis / n

    # -----------------------------------------------------------
    #  Преобразования
    # -----------------------------------------------------------
    def to_mat4(self):
        """Возвращает 4×4 матрицу вращения."""
        x, y, z, w = self.x, self.y, self.z, self.w
        xx, yy, zz = x*x, y*y, z*z
        xy, xz, yz = x*y, x*z, y*z
        wx, wy, wz = w*x, w*y, w*z

        m = np.identity(4, dtype=np.float64)
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

    def conjugate(self):
        return Quat(-self.x, -self.y, -self.z, self.w)

    def __repr__(self):
        return f"Quat({self.x:.3f}, {self.y:.3f}, {self.z:.3f}, {self.w:.3f})"
