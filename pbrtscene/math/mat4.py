# pbrtscene/math/mat4.py
# ---------------------------------------------------------------
# 4×4 матрица в соглашении pbrt: вектор‑столбец, перенос в m[0..2, 3].
# ---------------------------------------------------------------
import numpy as np
from math import radians, sin, cos

from pbrtscene.errors import DecomposeError

DTYPE = np.float64


class Mat4:
    __slots__ = ("m",)

    def __init__(self, array: np.ndarray = None):
        if array is None:
            self.m = np.identity(4, dtype=DTYPE)
        else:
            self.m = np.array(array, dtype=DTYPE).reshape((4, 4))

    @staticmethod
    def identity():
        return Mat4(np.identity(4, dtype=DTYPE))

    @staticmethod
    def translate(x: float, y: float, z: float):
        m = np.identity(4, dtype=DTYPE)
        m[0, 3] = x
        m[1, 3] = y
        m[2, 3] = z
        return Mat4(m)

    @staticmethod
    def scale(sx: float, sy: float, sz: float):
        m = np.identity(4, dtype=DTYPE)
        m[0, 0] = sx
        m[1, 1] = sy
        m[2, 2] = sz
        return Mat4(m)

    @staticmethod
    def rotate(angle_deg: float, x: float, y: float, z: float):
        """Поворот на angle_deg градусов вокруг произвольной оси."""
        axis = np.array([x, y, z], dtype=DTYPE)
        n = np.linalg.norm(axis)
        if n == 0.0:
            return Mat4.identity()
        ax, ay, az = axis / n
        a = radians(angle_deg)
        s, c = sin(a), cos(a)

        m = np.identity(4, dtype=DTYPE)
        m[0, 0] = ax * ax + (1.0 - ax * ax) * c
        m[0, 1] = ax * ay * (1.0 - c) - az * s
        m[0, 2] = ax * az * (1.0 - c) + ay * s

        m[1, 0] = ax * ay * (1.0 - c) + az * s
        m[1, 1] = ay * ay + (1.0 - ay * ay) * c
        m[1, 2] = ay * az * (1.0 - c) - ax * s

        m[2, 0] = ax * az * (1.0 - c) - ay * s
        m[2, 1] = ay * az * (1.0 - c) + ax * s
        m[2, 2] = az * az + (1.0 - az * az) * c
        return Mat4(m)

    @staticmethod
    def camera_to_world(eye, look, up) -> "Mat4":
        """
        Матрица камера→мир для директивы LookAt.
        Столбцы: right, new_up, dir, eye. ValueError при вырожденных векторах.
        """
        eye = np.asarray(eye, dtype=DTYPE)
        look = np.asarray(look, dtype=DTYPE)
        up = np.asarray(up, dtype=DTYPE)

        d = look - eye
        if np.linalg.norm(d) == 0.0 or np.linalg.norm(up) == 0.0:
            raise ValueError("LookAt: eye and look point coincide or up is zero")
        d = d / np.linalg.norm(d)
        right = np.cross(up / np.linalg.norm(up), d)
        if np.linalg.norm(right) == 0.0:
            raise ValueError("LookAt: up vector and viewing direction are parallel")
        right = right / np.linalg.norm(right)
        new_up = np.cross(d, right)

        m = np.identity(4, dtype=DTYPE)
        m[:3, 0] = right
        m[:3, 1] = new_up
        m[:3, 2] = d
        m[:3, 3] = eye
        return Mat4(m)

    @staticmethod
    def look_at(eye, look, up) -> "Mat4":
        """Мир→камера, обратная к camera_to_world."""
        return Mat4.camera_to_world(eye, look, up).inverse()

    @staticmethod
    def from_pbrt(values) -> "Mat4":
        """16 чисел из Transform/ConcatTransform (по столбцам)."""
        return Mat4(np.array(values[:16], dtype=DTYPE).reshape((4, 4)).T)

    def to_pbrt(self) -> list:
        return [float(v) for v in self.m.T.reshape(16)]

    # -----------------------------------------------------------
    def inverse(self):
        """Обратная матрица или None, если матрица вырождена."""
        if not np.all(np.isfinite(self.m)):
            return None
        try:
            inv = np.linalg.inv(self.m)
        except np.linalg.LinAlgError:
            return None
        if not np.all(np.isfinite(inv)):
            return None
        return Mat4(inv)

    def transpose(self) -> "Mat4":
        return Mat4(self.m.T)

    def transform_point(self, p) -> np.ndarray:
        v = self.m @ np.array([p[0], p[1], p[2], 1.0], dtype=DTYPE)
        if v[3] == 1.0 or v[3] == 0.0:
            return v[:3]
        return v[:3] / v[3]

    def transform_vector(self, v) -> np.ndarray:
        return self.m[:3, :3] @ np.asarray(v, dtype=DTYPE)

    def get_translation(self) -> np.ndarray:
        return self.m[:3, 3].copy()

    def is_identity(self, eps: float = 1e-9) -> bool:
        return bool(np.allclose(self.m, np.identity(4), atol=eps))

    def allclose(self, other: "Mat4", atol: float = 1e-5) -> bool:
        return bool(np.allclose(self.m, other.m, atol=atol))

    # -----------------------------------------------------------
    def decompose(self):
        """
        Разложение M = T · R · S (полярное разложение верхнего 3×3 блока).
        Возвращает (translation, Quat, scale). Отрицательный детерминант
        переносится в масштаб по X.
        """
        from pbrtscene.math.quat import Quat

        m = self.m
        if not np.all(np.isfinite(m)):
            raise DecomposeError("matrix has non-finite elements")
        if not np.allclose(m[3], [0.0, 0.0, 0.0, 1.0], atol=1e-6):
            raise DecomposeError("matrix is projective, cannot decompose")
        upper = m[:3, :3]
        det = np.linalg.det(upper)
        if abs(det) < 1e-12:
            raise DecomposeError("matrix is singular, cannot decompose")

        u, _, vt = np.linalg.svd(upper)
        rot = u @ vt
        stretch = rot.T @ upper
        if np.linalg.det(rot) < 0.0:
            flip = np.diag([-1.0, 1.0, 1.0])
            rot = rot @ flip
            stretch = flip @ stretch

        if not np.allclose(stretch, np.diag(np.diag(stretch)), atol=1e-6):
            raise DecomposeError("matrix has shear, cannot decompose into T·R·S")

        translation = m[:3, 3].copy()
        scale = np.array([stretch[0, 0], stretch[1, 1], stretch[2, 2]], dtype=DTYPE)
        return translation, Quat.from_matrix(rot), scale

    # -----------------------------------------------------------
    def __matmul__(self, other: "Mat4") -> "Mat4":
        return Mat4(np.dot(self.m, other.m))

    def __eq__(self, other):
        if not isinstance(other, Mat4):
            return NotImplemented
        return bool(np.array_equal(self.m, other.m))

    def __hash__(self):
        return hash(self.m.tobytes())

    def __repr__(self):
        return f"Mat4({self.m})"

    def copy(self) -> "Mat4":
        return Mat4(self.m.copy())

    def to_np(self) -> np.ndarray:
        return self.m.copy()
