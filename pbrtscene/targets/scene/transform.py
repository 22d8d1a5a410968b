# pbrtscene/targets/scene/transform.py
# ---------------------------------------------------------------
# Transform (m + обратная im) и TransformSet – пара преобразований
# для начала/конца интервала движения.
# ---------------------------------------------------------------
from pbrtscene.math.mat4 import Mat4

ACTIVE_START = 1
ACTIVE_END = 2
ACTIVE_ALL = 3


class Transform:
    __slots__ = ("m", "im")

    def __init__(self, m: Mat4 = None, im: Mat4 = None):
        self.m = m if m is not None else Mat4.identity()
        self.im = im if im is not None else Mat4.identity()

    @staticmethod
    def identity() -> "Transform":
        return Transform()

    @staticmethod
    def translate(x, y, z) -> "Transform":
        return Transform(Mat4.translate(x, y, z), Mat4.translate(-x, -y, -z))

    @staticmethod
    def rotate(angle, x, y, z) -> "Transform":
        m = Mat4.rotate(angle, x, y, z)
        return Transform(m, m.transpose())

    @staticmethod
    def scale(x, y, z) -> "Transform":
        """ValueError при нулевом коэффициенте."""
        if x == 0.0 or y == 0.0 or z == 0.0:
            raise ValueError(f"degenerate scale ({x}, {y}, {z})")
        return Transform(Mat4.scale(x, y, z), Mat4.scale(1.0 / x, 1.0 / y, 1.0 / z))

    @staticmethod
    def look_at(ex, ey, ez, lx, ly, lz, ux, uy, uz) -> "Transform":
        im = Mat4.camera_to_world((ex, ey, ez), (lx, ly, lz), (ux, uy, uz))
        return Transform(im.inverse(), im)

    @staticmethod
    def from_matrix(m: Mat4):
        """None, если матрица необратима."""
        im = m.inverse()
        if im is None:
            return None
        return Transform(m, im)

    def mul(self, other: "Transform") -> None:
        self.m = self.m @ other.m
        self.im = other.im @ self.im

    def set(self, other: "Transform") -> None:
        self.m = other.m.copy()
        self.im = other.im.copy()

    def inverse(self) -> "Transform":
        return Transform(self.im, self.m)

    def copy(self) -> "Transform":
        return Transform(self.m.copy(), self.im.copy())


class TransformSet:
    """Изменения касаются только активных слотов (бит 1 – начало, бит 2 – конец)."""

    def __init__(self):
        self.transforms = [Transform(), Transform()]
        self.active = ACTIVE_ALL

    def _active_slots(self):
        for i in range(2):
            if self.active & (1 << i):
                yield self.transforms[i]

    def mul_transform(self, t: Transform) -> None:
        for slot in self._active_slots():
            slot.mul(t)

    def set_transform(self, t: Transform) -> None:
        for slot in self._active_slots():
            slot.set(t)

    def set_active(self, bits: int) -> None:
        self.active = bits

    def is_animated(self) -> bool:
        if self.active != ACTIVE_ALL:
            return True
        return self.transforms[0].m != self.transforms[1].m

    def get_world_matrix(self) -> Mat4:
        return self.transforms[0].m

    def get_world_inverse_matrix(self) -> Mat4:
        return self.transforms[0].im

    def copy(self) -> "TransformSet":
        ts = TransformSet()
        ts.transforms = [t.copy() for t in self.transforms]
        ts.active = self.active
        return ts
