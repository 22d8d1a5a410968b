"""
Математический суб‑пакет: Mat4, Quat.
"""

from pbrtscene.math.mat4 import Mat4
from pbrtscene.math.quat import Quat

__all__ = ["Mat4", "Quat"]
