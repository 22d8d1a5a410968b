from .multiple import MultipleTarget
from .printer import PrintTarget
from .scene import SceneTarget

__all__ = ["MultipleTarget", "PrintTarget", "SceneTarget"]
