from .transform import Transform, TransformSet, ACTIVE_ALL, ACTIVE_END, ACTIVE_START
from .graphics_state import GraphicsState
from .render_options import RenderOptions
from .scene_target import SceneTarget, create_default_material

__all__ = [
    "Transform",
    "TransformSet",
    "ACTIVE_ALL",
    "ACTIVE_END",
    "ACTIVE_START",
    "GraphicsState",
    "RenderOptions",
    "SceneTarget",
    "create_default_material",
]
