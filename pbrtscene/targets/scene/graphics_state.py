"""Состояние атрибутов: текущий материал, именованные таблицы, отложенный источник."""

from typing import Dict, Optional, Tuple

from pbrtscene.scene.properties import PropertyMap
from pbrtscene.scene.resources import Material, Texture


class GraphicsState:

    def __init__(self):
        self.materials: Dict[str, Material] = {}
        self.current_material: Optional[Material] = None
        self.textures: Dict[str, Texture] = {}
        self.area_light: Optional[Tuple[str, PropertyMap]] = None

    def copy(self) -> "GraphicsState":
        """Словари копируются поверхностно, материалы остаются общими."""
        gs = GraphicsState()
        gs.materials = dict(self.materials)
        gs.current_material = self.current_material
        gs.textures = dict(self.textures)
        gs.area_light = self.area_light
        return gs
