"""
Компоненты узла сцены. Узел хранит их в словаре «класс → экземпляр».
"""

from typing import Optional

import numpy as np

from pbrtscene.math.mat4 import Mat4
from pbrtscene.scene.properties import PropertyMap
from pbrtscene.scene.resources import Material, Mesh, ResourceManager


class Component:
    """Маркерный базовый класс."""


class TransformComponent(Component):
    """Матрица узла относительно родителя."""

    def __init__(self, local: Optional[Mat4] = None):
        self.local = local.copy() if local is not None else Mat4.identity()

    def get_local_matrix(self) -> Mat4:
        return self.local

    def set_local_matrix(self, m: Mat4) -> None:
        self.local = m.copy()


class TypedComponent(Component):
    """Тип + параметры: камера, плёнка, сэмплер, источники света и т.п."""

    def __init__(self, type_name: str, props: Optional[PropertyMap] = None):
        self.type_name = type_name
        self.props = props.copy() if props is not None else PropertyMap()

    def __repr__(self):
        return f"{type(self).__name__}({self.type_name!r})"


class CameraComponent(TypedComponent):
    pass


class FilmComponent(TypedComponent):
    pass


class SamplerComponent(TypedComponent):
    pass


class IntegratorComponent(TypedComponent):
    pass


class AcceleratorComponent(TypedComponent):
    pass


class LightComponent(TypedComponent):
    NAMES = {
        "point": "PointLight",
        "spot": "SpotLight",
        "distant": "DistantLight",
        "infinite": "InfiniteLight",
        "goniometric": "GoniometricLight",
        "projection": "ProjectionLight",
    }

    @classmethod
    def name_from_type(cls, type_name: str) -> str:
        return cls.NAMES.get(type_name, "Light")


class AreaLightComponent(TypedComponent):
    pass


class SceneComponent(Component):
    def __init__(self, props: Optional[PropertyMap] = None):
        self.props = props.copy() if props is not None else PropertyMap()


class ShapeComponent(Component):
    """Ссылка на общую запись Mesh (несколько узлов могут делить один меш)."""
    NAMES = {
        "trianglemesh": "Mesh",
        "plymesh": "Mesh",
        "sphere": "Sphere",
        "disk": "Disk",
        "cylinder": "Cylinder",
        "cone": "Cone",
        "paraboloid": "Paraboloid",
        "hyperboloid": "Hyperboloid",
        "loopsubdiv": "Subdiv",
        "curve": "Curve",
    }

    def __init__(self, mesh: Mesh):
        self.mesh = mesh

    @property
    def type_name(self) -> str:
        return self.mesh.type_name

    @property
    def props(self) -> PropertyMap:
        return self.mesh.props

    @classmethod
    def name_from_type(cls, type_name: str) -> str:
        return cls.NAMES.get(type_name, "Shape")


class MaterialComponent(Component):
    def __init__(self, material: Material):
        self.material = material

    @property
    def name(self) -> str:
        return self.material.name

    @property
    def type_name(self) -> str:
        return self.material.type_name


class CoordinateSystemComponent(Component):
    """Доминирующая ось «вверх» для внешних просмотрщиков (сетка, пол)."""

    def __init__(self, up):
        self.up = np.array(up, dtype=np.float64)


class ResourcesComponent(Component):
    def __init__(self, manager: Optional[ResourceManager] = None):
        self.manager = manager if manager is not None else ResourceManager()


class AnimationComponent(Component):
    """Две матрицы (начало/конец) для форм под анимированным преобразованием."""

    def __init__(self, start: Mat4, start_time: float, end: Mat4, end_time: float):
        self.start = start.copy()
        self.start_time = float(start_time)
        self.end = end.copy()
        self.end_time = float(end_time)
