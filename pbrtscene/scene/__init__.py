"""
Пакет scene – узлы, компоненты, ресурсы, свойства и их схемы.
"""

from pbrtscene.scene.properties import Property, PropertyMap, split_key
from pbrtscene.scene.schema import PropertySchema, PropertyEntry, default_schema
from pbrtscene.scene.resources import (
    Resource, Material, Texture, Mesh, OtherResource, ResourceManager
)
from pbrtscene.scene.components import (
    Component, TransformComponent, ShapeComponent, LightComponent,
    AreaLightComponent, CameraComponent, MaterialComponent, FilmComponent,
    SamplerComponent, IntegratorComponent, AcceleratorComponent,
    CoordinateSystemComponent, ResourcesComponent, SceneComponent,
    AnimationComponent,
)
from pbrtscene.scene.node import Node

__all__ = [
    "Property", "PropertyMap", "split_key",
    "PropertySchema", "PropertyEntry", "default_schema",
    "Resource", "Material", "Texture", "Mesh", "OtherResource", "ResourceManager",
    "Component", "TransformComponent", "ShapeComponent", "LightComponent",
    "AreaLightComponent", "CameraComponent", "MaterialComponent", "FilmComponent",
    "SamplerComponent", "IntegratorComponent", "AcceleratorComponent",
    "CoordinateSystemComponent", "ResourcesComponent", "SceneComponent",
    "AnimationComponent", "Node",
]
