# pbrtscene/scene/resources.py
# ---------------------------------------------------------------
# Разделяемые ресурсы сцены: материалы, текстуры, меши и прочие
# файлы (bsdf, линзы, спектры) + таблица ресурсов.
# ---------------------------------------------------------------
import threading
import uuid
from typing import Dict, Optional

from PIL import Image, UnidentifiedImageError

from pbrtscene.math.mat4 import Mat4
from pbrtscene.scene.properties import PropertyMap
from pbrtscene.utils.logger import logger


class Resource:
    """Базовый ресурс: стабильный uid, параметры и собственный RLock."""
    kind = "resource"

    def __init__(self, name: str, type_name: str, props: Optional[PropertyMap] = None):
        self.uid = uuid.uuid4()
        self.name = name
        self.type_name = type_name
        self.props = props.copy() if props is not None else PropertyMap()
        self.lock = threading.RLock()
        # имя параметра "texture ..." -> текстура, видимая в момент объявления
        self.texture_refs: Dict[str, "Texture"] = {}

    @property
    def filename(self) -> Optional[str]:
        return self.props.find_one_string("filename")

    @property
    def fullpath(self) -> Optional[str]:
        return self.props.find_one_string("fullpath")

    def __repr__(self):
        return f"{type(self).__name__}({self.name!r}, {self.type_name!r})"


class Material(Resource):
    kind = "material"

    # устаревшие имена параметров pbrt
    _RENAMES = {"index": "eta", "ior": "eta"}

    def __init__(self, name: str, type_name: str, props: Optional[PropertyMap] = None):
        super().__init__(name, type_name, props)
        self.props.remove("type")
        for old, new in self._RENAMES.items():
            entry = self.props.entry(old)
            if entry is not None and new not in self.props:
                key_type, _, value = entry
                self.props.remove(old)
                self.props.insert(f"{key_type} {new}", value)


class Texture(Resource):
    kind = "texture"

    def __init__(self, name: str, color_type: str, type_name: str,
                 fullpath: Optional[str] = None, props: Optional[PropertyMap] = None,
                 transform: Optional[Mat4] = None):
        super().__init__(name, type_name, props)
        self.color_type = color_type
        if fullpath:
            self.props.add_string("string fullpath", fullpath)
        self.transform = transform.copy() if transform is not None else Mat4.identity()
        self.order = 0
        self._image_size = None

    @property
    def mapping(self) -> str:
        return self.props.find_one_string("mapping") or "uv"

    @property
    def image_size(self):
        """(w, h) файла imagemap; None, если файла нет или Pillow не смог его открыть."""
        if self._image_size is None and self.type_name == "imagemap" and self.fullpath:
            try:
                with Image.open(self.fullpath) as img:
                    self._image_size = img.size
            except (OSError, UnidentifiedImageError) as exc:
                logger.error(f"[Texture] Cannot decode image {self.fullpath}: {exc}")
        return self._image_size


class Mesh(Resource):
    """
    Общая запись формы. Тяжёлые данные (MeshData) строятся лениво
    внешним построителем по типу формы.
    """
    kind = "mesh"

    def __init__(self, name: str, type_name: str, props: Optional[PropertyMap] = None,
                 builders=None):
        super().__init__(name, type_name, props)
        self._builders = builders
        self._mesh_data = None
        self._built = False

    @property
    def mesh_data(self):
        with self.lock:
            if not self._built:
                self._built = True
                if self._builders is not None:
                    self._mesh_data = self._builders.build(self.type_name, self.props)
            return self._mesh_data


class OtherResource(Resource):
    """Файлы, на которые ссылаются параметры: bsdffile, lensfile, spd."""
    kind = "other"


class ResourceManager:
    """Четыре таблицы ресурсов, ключ – uid."""

    def __init__(self):
        self.materials: Dict[uuid.UUID, Material] = {}
        self.textures: Dict[uuid.UUID, Texture] = {}
        self.meshes: Dict[uuid.UUID, Mesh] = {}
        self.other_resources: Dict[uuid.UUID, OtherResource] = {}
        self.lock = threading.RLock()

    def add(self, resource: Resource) -> None:
        table = {
            "material": self.materials,
            "texture": self.textures,
            "mesh": self.meshes,
            "other": self.other_resources,
        }[resource.kind]
        with self.lock:
            table[resource.uid] = resource

    def find_material_by_name(self, name: str) -> Optional[Material]:
        for m in self.materials.values():
            if m.name == name:
                return m
        return None

    def find_texture_by_name(self, name: str) -> Optional[Texture]:
        for t in self.textures.values():
            if t.name == name:
                return t
        return None

    def clear(self) -> None:
        with self.lock:
            self.materials.clear()
            self.textures.clear()
            self.meshes.clear()
            self.other_resources.clear()

    def counts(self) -> dict:
        return {
            "materials": len(self.materials),
            "textures": len(self.textures),
            "meshes": len(self.meshes),
            "other_resources": len(self.other_resources),
        }
