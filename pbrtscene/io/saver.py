# pbrtscene/io/saver.py
# ---------------------------------------------------------------
# Граф сцены -> текст директив. Порядок вывода фиксирован:
# опции камеры, сэмплер/ускоритель/интегратор, WorldBegin,
# текстуры, материалы, иерархия узлов, WorldEnd.
# ---------------------------------------------------------------
import io
from pathlib import Path
from typing import Iterable, Optional

import numpy as np

from pbrtscene.errors import DecomposeError, PbrtError
from pbrtscene.io.copy_utility import copy_file
from pbrtscene.math.mat4 import Mat4
from pbrtscene.parse.formatting import format_number, format_param
from pbrtscene.scene.components import (
    AcceleratorComponent, AreaLightComponent, CameraComponent, FilmComponent,
    IntegratorComponent, LightComponent, MaterialComponent, ResourcesComponent,
    SamplerComponent, ShapeComponent,
)
from pbrtscene.scene.node import Node
from pbrtscene.scene.properties import Property, PropertyMap
from pbrtscene.scene.resources import Material, ResourceManager
from pbrtscene.scene.schema import PropertySchema, default_schema
from pbrtscene.utils.config import Config
from pbrtscene.utils.logger import logger
from pbrtscene.utils.profiler import Profiler

HEADER = "# Generated by pbrtscene\n"
INDENT = "    "
EPSILON = 1e-6

# служебные ключи, которые никогда не пишутся в файл
INTERNAL_KEYS = ("type", "id", "name_", "fullpath")


class SavePbrtOptions:
    def __init__(self, pretty_print: bool = True, copy_resources: bool = True):
        self.pretty_print = pretty_print
        self.copy_resources = copy_resources

    @classmethod
    def from_config(cls, config: Config) -> "SavePbrtOptions":
        section = config.section("save")
        return cls(pretty_print=bool(section["pretty_print"]),
                   copy_resources=bool(section["copy_resources"]))

    def __repr__(self):
        return (f"SavePbrtOptions(pretty_print={self.pretty_print}, "
                f"copy_resources={self.copy_resources})")


def make_indent(indent: int) -> str:
    return INDENT * indent


def is_internal_key(key_name: str) -> bool:
    return key_name in INTERNAL_KEYS or key_name.endswith("_fullpath")


def is_affine(matrix: Mat4) -> bool:
    return bool(np.allclose(matrix.m[3], [0.0, 0.0, 0.0, 1.0], atol=EPSILON))


def transform_lines(matrix: Mat4, indent: int = 0):
    """
    Translate / Rotate / Scale для матрицы. Компоненты, близкие к
    тождественным, пропускаются. Матрица со сдвигом (не T·R·S) пишется
    одной строкой ConcatTransform. DecomposeError для вырожденных и
    проективных матриц.
    """
    pad = make_indent(indent)
    try:
        t, r, s = matrix.decompose()
    except DecomposeError:
        if matrix.inverse() is None or not is_affine(matrix):
            raise
        values = " ".join(format_number(v) for v in matrix.to_pbrt())
        return [f"{pad}ConcatTransform [{values}]"]
    lines = []
    if np.any(np.abs(t) >= EPSILON):
        lines.append(f"{pad}Translate {' '.join(format_number(v) for v in t)}")
    if abs(abs(r.w) - 1.0) >= EPSILON:
        theta, axis = r.to_axis_angle()
        lines.append(f"{pad}Rotate {format_number(theta)} "
                     f"{' '.join(format_number(v) for v in axis)}")
    if np.any(np.abs(s - 1.0) >= EPSILON):
        lines.append(f"{pad}Scale {' '.join(format_number(v) for v in s)}")
    return lines


def _ref_value(value: Property, key_name: str, refs: dict) -> Property:
    if key_name in refs:
        return Property.strings([refs[key_name]])
    return value


def unique_names(resources) -> dict:
    """
    uid -> имя для записи. Одинаковые имена из соседних областей
    AttributeBegin получают суффиксы _2, _3, ... в порядке вывода.
    """
    reserved = {r.name for r in resources}
    used = set()
    names = {}
    for resource in resources:
        name = resource.name
        if name in used:
            i = 2
            while f"{resource.name}_{i}" in used or f"{resource.name}_{i}" in reserved:
                i += 1
            name = f"{resource.name}_{i}"
        used.add(name)
        names[resource.uid] = name
    return names


class PbrtSaver:
    """Пишет граф, построенный SceneTarget (или собранный вручную), в поток."""

    def __init__(self, options: Optional[SavePbrtOptions] = None,
                 schema: Optional[PropertySchema] = None):
        self.options = options if options is not None else SavePbrtOptions()
        self.schema = schema if schema is not None else default_schema()
        self._out = None
        self._texture_names = {}
        self._material_names = {}

    # ----------------- вывод -----------------
    def _write(self, text: str) -> None:
        self._out.write(text)

    def _line(self, indent: int, text: str) -> None:
        self._write(f"{make_indent(indent)}{text}\n")

    def _blank(self) -> None:
        if self.options.pretty_print:
            self._write("\n")

    def _comment(self, indent: int, text: str) -> None:
        if self.options.pretty_print:
            self._line(indent, f"# {text}")

    def _transform(self, indent: int, matrix: Mat4) -> None:
        for line in transform_lines(matrix, indent):
            self._write(line + "\n")

    def _params(self, props: PropertyMap, declared: Iterable,
                ignore: Iterable[str] = (), refs: Optional[dict] = None) -> str:
        """
        Сначала объявленные в схеме параметры (в порядке схемы), потом остальные.
        refs – имя параметра -> записанное имя текстуры.
        """
        ignore = set(ignore)
        refs = refs or {}
        written = set()
        parts = []
        for key_name in declared:
            if key_name in written or key_name in ignore or is_internal_key(key_name):
                continue
            entry = props.entry(key_name)
            if entry is not None:
                key_type, _, value = entry
                parts.append(format_param(key_type, key_name, _ref_value(value, key_name, refs)))
                written.add(key_name)
        for key_type, key_name, value in props:
            if key_name in written or key_name in ignore or is_internal_key(key_name):
                continue
            parts.append(format_param(key_type, key_name, _ref_value(value, key_name, refs)))
            written.add(key_name)
        return "".join(parts)

    def _declared(self, category: str, type_name: str):
        return [e.key_name for e in self.schema.get(category, type_name) or []]

    def _typed(self, indent: int, directive: str, category: str,
               type_name: str, props: PropertyMap, ignore=(), refs=None) -> None:
        params = self._params(props, self._declared(category, type_name), ignore, refs)
        self._line(indent, f'{directive} "{type_name}"{params}')

    # ----------------- блок опций -----------------
    def write_header(self) -> None:
        self._write(HEADER)

    def write_camera_options(self, root: Node) -> None:
        camera_node = root.find_node_by_component(CameraComponent)
        if camera_node is None:
            logger.warning("[Saver] Camera is not found, camera block skipped")
            return
        world_to_camera = camera_node.get_world_matrix().inverse()
        if world_to_camera is None:
            raise PbrtError("Camera transform is not invertible")
        self._transform(0, world_to_camera)
        camera = camera_node.get_component(CameraComponent)
        self._typed(0, "Camera", "camera", camera.type_name, camera.props)
        film = camera_node.get_component(FilmComponent)
        if film is not None:
            self._typed(0, "Film", "film", film.type_name, film.props)

    def write_options_block(self, root: Node) -> None:
        self.write_camera_options(root)
        self._blank()
        for component_class, directive, category in (
            (SamplerComponent, "Sampler", "sampler"),
            (AcceleratorComponent, "Accelerator", "accelerator"),
            (IntegratorComponent, "Integrator", "integrator"),
        ):
            component = root.get_component(component_class)
            if component is None:
                continue
            self._typed(0, directive, category, component.type_name, component.props)
            self._blank()

    # ----------------- блок мира -----------------
    @staticmethod
    def sorted_textures(manager: ResourceManager):
        return sorted(manager.textures.values(), key=lambda t: (t.order, t.name))

    @staticmethod
    def sorted_materials(manager: ResourceManager):
        return sorted(manager.materials.values(), key=lambda m: (m.name.lower(), m.name))

    def assign_names(self, manager: ResourceManager) -> None:
        self._texture_names = unique_names(self.sorted_textures(manager))
        self._material_names = unique_names(self.sorted_materials(manager))

    def texture_name(self, texture) -> str:
        return self._texture_names.get(texture.uid, texture.name)

    def material_name(self, material) -> str:
        return self._material_names.get(material.uid, material.name)

    def texture_refs(self, resource) -> dict:
        refs = getattr(resource, "texture_refs", {})
        return {key_name: self.texture_name(t) for key_name, t in refs.items()}

    def write_textures(self, manager: ResourceManager) -> None:
        if not manager.textures:
            return
        indent = 1
        self._comment(indent, "Textures")
        for texture in self.sorted_textures(manager):
            self._line(indent, "TransformBegin")
            self._transform(indent + 1, texture.transform)
            declared = self._declared("texture", texture.type_name)
            declared += self._declared("mapping", texture.mapping)
            params = self._params(texture.props, declared, refs=self.texture_refs(texture))
            self._line(indent + 1, f'Texture "{self.texture_name(texture)}" '
                                   f'"{texture.color_type}" "{texture.type_name}"{params}')
            self._line(indent, "TransformEnd")

    @staticmethod
    def material_ignore_keys(material: Material):
        if material.type_name == "subsurface" and material.props.find_one_string("name"):
            return ("sigma_a", "sigma_s")
        return ()

    def write_materials(self, manager: ResourceManager) -> None:
        if not manager.materials:
            return
        indent = 1
        self._comment(indent, "Materials")
        for material in self.sorted_materials(manager):
            params = self._params(material.props,
                                  self._declared("material", material.type_name),
                                  self.material_ignore_keys(material),
                                  self.texture_refs(material))
            self._line(indent, f'MakeNamedMaterial "{self.material_name(material)}" '
                               f'"string type" ["{material.type_name}"]{params}')

    def write_geometry(self, indent: int, node: Node) -> None:
        material = node.get_component(MaterialComponent)
        if material is not None:
            self._line(indent, f'NamedMaterial "{self.material_name(material.material)}"')
        shape = node.get_component(ShapeComponent)
        if shape is not None:
            area = node.get_component(AreaLightComponent)
            if area is not None:
                self._typed(indent, "AreaLightSource", "light", area.type_name, area.props)
            self._typed(indent, "Shape", "shape", shape.type_name, shape.props,
                        refs=self.texture_refs(shape.mesh))
            return
        light = node.get_component(LightComponent)
        if light is not None:
            self._typed(indent, "LightSource", "light", light.type_name, light.props)

    def write_node(self, indent: int, node: Node) -> None:
        if not node.enabled:
            return
        self._line(indent, "AttributeBegin")
        self._transform(indent + 1, node.get_local_matrix())
        self.write_geometry(indent + 1, node)
        for child in node.children:
            self.write_node(indent + 1, child)
        self._line(indent, "AttributeEnd")

    def write_geometries(self, root: Node) -> None:
        self._comment(1, "Geometries")
        if not root.enabled:
            return
        self._transform(0, root.get_local_matrix())
        for child in root.children:
            if child.has_component(CameraComponent):
                continue
            self.write_node(1, child)

    def write_world_block(self, root: Node) -> None:
        self._line(0, "WorldBegin")
        resources = root.get_component(ResourcesComponent)
        manager = resources.manager if resources is not None else ResourceManager()
        self.assign_names(manager)
        self.write_textures(manager)
        self._blank()
        self.write_materials(manager)
        self._blank()
        self.write_geometries(root)
        self._line(0, "WorldEnd")

    # ----------------- точки входа -----------------
    def write(self, root: Node, stream) -> None:
        """
        Текст целиком собирается в памяти и только потом уходит в поток,
        поэтому DecomposeError не оставляет полузаписанный файл.
        """
        self._out = io.StringIO()
        try:
            self.write_header()
            self.write_options_block(root)
            self._blank()
            self.write_world_block(root)
            text = self._out.getvalue()
        finally:
            self._out = None
        stream.write(text)

    def copy_resources(self, root: Node, path) -> int:
        """Копирует файлы imagemap, plymesh и прочих ресурсов в каталог сцены."""
        resources = root.get_component(ResourcesComponent)
        if resources is None:
            return 0
        manager = resources.manager
        out_dir = Path(path).resolve().parent
        out_dir.mkdir(parents=True, exist_ok=True)

        candidates = [t for t in manager.textures.values() if t.type_name == "imagemap"]
        candidates += [m for m in manager.meshes.values() if m.type_name == "plymesh"]
        candidates += list(manager.other_resources.values())

        pairs = []
        for resource in candidates:
            filename, fullpath = resource.filename, resource.fullpath
            if not filename or not fullpath:
                logger.warning(f"[Saver] {resource!r} does not have filename or fullpath")
                continue
            src = Path(fullpath)
            dst = out_dir / filename
            if src.resolve() != dst.resolve() and src.exists():
                pairs.append((src, dst))

        copied = 0
        for src, dst in pairs:
            try:
                if copy_file(src, dst):
                    copied += 1
            except OSError as exc:
                logger.error(f"[Saver] Failed to copy resource from {src} to {dst}: {exc}")
        return copied

    def save(self, root: Node, path) -> None:
        path = Path(path)
        with Profiler(f"save {path}"):
            text = io.StringIO()
            self.write(root, text)
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8", newline="\n") as f:
                f.write(text.getvalue())
            if self.options.copy_resources:
                copied = self.copy_resources(root, path)
                logger.info(f"[Saver] Copied {copied} resource file(s)")
        logger.info(f"[Saver] Saved {path}")


def write_pbrt(root: Node, stream, options: Optional[SavePbrtOptions] = None,
               schema: Optional[PropertySchema] = None) -> None:
    PbrtSaver(options, schema).write(root, stream)


def dumps_pbrt(root: Node, options: Optional[SavePbrtOptions] = None,
               schema: Optional[PropertySchema] = None) -> str:
    out = io.StringIO()
    write_pbrt(root, out, options, schema)
    return out.getvalue()


def save_pbrt(root: Node, path, options: Optional[SavePbrtOptions] = None,
              schema: Optional[PropertySchema] = None) -> None:
    """DecomposeError прерывает запись до создания файла; OSError пробрасывается."""
    PbrtSaver(options, schema).save(root, path)
