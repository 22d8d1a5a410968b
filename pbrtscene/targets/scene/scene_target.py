# pbrtscene/targets/scene/scene_target.py
# ---------------------------------------------------------------
# SceneTarget – интерпретатор директив: строит граф узлов и таблицы
# ресурсов (материалы, текстуры, меши, прочие файлы).
# ---------------------------------------------------------------
import os
import re
from pathlib import Path
from typing import Dict, List, Optional

import numpy as np

from pbrtscene.math.mat4 import Mat4
from pbrtscene.mesh.builders import MeshBuilders, default_builders
from pbrtscene.parse.target import ParseTarget
from pbrtscene.scene.components import (
    AcceleratorComponent, AnimationComponent, AreaLightComponent,
    CameraComponent, CoordinateSystemComponent, FilmComponent,
    IntegratorComponent, LightComponent, MaterialComponent,
    ResourcesComponent, SamplerComponent, SceneComponent, ShapeComponent,
)
from pbrtscene.scene.node import Node
from pbrtscene.scene.properties import STRINGS, Property, PropertyMap
from pbrtscene.scene.resources import (
    Material, Mesh, OtherResource, ResourceManager, Texture,
)
from pbrtscene.scene.schema import PropertySchema, default_schema
from pbrtscene.targets.scene.graphics_state import GraphicsState
from pbrtscene.targets.scene.render_options import RenderOptions
from pbrtscene.targets.scene.transform import (
    ACTIVE_ALL, ACTIVE_END, ACTIVE_START, Transform, TransformSet,
)
from pbrtscene.utils.logger import logger

OPTIONS_BLOCK = "options"
WORLD_BLOCK = "world"

CAMERA_COORDINATE_SYSTEM = "camera"

SUPPORTED_SHAPES = (
    "trianglemesh", "plymesh", "sphere", "disk", "cylinder", "cone",
    "paraboloid", "hyperboloid", "loopsubdiv", "curve",
)


def create_default_material() -> Material:
    return Material("Matte", "matte", PropertyMap())


def upper_camel(name: str) -> str:
    """'matte' -> 'Matte', 'coated_diffuse' -> 'CoatedDiffuse'."""
    return "".join(p[:1].upper() + p[1:] for p in re.split(r"[_\-\s]+", name) if p)


def coordinate_system(d1):
    """Ортонормированный базис (v1, v2, v3), v1 – нормированное d1."""
    v1 = np.asarray(d1, dtype=np.float64)
    v1 = v1 / np.linalg.norm(v1)
    if abs(v1[0]) > abs(v1[1]):
        v2 = np.array([-v1[2], 0.0, v1[0]])
    else:
        v2 = np.array([0.0, v1[2], -v1[1]])
    v2 = v2 / np.linalg.norm(v2)
    v3 = np.cross(v1, v2)
    v3 = v3 / np.linalg.norm(v3)
    return v1, v2, v3


class SceneTarget(ParseTarget):
    """
    Стек узлов, стек TransformSet и стек GraphicsState двигаются вместе.
    Структурные ошибки (лишний End, неизвестный материал, отсутствующий
    файл) не прерывают разбор: они пишутся в лог и в self.warnings.
    """

    def __init__(self, schema: Optional[PropertySchema] = None,
                 mesh_builders: Optional[MeshBuilders] = None):
        self.schema = schema if schema is not None else default_schema()
        self.mesh_builders = mesh_builders if mesh_builders is not None else default_builders()

        self.api_state = OPTIONS_BLOCK
        self.nodes: List[Node] = [Node.root_node("Scene")]
        self.transforms: List[TransformSet] = [TransformSet()]
        state = GraphicsState()
        state.current_material = create_default_material()
        self.graphics_states: List[GraphicsState] = [state]
        self.render_options = RenderOptions()
        self.named_coordinate_systems: Dict[str, TransformSet] = {}

        # таблицы ресурсов
        self.materials: Dict = {}
        self.textures: Dict = {}
        self.meshes: Dict[str, Mesh] = {}
        self.image_textures: Dict[str, Texture] = {}
        self.resources: Dict[str, OtherResource] = {}

        self.work_dirs: List[str] = []
        self.warnings: List[str] = []
        self._scene_root: Optional[Node] = None

    # ----------------- диагностика -----------------
    def _warn(self, message: str) -> None:
        logger.warning(f"[SceneTarget] {message}")
        self.warnings.append(message)

    def _verify_options(self, directive: str) -> None:
        if self.api_state != OPTIONS_BLOCK:
            self._warn(f"{directive} not allowed inside the world block")

    def _verify_world(self, directive: str) -> None:
        if self.api_state != WORLD_BLOCK:
            self._warn(f"{directive} not allowed outside the world block")

    # ----------------- глубина стеков (для тестов) -----------------
    @property
    def node_depth(self) -> int:
        return len(self.nodes)

    @property
    def transform_depth(self) -> int:
        return len(self.transforms)

    @property
    def graphics_state_depth(self) -> int:
        return len(self.graphics_states)

    @property
    def work_dir_depth(self) -> int:
        return len(self.work_dirs)

    # ----------------- вспомогательное -----------------
    @property
    def current_transform(self) -> TransformSet:
        return self.transforms[-1]

    @property
    def graphics_state(self) -> GraphicsState:
        return self.graphics_states[-1]

    def find_file_path(self, filename: str) -> Optional[str]:
        """Поиск по стеку рабочих каталогов, начиная с последнего."""
        for d in reversed(self.work_dirs):
            path = Path(d) / filename
            if path.exists():
                return str(path)
        if Path(filename).is_absolute() and Path(filename).exists():
            return filename
        return None

    def _find_absolute(self, filename: str) -> Optional[str]:
        path = self.find_file_path(filename)
        return os.path.abspath(path) if path is not None else None

    def get_current_local_matrix(self) -> Mat4:
        if len(self.transforms) == 1:
            return self.transforms[0].get_world_matrix()
        parent_inverse = self.transforms[-2].get_world_inverse_matrix()
        return parent_inverse @ self.transforms[-1].get_world_matrix()

    def create_child_node(self, name: str) -> Node:
        node = Node.child_node(name, self.nodes[-1])
        node.set_local_matrix(self.get_current_local_matrix())
        return node

    def _push_scope(self, name: str) -> None:
        node = self.create_child_node(name)
        self.nodes.append(node)
        self.transforms.append(self.current_transform.copy())

    def _pop_scope(self, directive: str) -> bool:
        if len(self.transforms) > 1:
            self.transforms.pop()
            self.nodes.pop()
            return True
        self._warn(f"{directive} without matching begin")
        return False

    # ----------------- ресурсы -----------------
    def _register_other_file(self, filename: str, type_name: str) -> None:
        fullpath = self._find_absolute(filename)
        if fullpath is None or fullpath in self.resources:
            return
        props = PropertyMap()
        props.add_string("string type", type_name)
        props.add_string("string filename", filename)
        props.add_string("string fullpath", fullpath)
        self.resources[fullpath] = OtherResource(Path(fullpath).stem, type_name, props)

    def register_other_resources(self, params: PropertyMap) -> None:
        """bsdffile, lensfile, файлы спектров и mapname."""
        for key in ("bsdffile", "lensfile"):
            filename = params.find_one_string(key)
            if filename:
                self._register_other_file(filename, key)

        for key_type, key_name, value in params:
            if key_type == "spectrum" and value.kind == STRINGS and len(value):
                self._register_other_file(value[0], "spd")

        mapname = params.find_one_string("mapname")
        if mapname:
            fullpath = self._find_absolute(mapname)
            if fullpath is not None and fullpath not in self.image_textures:
                props = PropertyMap()
                props.add_string("string filename", mapname)
                texture = Texture(Path(fullpath).stem, "spectrum", "imagemap",
                                  fullpath=fullpath, props=props)
                texture.order = len(self.textures)
                self.textures[texture.uid] = texture
                self.image_textures[fullpath] = texture

    def _add_fullpath_params(self, params: PropertyMap) -> None:
        extra = []
        for key_type, key_name, value in params:
            if key_type == "spectrum" and value.kind == STRINGS and len(value):
                fullpath = self._find_absolute(value[0])
                if fullpath is not None:
                    extra.append((f"{key_type} {key_name}_fullpath", fullpath))
        for key, fullpath in extra:
            params.insert(key, Property.strings([fullpath]))

    def _bind_textures(self, resource) -> None:
        """Запоминает, на какие текстуры текущей области ссылаются параметры."""
        textures = self.graphics_state.textures
        for key_type, key_name, value in resource.props:
            if key_type == "texture" and value.kind == STRINGS and len(value):
                texture = textures.get(value[0])
                if texture is not None:
                    resource.texture_refs[key_name] = texture

    def _register_texture(self, texture: Texture) -> None:
        texture.order = len(self.textures)
        state = self.graphics_state
        if texture.name in state.textures:
            self._warn(f"Texture {texture.name} already exists")
            return
        state.textures[texture.name] = texture
        self.textures[texture.uid] = texture

    def _make_mesh(self, shape_type: str, name: str, params: PropertyMap) -> Mesh:
        props = params.copy()
        if shape_type == "loopsubdiv":
            entry = props.entry("levels")
            if entry is not None and "nlevels" not in props:
                props.remove("levels")
                props.insert(f"{entry[0]} nlevels", entry[2])
        return Mesh(name, shape_type, props, builders=self.mesh_builders)

    def _make_shape(self, shape_type: str, params: PropertyMap) -> Optional[Node]:
        if shape_type not in SUPPORTED_SHAPES:
            self._warn(f"Shape {shape_type} not supported")
            return None
        title = ShapeComponent.name_from_type(shape_type)

        if shape_type == "plymesh":
            filename = params.find_one_string("filename")
            if not filename:
                self._warn("plymesh without filename")
                return None
            fullpath = self._find_absolute(filename)
            if fullpath is None:
                self._warn(f"PlyMesh file not found: {filename}")
                return None
            mesh = self.meshes.get(fullpath)
            if mesh is None:
                props = params.copy()
                props.add_string("string fullpath", fullpath)
                mesh = self._make_mesh(shape_type, Path(fullpath).stem, props)
                self._bind_textures(mesh)
                self.meshes[fullpath] = mesh
            node = self.create_child_node(title)
            node.add_component(ShapeComponent(mesh))
            return node

        mesh = self._make_mesh(shape_type, title, params)
        self._bind_textures(mesh)
        self.meshes[str(mesh.uid)] = mesh
        node = self.create_child_node(title)
        node.add_component(ShapeComponent(mesh))
        return node

    # ----------------- ParseTarget: преобразования -----------------
    def cleanup(self):
        if self.warnings:
            logger.info(f"[SceneTarget] Finished with {len(self.warnings)} warning(s)")

    def identity(self):
        self.current_transform.set_transform(Transform.identity())

    def translate(self, dx, dy, dz):
        self.current_transform.mul_transform(Transform.translate(dx, dy, dz))

    def rotate(self, angle, ax, ay, az):
        self.current_transform.mul_transform(Transform.rotate(angle, ax, ay, az))

    def scale(self, sx, sy, sz):
        try:
            t = Transform.scale(sx, sy, sz)
        except ValueError as exc:
            self._warn(f"Scale ignored: {exc}")
            return
        self.current_transform.mul_transform(t)

    def look_at(self, ex, ey, ez, lx, ly, lz, ux, uy, uz):
        try:
            t = Transform.look_at(ex, ey, ez, lx, ly, lz, ux, uy, uz)
        except ValueError as exc:
            self._warn(f"LookAt ignored: {exc}")
            return
        self.current_transform.mul_transform(t)

    def _matrix_transform(self, directive: str, values) -> Optional[Transform]:
        if len(values) < 16:
            self._warn(f"{directive}: expected 16 values, got {len(values)}")
            return None
        t = Transform.from_matrix(Mat4.from_pbrt(values))
        if t is None:
            self._warn(f"{directive}: matrix is not invertible")
        return t

    def concat_transform(self, values):
        t = self._matrix_transform("ConcatTransform", values)
        if t is not None:
            self.current_transform.mul_transform(t)

    def transform(self, values):
        t = self._matrix_transform("Transform", values)
        if t is not None:
            self.current_transform.set_transform(t)

    def coordinate_system(self, name):
        self.named_coordinate_systems[name] = self.current_transform.copy()

    def coord_sys_transform(self, name):
        ts = self.named_coordinate_systems.get(name)
        if ts is None:
            self._warn(f"Coordinate system {name} not found")
            return
        self.transforms[-1] = ts.copy()

    def active_transform_all(self):
        self.current_transform.set_active(ACTIVE_ALL)

    def active_transform_end_time(self):
        self.current_transform.set_active(ACTIVE_END)

    def active_transform_start_time(self):
        self.current_transform.set_active(ACTIVE_START)

    def transform_times(self, start, end):
        self._verify_options("TransformTimes")
        self.render_options.transform_start_time = float(start)
        self.render_options.transform_end_time = float(end)

    # ----------------- ParseTarget: опции -----------------
    def pixel_filter(self, name, params):
        self._verify_options("PixelFilter")
        self.render_options.filter_name = name
        self.render_options.filter_params = params.copy()

    def film(self, name, params):
        self._verify_options("Film")
        self.render_options.film_name = name
        self.render_options.film_params = params.copy()

    def sampler(self, name, params):
        self._verify_options("Sampler")
        self.render_options.sampler_name = name
        self.render_options.sampler_params = params.copy()

    def accelerator(self, name, params):
        self._verify_options("Accelerator")
        self.render_options.accelerator_name = name
        self.render_options.accelerator_params = params.copy()

    def integrator(self, name, params):
        self._verify_options("Integrator")
        self.render_options.integrator_name = name
        self.render_options.integrator_params = params.copy()

    def camera(self, name, params):
        self._verify_options("Camera")
        self.register_other_resources(params)
        self.render_options.camera_name = name
        self.render_options.camera_params = params.copy()
        self.named_coordinate_systems[CAMERA_COORDINATE_SYSTEM] = self.current_transform.copy()

    def make_named_medium(self, name, params):
        logger.debug(f"[SceneTarget] MakeNamedMedium {name} ignored")

    def medium_interface(self, inside_name, outside_name):
        logger.debug(f"[SceneTarget] MediumInterface {inside_name} {outside_name} ignored")

    # ----------------- ParseTarget: мир -----------------
    def world_begin(self):
        if self.api_state == WORLD_BLOCK:
            self._warn("WorldBegin inside the world block ignored")
            return
        if CAMERA_COORDINATE_SYSTEM not in self.named_coordinate_systems:
            self.named_coordinate_systems[CAMERA_COORDINATE_SYSTEM] = self.current_transform.copy()
        self.api_state = WORLD_BLOCK
        self.nodes = [Node.root_node("Scene")]
        self.transforms = [TransformSet()]

        camera_transform = self.named_coordinate_systems[CAMERA_COORDINATE_SYSTEM]
        c2w = camera_transform.get_world_matrix().inverse()
        if c2w is None:
            self._warn("Camera transform is not invertible, using identity")
            c2w = Mat4.identity()
        node = self.create_child_node("Camera")
        node.set_local_matrix(c2w)
        node.add_component(CameraComponent(self.render_options.camera_name,
                                           self.render_options.camera_params))

    def attribute_begin(self):
        self._verify_world("AttributeBegin")
        self._push_scope("Attribute")
        self.graphics_states.append(self.graphics_state.copy())

    def attribute_end(self):
        self._verify_world("AttributeEnd")
        if not self._pop_scope("AttributeEnd"):
            return
        if len(self.graphics_states) > 1:
            self.graphics_states.pop()
        else:
            self._warn("AttributeEnd closes a TransformBegin block")

    def transform_begin(self):
        self._push_scope("Transform")

    def transform_end(self):
        self._pop_scope("TransformEnd")

    def texture(self, name, color_type, tex_type, params):
        self._verify_world("Texture")
        params = params.copy()
        self.register_other_resources(params)
        self._add_fullpath_params(params)
        transform = self.current_transform.get_world_matrix()
        fullpath = None
        if tex_type == "imagemap":
            filename = params.find_one_string("filename")
            fullpath = self._find_absolute(filename) if filename else None
            if fullpath is None:
                self._warn(f"Texture {name}: file not found: {filename}")
                return
        texture = Texture(name, color_type, tex_type, fullpath=fullpath,
                          props=params, transform=transform)
        self._bind_textures(texture)
        self._register_texture(texture)
        if fullpath is not None:
            self.image_textures.setdefault(fullpath, texture)

    def material(self, name, params):
        self._verify_world("Material")
        self.register_other_resources(params)
        material = Material(upper_camel(name), name, params)
        material.name = f"{material.name}_{material.uid}"
        self._bind_textures(material)
        self.materials[material.uid] = material
        self.graphics_state.current_material = material

    def make_named_material(self, name, params):
        self._verify_world("MakeNamedMaterial")
        self.register_other_resources(params)
        mat_type = params.find_one_string("type")
        if not mat_type:
            self._warn(f"MakeNamedMaterial {name}: material type not found")
            return
        material = Material(name, mat_type, params)
        self._bind_textures(material)
        self.materials[material.uid] = material
        state = self.graphics_state
        if name in state.materials:
            self._warn(f"Material {name} already exists")
        state.materials[name] = material

    def named_material(self, name):
        self._verify_world("NamedMaterial")
        state = self.graphics_state
        if name in ("", "none"):
            state.current_material = None
        elif name in state.materials:
            state.current_material = state.materials[name]
        else:
            self._warn(f"Material {name} not found")

    def light_source(self, name, params):
        self._verify_world("LightSource")
        self.register_other_resources(params)
        node = self.create_child_node(LightComponent.name_from_type(name))
        params = params.copy()

        if name == "point":
            values = params.get_floats("from")
            if values is not None:
                if len(values) == 3:
                    local = self.get_current_local_matrix()
                    node.set_local_matrix(local @ Mat4.translate(*values))
                else:
                    self._warn("Light 'from' parameter should have 3 values")
                params.remove("from")
        elif name in ("spot", "distant"):
            found = [k for k in ("from", "to") if k in params]
            if found:
                origin = self._light_point(params, "from", (0.0, 0.0, 0.0))
                target = self._light_point(params, "to", (0.0, 0.0, 1.0))
                direction = target - origin
                if np.linalg.norm(direction) == 0.0:
                    self._warn("Light 'from' and 'to' coincide")
                    direction = np.array([0.0, 0.0, 1.0])
                d, du, dv = coordinate_system(direction)
                dir_to_z = np.identity(4)
                dir_to_z[0, :3] = du
                dir_to_z[1, :3] = dv
                dir_to_z[2, :3] = d
                frame = Mat4.translate(*origin) @ Mat4(dir_to_z).transpose()
                node.set_local_matrix(self.get_current_local_matrix() @ frame)
                for key in found:
                    params.remove(key)

        node.add_component(LightComponent(name, params))

    def _light_point(self, params: PropertyMap, key: str, default) -> np.ndarray:
        values = params.get_floats(key)
        if values is None:
            return np.array(default, dtype=np.float64)
        if len(values) != 3:
            self._warn(f"Light '{key}' parameter should have 3 values")
            return np.array(default, dtype=np.float64)
        return np.array(values, dtype=np.float64)

    def area_light_source(self, name, params):
        self._verify_world("AreaLightSource")
        self.register_other_resources(params)
        self.graphics_state.area_light = (name, params.copy())

    def shape(self, name, params):
        self._verify_world("Shape")
        ts = self.current_transform
        state = self.graphics_state
        animated = ts.is_animated()
        if animated and state.area_light is not None:
            self._warn("Area light source cannot be animated")

        node = self._make_shape(name, params)
        if node is None:
            return
        material = state.current_material
        if material is not None:
            self.materials[material.uid] = material
            node.add_component(MaterialComponent(material))
        if animated:
            opts = self.render_options
            node.add_component(AnimationComponent(
                ts.transforms[0].m, opts.transform_start_time,
                ts.transforms[1].m, opts.transform_end_time))
        elif state.area_light is not None:
            light_type, light_params = state.area_light
            node.name = "AreaLight"
            node.add_component(AreaLightComponent(light_type, light_params))

    def reverse_orientation(self):
        logger.debug("[SceneTarget] ReverseOrientation ignored")

    def object_begin(self, name):
        logger.debug(f"[SceneTarget] ObjectBegin {name} ignored")

    def object_end(self):
        logger.debug("[SceneTarget] ObjectEnd ignored")

    def object_instance(self, name):
        logger.debug(f"[SceneTarget] ObjectInstance {name} ignored")

    def world_end(self):
        self._verify_world("WorldEnd")
        if len(self.transforms) > 1:
            self._warn(f"WorldEnd with {len(self.transforms) - 1} unclosed block(s)")

    # ----------------- ParseTarget: файлы -----------------
    def parse_file(self, filename):
        from pbrtscene.parse.parser import pbrt_parse_file
        pbrt_parse_file(filename, self)

    def parse_string(self, text):
        from pbrtscene.parse.parser import pbrt_parse_string
        pbrt_parse_string(text, self)

    def work_dir_begin(self, path):
        self.work_dirs.append(path)

    def work_dir_end(self):
        if self.work_dirs:
            self.work_dirs.pop()
        else:
            self._warn("WorkDirEnd without WorkDirBegin")

    def include(self, filename, params):
        fullpath = self._find_absolute(filename)
        if fullpath is None:
            self._warn(f"Include file not found: {filename}")
            return
        self.parse_file(fullpath)

    # ----------------- финализация -----------------
    def create_scene_node(self) -> Node:
        """Достраивает корень: опции рендера, плёнка, ось «вверх», ресурсы."""
        if self._scene_root is not None:
            return self._scene_root
        root = self.nodes[0]
        opts = self.render_options
        root.add_component(SceneComponent())
        root.add_component(SamplerComponent(opts.sampler_name, opts.sampler_params))
        root.add_component(AcceleratorComponent(opts.accelerator_name, opts.accelerator_params))
        root.add_component(IntegratorComponent(opts.integrator_name, opts.integrator_params))

        camera_node = root.find_node_by_component(CameraComponent)
        if camera_node is not None:
            camera_node.add_component(FilmComponent(opts.film_name, opts.film_params))
            up = camera_node.get_local_matrix().transform_vector((0.0, 1.0, 0.0))
            index = int(np.argmax(np.abs(up)))
            axis = [0.0, 0.0, 0.0]
            axis[index] = -1.0 if up[index] < 0.0 else 1.0
            logger.info(f"[SceneTarget] Camera up: {axis}")
            root.add_component(CoordinateSystemComponent(axis))

        manager = ResourceManager()
        for table in (self.materials, self.textures, self.meshes, self.resources):
            for resource in table.values():
                manager.add(resource)
        root.add_component(ResourcesComponent(manager))
        self._scene_root = root
        return root
