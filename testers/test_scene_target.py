# -*- coding: utf-8 -*-
"""Интерпретатор: стеки, преобразования, материалы, ресурсы."""

import os

import numpy as np
import pytest

from pbrtscene.math.mat4 import Mat4
from pbrtscene.parse import pbrt_parse_string
from pbrtscene.scene.components import (
    AnimationComponent, AreaLightComponent, CameraComponent,
    CoordinateSystemComponent, FilmComponent, LightComponent,
    MaterialComponent, ResourcesComponent, SamplerComponent, ShapeComponent,
)
from pbrtscene.targets.scene import SceneTarget


def _build(text, target=None):
    target = target if target is not None else SceneTarget()
    pbrt_parse_string(text, target)
    return target, target.create_scene_node()


def _shape_nodes(root):
    return [n for n in root.traverse() if n.has_component(ShapeComponent)]


# ----------------------------------------------------------------------
# Конкретный сценарий
# ----------------------------------------------------------------------
def test_concrete_scene(concrete_scene_text):
    target, root = _build(concrete_scene_text)
    assert target.warnings == []

    camera = root.find_node_by_component(CameraComponent)
    # узел камеры хранит камера->мир, т.е. обратную к Translate 0 0 -140
    assert np.allclose(camera.get_world_matrix().get_translation(), [0, 0, 140])
    assert np.allclose(camera.get_world_matrix().inverse().get_translation(), [0, 0, -140])

    attribute = [c for c in root.children if c is not camera]
    assert len(attribute) == 1 and attribute[0].name == "Attribute"
    assert len(attribute[0].children) == 1
    mesh_node = attribute[0].children[0]
    assert mesh_node.name == "Mesh"

    shape = mesh_node.get_component(ShapeComponent)
    assert shape.type_name == "trianglemesh"
    assert shape.props.get_floats("P") == [-1, -1, 0, 1, -1, 0, 1, 1, 0, -1, 1, 0]
    assert shape.props.get_ints("indices") == [0, 1, 2, 2, 3, 0]
    assert shape.mesh.mesh_data.triangle_count == 2

    material = mesh_node.get_component(MaterialComponent)
    assert material.type_name == "matte"
    assert material.material.props.get_floats("Kd") == pytest.approx([0.5, 0.5, 0.8])
    assert material.name.startswith("Matte_")


def test_finalization_components(concrete_scene_text):
    target, root = _build(concrete_scene_text)
    assert root.has_component(SamplerComponent)
    camera = root.find_node_by_component(CameraComponent)
    assert camera.get_component(FilmComponent).type_name == "image"
    assert camera.get_component(CameraComponent).type_name == "perspective"
    assert np.allclose(root.get_component(CoordinateSystemComponent).up, [0, 1, 0])
    counts = root.get_component(ResourcesComponent).manager.counts()
    assert counts == {"materials": 1, "textures": 0, "meshes": 1, "other_resources": 0}
    # повторный вызов возвращает тот же корень и не дублирует компоненты
    assert target.create_scene_node() is root


# ----------------------------------------------------------------------
# Стеки
# ----------------------------------------------------------------------
def test_scope_balance(scene_target):
    pbrt_parse_string("WorldBegin\nAttributeBegin\nTransformBegin\nAttributeBegin\n",
                      scene_target)
    assert scene_target.node_depth == 4
    assert scene_target.transform_depth == 4
    assert scene_target.graphics_state_depth == 3
    pbrt_parse_string("AttributeEnd\nTransformEnd\nAttributeEnd\n", scene_target)
    assert scene_target.node_depth == 1
    assert scene_target.transform_depth == 1
    assert scene_target.graphics_state_depth == 1
    assert scene_target.warnings == []


def test_extra_end_is_warning(scene_target):
    pbrt_parse_string("WorldBegin\nAttributeEnd\nTransformEnd\nWorkDirEnd\n", scene_target)
    assert scene_target.node_depth == 1
    assert scene_target.graphics_state_depth == 1
    assert scene_target.work_dir_depth == 0
    assert len(scene_target.warnings) == 3


def test_second_world_begin_ignored(scene_target):
    pbrt_parse_string('WorldBegin\nShape "sphere"\nWorldBegin\n', scene_target)
    root = scene_target.create_scene_node()
    assert len(_shape_nodes(root)) == 1
    assert any("WorldBegin" in w for w in scene_target.warnings)


def test_options_inside_world_warn_but_apply(scene_target):
    pbrt_parse_string('WorldBegin\nSampler "random" "integer pixelsamples" [8]\n', scene_target)
    assert scene_target.render_options.sampler_name == "random"
    assert any("Sampler" in w for w in scene_target.warnings)


# ----------------------------------------------------------------------
# Преобразования
# ----------------------------------------------------------------------
def test_transform_composition():
    _, root = _build('WorldBegin\nTranslate 1 0 0\nRotate 90 0 0 1\nShape "sphere"\n')
    world = _shape_nodes(root)[0].get_world_matrix()
    expected = Mat4.translate(1, 0, 0) @ Mat4.rotate(90, 0, 0, 1)
    assert world.allclose(expected)
    assert np.allclose(world.transform_point((1, 0, 0)), [1, 1, 0])


def test_nested_scopes_compose():
    _, root = _build(
        'WorldBegin\nTranslate 1 0 0\nAttributeBegin\nScale 2 2 2\n'
        'AttributeBegin\nTranslate 0 1 0\nShape "sphere"\nAttributeEnd\nAttributeEnd\n'
        'Shape "disk"\n'
    )
    sphere, disk = _shape_nodes(root)
    assert sphere.get_world_matrix().allclose(
        Mat4.translate(1, 0, 0) @ Mat4.scale(2, 2, 2) @ Mat4.translate(0, 1, 0))
    assert disk.get_world_matrix().allclose(Mat4.translate(1, 0, 0))


def test_identity_resets():
    _, root = _build('WorldBegin\nTranslate 5 0 0\nIdentity\nShape "sphere"\n')
    assert _shape_nodes(root)[0].get_world_matrix().is_identity()


def test_transform_replaces_and_concat_composes():
    t = "1 0 0 0  0 1 0 0  0 0 1 0  3 4 5 1"
    _, root = _build(f'WorldBegin\nTranslate 9 9 9\nTransform [{t}]\nShape "sphere"\n'
                     f'ConcatTransform [{t}]\nShape "disk"\n')
    sphere, disk = _shape_nodes(root)
    assert np.allclose(sphere.get_world_matrix().get_translation(), [3, 4, 5])
    assert np.allclose(disk.get_world_matrix().get_translation(), [6, 8, 10])


def test_singular_transform_is_skipped(scene_target):
    zeros = " ".join(["0"] * 16)
    pbrt_parse_string(f"WorldBegin\nTranslate 1 0 0\nConcatTransform [{zeros}]\n"
                      "Transform [1 0 0]\n", scene_target)
    assert len(scene_target.warnings) == 2
    assert np.allclose(scene_target.current_transform.get_world_matrix().get_translation(),
                       [1, 0, 0])


def test_coordinate_system_restore(scene_target):
    pbrt_parse_string('WorldBegin\nTranslate 1 2 3\nCoordinateSystem "mark"\nIdentity\n'
                      'CoordSysTransform "mark"\nCoordSysTransform "missing"\n', scene_target)
    assert np.allclose(scene_target.current_transform.get_world_matrix().get_translation(),
                       [1, 2, 3])
    assert scene_target.warnings == ["Coordinate system missing not found"]


def test_animated_shape_gets_animation():
    target, root = _build(
        'WorldBegin\nAttributeBegin\nAreaLightSource "diffuse" "rgb L" [1 1 1]\n'
        'ActiveTransform EndTime\nTranslate 1 0 0\nActiveTransform All\n'
        'Shape "sphere"\nAttributeEnd\n'
    )
    node = _shape_nodes(root)[0]
    animation = node.get_component(AnimationComponent)
    assert animation is not None
    assert animation.start.is_identity()
    assert np.allclose(animation.end.get_translation(), [1, 0, 0])
    assert not node.has_component(AreaLightComponent)
    assert "Area light source cannot be animated" in target.warnings


# ----------------------------------------------------------------------
# Материалы
# ----------------------------------------------------------------------
def test_named_material_identity(scene_target):
    pbrt_parse_string('WorldBegin\nMakeNamedMaterial "A" "string type" ["matte"]\n'
                      'NamedMaterial "A"\n', scene_target)
    state = scene_target.graphics_state
    created = state.materials["A"]
    assert state.current_material is created

    pbrt_parse_string('NamedMaterial "nonexistent"\n', scene_target)
    assert scene_target.graphics_state.current_material is created
    assert scene_target.warnings == ["Material nonexistent not found"]


def test_named_material_none_clears(scene_target):
    pbrt_parse_string('WorldBegin\nNamedMaterial "none"\nShape "sphere"\n', scene_target)
    root = scene_target.create_scene_node()
    assert not _shape_nodes(root)[0].has_component(MaterialComponent)


def test_material_scoped_by_attributes():
    _, root = _build(
        'WorldBegin\nAttributeBegin\nMaterial "plastic"\nShape "sphere"\nAttributeEnd\n'
        'Shape "disk"\n'
    )
    sphere, disk = _shape_nodes(root)
    assert sphere.get_component(MaterialComponent).type_name == "plastic"
    assert disk.get_component(MaterialComponent).name == "Matte"


def test_default_material_registered_on_use():
    target, root = _build('WorldBegin\nShape "sphere"\n')
    names = [m.name for m in root.get_component(ResourcesComponent).manager.materials.values()]
    assert names == ["Matte"]
    target, root = _build('WorldBegin\nMaterial "glass"\nShape "sphere"\n')
    types = [m.type_name for m in root.get_component(ResourcesComponent).manager.materials.values()]
    assert types == ["glass"]


def test_make_named_material_duplicate_and_missing_type(scene_target):
    pbrt_parse_string('WorldBegin\nMakeNamedMaterial "A" "string type" ["matte"]\n'
                      'MakeNamedMaterial "A" "string type" ["plastic"]\n'
                      'MakeNamedMaterial "B" "float roughness" [0.1]\n', scene_target)
    assert scene_target.graphics_state.materials["A"].type_name == "plastic"
    assert "B" not in scene_target.graphics_state.materials
    assert len(scene_target.warnings) == 2


def test_legacy_index_renamed_to_eta():
    target, root = _build('WorldBegin\nMaterial "glass" "float index" [1.33]\nShape "sphere"\n')
    material = _shape_nodes(root)[0].get_component(MaterialComponent).material
    assert material.props.find_one_float("eta") == pytest.approx(1.33)
    assert "index" not in material.props


# ----------------------------------------------------------------------
# Источники света и формы
# ----------------------------------------------------------------------
def test_point_light_from_folded():
    _, root = _build('WorldBegin\nTranslate 0 0 1\nLightSource "point" "point from" [1 2 3]\n')
    light = root.find_node_by_component(LightComponent)
    assert light.name == "PointLight"
    assert np.allclose(light.get_world_matrix().get_translation(), [1, 2, 4])
    assert "from" not in light.get_component(LightComponent).props


def test_point_light_from_is_scaled_by_current_transform():
    _, root = _build('WorldBegin\nScale 2 2 2\nLightSource "point" "point from" [1 0 0]\n')
    light = root.find_node_by_component(LightComponent)
    assert np.allclose(light.get_world_matrix().get_translation(), [2, 0, 0])


def test_spot_light_frame_points_to_target():
    _, root = _build('WorldBegin\nLightSource "spot" "point from" [0 5 0] "point to" [0 0 0] '
                     '"float coneangle" [20]\n')
    light = root.find_node_by_component(LightComponent)
    world = light.get_world_matrix()
    assert np.allclose(world.get_translation(), [0, 5, 0])
    assert np.allclose(world.transform_vector((0, 0, 1)), [0, -1, 0])
    props = light.get_component(LightComponent).props
    assert "from" not in props and "to" not in props
    assert props.find_one_float("coneangle") == 20.0


def test_area_light_names_node():
    _, root = _build('WorldBegin\nAttributeBegin\nAreaLightSource "diffuse" "rgb L" [4 4 4]\n'
                     'Shape "sphere"\nAttributeEnd\nShape "disk"\n')
    lit, plain = _shape_nodes(root)
    assert lit.name == "AreaLight"
    assert lit.get_component(AreaLightComponent).props.get_floats("L") == [4, 4, 4]
    assert not plain.has_component(AreaLightComponent)


def test_unknown_shape_warns(scene_target):
    pbrt_parse_string('WorldBegin\nShape "teapot"\n', scene_target)
    root = scene_target.create_scene_node()
    assert _shape_nodes(root) == []
    assert scene_target.warnings == ["Shape teapot not supported"]


def test_loopsubdiv_levels_renamed():
    _, root = _build('WorldBegin\nShape "loopsubdiv" "integer levels" [2] '
                     '"point P" [0 0 0 1 0 0 0 1 0] "integer indices" [0 1 2]\n')
    node = _shape_nodes(root)[0]
    assert node.name == "Subdiv"
    assert node.get_component(ShapeComponent).props.find_one_int("nlevels") == 2


# ----------------------------------------------------------------------
# Файлы
# ----------------------------------------------------------------------
def test_plymesh_dedup(scene_target, resource_dir):
    pbrt_parse_string(
        f'WorkDirBegin "{resource_dir.as_posix()}"\nWorldBegin\n'
        'Shape "plymesh" "string filename" ["bunny.ply"]\n'
        'Translate 1 0 0\nShape "plymesh" "string filename" ["bunny.ply"]\n'
        'Shape "plymesh" "string filename" ["missing.ply"]\nWorkDirEnd\n',
        scene_target,
    )
    root = scene_target.create_scene_node()
    first, second = _shape_nodes(root)
    assert first.get_component(ShapeComponent).mesh is second.get_component(ShapeComponent).mesh
    assert len(root.get_component(ResourcesComponent).manager.meshes) == 1
    fullpath = first.get_component(ShapeComponent).props.find_one_string("fullpath")
    assert fullpath == os.path.abspath(resource_dir / "bunny.ply")
    assert scene_target.warnings == ["PlyMesh file not found: missing.ply"]


def test_imagemap_texture(scene_target, resource_dir):
    pbrt_parse_string(
        f'WorkDirBegin "{resource_dir.as_posix()}"\nWorldBegin\n'
        'Texture "checks" "spectrum" "imagemap" "string filename" ["checks.png"]\n'
        'Texture "gone" "spectrum" "imagemap" "string filename" ["nope.png"]\n'
        'Texture "checks" "spectrum" "checkerboard"\n',
        scene_target,
    )
    textures = list(scene_target.textures.values())
    assert len(textures) == 1
    assert textures[0].image_size == (4, 2)
    assert textures[0].order == 0
    assert len(scene_target.warnings) == 2


def test_other_resources_discovered(scene_target, resource_dir):
    (resource_dir / "metal.spd").write_text("300 0.1\n800 0.2\n")
    (resource_dir / "wide.dat").write_text("0 0\n")
    pbrt_parse_string(
        f'WorkDirBegin "{resource_dir.as_posix()}"\n'
        'Camera "realistic" "string lensfile" ["wide.dat"]\nWorldBegin\n'
        'Material "metal" "spectrum eta" "metal.spd"\n'
        'Material "metal" "spectrum k" "metal.spd"\n',
        scene_target,
    )
    kinds = sorted(r.type_name for r in scene_target.resources.values())
    assert kinds == ["lensfile", "spd"]


def test_include_resolves_relative(tmp_path):
    from pbrtscene.io import load_pbrt

    sub = tmp_path / "parts"
    sub.mkdir()
    (sub / "bunny.ply").write_bytes(b"ply\n")
    (sub / "geometry.pbrt").write_text('Shape "plymesh" "string filename" ["bunny.ply"]\n')
    main = tmp_path / "main.pbrt"
    main.write_text('WorldBegin\nInclude "parts/geometry.pbrt"\nWorldEnd\n')

    root = load_pbrt(main)
    nodes = _shape_nodes(root)
    assert len(nodes) == 1
    fullpath = nodes[0].get_component(ShapeComponent).props.find_one_string("fullpath")
    assert fullpath == str((sub / "bunny.ply").resolve())


def test_live_include_reenters_parser(tmp_path):
    from pbrtscene.parse import pbrt_parse_file_without_include

    sub = tmp_path / "parts"
    sub.mkdir()
    (sub / "bunny.ply").write_bytes(b"ply\n")
    (sub / "geometry.pbrt").write_text('Shape "plymesh" "string filename" ["bunny.ply"]\n')
    main = tmp_path / "main.pbrt"
    main.write_text('WorldBegin\nInclude "parts/geometry.pbrt"\nInclude "absent.pbrt"\nWorldEnd\n')

    target = SceneTarget()
    pbrt_parse_file_without_include(main, target)
    root = target.create_scene_node()
    assert len(_shape_nodes(root)) == 1
    assert target.warnings == ["Include file not found: absent.pbrt"]
    assert target.work_dir_depth == 0
