# -*- coding: utf-8 -*-
"""
conftest.py – общие фикстуры: интерпретатор сцены, записывающая цель
(мок ParseTarget) и маленькие сцены во временных каталогах.
"""

from abc import ABCMeta

import pytest
from PIL import Image

from pbrtscene.parse.target import ParseTarget
from pbrtscene.scene.schema import default_schema
from pbrtscene.targets.scene.scene_target import SceneTarget


CONCRETE_SCENE = (
    "Translate 0 0 -140\n"
    "WorldBegin\n"
    "AttributeBegin\n"
    'Material "matte" "color Kd" [.5 .5 .8]\n'
    'Shape "trianglemesh" "point P" [-1 -1 0  1 -1 0  1 1 0  -1 1 0] '
    '"integer indices" [0 1 2 2 3 0]\n'
    "AttributeEnd\n"
    "WorldEnd\n"
)


# ----------------------------------------------------------------------
# RecordingTarget – реализует весь ParseTarget, каждый метод только
# записывает вызов в `self.calls`.
# ----------------------------------------------------------------------
def _recorder(method_name):
    def method(self, *args):
        self.calls.append((method_name, args))
    method.__name__ = method_name
    return method


def _make_recording_target_class():
    namespace = {name: _recorder(name) for name in sorted(ParseTarget.__abstractmethods__)}

    def __init__(self):
        self.calls = []

    def names(self):
        return [name for name, _ in self.calls]

    namespace["__init__"] = __init__
    namespace["names"] = names
    return ABCMeta("RecordingTarget", (ParseTarget,), namespace)


RecordingTarget = _make_recording_target_class()


@pytest.fixture
def recording_target():
    return RecordingTarget()


@pytest.fixture
def recording_target_class():
    return RecordingTarget


@pytest.fixture
def schema():
    return default_schema()


@pytest.fixture
def scene_target(schema):
    return SceneTarget(schema=schema)


@pytest.fixture
def concrete_scene_text():
    return CONCRETE_SCENE


# ----------------------------------------------------------------------
# Файлы на диске
# ----------------------------------------------------------------------
@pytest.fixture
def resource_dir(tmp_path):
    """Каталог с фиктивным ply‑файлом и маленькой PNG‑картинкой."""
    src = tmp_path / "src"
    src.mkdir()
    (src / "bunny.ply").write_bytes(b"ply\nformat ascii 1.0\nend_header\n")
    Image.new("RGB", (4, 2), (255, 0, 0)).save(src / "checks.png")
    return src


@pytest.fixture
def scene_file(resource_dir):
    """Сцена с текстурой, общим plymesh и точечным источником."""
    text = (
        'LookAt 0 0 10  0 0 0  0 1 0\n'
        'Camera "perspective" "float fov" [45]\n'
        'Film "image" "integer xresolution" [64] "integer yresolution" [32]\n'
        'Sampler "halton" "integer pixelsamples" [4]\n'
        'WorldBegin\n'
        'Texture "checks" "spectrum" "imagemap" "string filename" ["checks.png"]\n'
        'MakeNamedMaterial "red" "string type" ["matte"] "texture Kd" ["checks"]\n'
        'LightSource "point" "point from" [1 2 3] "rgb I" [5 5 5]\n'
        'AttributeBegin\n'
        '  NamedMaterial "red"\n'
        '  Translate 1 0 0\n'
        '  Shape "plymesh" "string filename" ["bunny.ply"]\n'
        'AttributeEnd\n'
        'AttributeBegin\n'
        '  Translate -1 0 0\n'
        '  Shape "plymesh" "string filename" ["bunny.ply"]\n'
        'AttributeEnd\n'
        'WorldEnd\n'
    )
    path = resource_dir / "scene.pbrt"
    path.write_text(text, encoding="utf-8")
    return path
