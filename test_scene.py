# -*- coding: utf-8 -*-
import gc

import numpy as np
import pytest

from pbrtscene.math.mat4 import Mat4
from pbrtscene.scene import Node
from pbrtscene.scene.components import CameraComponent, LightComponent
from pbrtscene.scene.properties import Property, PropertyMap, FLOATS, STRINGS
from pbrtscene.scene.schema import PropertySchema, default_schema


def make_tree():
    root = Node.root_node("Scene")
    a = Node.child_node("A", root)
    b = Node.child_node("B", a)
    c = Node.child_node("C", root)
    return root, a, b, c


def test_scene_traversal():
    root, a, b, c = make_tree()
    assert [n.name for n in root.traverse()] == ["Scene", "A", "B", "C"]
    assert b.parent is a and a.parent is root


def test_parent_is_weak():
    root = Node.root_node()
    child = Node.child_node("child", root)
    del root
    gc.collect()
    assert child.parent is None


def test_reparent():
    root, a, b, c = make_tree()
    c.add_child(b)
    assert b.parent is c
    assert b not in a.children
    a.remove_child(c)   # чужой ребёнок – ничего не происходит
    assert c.parent is root


def test_find_nodes():
    root, a, b, c = make_tree()
    b.add_component(CameraComponent("perspective"))
    assert root.find_node_by_component(CameraComponent) is b
    assert root.find_node_by_component(LightComponent) is None
    assert root.find_node_by_id(c.uid) is c


def test_world_matrix_chain():
    root, a, b, c = make_tree()
    root.set_local_matrix(Mat4.translate(1, 0, 0))
    a.set_local_matrix(Mat4.scale(2, 2, 2))
    b.set_local_matrix(Mat4.translate(0, 1, 0))
    assert np.allclose(b.get_world_matrix().get_translation(), [1, 2, 0])
    assert np.allclose(c.get_world_matrix().get_translation(), [1, 0, 0])


def test_local_matrix_is_copied():
    node = Node()
    m = Mat4.translate(1, 2, 3)
    node.set_local_matrix(m)
    m.m[0, 3] = 100
    assert node.get_local_matrix().get_translation()[0] == 1


# ----------------------------------------------------------------------
# PropertyMap
# ----------------------------------------------------------------------
def test_property_map_insert_replaces_in_place():
    pm = PropertyMap()
    pm.add_float("float a", 1)
    pm.add_string("string b", "x")
    pm.add_ints("integer a", [2, 3])
    assert pm.keys() == [("integer", "a"), ("string", "b")]
    assert pm.get_ints("a") == [2, 3]
    assert pm.get_floats("a") is None


def test_property_map_lookup_ignores_type():
    pm = PropertyMap()
    pm.add_floats("rgb Kd", [0.1, 0.2, 0.3])
    assert "Kd" in pm
    assert "color Kd" in pm
    assert pm.entry("Kd")[0] == "rgb"
    assert pm.find_one_float("Kd") == pytest.approx(0.1)
    assert pm.remove("Kd") and not pm.remove("Kd")
    assert len(pm) == 0


def test_property_map_copy_is_deep():
    pm = PropertyMap()
    pm.add_floats("float v", [1])
    other = pm.copy()
    other.get("v").values.append(2)
    assert pm.get_floats("v") == [1.0]
    assert other != pm


def test_tagged_values():
    assert Property.from_tagged("spectrum", [300, 0.5, 800, 0.7]).kind == FLOATS
    assert Property.from_tagged("spectrum", ["metal.spd"]).kind == STRINGS
    assert Property.from_tagged("bool", ['"true"', "false"]).values == [True, False]
    assert Property.from_tagged("integer", [3.0]).values == [3]
    with pytest.raises(ValueError):
        Property.from_tagged("bool", ["maybe"])
    with pytest.raises(ValueError):
        Property.from_tagged("integer", [0.5])


# ----------------------------------------------------------------------
# Схема
# ----------------------------------------------------------------------
def test_schema_defaults():
    schema = default_schema()
    names = [e.key_name for e in schema.get("material", "plastic")]
    assert names[:3] == ["Kd", "Ks", "roughness"]
    defaults = schema.defaults("material", "matte")
    assert defaults.get_floats("Kd") == [0.5, 0.5, 0.5]
    assert schema.get("material", "no-such-material") is None
    assert "matte" in schema.types("material")


def test_schema_register():
    schema = PropertySchema()
    schema.register("material", "toon", [("color", "Kd", "1 0 0", ""),
                                         ("float", "steps", "3", "1 10")])
    entries = schema.get("material", "toon")
    assert [e.key_name for e in entries] == ["Kd", "steps"]
    assert entries[1].value_range == (1.0, 10.0)
    assert schema.defaults("material", "toon").find_one_float("steps") == 3.0
