# -*- coding: utf-8 -*-
"""Грамматика, удаление комментариев, порядок диспетчеризации."""

import pytest

from pbrtscene.errors import PbrtSyntaxError
from pbrtscene.parse import remove_comments, parse_string, pbrt_parse_string
from pbrtscene.scene.properties import BOOLS, FLOATS, INTS, STRINGS


def test_remove_comments_keeps_strings_and_newlines():
    text = 'Shape "a#b" # comment\nWorldEnd # tail\n'
    assert remove_comments(text) == 'Shape "a#b" \nWorldEnd \n'


def test_parse_directive_kinds():
    text = (
        "Identity\n"
        "Translate 1 -2 3.5e1\n"
        "Transform [1 0 0 0  0 1 0 0  0 0 1 0  0 0 0 1]\n"
        'CoordinateSystem "cam"\n'
        'Camera "perspective" "float fov" [45]\n'
        'Texture "t" "spectrum" "checkerboard" "float uscale" [4]\n'
        "ActiveTransform StartTime\n"
    )
    directives = parse_string(text)
    assert [d.name for d in directives] == [
        "Identity", "Translate", "Transform", "CoordinateSystem",
        "Camera", "Texture", "ActiveTransform",
    ]
    assert directives[1].floats() == [1.0, -2.0, 35.0]
    assert len(directives[2].floats()) == 16
    assert directives[3].string(1) == "cam"
    assert directives[4].params.find_one_float("fov") == 45.0
    assert [directives[5].string(i) for i in (1, 2, 3)] == ["t", "spectrum", "checkerboard"]
    assert directives[6].string(1) == "StartTime"


def test_param_kind_follows_type_tag():
    text = ('Shape "trianglemesh" "integer indices" [0 1 2] "point P" [0 0 0 1 0 0 0 1 0] '
            '"bool twosided" "false" "string name" "tri" "spectrum Kd" [300 .3  800 .6]\n')
    params = parse_string(text)[0].params
    assert params.get("indices").kind == INTS
    assert params.get("P").kind == FLOATS
    assert params.get("twosided").kind == BOOLS
    assert params.find_one_bool("twosided") is False
    assert params.get("name").kind == STRINGS
    assert params.get_floats("Kd") == [300.0, 0.3, 800.0, 0.6]


def test_number_forms():
    d = parse_string("Scale +1. .5 -2E-1\n")[0]
    assert d.floats() == pytest.approx([1.0, 0.5, -0.2])


@pytest.mark.parametrize("text", [
    "Translate 1 2\n",
    'Shape "sphere" "float radius"\n',
    'Shape "sphere" "radius" [1]\n',
    "WorldBegin\nBogus 1\n",
    "WorldBegin extra\n",
    'Shape "sphere" "bool flag" ["maybe"]\n',
    'Shape "trianglemesh" "integer indices" [0.5]\n',
])
def test_syntax_errors(text):
    with pytest.raises(PbrtSyntaxError):
        parse_string(text)


def test_syntax_error_reports_line():
    with pytest.raises(PbrtSyntaxError) as info:
        parse_string('WorldBegin\nAttributeBegin\nBogus "x"\n')
    assert info.value.line == 3
    assert "Bogus" in info.value.fragment


def test_failed_parse_dispatches_nothing(recording_target):
    with pytest.raises(PbrtSyntaxError):
        pbrt_parse_string("WorldBegin\nAttributeBegin\nTranslate 1\n", recording_target)
    assert recording_target.calls == []


def test_dispatch_order(recording_target):
    pbrt_parse_string(
        'LookAt 0 0 5 0 0 0 0 1 0\nWorldBegin\nAttributeBegin\n'
        'Shape "sphere"\nAttributeEnd\nWorldEnd\n',
        recording_target,
    )
    assert recording_target.names() == [
        "look_at", "world_begin", "attribute_begin", "shape", "attribute_end", "world_end",
    ]
    name, args = recording_target.calls[0]
    assert args == (0.0, 0.0, 5.0, 0.0, 0.0, 0.0, 0.0, 1.0, 0.0)
