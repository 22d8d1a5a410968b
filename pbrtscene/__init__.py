"""
pbrtscene – чтение, интерпретация и запись сцен в формате PBRT‑v3.
Текст -> директивы -> граф узлов с ресурсами -> текст.
"""

from pbrtscene.utils import logger
from pbrtscene.errors import PbrtError, PbrtSyntaxError, DecomposeError
from pbrtscene.math import Mat4, Quat
from pbrtscene.scene import Node, Property, PropertyMap, PropertySchema, default_schema
from pbrtscene.parse import ParseTarget, parse_string, pbrt_parse_file, pbrt_parse_string
from pbrtscene.targets import MultipleTarget, PrintTarget, SceneTarget
from pbrtscene.io import (
    SavePbrtOptions,
    dumps_pbrt,
    load_pbrt,
    load_pbrt_async,
    save_pbrt,
    write_pbrt,
)

__version__ = "0.1.0"

__all__ = [
    "PbrtError",
    "PbrtSyntaxError",
    "DecomposeError",
    "Mat4",
    "Quat",
    "Node",
    "Property",
    "PropertyMap",
    "PropertySchema",
    "default_schema",
    "ParseTarget",
    "parse_string",
    "pbrt_parse_file",
    "pbrt_parse_string",
    "MultipleTarget",
    "PrintTarget",
    "SceneTarget",
    "SavePbrtOptions",
    "dumps_pbrt",
    "load_pbrt",
    "load_pbrt_async",
    "save_pbrt",
    "write_pbrt",
]
