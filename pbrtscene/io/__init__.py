from .copy_utility import copy_file
from .loader import load_pbrt, load_pbrt_async, load_pbrt_target
from .saver import (
    PbrtSaver,
    SavePbrtOptions,
    dumps_pbrt,
    save_pbrt,
    transform_lines,
    write_pbrt,
)

__all__ = [
    "copy_file",
    "load_pbrt",
    "load_pbrt_async",
    "load_pbrt_target",
    "PbrtSaver",
    "SavePbrtOptions",
    "dumps_pbrt",
    "save_pbrt",
    "transform_lines",
    "write_pbrt",
]
