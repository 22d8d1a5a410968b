# pbrtscene/io/loader.py
# ---------------------------------------------------------------
# load_pbrt – файл сцены (.pbrt, .pbrt.gz, .tar.gz) -> корневой Node.
# ---------------------------------------------------------------
import atexit
import os
from concurrent.futures import Future
from typing import Optional

from pbrtscene.mesh.builders import MeshBuilders
from pbrtscene.multithread.task_pool import TaskPool
from pbrtscene.parse.parser import pbrt_parse_file
from pbrtscene.parse.target import ParseTarget
from pbrtscene.scene.components import SceneComponent
from pbrtscene.scene.node import Node
from pbrtscene.scene.schema import PropertySchema
from pbrtscene.targets.multiple import MultipleTarget
from pbrtscene.targets.scene.scene_target import SceneTarget
from pbrtscene.utils.logger import logger
from pbrtscene.utils.profiler import Profiler

_POOL: Optional[TaskPool] = None


def _pool() -> TaskPool:
    global _POOL
    if _POOL is None:
        _POOL = TaskPool(max_workers=2)
        atexit.register(_POOL.shutdown)
    return _POOL


def load_pbrt_target(path, schema: Optional[PropertySchema] = None,
                     print_target: Optional[ParseTarget] = None,
                     mesh_builders: Optional[MeshBuilders] = None) -> SceneTarget:
    """Разбирает файл и возвращает интерпретатор (граф + предупреждения)."""
    scene_target = SceneTarget(schema=schema, mesh_builders=mesh_builders)
    target = MultipleTarget()
    if print_target is not None:
        target.add_target(print_target)
    target.add_target(scene_target)

    with Profiler(f"load {path}") as prof:
        pbrt_parse_file(path, target)
        target.cleanup()
        root = scene_target.create_scene_node()

    fullpath = os.path.abspath(str(path))
    scene = root.get_component(SceneComponent)
    scene.props.add_string("string filename", os.path.basename(fullpath))
    scene.props.add_string("string fullpath", fullpath)
    logger.info(f"[Loader] Loaded {fullpath} in {prof.elapsed_ms:.1f} ms "
                f"({len(scene_target.warnings)} warning(s))")
    return scene_target


def load_pbrt(path, schema: Optional[PropertySchema] = None,
              print_target: Optional[ParseTarget] = None,
              mesh_builders: Optional[MeshBuilders] = None) -> Node:
    """
    Загружает сцену. PbrtSyntaxError прерывает загрузку целиком,
    OSError (нет файла, нет доступа) пробрасывается как есть.
    """
    return load_pbrt_target(path, schema, print_target, mesh_builders).create_scene_node()


def load_pbrt_async(path, schema: Optional[PropertySchema] = None,
                    pool: Optional[TaskPool] = None) -> Future:
    """load_pbrt в фоновом потоке; Future.result() вернёт корневой Node."""
    pool = pool if pool is not None else _pool()
    return pool.submit(load_pbrt, path, schema)
