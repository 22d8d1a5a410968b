# pbrtscene/mesh/builders.py
# ---------------------------------------------------------------
# Реестр построителей мешей по типу формы. Загрузчики plymesh и
# настоящее подразбиение Loop регистрируются снаружи.
# ---------------------------------------------------------------
from typing import Callable, Dict, Optional

import numpy as np

from pbrtscene.mesh.mesh_data import MeshData
from pbrtscene.scene.properties import PropertyMap
from pbrtscene.utils.logger import logger

Builder = Callable[[PropertyMap], Optional[MeshData]]


def build_trianglemesh(props: PropertyMap) -> Optional[MeshData]:
    positions = props.get_floats("P")
    indices = props.get_ints("indices")
    if not positions or len(positions) % 3 != 0:
        logger.warning("[MeshBuilders] trianglemesh without valid 'point P'")
        return None
    n_verts = len(positions) // 3
    if indices is None:
        if n_verts != 3:
            logger.warning("[MeshBuilders] trianglemesh without 'integer indices'")
            return None
        indices = [0, 1, 2]
    if len(indices) % 3 != 0 or (indices and max(indices) >= n_verts):
        logger.warning("[MeshBuilders] trianglemesh has invalid indices")
        return None

    normals = props.get_floats("N")
    if normals is not None and len(normals) != len(positions):
        normals = None
    uv = props.get_floats("uv") or props.get_floats("st")
    if uv is not None and len(uv) != n_verts * 2:
        uv = None
    return MeshData(np.array(positions), normals=normals, texcoords=uv,
                    indices=np.array(indices))


def build_loopsubdiv_cage(props: PropertyMap) -> Optional[MeshData]:
    """Контрольная сетка без подразбиения."""
    return build_trianglemesh(props)


class MeshBuilders:
    """Словарь «тип формы → callable(props) -> MeshData | None»."""

    def __init__(self, builders: Optional[Dict[str, Builder]] = None):
        self._builders: Dict[str, Builder] = {}
        if builders:
            self._builders.update(builders)

    def register(self, shape_type: str, builder: Builder) -> None:
        self._builders[shape_type] = builder

    def __contains__(self, shape_type: str) -> bool:
        return shape_type in self._builders

    def build(self, shape_type: str, props: PropertyMap) -> Optional[MeshData]:
        builder = self._builders.get(shape_type)
        if builder is None:
            logger.debug(f"[MeshBuilders] No builder for '{shape_type}'")
            return None
        return builder(props)


def default_builders() -> MeshBuilders:
    return MeshBuilders({
        "trianglemesh": build_trianglemesh,
        "loopsubdiv": build_loopsubdiv_cage,
    })
