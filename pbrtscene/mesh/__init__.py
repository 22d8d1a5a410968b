"""
Меш‑данные и реестр построителей мешей.
"""

from pbrtscene.mesh.mesh_data import MeshData
from pbrtscene.mesh.builders import MeshBuilders, default_builders, build_trianglemesh

__all__ = ["MeshData", "MeshBuilders", "default_builders", "build_trianglemesh"]
