# pbrtscene/mesh/mesh_data.py
import numpy as np


class MeshData:
    """Геометрия треугольного меша в numpy‑массивах + ограничивающая сфера."""

    def __init__(self,
                 vertices: np.ndarray,
                 normals: np.ndarray = None,
                 texcoords: np.ndarray = None,
                 indices: np.ndarray = None):
        self.vertices = np.asarray(vertices, dtype=np.float32).reshape((-1, 3))
        self.normals = np.asarray(normals, dtype=np.float32).reshape((-1, 3)) if normals is not None else None
        self.texcoords = np.asarray(texcoords, dtype=np.float32).reshape((-1, 2)) if texcoords is not None else None
        self.indices = np.asarray(indices, dtype=np.uint32) if indices is not None else None

        # количество индексов/вершин
        self.index_count = len(self.indices) if self.indices is not None else len(self.vertices)

        if len(self.vertices):
            self.bounding_center = self.vertices.mean(axis=0)
            self.bounding_radius = float(np.linalg.norm(self.vertices - self.bounding_center, axis=1).max())
        else:
            self.bounding_center = np.zeros(3, dtype=np.float32)
            self.bounding_radius = 0.0

    @property
    def triangle_count(self) -> int:
        return self.index_count // 3
