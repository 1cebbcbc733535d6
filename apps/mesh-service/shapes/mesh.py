# apps/mesh-service/shapes/mesh.py
"""
Acumulador de mallas compartido por todos los builders.

Se guardan tres secuencias paralelas (vértices, normales, índices) en lugar de
un registro por vértice: es el formato que esperan el render y la física
(posición + normal co-indexadas, lista de triángulos u32).
"""
from __future__ import annotations

from typing import Any, Iterable, List, NamedTuple, Sequence

import numpy as np
import trimesh

from .geom import vec3


class Surface(NamedTuple):
    positions: np.ndarray  # (N, 3) float32
    normals: np.ndarray    # (N, 3) float32
    indices: np.ndarray    # (3M,) uint32


class MeshElements:
    """Vértices + normales + índices de triángulos (antihorario visto desde fuera)."""

    __slots__ = ("vertices", "normals", "indices")

    def __init__(
        self,
        vertices: Sequence[Sequence[float]] = (),
        normals: Sequence[Sequence[float]] = (),
        indices: Sequence[int] = (),
    ):
        self.vertices: List[List[float]] = [list(map(float, v)) for v in vertices]
        self.normals: List[List[float]] = [list(map(float, n)) for n in normals]
        self.indices: List[int] = [int(i) for i in indices]

    @classmethod
    def empty(cls) -> "MeshElements":
        return cls()

    @classmethod
    def quad(cls, corners: Sequence[Sequence[float]], normal: Sequence[float]) -> "MeshElements":
        """Cara plana de 4 vértices, dados en orden antihorario desde la normal."""
        if len(corners) != 4:
            raise ValueError("quad needs exactly 4 corners")
        return cls(corners, [normal] * 4, [0, 1, 2, 2, 3, 0])

    @classmethod
    def concatenate(cls, parts: Iterable["MeshElements"]) -> "MeshElements":
        acc = cls.empty()
        for p in parts:
            acc.merge(p)
        return acc

    # ---------------------- álgebra ----------------------

    def merge(self, other: "MeshElements") -> "MeshElements":
        """Añade `other` al final desplazando sus índices por len(self.vertices)."""
        offset = len(self.vertices)
        self.vertices.extend([list(v) for v in other.vertices])
        self.normals.extend([list(n) for n in other.normals])
        self.indices.extend([i + offset for i in other.indices])
        return self

    def translate(self, offset: Any) -> "MeshElements":
        """Traslación rígida; las normales no cambian."""
        dx, dy, dz = vec3(offset)
        for v in self.vertices:
            v[0] += dx
            v[1] += dy
            v[2] += dz
        return self

    def __iadd__(self, rhs: Any) -> "MeshElements":
        if isinstance(rhs, MeshElements):
            return self.merge(rhs)
        return self.translate(rhs)

    # ---------------------- inspección ----------------------

    def __len__(self) -> int:
        return len(self.vertices)

    def __repr__(self) -> str:
        return (
            f"MeshElements(vertices={len(self.vertices)}, "
            f"normals={len(self.normals)}, triangles={len(self.indices) // 3})"
        )

    def copy(self) -> "MeshElements":
        return MeshElements(self.vertices, self.normals, self.indices)

    @property
    def triangles(self) -> List[tuple]:
        it = iter(self.indices)
        return list(zip(it, it, it))

    def is_consistent(self) -> bool:
        """Invariantes del buffer: múltiplo de 3, índices válidos, normales 1:1."""
        n = len(self.vertices)
        return (
            len(self.normals) == n
            and len(self.indices) % 3 == 0
            and all(0 <= i < n for i in self.indices)
        )

    # ---------------------- entrega ----------------------

    def into_surface(self) -> Surface:
        """
        Entrega las tres secuencias al llamante como arrays de numpy.
        Después de esta llamada el buffer queda vacío (consumido).
        """
        surface = Surface(
            positions=np.asarray(self.vertices, dtype=np.float32).reshape(-1, 3),
            normals=np.asarray(self.normals, dtype=np.float32).reshape(-1, 3),
            indices=np.asarray(self.indices, dtype=np.uint32),
        )
        self.vertices, self.normals, self.indices = [], [], []
        return surface

    def to_trimesh(self) -> trimesh.Trimesh:
        """Malla trimesh sin procesar (no fusiona vértices ni reordena caras)."""
        faces = np.asarray(self.indices, dtype=np.int64).reshape(-1, 3)
        return trimesh.Trimesh(
            vertices=np.asarray(self.vertices, dtype=float).reshape(-1, 3),
            faces=faces,
            vertex_normals=np.asarray(self.normals, dtype=float).reshape(-1, 3),
            process=False,
        )
