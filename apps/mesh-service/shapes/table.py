# apps/mesh-service/shapes/table.py
# Mesa: caja abierta por arriba (suelo + 4 paredes de doble cara)
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List

import trimesh

from ._helpers import num, param
from .geom import X_NEGATIF, X_POSITIF, Y_POSITIF, Z_NEGATIF, Z_POSITIF
from .mesh import MeshElements

NAME = "table"
SLUGS = ["tray", "mesa"]

DEFAULTS: Dict[str, float] = {
    "height": 5.0,     # largo en Z
    "width": 3.0,      # ancho en X
    "thickness": 1.0,  # alto de las paredes (Y)
}

TYPES: Dict[str, str] = {
    "height": "float",
    "width": "float",
    "thickness": "float",
}


@dataclass(frozen=True)
class Table:
    height: float = 5.0
    width: float = 3.0
    thickness: float = 1.0

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "Table":
        p = params or {}
        return cls(
            height=num(param(p, "height", "length", "H"), DEFAULTS["height"]),
            width=num(param(p, "width", "W"), DEFAULTS["width"]),
            thickness=num(param(p, "thickness", "wall_height", "T"), DEFAULTS["thickness"]),
        )

    def problems(self) -> List[str]:
        return [f"{k} must be > 0" for k in ("height", "width", "thickness") if getattr(self, k) <= 0]

    def build(self) -> MeshElements:
        # Centrado en el medio de la mesa en los tres ejes
        x0 = -self.width / 2.0
        y0 = -self.thickness / 2.0
        z0 = -self.height / 2.0
        x1 = x0 + self.width
        y1 = y0 + self.thickness
        z1 = z0 + self.height

        # Los vértices van ordenados para que cada grupo de 4 sea antihorario
        # visto desde su normal: así los índices salen de un único bucle.
        faces = [
            # Suelo
            ([[x0, y0, z0], [x0, y0, z1], [x1, y0, z1], [x1, y0, z0]], Y_POSITIF),
            # Pared izquierda (dentro / fuera)
            ([[x0, y0, z0], [x0, y1, z0], [x0, y1, z1], [x0, y0, z1]], X_POSITIF),
            ([[x0, y0, z0], [x0, y0, z1], [x0, y1, z1], [x0, y1, z0]], X_NEGATIF),
            # Pared delantera
            ([[x0, y0, z1], [x0, y1, z1], [x1, y1, z1], [x1, y0, z1]], Z_NEGATIF),
            ([[x0, y0, z1], [x1, y0, z1], [x1, y1, z1], [x0, y1, z1]], Z_POSITIF),
            # Pared derecha
            ([[x1, y0, z1], [x1, y1, z1], [x1, y1, z0], [x1, y0, z0]], X_NEGATIF),
            ([[x1, y0, z1], [x1, y0, z0], [x1, y1, z0], [x1, y1, z1]], X_POSITIF),
            # Pared trasera
            ([[x0, y0, z0], [x1, y0, z0], [x1, y1, z0], [x0, y1, z0]], Z_POSITIF),
            ([[x0, y0, z0], [x0, y1, z0], [x1, y1, z0], [x1, y0, z0]], Z_NEGATIF),
        ]

        vertices: List[List[float]] = []
        normals: List[List[float]] = []
        for corners, normal in faces:
            vertices.extend(corners)
            normals.extend([normal] * 4)

        indices: List[int] = []
        for i in range(0, len(vertices), 4):
            # Triángulo uno
            indices.extend((i, i + 1, i + 2))
            # Triángulo dos
            indices.extend((i + 2, i + 3, i))

        return MeshElements(vertices, normals, indices)


def make_model(params: Dict[str, Any]) -> trimesh.Trimesh:
    return Table.from_params(params).build().to_trimesh()


DESCRIPTOR = Table
BUILD = {"make": make_model, "build": make_model}
__all__ = ["NAME", "SLUGS", "DEFAULTS", "TYPES", "DESCRIPTOR", "Table", "make_model", "BUILD"]
