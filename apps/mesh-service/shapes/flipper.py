# apps/mesh-service/shapes/flipper.py
"""
Paleta del flipper: dos arcos de radios distintos unidos por sus tangentes,
extruidos de y=0 a y=thickness.

El círculo grande está centrado en el origen; el pequeño en
(distance_centers, 0, (radius_max - radius_min) / 2).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict, List

import numpy as np
import trimesh

from ._helpers import num, num_int, param
from .geom import Vec, Y_NEGATIF, Y_POSITIF
from .mesh import MeshElements

NAME = "flipper"
SLUGS = ["paddle", "paleta"]

DEFAULTS: Dict[str, Any] = {
    "x": 0.7,           # largo total de la paleta
    "radius_min": 0.05,
    "radius_max": 0.1,
    "thickness": 0.28,
    "resolution": 20,
}

TYPES: Dict[str, str] = {
    "x": "float",
    "radius_min": "float",
    "radius_max": "float",
    "thickness": "float",
    "resolution": "int",
}

# Abanicos de unión entre las dos tapas: (apex_g, g_0, g_n, apex_p, p_0, p_n)
_GUSSET_BOTTOM = [0, 2, 4, 0, 4, 3, 1, 0, 3, 1, 3, 5]
_GUSSET_TOP = [0, 4, 2, 0, 3, 4, 1, 3, 0, 1, 5, 3]


@dataclass(frozen=True)
class Flipper:
    x: float = 0.7
    radius_min: float = 0.05
    radius_max: float = 0.1
    thickness: float = 0.28
    resolution: int = 20

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "Flipper":
        p = params or {}
        return cls(
            x=num(param(p, "x", "length", "L"), DEFAULTS["x"]),
            radius_min=num(param(p, "radius_min", "min_z", "small"), DEFAULTS["radius_min"]),
            radius_max=num(param(p, "radius_max", "max_z", "big"), DEFAULTS["radius_max"]),
            thickness=num(param(p, "thickness", "height", "T"), DEFAULTS["thickness"]),
            resolution=num_int(param(p, "resolution", "segments"), DEFAULTS["resolution"]),
        )

    # ---------------------- geometría auxiliar ----------------------

    @property
    def distance_centers(self) -> float:
        return self.x - (self.radius_min + self.radius_max)

    @property
    def alpha(self) -> float:
        """Ángulo que hay que girar los arcos para que la tangente exterior los una."""
        # división IEEE: con los centros superpuestos da inf (o NaN) en vez de lanzar
        with np.errstate(divide="ignore", invalid="ignore"):
            tangente = np.divide(self.radius_max - self.radius_min, 2.0 * self.distance_centers)
        return math.atan(float(tangente)) * 2.0

    @property
    def small_center(self) -> Vec:
        return Vec(self.distance_centers, 0.0, (self.radius_max - self.radius_min) / 2.0)

    @property
    def samples(self) -> int:
        """Muestras por arco; al menos una aunque resolution sea negativa."""
        return max(self.resolution, 0) + 1

    def large_angles(self) -> List[float]:
        start = math.pi / 2.0
        return np.linspace(start, start + math.pi + self.alpha, self.samples).tolist()

    def small_angles(self) -> List[float]:
        start = -math.pi / 2.0 + self.alpha
        return np.linspace(start, start + math.pi - self.alpha, self.samples).tolist()

    def problems(self) -> List[str]:
        """Contrato geométrico; vacío si la paleta es válida. `build()` no lo comprueba."""
        out: List[str] = []
        if self.resolution < 1:
            out.append("resolution must be >= 1")
        if self.thickness <= 0:
            out.append("thickness must be > 0")
        if self.radius_min <= 0:
            out.append("radius_min must be > 0")
        if self.radius_max < self.radius_min:
            out.append("radius_max must be >= radius_min")
        if self.distance_centers <= 0:
            out.append("x must be greater than radius_min + radius_max")
        return out

    # ---------------------- caras ----------------------

    def border(self) -> MeshElements:
        """Pared lateral: pares (abajo, arriba) del arco grande y luego del pequeño."""
        vertices: List[List[float]] = []
        normals: List[List[float]] = []
        indices: List[int] = []

        for a in self.large_angles():
            p = Vec.on_arc(self.radius_max, self.radius_max, a)
            n = p.normalize().as_list()
            for height in (0.0, self.thickness):
                vertices.append([p.x, height, p.z])
                normals.append(list(n))

        c = self.small_center
        for a in self.small_angles():
            p = Vec.on_arc(self.radius_min, self.radius_min, a)
            n = p.normalize().as_list()
            for height in (0.0, self.thickness):
                vertices.append([p.x + c.x, height, p.z + c.z])
                normals.append(list(n))

        last = len(vertices) - 2
        for i in range(0, last, 2):
            # Triángulo 1
            indices.extend((i, i + 1, i + 3))
            # Triángulo 2
            indices.extend((i + 3, i + 2, i))

        # Tramo recto de vuelta al primer par
        indices.extend((last, last + 1, 1))
        indices.extend((1, 0, last))

        return MeshElements(vertices, normals, indices)

    def _fan(self, radius: float, angles: List[float], top: bool) -> MeshElements:
        height = self.thickness if top else 0.0
        normal = Y_POSITIF if top else Y_NEGATIF

        vertices = [[0.0, height, 0.0]]
        for a in angles:
            vertices.append(Vec.on_arc(radius, radius, a, height).as_list())

        offset1, offset2 = (1, 0) if top else (0, 1)
        indices: List[int] = []
        for i in range(1, len(vertices) - 1):
            indices.extend((0, i + offset1, i + offset2))

        return MeshElements(vertices, [normal] * len(vertices), indices)

    def large_arc(self, top: bool) -> MeshElements:
        return self._fan(self.radius_max, self.large_angles(), top)

    def small_arc(self, top: bool) -> MeshElements:
        return self._fan(self.radius_min, self.small_angles(), top).translate(self.small_center)

    def cap(self, top: bool) -> MeshElements:
        """Tapa completa: abanico grande + cuña de unión + abanico pequeño."""
        large = self.large_arc(top)
        small = self.small_arc(top)

        gusset = MeshElements(
            [
                large.vertices[0],
                large.vertices[1],
                large.vertices[-1],
                small.vertices[0],
                small.vertices[1],
                small.vertices[-1],
            ],
            [Y_POSITIF if top else Y_NEGATIF] * 6,
            _GUSSET_TOP if top else _GUSSET_BOTTOM,
        )

        large += gusset
        large += small
        return large

    # ---------------------- ensamblado ----------------------

    def build(self) -> MeshElements:
        mesh = self.cap(top=False)
        mesh += self.cap(top=True)
        mesh += self.border()
        return mesh


def make_model(params: Dict[str, Any]) -> trimesh.Trimesh:
    return Flipper.from_params(params).build().to_trimesh()


DESCRIPTOR = Flipper
BUILD = {"make": make_model, "build": make_model}
__all__ = ["NAME", "SLUGS", "DEFAULTS", "TYPES", "DESCRIPTOR", "Flipper", "make_model", "BUILD"]
