# apps/mesh-service/shapes/ellipse.py
"""
Cuña elíptica: un trozo de elipse "tallado" dentro de una caja rectangular.

Con `rectangle=True` el sólido es la región entre el arco y la esquina de la
caja (tapas arriba/abajo + cara trasera + cara lateral). Con `rectangle=False`
sólo queda el arco, como lámina de doble cara.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Sequence, Tuple

import numpy as np
import trimesh

from ._helpers import flag, num, num_int, param
from .geom import Vec, X_POSITIF, Y_NEGATIF, Y_POSITIF, Z_POSITIF
from .mesh import MeshElements

NAME = "ellipse"
SLUGS = ["carved_ellipse", "elipse", "wedge", "banister"]

HALF_PI = math.pi / 2.0


class OutOfRangeError(ValueError):
    """Ángulo fuera de [0, PI/2]. No se recorta: se devuelve el error al llamante."""

    def __init__(self, angle: float):
        super().__init__(f"Angle must be between 0 and PI/2 (inclusive), got {angle!r}")
        self.angle = angle


class Origin(Enum):
    """Dónde queda el origen local una vez generada la malla."""

    CENTER = "center"
    MIN_X_MIN_Z = "min_x_min_z"
    MAX_X_MIN_Z = "max_x_min_z"
    MIN_X_MAX_Z = "min_x_max_z"
    MAX_X_MAX_Z = "max_x_max_z"

    @classmethod
    def parse(cls, raw: Any) -> "Origin":
        """Acepta el miembro, su valor, 'MinXMaxZ' o 'min-x-max-z'."""
        if isinstance(raw, Origin):
            return raw
        s = str(raw or "center").strip()
        plain = s.replace("-", "_").lower()
        # CamelCase -> snake
        camel = "".join("_" + c.lower() if c.isupper() else c for c in s).lstrip("_")
        for member in cls:
            if member.value in (plain, camel):
                return member
        raise ValueError(f"Unknown origin '{raw}'")


DEFAULTS: Dict[str, Any] = {
    "rectangle": True,
    "center": Origin.CENTER.value,
    "first_angle": 0.0,
    "second_angle": HALF_PI,
    "resolution": 20,
    "x": 3.0,          # semieje X
    "z": 1.0,          # semieje Z
    "thickness": 1.0,  # altura (eje Y)
}

TYPES: Dict[str, str] = {
    "rectangle": "bool",
    "center": "center|min_x_min_z|max_x_min_z|min_x_max_z|max_x_max_z",
    "first_angle": "float (rad, 0..pi/2)",
    "second_angle": "float (rad, 0..pi/2)",
    "resolution": "int",
    "x": "float",
    "z": "float",
    "thickness": "float",
}


# ---------------------- Lámina del arco ----------------------

def arc_strip(
    x: float,
    z: float,
    thickness: float,
    angles: Sequence[float],
    revert: bool = False,
) -> MeshElements:
    """
    Banda de cuadriláteros sobre el arco x·cos(a), z·sin(a).

    Cada muestra aporta un par (abajo, arriba), así que hay 2·len(angles)
    vértices. La normal es la dirección radial en el plano XZ: hacia el centro
    de la elipse por defecto, hacia fuera con `revert=True` (y el orden de los
    triángulos se invierte a juego).
    """
    vertices: List[List[float]] = []
    normals: List[List[float]] = []
    indices: List[int] = []

    direction = 1.0 if revert else -1.0
    for a in angles:
        p = Vec.on_arc(x, z, a)
        vertices.append([p.x, 0.0, p.z])
        vertices.append([p.x, thickness, p.z])
        n = Vec(direction * p.x, 0.0, direction * p.z).normalize().as_list()
        normals.append(n)
        normals.append(list(n))

    # (abajo_i, arriba_i, arriba_i+1, abajo_i+1) = (i, i+1, i+3, i+2)
    pattern = (0, 1, 3, 3, 2, 0) if revert else (0, 3, 1, 3, 0, 2)
    for i in range(0, len(vertices) - 2, 2):
        indices.extend(i + o for o in pattern)

    return MeshElements(vertices, normals, indices)


# ---------------------- Descriptor ----------------------

@dataclass(frozen=True)
class Ellipse:
    # Cerrar el sólido contra la esquina de la caja
    rectangle: bool = True
    # Ancla del origen local
    center: Origin = Origin.CENTER
    # Desde +X, sentido antihorario. Entre [0, PI/2].
    first_angle: float = 0.0
    second_angle: float = HALF_PI
    # Número de pasos angulares
    resolution: int = 20
    # Semiejes X y Z
    x: float = 3.0
    z: float = 1.0
    # Altura en Y
    thickness: float = 1.0

    @classmethod
    def from_params(cls, params: Dict[str, Any]) -> "Ellipse":
        p = params or {}
        return cls(
            rectangle=flag(param(p, "rectangle", "capped", "solid"), DEFAULTS["rectangle"]),
            center=Origin.parse(param(p, "center", "origin", "anchor", default=DEFAULTS["center"])),
            first_angle=num(param(p, "first_angle", "angle_a"), DEFAULTS["first_angle"]),
            second_angle=num(param(p, "second_angle", "angle_b"), DEFAULTS["second_angle"]),
            resolution=num_int(param(p, "resolution", "segments"), DEFAULTS["resolution"]),
            x=num(param(p, "x", "half_x", "radius_x"), DEFAULTS["x"]),
            z=num(param(p, "z", "half_z", "radius_z"), DEFAULTS["z"]),
            thickness=num(param(p, "thickness", "height", "T"), DEFAULTS["thickness"]),
        )

    # ---------------------- geometría auxiliar ----------------------

    def problems(self) -> List[str]:
        """Comprobaciones geométricas del servicio. Los ángulos los valida `build()`."""
        out: List[str] = []
        if self.resolution < 1:
            out.append("resolution must be >= 1")
        for k in ("x", "z", "thickness"):
            if getattr(self, k) <= 0:
                out.append(f"{k} must be > 0")
        return out

    def min_max_angle(self) -> Tuple[float, float]:
        if self.first_angle < self.second_angle:
            return (self.first_angle, self.second_angle)
        return (self.second_angle, self.first_angle)

    def check_angles(self) -> None:
        for a in (self.first_angle, self.second_angle):
            # `not (…)` también atrapa NaN
            if not (0.0 <= a <= HALF_PI):
                raise OutOfRangeError(a)

    def angles(self) -> List[float]:
        """resolution + 1 muestras (mínimo una); la última coincide exactamente con el máximo."""
        angle_min, angle_max = self.min_max_angle()
        return np.linspace(angle_min, angle_max, max(self.resolution, 0) + 1).tolist()

    def real_x(self) -> float:
        angle_min, angle_max = self.min_max_angle()
        return abs(self.x * math.cos(angle_max) - self.x * math.cos(angle_min))

    def real_z(self) -> float:
        angle_min, angle_max = self.min_max_angle()
        return abs(self.z * math.sin(angle_max) - self.z * math.sin(angle_min))

    def axis_offsets(self) -> Vec:
        center_y = self.thickness / 2.0
        angle_min, angle_max = self.min_max_angle()

        x1 = self.x * math.cos(angle_min)
        x2 = self.x * math.cos(angle_max)
        z1 = self.z * math.sin(angle_min)
        z2 = self.z * math.sin(angle_max)

        left, right = (x1, x2) if x1 < x2 else (x2, x1)
        z_low, z_high = (z1, z2) if z1 < z2 else (z2, z1)

        if self.center is Origin.CENTER:
            return Vec(self.real_x() / 2.0 - right, -center_y, self.real_z() / 2.0 - z_high)
        if self.center is Origin.MIN_X_MIN_Z:
            return Vec(-left, -center_y, -z_low)
        if self.center is Origin.MAX_X_MIN_Z:
            return Vec(-right, -center_y, -z_low)
        if self.center is Origin.MIN_X_MAX_Z:
            return Vec(-left, -center_y, -z_high)
        return Vec(-right, -center_y, -z_high)

    # ---------------------- caras ----------------------

    def _cap(self, top: bool, angles: Sequence[float]) -> MeshElements:
        """Abanico desde la esquina de la caja hasta cada muestra del arco."""
        angle_min, angle_max = angles[0], angles[-1]
        height = self.thickness if top else 0.0
        normal, second, third = (Y_POSITIF, 1, 2) if top else (Y_NEGATIF, 2, 1)

        vertices = [[self.x * math.cos(angle_min), height, self.z * math.sin(angle_max)]]
        for a in angles:
            vertices.append(Vec.on_arc(self.x, self.z, a, height).as_list())

        indices: List[int] = []
        for i in range(len(angles) - 1):
            indices.extend((0, i + second, i + third))

        return MeshElements(vertices, [normal] * len(vertices), indices)

    def _back(self, angle_min: float, angle_max: float) -> MeshElements:
        """Cara plana en z = z·sin(max)."""
        x_a = self.x * math.cos(angle_min)
        x_b = self.x * math.cos(angle_max)
        z_back = self.z * math.sin(angle_max)
        t = self.thickness
        return MeshElements.quad(
            [[x_a, 0.0, z_back], [x_a, t, z_back], [x_b, t, z_back], [x_b, 0.0, z_back]],
            Z_POSITIF,
        )

    def _side(self, angle_min: float, angle_max: float) -> MeshElements:
        """Cara plana en x = x·cos(min)."""
        x_side = self.x * math.cos(angle_min)
        z_a = self.z * math.sin(angle_min)
        z_b = self.z * math.sin(angle_max)
        t = self.thickness
        return MeshElements.quad(
            [[x_side, 0.0, z_a], [x_side, t, z_a], [x_side, t, z_b], [x_side, 0.0, z_b]],
            X_POSITIF,
        )

    # ---------------------- ensamblado ----------------------

    def build(self) -> MeshElements:
        self.check_angles()

        angles = self.angles()
        angle_min, angle_max = angles[0], angles[-1]

        mesh = arc_strip(self.x, self.z, self.thickness, angles, revert=False)

        if self.rectangle:
            mesh += self._cap(True, angles)
            mesh += self._cap(False, angles)
            mesh += self._back(angle_min, angle_max)
            mesh += self._side(angle_min, angle_max)
        else:
            mesh += arc_strip(self.x, self.z, self.thickness, angles, revert=True)

        # Origen según el ancla pedida
        mesh += self.axis_offsets()
        return mesh


def make_model(params: Dict[str, Any]) -> trimesh.Trimesh:
    """Builder del registro: dict de parámetros -> trimesh."""
    return Ellipse.from_params(params).build().to_trimesh()


DESCRIPTOR = Ellipse
BUILD = {"make": make_model, "build": make_model}
__all__ = [
    "NAME", "SLUGS", "DEFAULTS", "TYPES", "DESCRIPTOR", "Origin", "OutOfRangeError",
    "Ellipse", "arc_strip", "make_model", "BUILD",
]
