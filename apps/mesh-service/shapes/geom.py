# apps/mesh-service/shapes/geom.py
"""Vectores 3D. Convención de la mesa: Y hacia arriba, ángulos desde +X girando hacia +Z."""
import math
from dataclasses import dataclass
from typing import Any, Iterable, List


@dataclass(frozen=True)
class Vec:
    x: float = 0.0
    y: float = 0.0
    z: float = 0.0

    @classmethod
    def on_arc(cls, rx: float, rz: float, angle: float, y: float = 0.0) -> "Vec":
        """Punto (rx·cos a, y, rz·sin a): elipse o circunferencia en el plano XZ."""
        return cls(rx * math.cos(angle), y, rz * math.sin(angle))

    def as_tuple(self): return (self.x, self.y, self.z)
    def as_list(self) -> List[float]: return [self.x, self.y, self.z]
    def __iter__(self): return iter(self.as_tuple())

    def dot(self, o: Any) -> float:
        o = vec3(o)
        return self.x * o.x + self.y * o.y + self.z * o.z

    def length(self) -> float:
        return math.sqrt(self.dot(self))

    def normalize(self) -> "Vec":
        n = self.length()
        return self / n if n > 0 else self

    def __add__(self, o: Any) -> "Vec":
        o = vec3(o)
        return Vec(self.x + o.x, self.y + o.y, self.z + o.z)

    def __sub__(self, o: Any) -> "Vec":
        return self + (-vec3(o))

    def __neg__(self) -> "Vec":
        return Vec(-self.x, -self.y, -self.z)

    def __mul__(self, s: float) -> "Vec":
        return Vec(self.x * s, self.y * s, self.z * s)

    __rmul__ = __mul__

    def __truediv__(self, s: float) -> "Vec":
        return Vec(self.x / s, self.y / s, self.z / s)


def vec3(obj: Any) -> Vec:
    """Vec, dict {x,y,z} (claves ausentes = 0) o cualquier iterable de 3 números."""
    if isinstance(obj, Vec):
        return obj
    if isinstance(obj, dict):
        return Vec(*(float(obj.get(k) or 0.0) for k in ("x", "y", "z")))
    if isinstance(obj, Iterable) and not isinstance(obj, (str, bytes)):
        values = [float(c) for c in obj]
        if len(values) == 3:
            return Vec(*values)
    raise TypeError(f"Cannot convert {type(obj).__name__} to Vec")


# Normales unitarias de los ejes
X_NEGATIF = [-1.0, 0.0, 0.0]
X_POSITIF = [1.0, 0.0, 0.0]
Y_NEGATIF = [0.0, -1.0, 0.0]
Y_POSITIF = [0.0, 1.0, 0.0]
Z_NEGATIF = [0.0, 0.0, -1.0]
Z_POSITIF = [0.0, 0.0, 1.0]
