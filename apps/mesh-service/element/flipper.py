# apps/mesh-service/element/flipper.py
from __future__ import annotations

import math
from enum import Enum

# Recorrido total de la paleta (mismos límites que la articulación de la mesa)
MAX_ANGLE = math.pi / 3.0
# Fuerza mínima para que el mando cuente como pulsado
DEAD_ZONE = 0.2


class Side(Enum):
    LEFT = "left"
    RIGHT = "right"

    @property
    def sign(self) -> float:
        """+1 a la izquierda, -1 a la derecha (giro espejo)."""
        return 1.0 if self is Side.LEFT else -1.0


class AngleTracker:
    """
    Estado de giro de una paleta: en reposo (0) o desplegada (max_angle).

    `rotate()` no integra nada: salta de un extremo a otro en un solo paso y
    devuelve el delta aplicado (0.0 si ya estaba en el extremo pedido).
    """

    def __init__(self, max_angle: float = MAX_ANGLE, dead_zone: float = DEAD_ZONE):
        self.max_angle = float(max_angle)
        self.dead_zone = float(dead_zone)
        self.angle = 0.0

    @property
    def deployed(self) -> bool:
        return self.angle == self.max_angle and self.max_angle != 0.0

    def rotate(self, input_force: float) -> float:
        force = float(input_force) - self.dead_zone
        target = self.max_angle if force > 0.0 else 0.0
        if self.angle == target:
            return 0.0
        delta = target - self.angle
        self.angle = target
        return delta

    def reset(self) -> float:
        """Vuelve al reposo; devuelve el delta como `rotate`."""
        delta = -self.angle
        self.angle = 0.0
        return delta

    def __repr__(self) -> str:
        return f"AngleTracker(angle={self.angle:.4f}, max_angle={self.max_angle:.4f})"
