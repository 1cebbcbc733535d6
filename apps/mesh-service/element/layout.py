# apps/mesh-service/element/layout.py
"""
Disposición estática de las piezas de la mesa.

Cada pieza lleva su malla y la transformación (4x4) relativa a la mesa.
`assemble()` las junta en una escena trimesh para exportar (GLB/STL).
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import List, Optional

import numpy as np
import trimesh
from trimesh.transformations import rotation_matrix, translation_matrix

from shapes import Ellipse, Flipper, MeshElements, Origin, Table

from .flipper import Side

# ---------- constantes de la mesa ----------
RESOLUTION = 20
TABLE_INCLINATION = math.radians(6.5)
TABLE_HEIGHT = 8.0
TABLE_WIDTH = 5.0
WALL_HEIGHT = 0.3
BALL_RADIUS = 0.1
GUIDE_HEIGHT = TABLE_HEIGHT - 1.2
FLIPPER_BIG = 0.1
FLIPPER_SMALL = 0.05

# Ángulo de reposo de la paleta superior izquierda
UPPER_FLIPPER_ANGLE = -math.pi / 10.0


@dataclass
class Piece:
    name: str
    mesh: MeshElements
    transform: np.ndarray
    side: Optional[Side] = None


def rotx(angle: float) -> np.ndarray:
    return rotation_matrix(angle, (1, 0, 0))


def roty(angle: float) -> np.ndarray:
    return rotation_matrix(angle, (0, 1, 0))


def flipper_rotation(side: Side, angle: float) -> np.ndarray:
    """Giro en Y de una paleta; la derecha gira en sentido contrario."""
    return roty(side.sign * angle)


def placed(rotation: np.ndarray, translation) -> np.ndarray:
    """Primero gira y luego traslada (T @ R)."""
    return translation_matrix(translation) @ rotation


def _top_ellipse() -> Ellipse:
    return Ellipse(
        rectangle=True,
        center=Origin.MIN_X_MAX_Z,
        first_angle=0.0,
        second_angle=math.pi / 2.0,
        resolution=RESOLUTION,
        x=TABLE_WIDTH / 2.0,
        z=0.9,
        thickness=WALL_HEIGHT,
    )


def table_pieces() -> List[Piece]:
    pieces: List[Piece] = []

    # Mesa
    table = Table(TABLE_HEIGHT, TABLE_WIDTH, WALL_HEIGHT)
    pieces.append(Piece("table", table.build(), np.eye(4)))

    # Guía elíptica de salida de la bola (lámina)
    guide = Ellipse(
        rectangle=False,
        center=Origin.MAX_X_MIN_Z,
        first_angle=0.0,
        second_angle=math.pi / 4.0,
        resolution=RESOLUTION,
        x=2.5,
        z=0.9,
        thickness=WALL_HEIGHT,
    )
    lane_x = TABLE_WIDTH / 2.0 - (BALL_RADIUS + 0.05) * 2.0
    pieces.append(Piece(
        "elliptic_guide",
        guide.build(),
        placed(rotx(math.pi), (lane_x, 0.0, TABLE_HEIGHT / 2.0 - GUIDE_HEIGHT)),
    ))

    # Elipses de las esquinas superiores
    pieces.append(Piece(
        "top_left_ellipse",
        _top_ellipse().build(),
        placed(roty(math.pi), (0.0, 0.0, -TABLE_HEIGHT / 2.0)),
    ))
    pieces.append(Piece(
        "top_right_ellipse",
        _top_ellipse().build(),
        placed(rotx(math.pi), (0.0, 0.0, -TABLE_HEIGHT / 2.0)),
    ))

    # Elipse del lateral izquierdo
    middle = Ellipse(
        rectangle=True,
        center=Origin.MAX_X_MAX_Z,
        first_angle=math.pi / 2.0,
        second_angle=math.pi / 8.0,
        resolution=RESOLUTION,
        x=0.8,
        z=0.3,
        thickness=WALL_HEIGHT,
    )
    # Con el giro de -PI/2 en Y, la X de la mesa es la Z de la elipse
    middle_depth = middle.real_z()
    pieces.append(Piece(
        "middle_left_ellipse",
        middle.build(),
        placed(roty(-math.pi / 2.0), (-TABLE_WIDTH / 2.0, 0.0, 0.0)),
    ))

    # Paleta superior izquierda, pegada a la elipse anterior
    flipper = Flipper(0.7, FLIPPER_SMALL, FLIPPER_BIG, WALL_HEIGHT - 0.02, RESOLUTION)
    side = Side.LEFT
    angle = side.sign * UPPER_FLIPPER_ANGLE
    position = (
        -TABLE_WIDTH / 2.0 + FLIPPER_BIG + middle_depth - math.cos(angle) * FLIPPER_BIG + 0.02,
        0.0,
        math.sin(math.pi / 2.0) * FLIPPER_BIG + 0.02,
    )
    pieces.append(Piece(
        "upper_left_flipper",
        flipper.build(),
        placed(flipper_rotation(side, UPPER_FLIPPER_ANGLE), position),
        side=side,
    ))

    return pieces


def world_transform(piece: Piece, incline: bool = False) -> np.ndarray:
    if not incline:
        return piece.transform
    return rotx(TABLE_INCLINATION) @ piece.transform


def assemble(incline: bool = False) -> trimesh.Scene:
    """Escena con un nodo por pieza (nombre = nombre de la pieza)."""
    scene = trimesh.Scene()
    for piece in table_pieces():
        scene.add_geometry(
            piece.mesh.to_trimesh(),
            node_name=piece.name,
            geom_name=piece.name,
            transform=world_transform(piece, incline),
        )
    return scene


def assemble_mesh(incline: bool = False) -> trimesh.Trimesh:
    """Todas las piezas ya transformadas en una sola malla (para STL)."""
    meshes = []
    for piece in table_pieces():
        m = piece.mesh.to_trimesh()
        m.apply_transform(world_transform(piece, incline))
        meshes.append(m)
    return trimesh.util.concatenate(meshes)
