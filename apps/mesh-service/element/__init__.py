# apps/mesh-service/element/__init__.py
from .flipper import AngleTracker, Side
from .layout import Piece, assemble, assemble_mesh, table_pieces, world_transform

__all__ = ["AngleTracker", "Side", "Piece", "assemble", "assemble_mesh", "table_pieces", "world_transform"]
