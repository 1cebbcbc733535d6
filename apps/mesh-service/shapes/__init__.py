"""
Registro de formas de la mesa.

Cada módulo `shapes/<nombre>.py` que no sea de apoyo aporta un builder
`params -> trimesh.Trimesh`, elegido por este orden:

1) `BUILDER` (callable)
2) `BUILD["make"]` o `BUILD["build"]`
3) `make_model` / `make`

El nombre del módulo queda como clave (snake) y se le añaden alias: su forma
kebab, `NAME` y cada entrada de `SLUGS` (en snake y kebab). Un alias nunca
pisa a otro ya registrado.

`MODULES` guarda el módulo de cada clave para consultar `DEFAULTS`, `TYPES` y
`DESCRIPTOR`.
"""
from __future__ import annotations

import importlib
import pkgutil
import sys
import traceback
from types import ModuleType
from typing import Callable, Dict, Iterator, Optional

REGISTRY: Dict[str, Callable] = {}
ALIASES: Dict[str, str] = {}
MODULES: Dict[str, ModuleType] = {}

# Módulos de apoyo: no son formas
_SUPPORT = frozenset({"_helpers", "geom", "mesh"})


def _spellings(slug: str) -> Iterator[str]:
    s = slug.strip().lower()
    if s:
        yield s
        yield s.replace("_", "-")
        yield s.replace("-", "_")


def _builder_of(mod: ModuleType) -> Optional[Callable]:
    candidates = [getattr(mod, "BUILDER", None)]
    build = getattr(mod, "BUILD", None)
    if isinstance(build, dict):
        candidates += [build.get("make"), build.get("build")]
    candidates += [getattr(mod, "make_model", None), getattr(mod, "make", None)]
    return next((c for c in candidates if callable(c)), None)


def _declared_slugs(mod: ModuleType) -> Iterator[str]:
    name = getattr(mod, "NAME", None)
    if isinstance(name, str):
        yield name
    for s in getattr(mod, "SLUGS", None) or ():
        if isinstance(s, str):
            yield s


def _discover() -> None:
    for info in pkgutil.iter_modules(__path__):
        if info.ispkg or info.name in _SUPPORT:
            continue
        try:
            mod = importlib.import_module(f"{__name__}.{info.name}")
        except Exception:
            # una forma rota no tumba el registro
            print(f"[PINBALL][registry] ERROR importando shapes.{info.name}", file=sys.stderr)
            traceback.print_exc()
            continue

        fn = _builder_of(mod)
        if fn is None:
            print(f"[PINBALL][registry] shapes.{info.name} no expone builder", file=sys.stderr)
            continue

        key = info.name.lower()
        REGISTRY[key] = fn
        MODULES[key] = mod
        for slug in (key, *_declared_slugs(mod)):
            for alias in _spellings(slug):
                ALIASES.setdefault(alias, key)


def resolve(slug_or_name: str) -> Optional[str]:
    """Slug (snake, kebab o alias) -> clave del registro, o None."""
    for alias in _spellings(slug_or_name or ""):
        key = ALIASES.get(alias)
        if key in REGISTRY:
            return key
    return None


def get_builder(slug_or_name: str) -> Optional[Callable]:
    key = resolve(slug_or_name)
    return REGISTRY[key] if key else None


_discover()

from .ellipse import Ellipse, Origin, OutOfRangeError  # noqa: E402
from .flipper import Flipper  # noqa: E402
from .mesh import MeshElements, Surface  # noqa: E402
from .table import Table  # noqa: E402

__all__ = [
    "REGISTRY", "ALIASES", "MODULES", "resolve", "get_builder",
    "MeshElements", "Surface", "Ellipse", "Origin", "OutOfRangeError", "Flipper", "Table",
]
