from __future__ import annotations

from typing import Any, Dict, Optional


# ---------------------- Utilidades numéricas ----------------------

def num(x: Any, default: Optional[float] = None) -> Optional[float]:
    if x is None:
        return default
    if isinstance(x, bool):
        return float(x)
    if isinstance(x, (int, float)):
        return float(x)
    try:
        return float(str(x).replace(",", "."))
    except ValueError:
        return default


def num_int(x: Any, default: Optional[int] = None) -> Optional[int]:
    v = num(x)
    if v is None or v != v:  # NaN
        return default
    return int(round(v))


_TRUE = {"1", "true", "yes", "si", "sí", "on", "y"}
_FALSE = {"0", "false", "no", "off", "n", ""}


def flag(x: Any, default: bool = False) -> bool:
    """Booleano tolerante: acepta bool, números y cadenas tipo 'true'/'si'/'0'."""
    if x is None:
        return default
    if isinstance(x, bool):
        return x
    if isinstance(x, (int, float)):
        return x != 0
    s = str(x).strip().lower()
    if s in _TRUE:
        return True
    if s in _FALSE:
        return False
    return default


def param(params: Dict[str, Any], *keys: str, default: Any = None) -> Any:
    """
    Devuelve el primer valor presente entre `keys` (alias).
    Prueba cada clave tal cual, en minúsculas y con guiones en vez de '_'.
    """
    for k in keys:
        for cand in (k, k.lower(), k.replace("_", "-")):
            if cand in params and params[cand] is not None:
                return params[cand]
    return default
