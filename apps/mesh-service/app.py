# apps/mesh-service/app.py
from __future__ import annotations

import os
import sys
import traceback
from typing import Any, Dict, List, Literal, Optional

import trimesh
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel, Field

from element import assemble, assemble_mesh, table_pieces, world_transform
from shapes import ALIASES, MODULES, REGISTRY, resolve
from supabase_client import CONTENT_TYPES, object_path_for, upload_and_get_url  # subida + URL firmada

# -------------------------- Config & App --------------------------

def _split_origins(s: Optional[str]) -> list[str]:
    if not s:
        return []
    return [x.strip() for x in s.split(",") if x.strip()]

CORS_ALLOW = os.getenv("CORS_ALLOW_ORIGINS", "")
origins = _split_origins(CORS_ALLOW) or ["*"]

UPLOAD_DEFAULT = os.getenv("PINBALL_UPLOAD", "0") == "1"

try:
    MAX_RESOLUTION = int(os.getenv("PINBALL_MAX_RESOLUTION", "") or 512)
except ValueError:
    MAX_RESOLUTION = 512

app = FastAPI(title="Pinball Mesh Service")
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# -------------------------- Schemas --------------------------

Fmt = Literal["stl", "glb", "json"]

class GenerateBody(BaseModel):
    slug: str                       # snake, kebab o alias
    params: Dict[str, Any] = Field(default_factory=dict)
    fmt: Fmt = "stl"
    upload: Optional[bool] = None   # None -> PINBALL_UPLOAD

class LayoutBody(BaseModel):
    fmt: Fmt = "glb"
    incline: bool = False           # aplica la inclinación de la mesa
    upload: Optional[bool] = None

# -------------------------- Helpers --------------------------

def _aliases_for(key: str) -> List[str]:
    return sorted(a for a, target in ALIASES.items() if target == key and a != key)

def _wants_upload(flag: Optional[bool]) -> bool:
    return UPLOAD_DEFAULT if flag is None else bool(flag)

def _surface_json(mesh) -> Dict[str, Any]:
    surface = mesh.into_surface()
    return {
        "positions": surface.positions.tolist(),
        "normals": surface.normals.tolist(),
        "indices": surface.indices.tolist(),
    }

def _check_descriptor(key: str, params: Dict[str, Any]):
    """Parsea los parámetros con el descriptor del módulo y aplica el contrato geométrico."""
    descriptor_cls = getattr(MODULES[key], "DESCRIPTOR", None)
    if descriptor_cls is None:
        return None
    try:
        descriptor = descriptor_cls.from_params(params)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=f"Model build error: {e}")

    problems = list(descriptor.problems())
    resolution = getattr(descriptor, "resolution", None)
    if resolution is not None and resolution > MAX_RESOLUTION:
        problems.append(f"resolution must be <= {MAX_RESOLUTION}")
    if problems:
        raise HTTPException(status_code=400, detail="Model build error: " + "; ".join(problems))
    return descriptor

def _deliver(data: bytes, fmt: str, key: str, upload: bool):
    filename = f"pinball-output.{fmt}"
    if not upload:
        return Response(
            content=data,
            media_type=CONTENT_TYPES[fmt],
            headers={"Content-Disposition": f'attachment; filename="{filename}"'},
        )

    object_path = object_path_for(key, fmt)
    try:
        out = upload_and_get_url(data, object_path, content_type=CONTENT_TYPES[fmt])
        return {"ok": True, "slug": key, "path": object_path, **(out or {})}
    except Exception as e:
        print(f"[PINBALL][upload] error subiendo '{object_path}':", e, file=sys.stderr)
        traceback.print_exc()
        raise HTTPException(status_code=500, detail=f"Upload error: {e}")

def _export(obj, fmt: str) -> bytes:
    try:
        return obj.export(file_type=fmt)
    except Exception:
        print(f"[PINBALL][{fmt.upper()}] error exportando", file=sys.stderr)
        traceback.print_exc()
        raise

# -------------------------- Endpoints --------------------------

@app.get("/health")
def health():
    return {
        "ok": True,
        "service": "pinball-mesh",
        "origins": origins,
        "loaded_models": sorted(list(REGISTRY.keys())),
        "aliases_count": len(ALIASES),
        "upload_default": UPLOAD_DEFAULT,
        "max_resolution": MAX_RESOLUTION,
    }

@app.get("/models")
def models():
    out: Dict[str, Any] = {}
    for key in sorted(REGISTRY.keys()):
        mod = MODULES[key]
        out[key] = {
            "defaults": dict(getattr(mod, "DEFAULTS", {}) or {}),
            "types": dict(getattr(mod, "TYPES", {}) or {}),
            "aliases": _aliases_for(key),
        }
    return {"models": out, "aliases_count": len(ALIASES)}

@app.post("/generate")
def generate(body: GenerateBody):
    raw_slug = (body.slug or "").strip()
    key = resolve(raw_slug)
    if not key:
        raise HTTPException(status_code=404, detail=f"Model '{raw_slug}' not found")

    params = dict(body.params or {})
    descriptor = _check_descriptor(key, params)

    if body.fmt == "json":
        if descriptor is None:
            raise HTTPException(status_code=400, detail=f"Model '{key}' has no surface output")
        try:
            mesh = descriptor.build()
        except Exception as e:
            raise HTTPException(status_code=400, detail=f"Model build error: {e}")
        return {"ok": True, "slug": key, **_surface_json(mesh)}

    builder = REGISTRY[key]
    try:
        result: trimesh.Trimesh = builder(params)
    except Exception as e:
        raise HTTPException(status_code=400, detail=f"Model build error: {e}")

    data = _export(result, body.fmt)
    return _deliver(data, body.fmt, key, _wants_upload(body.upload))

@app.post("/layout")
def layout(body: LayoutBody):
    if body.fmt == "json":
        pieces = []
        for piece in table_pieces():
            pieces.append({
                "name": piece.name,
                "side": piece.side.value if piece.side else None,
                "transform": world_transform(piece, body.incline).tolist(),
                **_surface_json(piece.mesh),
            })
        return {"ok": True, "incline": body.incline, "pieces": pieces}

    # GLB conserva un nodo por pieza; STL necesita una sola malla
    if body.fmt == "glb":
        data = _export(assemble(incline=body.incline), "glb")
    else:
        data = _export(assemble_mesh(incline=body.incline), "stl")
    return _deliver(data, body.fmt, "layout", _wants_upload(body.upload))
