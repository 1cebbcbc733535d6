# apps/mesh-service/supabase_client.py
"""
Almacenamiento de mallas generadas en Supabase Storage.

Las rutas dentro del bucket son '<slug-kebab>/pinball-output.<fmt>'; cada
nueva generación del mismo slug y formato sustituye a la anterior.
"""
from __future__ import annotations

import io
import os
import sys
from typing import Any, Dict, Optional

from supabase import create_client

# ---------------- Config ----------------
SUPABASE_URL = (os.getenv("SUPABASE_URL", "") or "").rstrip("/")
SUPABASE_SERVICE_KEY = os.getenv("SUPABASE_SERVICE_KEY", "") or os.getenv("SUPABASE_SERVICE_ROLE_KEY", "")
SUPABASE_BUCKET = os.getenv("SUPABASE_BUCKET", "pinball-meshes")

CONTENT_TYPES: Dict[str, str] = {
    "stl": "model/stl",
    "glb": "model/gltf-binary",
}

_client: Optional[Any] = None


def is_configured() -> bool:
    return bool(SUPABASE_URL and SUPABASE_SERVICE_KEY)


def object_path_for(slug: str, fmt: str) -> str:
    kebab = (slug or "").strip().lower().replace("_", "-")
    if not kebab:
        raise ValueError("slug is required")
    return f"{kebab}/pinball-output.{fmt}"


def _get() -> Any:
    global _client
    if _client is None:
        if not is_configured():
            raise RuntimeError("Supabase ENV vars missing (SUPABASE_URL / SERVICE_KEY)")
        cli = create_client(SUPABASE_URL, SUPABASE_SERVICE_KEY)
        # el endpoint de storage debe acabar en '/'
        for attr in ("url", "storage_url"):
            url = getattr(cli.storage, attr, None)
            if isinstance(url, str) and not url.endswith("/"):
                setattr(cli.storage, attr, url + "/")
        _client = cli
    return _client


def _exists(store: Any, path: str) -> bool:
    folder, name = path.rsplit("/", 1)
    listing = store.list(folder, {"limit": 100, "search": name}) or []
    return any((it or {}).get("name") == name for it in listing)


def upload_and_get_url(
    data: bytes | bytearray | io.BytesIO,
    object_path: str,
    *,
    content_type: Optional[str] = None,
    cache_control: str = "public, max-age=31536000, immutable",
    expires_in: int = 3600,
) -> Dict[str, Optional[str]]:
    """
    Sube la malla y devuelve { path, signed_url }.

    Si el objeto ya existe se borra antes: subir con 'upsert' manda una
    cabecera booleana que algunas versiones del SDK rechazan.
    """
    path = (object_path or "").lstrip("/")
    if not path or "/" not in path:
        raise ValueError("object_path must be '<slug>/<filename>'")
    if content_type is None:
        content_type = CONTENT_TYPES.get(path.rsplit(".", 1)[-1].lower(), "application/octet-stream")

    store = _get().storage.from_(SUPABASE_BUCKET)

    if _exists(store, path):
        store.remove([path])

    payload = data.getvalue() if hasattr(data, "getvalue") else bytes(data)  # type: ignore
    store.upload(path, payload, {"content-type": content_type, "cache-control": cache_control})

    signed = store.create_signed_url(path, expires_in)
    signed_url = None
    if isinstance(signed, dict):
        signed_url = signed.get("signedURL") or signed.get("signed_url")
    if not signed_url:
        print(f"[PINBALL][upload] sin URL firmada para '{path}'", file=sys.stderr)

    return {"path": path, "signed_url": signed_url}
