# apps/mesh-service/asgi.py
"""
Entrada ASGI del servicio de mallas.

  - uvicorn asgi:app --port 8000
  - python asgi.py            (lee HOST / PORT del entorno)
"""
import os

import uvicorn

from app import app as fastapi_app

app = fastapi_app


def main() -> None:
    uvicorn.run(
        "asgi:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000") or 8000),
        log_level=os.getenv("LOG_LEVEL", "info"),
    )


if __name__ == "__main__":
    main()
