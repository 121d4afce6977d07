"""
API HTTP principal para lecture-ai-core.

Esta aplicación FastAPI expone el endpoint que usa el core interno
(lecture_ai_core.engine) para convertir un documento en una clase narrada,
y sirve los MP3 generados y el front-end estático.

Uso:
    uvicorn api.main:app --reload --port 3000
"""

import logging
import os
from pathlib import Path

from dotenv import load_dotenv
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from fastapi.staticfiles import StaticFiles

from lecture_ai_core.config import Settings, get_settings
from lecture_ai_core.errors import UploadTooLargeError

from .routes import lectures

# Cargar variables de entorno
load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()

# Configurar logging
log_level = getattr(logging, LOG_LEVEL, logging.INFO)
logging.basicConfig(
    level=log_level,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

API_VERSION = "0.1.0"

# Rutas que reciben uploads multipart
UPLOAD_PATHS = ("/api/process",)

# Margen para boundaries y headers del multipart sobre el tamaño del archivo
MULTIPART_OVERHEAD_BYTES = 64 * 1024


def create_app(settings: Settings | None = None) -> FastAPI:
    """
    Construye la app. Los tests pasan un `Settings` con directorios temporales.

    Los directorios se crean bajo demanda (al guardar uploads/MP3), por eso los
    mounts no validan que existan al arrancar.
    """
    settings = settings or get_settings()

    app = FastAPI(
        title="Lecture AI Core API",
        description="API para generar clases narradas a partir de documentos",
        version=API_VERSION,
    )
    app.state.settings = settings

    # CORS: por defecto abierto (el front-end se sirve desde el mismo origen)
    cors_origins_str = os.getenv("CORS_ORIGINS", "*")
    cors_origins = [origin.strip() for origin in cors_origins_str.split(",") if origin.strip()]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def reject_oversized_uploads(request: Request, call_next):
        """
        Corta uploads con Content-Length excesivo antes de parsear el multipart
        (Starlette escribe el cuerpo completo a disco al parsear el form).
        """
        if request.method == "POST" and request.url.path in UPLOAD_PATHS:
            content_length = request.headers.get("content-length", "")
            limit = settings.max_upload_bytes + MULTIPART_OVERHEAD_BYTES
            if content_length.isdigit() and int(content_length) > limit:
                error = UploadTooLargeError(settings.max_upload_bytes)
                logger.warning(f"Upload rechazado por Content-Length={content_length}: {error}")
                return JSONResponse(status_code=error.status_code, content={"error": str(error)})
        return await call_next(request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        """Errores de validación de FastAPI → 400 con la forma `{error}`."""
        fields = {str(err["loc"][-1]) for err in exc.errors() if err.get("loc")}
        message = "No se subió ningún archivo" if "file" in fields else "Solicitud inválida"
        logger.warning(f"Request inválido en {request.url.path}: {exc.errors()}")
        return JSONResponse(status_code=400, content={"error": message})

    # Registrar rutas
    app.include_router(lectures.router)

    @app.get("/health")
    async def health():
        """Health check."""
        return {
            "status": "ok",
            "service": "lecture-ai-core-api",
            "version": API_VERSION,
        }

    # Estáticos: MP3 generados y front-end (el mount en "/" va último)
    app.mount(
        "/downloads",
        StaticFiles(directory=settings.downloads_dir, check_dir=False),
        name="downloads",
    )
    if Path(settings.public_dir).is_dir():
        app.mount("/", StaticFiles(directory=settings.public_dir, html=True), name="public")
    else:
        logger.warning(f"Directorio público {settings.public_dir} no encontrado; front-end deshabilitado")

    logger.info(
        f"🚀 API lista (estrategia: {settings.lecture_strategy}, idioma: {settings.lecture_language})"
    )
    return app


app = create_app()
