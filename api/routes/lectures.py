"""
Endpoint para convertir un documento en una clase narrada.

Este endpoint maneja:
- POST /api/process: recibe un archivo, devuelve guion + URL del MP3
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse

from lecture_ai_core.config import Settings
from lecture_ai_core.errors import InputError
from lecture_ai_core.uploads import store_upload

from ..dependencies import LectureServiceFactory, get_app_settings, get_lecture_service_factory
from ..models.requests import ErrorResponse, LectureResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["lectures"])


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": message})


@router.post(
    "/process",
    response_model=LectureResponse,
    responses={400: {"model": ErrorResponse}, 413: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def process_document(
    file: Optional[UploadFile] = File(None),
    settings: Settings = Depends(get_app_settings),
    service_factory: LectureServiceFactory = Depends(get_lecture_service_factory),
):
    """
    Genera una clase narrada a partir del documento subido.

    Flujo:
    ------
    1) Validar que haya archivo (400 si no).
    2) Construir el servicio (cliente de OpenAI + estrategia).
    3) Guardar el archivo en `uploads/` con nombre aleatorio (413 si se pasa del tamaño).
    4) Correr el pipeline en un thread (las llamadas a OpenAI son bloqueantes).
    5) Devolver `{success, downloadUrl, script}`.

    Desde el paso 4, el upload temporal y los recursos remotos se liberan
    dentro de `LectureService.process`, pase lo que pase.
    """
    if file is None or not file.filename:
        return _error(400, "No se subió ningún archivo")

    try:
        service = service_factory()
    except Exception as e:
        await file.close()
        logger.exception(f"No se pudo inicializar el servicio: {e}")
        return _error(500, str(e) or "Internal Server Error")

    try:
        # Cuerpos sin Content-Length (chunked) no pasan por el middleware de tamaño:
        # leer un byte de más detecta el exceso antes de escribir en uploads/
        data = await file.read(settings.max_upload_bytes + 1)
        document = store_upload(file.filename, data, settings.upload_dir, settings.max_upload_bytes)
    except InputError as e:
        logger.warning(f"Upload rechazado: {e}")
        return _error(e.status_code, str(e))
    except Exception as e:
        logger.exception(f"No se pudo guardar el upload '{file.filename}': {e}")
        return _error(500, str(e) or "Internal Server Error")
    finally:
        await file.close()

    try:
        result = await run_in_threadpool(service.process, document)
    except InputError as e:
        logger.warning(f"Documento rechazado: {e}")
        return _error(e.status_code, str(e))
    except Exception as e:
        logger.exception(f"Error procesando '{document.original_name}': {e}")
        return _error(500, str(e) or "Internal Server Error")

    return LectureResponse(success=True, downloadUrl=result.download_url, script=result.script)
