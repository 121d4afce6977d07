from __future__ import annotations

"""
Recepción de uploads: valida y guarda el archivo recibido en `uploads/`.
"""

import logging
import time
import uuid
from pathlib import Path

from .domain_models import UploadedDocument
from .errors import MissingFileError, UploadTooLargeError

logger = logging.getLogger(__name__)


def build_upload_name(original_name: str) -> str:
    """
    Nombre resistente a colisiones que conserva la extensión original.

    Ej: "Clase 3.PDF" → "1718900000000-3f2a...9c.pdf"
    """
    ext = Path(original_name).suffix.lower()
    return f"{int(time.time() * 1000)}-{uuid.uuid4().hex}{ext}"


def store_upload(
    original_name: str | None,
    data: bytes,
    upload_dir: str | Path,
    max_bytes: int,
) -> UploadedDocument:
    """
    Guarda el contenido de un upload en `upload_dir`.

    Reglas:
    -------
    - Sin nombre de archivo → `MissingFileError` (no se escribe nada).
    - Más de `max_bytes` → `UploadTooLargeError` (no se escribe nada).

    Returns:
        `UploadedDocument` apuntando al archivo temporal.
    """
    if not original_name:
        raise MissingFileError("No se subió ningún archivo")

    if len(data) > max_bytes:
        raise UploadTooLargeError(max_bytes)

    target_dir = Path(upload_dir)
    target_dir.mkdir(parents=True, exist_ok=True)

    temp_path = target_dir / build_upload_name(original_name)
    temp_path.write_bytes(data)

    logger.info(f"Upload '{original_name}' guardado en {temp_path} ({len(data)} bytes)")

    return UploadedDocument(
        original_name=original_name,
        extension=temp_path.suffix,
        size_bytes=len(data),
        path=str(temp_path),
    )
