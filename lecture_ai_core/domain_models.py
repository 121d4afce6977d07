from __future__ import annotations

"""
lecture_ai_core.domain_models
=============================

Modelos de dominio (dataclasses) usados a lo largo del pipeline.

Todas las entidades viven lo que dura un request:

- `UploadedDocument`: el archivo recibido y guardado en `uploads/`.
- `ExtractedContent`: texto plano extraído localmente (solo estrategia "text").
- `RemoteFileHandle` / `RemoteSession`: recursos creados en OpenAI que hay que
  borrar al terminar.
- `GeneratedLecture`: guion + audio en memoria.
- `LectureRunResult`: lo que se devuelve al cliente HTTP.

Este módulo NO habla con OpenAI ni hace IO.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


# ============================================================
# Estados de una corrida
# ============================================================

class LectureStage(str, Enum):
    """
    Etapas de una corrida, en orden.

    `FAILED` es absorbente: se puede llegar desde cualquier etapa y no se sale.
    """

    RECEIVED = "received"
    CONTENT_ACQUIRED = "content_acquired"
    SCRIPT_GENERATED = "script_generated"
    AUDIO_GENERATED = "audio_generated"
    PERSISTED = "persisted"
    RESPONDED = "responded"
    FAILED = "failed"


STAGE_ORDER: List[LectureStage] = [
    LectureStage.RECEIVED,
    LectureStage.CONTENT_ACQUIRED,
    LectureStage.SCRIPT_GENERATED,
    LectureStage.AUDIO_GENERATED,
    LectureStage.PERSISTED,
    LectureStage.RESPONDED,
]


# ============================================================
# Insumos
# ============================================================

@dataclass
class UploadedDocument:
    """
    Archivo subido por el usuario, ya persistido en el directorio temporal.

    Attributes:
        original_name:
            Nombre tal cual vino en el multipart (solo informativo).
        extension:
            Extensión en minúsculas, con punto (".pdf"). Puede ser "".
        size_bytes:
            Tamaño en bytes.
        path:
            Ruta local del archivo temporal (nombre aleatorio).
    """
    original_name: str
    extension: str
    size_bytes: int
    path: str


@dataclass
class ExtractedContent:
    """Texto plano extraído del documento, ya recortado al tope de seguridad."""
    text: str
    truncated: bool = False


# ============================================================
# Recursos remotos
# ============================================================

@dataclass
class RemoteFileHandle:
    """ID opaco de un archivo subido a OpenAI."""
    file_id: str


@dataclass
class RemoteSession:
    """IDs de assistant/thread/run creados para una corrida."""
    assistant_id: str
    thread_id: str
    run_id: Optional[str] = None


# ============================================================
# Resultados
# ============================================================

@dataclass
class GeneratedLecture:
    """Guion y audio devueltos por el proveedor."""
    script: str
    audio: bytes = field(repr=False)


@dataclass
class LectureRunResult:
    """
    Resultado final de una corrida exitosa.

    Attributes:
        script: Guion de la clase en el idioma objetivo.
        filename: Nombre del MP3 generado (`<uuid>.mp3`).
        audio_path: Ruta local del MP3.
        download_url: Ruta pública (`/downloads/<uuid>.mp3`).
    """
    script: str
    filename: str
    audio_path: str
    download_url: str
