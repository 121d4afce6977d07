"""
lecture_ai_core.errors
======================

Jerarquía de errores del pipeline de clases narradas.

La capa HTTP solo necesita distinguir dos familias:

- `InputError`: el problema está en lo que mandó el usuario (4xx).
- Todo lo demás (`ExtractionError`, `GenerationError`, errores del SDK de OpenAI):
  falla la corrida completa (500).

Los errores de limpieza NO forman parte de esta jerarquía: se loguean y listo
(ver `cleanup.CleanupStack`).
"""


class LectureError(Exception):
    """Base de todos los errores propios del pipeline."""


# ============================================================
# Errores de entrada (4xx)
# ============================================================

class InputError(LectureError):
    """El request no se puede procesar por culpa del insumo."""

    status_code = 400


class MissingFileError(InputError):
    """No llegó ningún archivo en el campo `file`."""


class UnsupportedFileTypeError(InputError):
    """La extensión del archivo no tiene decoder asociado."""

    def __init__(self, extension: str):
        self.extension = extension
        super().__init__(f"Tipo de archivo no soportado: {extension or '(sin extensión)'}")


def _format_size(num_bytes: int) -> str:
    """Ej: 10485760 → "10MB", 524288 → "0.5MB", 10 → "10 bytes"."""
    if num_bytes < 1024 * 1024 // 10:
        return f"{num_bytes} bytes"
    mb = num_bytes / (1024 * 1024)
    return f"{mb:.1f}".rstrip("0").rstrip(".") + "MB"


class UploadTooLargeError(InputError):
    """El archivo supera el tamaño máximo permitido."""

    status_code = 413

    def __init__(self, max_bytes: int):
        self.max_bytes = max_bytes
        super().__init__(f"El archivo supera el tamaño máximo de {_format_size(max_bytes)}")


# ============================================================
# Errores de procesamiento (500)
# ============================================================

class ExtractionError(LectureError):
    """Falló la extracción local de texto (decoder roto o documento vacío)."""


class GenerationError(LectureError):
    """El proveedor no devolvió un guion o audio utilizable."""


class RunFailedError(GenerationError):
    """Una corrida (run) asíncrona terminó en un estado terminal de error."""

    def __init__(self, status: str, message: str | None = None):
        self.status = status
        detail = f": {message}" if message else ""
        super().__init__(f"La corrida terminó con estado '{status}'{detail}")


class RunTimeoutError(GenerationError):
    """La corrida no llegó a un estado terminal dentro del presupuesto de intentos."""

    def __init__(self, attempts: int, last_status: str | None = None):
        self.attempts = attempts
        self.last_status = last_status
        super().__init__(
            f"La corrida no terminó después de {attempts} intentos "
            f"(último estado: {last_status or 'desconocido'})"
        )
