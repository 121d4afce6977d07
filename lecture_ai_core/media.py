from __future__ import annotations

import logging
import uuid
from pathlib import Path

from .errors import GenerationError

logger = logging.getLogger(__name__)


def _ensure_downloads_dir(downloads_dir: str | Path) -> Path:
    out = Path(downloads_dir)
    out.mkdir(parents=True, exist_ok=True)
    return out


def persist_audio(audio: bytes, downloads_dir: str | Path) -> Path:
    """
    Escribe el MP3 una única vez bajo `<downloads_dir>/<uuid>.mp3`.

    El archivo se crea en modo exclusivo ("xb"); si la escritura falla a mitad,
    se borra el parcial para no dejar artefactos corruptos servibles.
    """
    if not audio:
        raise GenerationError("OpenAI no devolvió datos de audio.")

    out_dir = _ensure_downloads_dir(downloads_dir)
    out_path = out_dir / f"{uuid.uuid4()}.mp3"

    try:
        with out_path.open("xb") as fh:
            fh.write(audio)
    except FileExistsError:
        # El archivo existente no es nuestro: no se borra
        raise
    except Exception:
        out_path.unlink(missing_ok=True)
        raise

    logger.info(f"Audio guardado en {out_path} ({len(audio)} bytes)")
    return out_path
