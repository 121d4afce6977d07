from __future__ import annotations

"""
lecture_ai_core.engine
======================

Orquestador de alto nivel del pipeline de clases narradas.

Este módulo expone una **API interna** y estable para correr el flujo completo
(documento → guion → audio → MP3 persistido), sin preocuparse por:

- HTTP
- frameworks web
- detalles de CLI

La ruta HTTP (`api/routes/lectures.py`) y el CLI (`cli.py`) usan este módulo;
ninguno habla directo con `llm_client.py`.

Máquina de estados
------------------
    received → content_acquired → script_generated → audio_generated
             → persisted → responded

Cualquier excepción lleva a `failed` (absorbente). En ambos caminos se
liberan el upload local y los recursos remotos; el MP3 persistido se conserva.
"""

import logging
import uuid
from dataclasses import dataclass, field
from pathlib import Path
from typing import List

from .cleanup import CleanupStack, remove_local_file
from .config import Settings
from .core.abstractions import LectureGenerator
from .domain_models import (
    STAGE_ORDER,
    GeneratedLecture,
    LectureRunResult,
    LectureStage,
    UploadedDocument,
)
from .errors import GenerationError
from .media import persist_audio

logger = logging.getLogger(__name__)

DOWNLOADS_URL_PREFIX = "/downloads"


@dataclass
class LectureRun:
    """
    Estado de una corrida (un request).

    Attributes:
        document: Archivo subido.
        run_id: ID corto para correlacionar logs.
        stage: Etapa actual.
        history: Etapas recorridas, en orden.
        cleanup: Guards a liberar al terminar.
    """

    document: UploadedDocument
    run_id: str = field(default_factory=lambda: uuid.uuid4().hex[:8])
    stage: LectureStage = LectureStage.RECEIVED
    history: List[LectureStage] = field(default_factory=lambda: [LectureStage.RECEIVED])
    cleanup: CleanupStack = field(default_factory=CleanupStack)

    def advance(self, stage: LectureStage) -> None:
        """
        Avanza a `stage`. Solo se permite ir a la etapa siguiente o a `failed`;
        desde `failed` no se sale.
        """
        if self.stage is LectureStage.FAILED:
            raise RuntimeError(f"[{self.run_id}] la corrida ya falló; no puede pasar a {stage.value}")

        if stage is not LectureStage.FAILED:
            idx = STAGE_ORDER.index(self.stage) + 1
            expected = STAGE_ORDER[idx] if idx < len(STAGE_ORDER) else None
            if stage is not expected:
                raise RuntimeError(
                    f"[{self.run_id}] transición inválida {self.stage.value} → {stage.value}"
                )

        logger.info(f"[{self.run_id}] {self.stage.value} → {stage.value}")
        self.stage = stage
        self.history.append(stage)


class LectureService:
    """
    Orquesta una corrida completa con una estrategia de generación dada.
    """

    def __init__(self, settings: Settings, generator: LectureGenerator) -> None:
        self.settings = settings
        self.generator = generator

    def process(self, document: UploadedDocument) -> LectureRunResult:
        """
        Ejecuta el pipeline para un documento ya guardado en disco.

        Args:
            document: Upload persistido (se borra al terminar, pase lo que pase).

        Returns:
            `LectureRunResult` con guion y URL del MP3.

        Raises:
            Cualquier error de extracción/generación/proveedor, después de limpiar.
        """
        run = LectureRun(document=document)
        run.cleanup.push(
            f"upload local {document.path}",
            lambda: remove_local_file(document.path),
        )
        logger.info(
            f"[{run.run_id}] Procesando '{document.original_name}' "
            f"({document.size_bytes} bytes) con {type(self.generator).__name__}"
        )

        audio_path: Path | None = None
        try:
            lecture = self.generator.generate(run)
            self._validate(lecture)
            audio_path = persist_audio(lecture.audio, self.settings.downloads_dir)
            run.advance(LectureStage.PERSISTED)
        except Exception:
            # Sin éxito parcial: un MP3 ya escrito no se expone
            if audio_path is not None:
                remove_local_file(audio_path)
            if run.stage is not LectureStage.FAILED:
                run.advance(LectureStage.FAILED)
            run.cleanup.release_all()
            raise

        run.cleanup.release_all()
        run.advance(LectureStage.RESPONDED)

        filename = audio_path.name
        return LectureRunResult(
            script=lecture.script,
            filename=filename,
            audio_path=str(audio_path),
            download_url=f"{DOWNLOADS_URL_PREFIX}/{filename}",
        )

    @staticmethod
    def _validate(lecture: GeneratedLecture) -> None:
        if not lecture.script or not lecture.script.strip():
            raise GenerationError("OpenAI no devolvió un guion.")
        if not lecture.audio:
            raise GenerationError("OpenAI no devolvió datos de audio.")


def run_lecture_pipeline(
    *,
    settings: Settings,
    generator: LectureGenerator,
    document: UploadedDocument,
) -> LectureRunResult:
    """Atajo funcional sobre `LectureService(settings, generator).process(document)`."""
    return LectureService(settings, generator).process(document)
