from __future__ import annotations

"""
lecture_ai_core.generators
==========================

Estrategias concretas de `LectureGenerator`.

- `MultimodalLectureGenerator` (default): sube el archivo y pide guion + audio
  en una sola llamada. Menos round-trips y un solo recurso remoto.
- `AssistantLectureGenerator`: sube el archivo, crea assistant/thread/run,
  hace polling acotado y después narra con TTS.
- `ExtractedTextLectureGenerator`: extrae texto localmente, chat completion
  y TTS separado. No deja nada del lado de OpenAI.

Todas avanzan la corrida hasta `audio_generated` y registran cada recurso
remoto en `run.cleanup` inmediatamente después de crearlo.
"""

import logging
import time
from typing import Callable

from openai import OpenAI

from . import llm_client
from .config import STRATEGIES, Settings
from .core.abstractions import LectureGenerator, TextExtractor
from .domain_models import GeneratedLecture, LectureStage
from .engine import LectureRun
from .errors import GenerationError
from .ingest import cap_content, extract_text
from .polling import RunPoller

logger = logging.getLogger(__name__)


def _require_script(script: str) -> str:
    if not script or not script.strip():
        raise GenerationError("OpenAI no devolvió un guion.")
    return script.strip()


def _require_audio(audio: bytes) -> bytes:
    if not audio:
        raise GenerationError("OpenAI no devolvió datos de audio.")
    return audio


class MultimodalLectureGenerator:
    def __init__(self, client: OpenAI, settings: Settings) -> None:
        self.client = client
        self.settings = settings

    def generate(self, run: LectureRun) -> GeneratedLecture:
        logger.info(f"[{run.run_id}] Subiendo archivo a OpenAI para análisis directo...")
        handle = llm_client.upload_file(self.client, run.document.path)
        run.cleanup.push(
            f"archivo remoto {handle.file_id}",
            lambda: llm_client.delete_file(self.client, handle.file_id),
        )
        run.advance(LectureStage.CONTENT_ACQUIRED)

        logger.info(f"[{run.run_id}] Generando clase (texto + audio) vía Responses API...")
        payload = llm_client.create_multimodal_lecture(self.client, self.settings, handle.file_id)

        script = _require_script(payload.script)
        run.advance(LectureStage.SCRIPT_GENERATED)

        audio = _require_audio(payload.audio_bytes())
        run.advance(LectureStage.AUDIO_GENERATED)

        return GeneratedLecture(script=script, audio=audio)


class AssistantLectureGenerator:
    def __init__(
        self,
        client: OpenAI,
        settings: Settings,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.client = client
        self.settings = settings
        self.sleep = sleep

    def generate(self, run: LectureRun) -> GeneratedLecture:
        client = self.client

        handle = llm_client.upload_file(client, run.document.path)
        run.cleanup.push(
            f"archivo remoto {handle.file_id}",
            lambda: llm_client.delete_file(client, handle.file_id),
        )
        run.advance(LectureStage.CONTENT_ACQUIRED)

        session = llm_client.create_assistant_session(client, self.settings, handle.file_id)
        run.cleanup.push(
            f"assistant {session.assistant_id}",
            lambda: llm_client.delete_assistant(client, session.assistant_id),
        )
        run.cleanup.push(
            f"thread {session.thread_id}",
            lambda: llm_client.delete_thread(client, session.thread_id),
        )

        llm_client.start_run(client, session)
        logger.info(f"[{run.run_id}] Run {session.run_id} iniciado, esperando resultado...")

        poller = RunPoller(
            fetch=lambda: llm_client.retrieve_run(client, session),
            max_attempts=self.settings.run_poll_max_attempts,
            interval_s=self.settings.run_poll_interval_s,
            sleep=self.sleep,
        )
        poller.wait()

        script = _require_script(llm_client.read_assistant_reply(client, session))
        run.advance(LectureStage.SCRIPT_GENERATED)

        audio = _require_audio(llm_client.synthesize_speech(client, self.settings, script))
        run.advance(LectureStage.AUDIO_GENERATED)

        return GeneratedLecture(script=script, audio=audio)


class ExtractedTextLectureGenerator:
    def __init__(
        self,
        client: OpenAI,
        settings: Settings,
        extractor: TextExtractor = extract_text,
    ) -> None:
        self.client = client
        self.settings = settings
        self.extractor = extractor

    def generate(self, run: LectureRun) -> GeneratedLecture:
        logger.info(f"[{run.run_id}] Extrayendo texto de {run.document.path}...")
        content = cap_content(self.extractor(run.document.path), self.settings.max_content_chars)
        if content.truncated:
            logger.info(f"[{run.run_id}] Texto recortado a {self.settings.max_content_chars} caracteres")
        run.advance(LectureStage.CONTENT_ACQUIRED)

        script = _require_script(
            llm_client.generate_script_from_text(self.client, self.settings, content.text)
        )
        run.advance(LectureStage.SCRIPT_GENERATED)

        audio = _require_audio(llm_client.synthesize_speech(self.client, self.settings, script))
        run.advance(LectureStage.AUDIO_GENERATED)

        return GeneratedLecture(script=script, audio=audio)


def build_generator(
    settings: Settings,
    client: OpenAI,
    sleep: Callable[[float], None] = time.sleep,
) -> LectureGenerator:
    """
    Devuelve la estrategia configurada en `settings.lecture_strategy`.

    Raises:
        ValueError: estrategia desconocida.
    """
    strategy = settings.lecture_strategy
    if strategy == "multimodal":
        return MultimodalLectureGenerator(client, settings)
    if strategy == "assistant":
        return AssistantLectureGenerator(client, settings, sleep=sleep)
    if strategy == "text":
        return ExtractedTextLectureGenerator(client, settings)
    raise ValueError(
        f"LECTURE_STRATEGY inválida: {strategy!r} (opciones: {', '.join(STRATEGIES)})"
    )
