from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, List

from openai import OpenAI

from .config import Settings
from .domain_models import RemoteFileHandle, RemoteSession
from .errors import GenerationError
from .prompts import build_text_lecture_request, get_lecture_instructions, get_lecture_request
from .response_parser import LecturePayload, extract_response_payload

logger = logging.getLogger(__name__)


def get_client(settings: Settings) -> OpenAI:
    if not settings.openai_api_key:
        raise RuntimeError("OPENAI_API_KEY no está configurada en el .env")
    return OpenAI(api_key=settings.openai_api_key)


# ============================================================
# Archivos
# ============================================================

def upload_file(client: OpenAI, path: str) -> RemoteFileHandle:
    """
    Sube un archivo local a OpenAI (purpose=assistants) y devuelve su handle.
    """
    file_path = Path(path)
    if not file_path.exists():
        raise FileNotFoundError(f"No se encontró el archivo subido: {file_path}")

    with file_path.open("rb") as fh:
        uploaded = client.files.create(file=fh, purpose="assistants")

    logger.info(f"Archivo subido a OpenAI: {uploaded.id}")
    return RemoteFileHandle(file_id=uploaded.id)


def delete_file(client: OpenAI, file_id: str) -> None:
    client.files.delete(file_id)
    logger.info(f"Archivo remoto borrado: {file_id}")


# ============================================================
# Guion
# ============================================================

def create_multimodal_lecture(
    client: OpenAI,
    settings: Settings,
    file_id: str,
) -> LecturePayload:
    """
    Una sola llamada a la Responses API que devuelve guion (texto) y narración
    (audio mp3 en base64), leyendo el archivo ya subido.

    Los parámetros de audio no forman parte de la firma tipada del SDK, por eso
    viajan en `extra_body`.
    """
    response = client.responses.create(
        model=settings.openai_model_text,
        instructions=get_lecture_instructions(settings.lecture_language),
        input=[
            {
                "role": "user",
                "content": [
                    {"type": "input_text", "text": get_lecture_request(settings.lecture_language)},
                    {"type": "input_file", "file_id": file_id},
                ],
            }
        ],
        extra_body={
            "modalities": ["text", "audio"],
            "audio": {"voice": settings.openai_tts_voice, "format": "mp3"},
        },
    )
    return extract_response_payload(getattr(response, "output", None))


def generate_script_from_text(client: OpenAI, settings: Settings, content: str) -> str:
    """
    Usa chat.completions para escribir el guion a partir de texto ya extraído.
    """
    completion = client.chat.completions.create(
        model=settings.openai_model_text,
        messages=[
            {"role": "system", "content": get_lecture_instructions(settings.lecture_language)},
            {
                "role": "user",
                "content": build_text_lecture_request(content, settings.lecture_language),
            },
        ],
        temperature=0.4,
    )

    if not completion.choices:
        return ""
    return (completion.choices[0].message.content or "").strip()


# ============================================================
# Assistant / thread / run
# ============================================================

def create_assistant_session(
    client: OpenAI,
    settings: Settings,
    file_id: str,
) -> RemoteSession:
    """
    Crea assistant (con file_search) y thread con el documento adjunto.

    Si falla la creación del thread, el assistant ya creado se borra acá mismo
    antes de relanzar: el llamador todavía no tiene su ID.
    """
    assistant = client.beta.assistants.create(
        model=settings.openai_model_text,
        name="Lecture writer",
        instructions=get_lecture_instructions(settings.lecture_language),
        tools=[{"type": "file_search"}],
    )
    try:
        thread = client.beta.threads.create(
            messages=[
                {
                    "role": "user",
                    "content": get_lecture_request(settings.lecture_language),
                    "attachments": [{"file_id": file_id, "tools": [{"type": "file_search"}]}],
                }
            ]
        )
    except Exception:
        _delete_quietly(lambda: client.beta.assistants.delete(assistant.id), f"assistant {assistant.id}")
        raise

    logger.info(f"Sesión creada: assistant={assistant.id} thread={thread.id}")
    return RemoteSession(assistant_id=assistant.id, thread_id=thread.id)


def start_run(client: OpenAI, session: RemoteSession) -> str:
    run = client.beta.threads.runs.create(
        thread_id=session.thread_id,
        assistant_id=session.assistant_id,
    )
    session.run_id = run.id
    return run.id


def retrieve_run(client: OpenAI, session: RemoteSession) -> Any:
    return client.beta.threads.runs.retrieve(run_id=session.run_id, thread_id=session.thread_id)


def read_assistant_reply(client: OpenAI, session: RemoteSession) -> str:
    """
    Devuelve el texto del mensaje más reciente del assistant en el thread.
    """
    messages = client.beta.threads.messages.list(thread_id=session.thread_id, order="desc")
    for message in messages.data:
        if message.role != "assistant":
            continue
        texts: List[str] = []
        for block in message.content:
            if getattr(block, "type", None) == "text":
                texts.append(block.text.value)
        return "".join(texts).strip()
    return ""


def delete_assistant(client: OpenAI, assistant_id: str) -> None:
    client.beta.assistants.delete(assistant_id)


def delete_thread(client: OpenAI, thread_id: str) -> None:
    client.beta.threads.delete(thread_id)


# ============================================================
# Narración
# ============================================================

def split_for_speech(script: str, max_chars: int) -> List[str]:
    """
    Parte el guion en tramos de hasta `max_chars` caracteres.

    Corta preferentemente en salto de línea, después en fin de oración y
    después en espacio; solo si no hay ninguno corta en seco.
    """
    if max_chars < 1:
        raise ValueError("max_chars debe ser >= 1")

    chunks: List[str] = []
    rest = script.strip()
    while len(rest) > max_chars:
        window = rest[: max_chars + 1]
        cut = window.rfind("\n")
        if cut <= 0:
            cut = max(window.rfind(p) for p in (". ", "! ", "? ")) + 1
        if cut <= 0:
            cut = window.rfind(" ")
        if cut <= 0:
            cut = max_chars
        chunk = rest[:cut].strip()
        if chunk:
            chunks.append(chunk)
        rest = rest[cut:].strip()
    if rest:
        chunks.append(rest)
    return chunks


def synthesize_speech(client: OpenAI, settings: Settings, script: str) -> bytes:
    """
    Text-to-speech del guion completo.

    El endpoint acepta hasta `max_speech_chars` caracteres por llamada: los
    guiones más largos se narran por tramos y los MP3 se concatenan en orden
    (los frames MP3 se pueden unir sin reencodear).
    """
    if not script.strip():
        raise GenerationError("No hay guion para narrar.")

    chunks = split_for_speech(script, settings.max_speech_chars)
    if len(chunks) > 1:
        logger.info(f"Guion de {len(script)} caracteres narrado en {len(chunks)} tramos")

    audio = bytearray()
    for chunk in chunks:
        response = client.audio.speech.create(
            model=settings.openai_model_tts,
            voice=settings.openai_tts_voice,
            input=chunk,
            response_format="mp3",
        )
        audio.extend(response.read())
    return bytes(audio)


def _delete_quietly(release, description: str) -> None:
    try:
        release()
    except Exception as e:
        logger.warning(f"No se pudo liberar {description}: {e}")
