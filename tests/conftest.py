"""
Fixtures compartidas: configuración con directorios temporales y un cliente
de OpenAI falso (MagicMock) con respuestas armadas a mano.
"""

import base64
from types import SimpleNamespace
from typing import Any, Dict, List, Optional
from unittest.mock import MagicMock

import pytest

from lecture_ai_core.config import Settings
from lecture_ai_core.uploads import store_upload

FAKE_AUDIO = b"ID3\x04\x00fake-mp3-bytes"


@pytest.fixture
def settings(tmp_path) -> Settings:
    """Settings aislado en tmp_path (uploads/, downloads/, sin polling real)."""
    return Settings(
        openai_api_key="sk-test",
        upload_dir=str(tmp_path / "uploads"),
        downloads_dir=str(tmp_path / "downloads"),
        public_dir=str(tmp_path / "public"),
        max_upload_bytes=1024 * 1024,
        run_poll_max_attempts=3,
        run_poll_interval_s=0.5,
    )


@pytest.fixture
def make_document(settings):
    """Guarda un upload en el directorio temporal y devuelve el `UploadedDocument`."""

    def _make(name: str = "apuntes.pdf", data: bytes = b"%PDF-1.4 fake"):
        return store_upload(name, data, settings.upload_dir, settings.max_upload_bytes)

    return _make


def responses_output(script: Optional[str], audio: Optional[bytes]) -> List[Dict[str, Any]]:
    """Arma un `response.output` como lo devuelve la Responses API."""
    content: List[Dict[str, Any]] = []
    if script is not None:
        content.append({"type": "output_text", "text": script})
    if audio is not None:
        content.append(
            {"type": "output_audio", "audio": {"data": base64.b64encode(audio).decode("ascii")}}
        )
    return [{"type": "message", "role": "assistant", "content": content}]


def fake_openai_client(
    script: Optional[str] = "שלום עולם",
    audio: Optional[bytes] = FAKE_AUDIO,
) -> MagicMock:
    """
    Cliente falso que cubre las tres estrategias:
    - files.create / files.delete
    - responses.create (guion + audio inline)
    - chat.completions.create (guion)
    - audio.speech.create (audio)
    - beta.assistants / threads / runs / messages
    """
    client = MagicMock()
    client.files.create.return_value = SimpleNamespace(id="file-123")

    client.responses.create.return_value = SimpleNamespace(output=responses_output(script, audio))

    client.chat.completions.create.return_value = SimpleNamespace(
        choices=[SimpleNamespace(message=SimpleNamespace(content=script))]
    )
    client.audio.speech.create.return_value = SimpleNamespace(read=lambda: audio or b"")

    client.beta.assistants.create.return_value = SimpleNamespace(id="asst-1")
    client.beta.threads.create.return_value = SimpleNamespace(id="thread-1")
    client.beta.threads.runs.create.return_value = SimpleNamespace(id="run-1", status="queued")
    client.beta.threads.runs.retrieve.return_value = SimpleNamespace(
        id="run-1", status="completed", last_error=None
    )
    client.beta.threads.messages.list.return_value = SimpleNamespace(
        data=[
            SimpleNamespace(
                role="assistant",
                content=[SimpleNamespace(type="text", text=SimpleNamespace(value=script or ""))],
            )
        ]
    )
    return client


@pytest.fixture
def openai_client():
    return fake_openai_client()
