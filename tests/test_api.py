"""
Tests del endpoint HTTP con la estrategia real y un cliente de OpenAI falso.
"""

import dataclasses
from pathlib import Path

import pytest
from fastapi import Request
from fastapi.testclient import TestClient

from api.dependencies import get_lecture_service_factory
from api.main import create_app
from conftest import FAKE_AUDIO, fake_openai_client
from lecture_ai_core.engine import LectureService
from lecture_ai_core.generators import ExtractedTextLectureGenerator, MultimodalLectureGenerator


def _client_for(settings, service: LectureService) -> TestClient:
    app = create_app(settings)
    app.dependency_overrides[get_lecture_service_factory] = lambda: (lambda: service)
    return TestClient(app)


def _files_in(directory: str):
    path = Path(directory)
    return list(path.iterdir()) if path.exists() else []


@pytest.fixture
def openai_mock():
    return fake_openai_client()


@pytest.fixture
def http(settings, openai_mock):
    service = LectureService(settings, MultimodalLectureGenerator(openai_mock, settings))
    return _client_for(settings, service)


def test_happy_path_returns_script_and_servable_mp3(http, settings):
    response = http.post("/api/process", files={"file": ("clase.pdf", b"%PDF-1.4", "application/pdf")})

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["script"] == "שלום עולם"
    assert body["downloadUrl"].startswith("/downloads/") and body["downloadUrl"].endswith(".mp3")

    filename = body["downloadUrl"].rsplit("/", 1)[-1]
    assert (Path(settings.downloads_dir) / filename).read_bytes() == FAKE_AUDIO

    download = http.get(body["downloadUrl"])
    assert download.status_code == 200
    assert download.content == FAKE_AUDIO

    assert _files_in(settings.upload_dir) == []


@pytest.mark.parametrize(
    "kwargs",
    [
        {},
        {"data": {"nombre": "sin archivo"}},
        {"data": {"file": "no-es-un-archivo"}},
        {"files": {"otro_campo": ("clase.pdf", b"%PDF", "application/pdf")}},
    ],
)
def test_missing_file_is_400_without_side_effects(http, settings, openai_mock, kwargs):
    response = http.post("/api/process", **kwargs)

    assert response.status_code == 400
    assert response.json() == {"error": "No se subió ningún archivo"}
    assert _files_in(settings.upload_dir) == []
    assert _files_in(settings.downloads_dir) == []
    openai_mock.files.create.assert_not_called()


def test_empty_script_is_500_and_upload_is_deleted(settings):
    openai_mock = fake_openai_client(script=None)
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))

    response = http.post("/api/process", files={"file": ("clase.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 500
    assert response.json() == {"error": "OpenAI no devolvió un guion."}
    assert _files_in(settings.upload_dir) == []
    openai_mock.files.delete.assert_called_once_with("file-123")


def test_empty_audio_is_500_and_nothing_is_written(settings):
    openai_mock = fake_openai_client(audio=None)
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))

    response = http.post("/api/process", files={"file": ("clase.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 500
    assert "audio" in response.json()["error"]
    assert _files_in(settings.downloads_dir) == []
    assert _files_in(settings.upload_dir) == []


def test_provider_error_message_is_surfaced(settings, openai_mock):
    openai_mock.responses.create.side_effect = RuntimeError("Invalid file format")
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))

    response = http.post("/api/process", files={"file": ("clase.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 500
    assert response.json() == {"error": "Invalid file format"}


def test_oversized_upload_is_413(settings, openai_mock):
    settings = dataclasses.replace(settings, max_upload_bytes=10)
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))

    response = http.post("/api/process", files={"file": ("grande.pdf", b"x" * 11, "application/pdf")})

    assert response.status_code == 413
    assert "error" in response.json()
    assert _files_in(settings.upload_dir) == []
    openai_mock.files.create.assert_not_called()


def test_oversized_body_is_rejected_before_form_parsing(settings, openai_mock, monkeypatch):
    settings = dataclasses.replace(settings, max_upload_bytes=10)
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))
    parsed_forms = []
    original_form = Request.form

    def recording_form(self, *args, **kwargs):
        parsed_forms.append(self.url.path)
        return original_form(self, *args, **kwargs)

    monkeypatch.setattr(Request, "form", recording_form)

    # Chico pero apenas por encima del límite: se parsea y lo corta la ruta
    small = http.post("/api/process", files={"file": ("chico.pdf", b"x" * 11, "application/pdf")})
    assert small.status_code == 413
    assert parsed_forms == ["/api/process"]

    parsed_forms.clear()
    big = http.post("/api/process", files={"file": ("grande.pdf", b"x" * (5 * 1024 * 1024), "application/pdf")})

    assert big.status_code == 413
    assert big.json() == {"error": "El archivo supera el tamaño máximo de 10 bytes"}
    assert parsed_forms == []
    assert _files_in(settings.upload_dir) == []
    openai_mock.files.create.assert_not_called()


def test_unsupported_type_is_400_with_local_extraction(settings, openai_mock):
    http = _client_for(settings, LectureService(settings, ExtractedTextLectureGenerator(openai_mock, settings)))

    response = http.post("/api/process", files={"file": ("programa.exe", b"MZ", "application/octet-stream")})

    assert response.status_code == 400
    assert ".exe" in response.json()["error"]
    assert _files_in(settings.upload_dir) == []


def test_service_construction_error_uses_error_shape(settings):
    app = create_app(settings)

    def broken_factory():
        raise RuntimeError("OPENAI_API_KEY no está configurada en el .env")

    app.dependency_overrides[get_lecture_service_factory] = lambda: broken_factory
    http = TestClient(app)

    response = http.post("/api/process", files={"file": ("clase.pdf", b"%PDF", "application/pdf")})

    assert response.status_code == 500
    assert "OPENAI_API_KEY" in response.json()["error"]
    assert _files_in(settings.upload_dir) == []


def test_health_and_static_front_end(settings, openai_mock):
    public = Path(settings.public_dir)
    public.mkdir(parents=True)
    (public / "index.html").write_text("<h1>Lecture AI</h1>", encoding="utf-8")
    http = _client_for(settings, LectureService(settings, MultimodalLectureGenerator(openai_mock, settings)))

    assert http.get("/health").json()["status"] == "ok"
    assert "Lecture AI" in http.get("/").text
