"""
Dependencias de FastAPI.

Este módulo proporciona dependencias reutilizables para:
- Obtener la configuración de la app
- Construir el `LectureService` con la estrategia configurada

Los tests las reemplazan con `app.dependency_overrides`.
"""

from typing import Callable

from fastapi import Depends, Request

from lecture_ai_core.config import Settings
from lecture_ai_core.engine import LectureService
from lecture_ai_core.generators import build_generator
from lecture_ai_core.llm_client import get_client

LectureServiceFactory = Callable[[], LectureService]


def get_app_settings(request: Request) -> Settings:
    """Devuelve el `Settings` con el que se construyó la app."""
    return request.app.state.settings


def get_lecture_service_factory(
    settings: Settings = Depends(get_app_settings),
) -> LectureServiceFactory:
    """
    Devuelve una fábrica de `LectureService` (uno por request).

    Es una fábrica y no el servicio directo para que un error al construir el
    cliente de OpenAI (ej. falta la API key) lo maneje la ruta con la forma de
    error estándar, y después de validar que llegó un archivo.
    """

    def factory() -> LectureService:
        client = get_client(settings)
        return LectureService(settings, build_generator(settings, client))

    return factory
