"""
Abstracciones (Protocols) del motor de clases narradas.

Estos protocols definen las interfaces que cada estrategia de generación debe
implementar para que el orquestador (`engine.LectureService`) pueda trabajar
con cualquiera de ellas.
"""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Protocol

from ..domain_models import GeneratedLecture

if TYPE_CHECKING:
    from ..engine import LectureRun


class LectureGenerator(Protocol):
    """
    Interfaz para obtener guion + narración a partir de un documento subido.

    Cada estrategia debe:
    - Adquirir el contenido (extracción local o upload remoto)
    - Generar el guion en el idioma objetivo
    - Obtener el audio narrado
    - Avanzar `run` por las etapas correspondientes
    - Registrar en `run.cleanup` cada recurso remoto apenas lo crea
    """

    def generate(self, run: "LectureRun") -> GeneratedLecture:
        """
        Args:
            run: Corrida en curso (documento, etapa actual, pila de limpieza).

        Returns:
            `GeneratedLecture` con guion no vacío y audio no vacío.
        """
        ...


class TextExtractor(Protocol):
    """
    Interfaz de extracción local de texto.

    Recibe la ruta del archivo y devuelve texto plano, o lanza
    `UnsupportedFileTypeError` / `ExtractionError`.
    """

    def __call__(self, path: str | Path) -> str:
        ...
