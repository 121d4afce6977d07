"""
Modelos de request/response para la API.

El endpoint de procesamiento recibe multipart/form-data (FastAPI maneja el
archivo aparte), así que acá solo se definen las respuestas.
"""

from pydantic import BaseModel, Field


class LectureResponse(BaseModel):
    """
    Response de una corrida exitosa.

    Los nombres de campo son los que consume el front-end (`downloadUrl`).
    """

    success: bool = Field(default=True, description="Siempre true en respuestas 200")
    downloadUrl: str = Field(..., description="Ruta pública del MP3 generado")
    script: str = Field(..., description="Guion de la clase")


class ErrorResponse(BaseModel):
    """Forma única de todas las respuestas de error."""

    error: str = Field(..., description="Mensaje de error")
