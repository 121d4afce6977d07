from __future__ import annotations

"""
lecture_ai_core.response_parser
===============================

Parsing de la salida de la Responses API (árbol heterogéneo → guion + audio).

La salida es una lista de items que pueden anidar otros items en `content`
(ej. un `message` con partes `output_text` y `output_audio`). Se procesa en dos
pasos:

1) `parse_parts(node)`: convierte el árbol crudo (dicts u objetos pydantic del
   SDK) en una unión tipada de partes:
   - `TextPart`      → texto del guion
   - `AudioPart`     → audio en base64
   - `ContainerPart` → nodo con hijos

2) `collect_payload(parts)`: un único visitor recursivo que acumula el guion
   (concatenado, en orden) y el audio (gana el último encontrado).
"""

import base64
import binascii
from dataclasses import dataclass
from typing import Any, Iterable, List, Optional, Tuple, Union

from .errors import GenerationError

TEXT_TYPES = {"output_text", "text"}
AUDIO_TYPES = {"output_audio", "audio"}


# ============================================================
# Unión de partes
# ============================================================

@dataclass(frozen=True)
class TextPart:
    text: str


@dataclass(frozen=True)
class AudioPart:
    data: str  # base64


@dataclass(frozen=True)
class ContainerPart:
    children: Tuple["ResponsePart", ...]


ResponsePart = Union[TextPart, AudioPart, ContainerPart]


@dataclass
class LecturePayload:
    """Resultado acumulado del visitor."""
    script: str
    audio_base64: Optional[str]

    def audio_bytes(self) -> bytes:
        """Decodifica el audio. Lanza `GenerationError` si falta o es inválido."""
        if not self.audio_base64:
            raise GenerationError("OpenAI no devolvió datos de audio.")
        try:
            return base64.b64decode("".join(self.audio_base64.split()), validate=True)
        except (binascii.Error, ValueError) as e:
            raise GenerationError(f"El audio devuelto no es base64 válido: {e}") from e


# ============================================================
# Árbol crudo → partes
# ============================================================

def _as_dict(node: Any) -> Any:
    """Normaliza objetos del SDK (pydantic) a dict; deja el resto igual."""
    if hasattr(node, "model_dump"):
        return node.model_dump()
    return node


def parse_parts(node: Any) -> List[ResponsePart]:
    """
    Convierte un nodo (o lista de nodos) en partes tipadas.

    Un mismo nodo puede aportar una parte hoja (texto o audio) y, además,
    un `ContainerPart` si trae `content`.
    """
    node = _as_dict(node)
    if node is None:
        return []
    if isinstance(node, (list, tuple)):
        out: List[ResponsePart] = []
        for child in node:
            out.extend(parse_parts(child))
        return out
    if not isinstance(node, dict):
        return []

    parts: List[ResponsePart] = []
    node_type = node.get("type")

    if node_type in TEXT_TYPES and node.get("text"):
        parts.append(TextPart(text=str(node["text"])))
    elif node_type in AUDIO_TYPES:
        audio = _as_dict(node.get("audio")) or {}
        if isinstance(audio, dict) and audio.get("data"):
            parts.append(AudioPart(data=str(audio["data"])))

    content = node.get("content")
    if content:
        parts.append(ContainerPart(children=tuple(parse_parts(content))))

    return parts


# ============================================================
# Visitor
# ============================================================

def collect_payload(parts: Iterable[ResponsePart]) -> LecturePayload:
    """Recorre las partes en profundidad y acumula (guion, audio)."""
    texts: List[str] = []
    audio: List[Optional[str]] = [None]

    def visit(part: ResponsePart) -> None:
        if isinstance(part, TextPart):
            texts.append(part.text)
        elif isinstance(part, AudioPart):
            audio[0] = part.data
        elif isinstance(part, ContainerPart):
            for child in part.children:
                visit(child)

    for p in parts:
        visit(p)

    return LecturePayload(script="".join(texts).strip(), audio_base64=audio[0])


def extract_response_payload(output: Any) -> LecturePayload:
    """Atajo: `response.output` → `LecturePayload`."""
    return collect_payload(parse_parts(output))
