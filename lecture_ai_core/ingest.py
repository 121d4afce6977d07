from __future__ import annotations

from pathlib import Path
from typing import Callable, Dict, List, Mapping

from .domain_models import ExtractedContent
from .errors import ExtractionError, UnsupportedFileTypeError

"""
lecture_ai_core.ingest
======================

Extracción local de texto (documento → texto plano).

Responsabilidad
----------------
Este módulo se encarga exclusivamente de:

- Elegir un decoder según la extensión del archivo
- Delegar la lectura a la librería de cada formato
- Normalizar errores a `ExtractionError` / `UnsupportedFileTypeError`
- Recortar el texto al tope de seguridad antes de mandarlo al modelo

NO hace:
---------
- Llamadas a LLM
- Limpieza de archivos temporales

Solo lo usa la estrategia "text"; las estrategias "multimodal" y "assistant"
suben el archivo crudo a OpenAI.

Decoders
--------
Cada decoder recibe una ruta y devuelve texto (o lanza). Las librerías se
importan dentro de cada decoder, así un formato roto no impide usar los demás.
"""

Decoder = Callable[[Path], str]


# ============================================================
# Decoders por formato
# ============================================================

def _read_pdf(path: Path) -> str:
    import fitz  # PyMuPDF

    parts: List[str] = []
    with fitz.open(str(path)) as doc:
        for page in doc:
            parts.append(page.get_text())
    return "\n".join(parts)


def _read_docx(path: Path) -> str:
    from docx import Document

    doc = Document(str(path))
    return "\n".join(p.text for p in doc.paragraphs)


def _read_spreadsheet(path: Path) -> str:
    """
    Una sección por hoja: encabezado con el nombre y filas separadas por tab.
    pandas elige el engine por extensión (openpyxl para .xlsx, xlrd para .xls).
    """
    import pandas as pd

    sheets = pd.read_excel(path, sheet_name=None, header=None, dtype=str)
    out: List[str] = []
    for sheet_name, df in sheets.items():
        out.append(f"# {sheet_name}")
        out.append(df.fillna("").to_csv(sep="\t", index=False, header=False))
    return "\n".join(out)


def _read_presentation(path: Path) -> str:
    from pptx import Presentation

    prs = Presentation(str(path))
    out: List[str] = []
    for idx, slide in enumerate(prs.slides, start=1):
        lines = [
            shape.text_frame.text
            for shape in slide.shapes
            if shape.has_text_frame and shape.text_frame.text.strip()
        ]
        if lines:
            out.append(f"--- Slide {idx} ---")
            out.extend(lines)
    return "\n".join(out)


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8", errors="replace")


DECODERS: Dict[str, Decoder] = {
    ".pdf": _read_pdf,
    ".docx": _read_docx,
    ".xlsx": _read_spreadsheet,
    ".xls": _read_spreadsheet,
    ".pptx": _read_presentation,
    ".ppt": _read_presentation,
    ".txt": _read_text,
    ".md": _read_text,
}

SUPPORTED_EXT = frozenset(DECODERS)


# ============================================================
# API pública
# ============================================================

def extract_text(path: str | Path, decoders: Mapping[str, Decoder] | None = None) -> str:
    """
    Extrae texto plano de un archivo según su extensión.

    Args:
        path: Ruta local del archivo.
        decoders: Tabla extensión → decoder. Por defecto `DECODERS`.

    Returns:
        Texto extraído (nunca vacío).

    Raises:
        UnsupportedFileTypeError: la extensión no tiene decoder (no se invoca ninguno).
        ExtractionError: el decoder falló o el documento no tiene texto.
    """
    p = Path(path)
    table = DECODERS if decoders is None else decoders
    ext = p.suffix.lower()

    decoder = table.get(ext)
    if decoder is None:
        raise UnsupportedFileTypeError(ext)

    try:
        text = decoder(p)
    except Exception as e:
        raise ExtractionError(f"No se pudo extraer texto de {p.name}: {e}") from e

    if not text or not text.strip():
        raise ExtractionError(f"El documento {p.name} no contiene texto extraíble")

    return text


def cap_content(text: str, max_chars: int) -> ExtractedContent:
    """Recorta el texto a `max_chars` caracteres (límite de tamaño del request)."""
    text = text.strip()
    if len(text) <= max_chars:
        return ExtractedContent(text=text, truncated=False)
    return ExtractedContent(text=text[:max_chars], truncated=True)
