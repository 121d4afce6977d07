"""
lecture_ai_core.cli
===================

Punto de entrada mínimo para correr el pipeline sobre un archivo local, sin
levantar la API:

1) Copiar el documento a `uploads/` (igual que un upload HTTP).
2) Generar guion + audio con la estrategia configurada.
3) Guardar el MP3 en `downloads/` e imprimir el guion.

Pensado para:
- demo local rápida,
- smoke tests manuales contra OpenAI.

Uso:
    lecture-ai apuntes.pdf --strategy text --language en
"""

from __future__ import annotations

import argparse
import dataclasses
import sys
from pathlib import Path
from typing import List, Optional

from .config import STRATEGIES, get_settings
from .engine import run_lecture_pipeline
from .generators import build_generator
from .llm_client import get_client
from .uploads import store_upload


def _parse_args(argv: Optional[List[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Genera una clase narrada a partir de un documento.")
    parser.add_argument("file", type=Path, help="Documento de entrada (pdf, docx, pptx, xlsx, txt...)")
    parser.add_argument("--strategy", choices=STRATEGIES, default=None, help="Estrategia de generación")
    parser.add_argument("--language", default=None, help="Idioma de la clase (he, en)")
    return parser.parse_args(argv)


def main(argv: Optional[List[str]] = None) -> int:
    """
    Ejecuta una corrida completa del motor sobre un archivo local.

    Returns
    -------
    int
        0 si se generó la clase, 1 si hubo error.
    """
    args = _parse_args(argv)
    settings = get_settings()

    overrides = {}
    if args.strategy:
        overrides["lecture_strategy"] = args.strategy
    if args.language:
        overrides["lecture_language"] = args.language
    if overrides:
        settings = dataclasses.replace(settings, **overrides)

    if not args.file.is_file():
        print(f"❌ No existe el archivo: {args.file}", file=sys.stderr)
        return 1

    try:
        generator = build_generator(settings, get_client(settings))
        document = store_upload(
            args.file.name,
            args.file.read_bytes(),
            settings.upload_dir,
            settings.max_upload_bytes,
        )
        result = run_lecture_pipeline(settings=settings, generator=generator, document=document)
    except Exception as e:
        print(f"❌ No se pudo generar la clase: {e}", file=sys.stderr)
        return 1

    print(result.script)
    print()
    print(f"✅ Audio generado en: {Path(result.audio_path).resolve()}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
