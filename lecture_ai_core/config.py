# lecture_ai_core/config.py
from dataclasses import dataclass
from functools import lru_cache
import os

from dotenv import load_dotenv

"""
lecture_ai_core.config
======================

Gestión centralizada de configuración de la aplicación.

Este módulo define:
- La estructura de configuración (`Settings`)
- El mecanismo para cargar variables desde entorno (.env)
- Un acceso único y cacheado a la configuración (`get_settings`)

Objetivos de diseño
-------------------
1. **Fuente única de verdad**
   La app obtiene configuración solo a través de `get_settings()`, y el
   orquestador la recibe explícitamente (no lee el entorno por su cuenta).

2. **Inmutabilidad práctica**
   `Settings` se crea una sola vez y luego se reutiliza (cache LRU).

3. **Facilidad de testing**
   Los tests construyen `Settings(...)` a mano con directorios temporales.

Notas importantes
-----------------
- `load_dotenv()` se ejecuta al importar el módulo.
- Si `OPENAI_API_KEY` no está presente, el error se lanza donde se construye
  el cliente (`llm_client.get_client`), no acá.
- Valores numéricos inválidos (ej. `PORT=abc`) fallan acá con `ValueError`.
"""

# Cargar variables de entorno desde .env (si existe)
load_dotenv()

STRATEGIES = ("multimodal", "assistant", "text")


@dataclass
class Settings:
    """
    Contenedor tipado de configuración.

    Attributes
    ----------
    openai_api_key:
        API key de OpenAI.
    openai_model_text:
        Modelo que genera el guion (y el audio, en la estrategia multimodal).
    openai_model_tts:
        Modelo de síntesis de voz para las estrategias `text` y `assistant`.
    openai_tts_voice:
        Voz usada para narrar.
    port:
        Puerto HTTP donde escucha la API.
    lecture_strategy:
        Cómo se obtiene el guion y el audio:
        - "multimodal": sube el archivo y pide texto + audio en una sola llamada.
        - "assistant": sube el archivo, crea assistant/thread/run y hace polling.
        - "text": extrae texto localmente, chat completion + TTS separado.
    lecture_language:
        Idioma de la clase generada ("he" o "en").
    upload_dir:
        Directorio temporal donde se guardan los archivos recibidos.
    downloads_dir:
        Directorio público donde quedan los MP3 generados.
    public_dir:
        Front-end estático servido en `/`.
    max_upload_bytes:
        Tamaño máximo aceptado para un upload.
    max_content_chars:
        Tope de caracteres de texto extraído que se envía al modelo.
    max_speech_chars:
        Tope de caracteres que acepta el endpoint de síntesis de voz.
    run_poll_max_attempts / run_poll_interval_s:
        Presupuesto de polling de la estrategia `assistant`.
    """

    # OpenAI
    openai_api_key: str
    openai_model_text: str = "gpt-4.1-mini"
    openai_model_tts: str = "gpt-4o-mini-tts"
    openai_tts_voice: str = "alloy"

    # Servidor
    port: int = 3000

    # Generación
    lecture_strategy: str = "multimodal"
    lecture_language: str = "he"

    # I/O
    upload_dir: str = "uploads"
    downloads_dir: str = "downloads"
    public_dir: str = "public"

    # Límites
    max_upload_bytes: int = 10 * 1024 * 1024  # 10MB
    max_content_chars: int = 15000
    max_speech_chars: int = 4096

    # Polling de runs
    run_poll_max_attempts: int = 60
    run_poll_interval_s: float = 1.0


@lru_cache
def get_settings() -> Settings:
    """
    Devuelve una instancia única y cacheada de `Settings`.

    Variables de entorno utilizadas
    -------------------------------
    - OPENAI_API_KEY
    - OPENAI_GPT_MODEL (default: "gpt-4.1-mini")
    - OPENAI_TTS_MODEL (default: "gpt-4o-mini-tts")
    - OPENAI_TTS_VOICE (default: "alloy")
    - PORT (default: 3000)
    - LECTURE_STRATEGY (default: "multimodal")
    - LECTURE_LANGUAGE (default: "he")
    - UPLOAD_DIR / DOWNLOADS_DIR / PUBLIC_DIR
    - MAX_UPLOAD_MB (default: 10)
    - MAX_CONTENT_CHARS (default: 15000)
    - RUN_POLL_MAX_ATTEMPTS (default: 60)
    - RUN_POLL_INTERVAL_S (default: 1.0)
    """
    return Settings(
        openai_api_key=os.getenv("OPENAI_API_KEY", ""),
        openai_model_text=os.getenv("OPENAI_GPT_MODEL", "gpt-4.1-mini"),
        openai_model_tts=os.getenv("OPENAI_TTS_MODEL", "gpt-4o-mini-tts"),
        openai_tts_voice=os.getenv("OPENAI_TTS_VOICE", "alloy"),
        port=int(os.getenv("PORT", "3000")),
        lecture_strategy=os.getenv("LECTURE_STRATEGY", "multimodal").strip().lower(),
        lecture_language=os.getenv("LECTURE_LANGUAGE", "he").strip().lower(),
        upload_dir=os.getenv("UPLOAD_DIR", "uploads"),
        downloads_dir=os.getenv("DOWNLOADS_DIR", "downloads"),
        public_dir=os.getenv("PUBLIC_DIR", "public"),
        max_upload_bytes=int(float(os.getenv("MAX_UPLOAD_MB", "10")) * 1024 * 1024),
        max_content_chars=int(os.getenv("MAX_CONTENT_CHARS", "15000")),
        run_poll_max_attempts=int(os.getenv("RUN_POLL_MAX_ATTEMPTS", "60")),
        run_poll_interval_s=float(os.getenv("RUN_POLL_INTERVAL_S", "1.0")),
    )
