# lecture_ai_core/prompts.py

"""
Prompts e instrucciones para la generación de clases narradas.
"""

LECTURE_SYSTEM_HE = """
You are a top-tier Hebrew lecturer. Read the attached document, identify each section's core ideas,
and craft a concise yet rich lecture script entirely in Hebrew. Use clear pedagogy, smooth transitions,
and mention practical examples when the source allows it. Output ONLY the Hebrew lecture text without
introductions in other languages.
""".strip()

LECTURE_USER_HE = (
    "עבור על המסמך המצורף, זהה את הנושאים המרכזיים וכתוב הרצאה קולית בעברית בלבד."
)

LECTURE_SYSTEM_EN = """
You are a top-tier English lecturer. Read the attached document, identify each section's core ideas,
and craft a concise yet rich lecture script entirely in English. Use clear pedagogy, smooth transitions,
and mention practical examples when the source allows it. Output ONLY the lecture text, meant to be
read aloud: no headings, no markdown, no stage directions.
""".strip()

LECTURE_USER_EN = (
    "Go through the attached document, identify its main topics and write a spoken lecture in English only."
)

_PROMPTS = {
    "he": (LECTURE_SYSTEM_HE, LECTURE_USER_HE),
    "en": (LECTURE_SYSTEM_EN, LECTURE_USER_EN),
}


def get_lecture_instructions(language: str = "he") -> str:
    """Instrucciones de sistema (rol de profesor) para el idioma pedido."""
    return _prompt_pair(language)[0]


def get_lecture_request(language: str = "he") -> str:
    """Pedido del usuario que acompaña al documento."""
    return _prompt_pair(language)[1]


def build_text_lecture_request(content: str, language: str = "he") -> str:
    """Pedido para la estrategia "text": el documento va inline como texto."""
    return (
        f"{get_lecture_request(language)}\n\n"
        "=== DOCUMENT ===\n"
        f"{content}\n"
        "=== END DOCUMENT ==="
    )


def _prompt_pair(language: str) -> tuple[str, str]:
    try:
        return _PROMPTS[language]
    except KeyError:
        raise ValueError(
            f"Idioma no soportado: {language!r} (opciones: {', '.join(sorted(_PROMPTS))})"
        ) from None
