from unittest.mock import MagicMock

import pytest

from lecture_ai_core.errors import ExtractionError, UnsupportedFileTypeError
from lecture_ai_core.ingest import SUPPORTED_EXT, cap_content, extract_text


def _stub_decoders(result="texto del documento"):
    return {ext: MagicMock(return_value=result) for ext in SUPPORTED_EXT}


@pytest.mark.parametrize("ext", sorted(SUPPORTED_EXT))
def test_supported_extension_uses_its_decoder(tmp_path, ext):
    path = tmp_path / f"doc{ext}"
    path.write_bytes(b"x")
    decoders = _stub_decoders()

    assert extract_text(path, decoders) == "texto del documento"
    decoders[ext].assert_called_once_with(path)


@pytest.mark.parametrize("ext", sorted(SUPPORTED_EXT))
def test_blank_decoder_output_is_an_extraction_error(tmp_path, ext):
    path = tmp_path / f"doc{ext}"
    path.write_bytes(b"x")

    with pytest.raises(ExtractionError):
        extract_text(path, _stub_decoders(result="  \n "))


def test_decoder_failure_is_wrapped(tmp_path):
    path = tmp_path / "roto.pdf"
    path.write_bytes(b"x")
    decoders = _stub_decoders()
    decoders[".pdf"].side_effect = ValueError("xref corrupta")

    with pytest.raises(ExtractionError) as exc_info:
        extract_text(path, decoders)

    assert "xref corrupta" in str(exc_info.value)
    assert isinstance(exc_info.value.__cause__, ValueError)


@pytest.mark.parametrize("name", ["virus.exe", "foto.png", "sin_extension"])
def test_unsupported_extension_never_calls_a_decoder(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"x")
    decoders = _stub_decoders()

    with pytest.raises(UnsupportedFileTypeError):
        extract_text(path, decoders)

    for decoder in decoders.values():
        decoder.assert_not_called()


def test_extension_match_is_case_insensitive(tmp_path):
    path = tmp_path / "NOTAS.TXT"
    path.write_text("hola", encoding="utf-8")

    assert extract_text(path) == "hola"


def test_real_text_and_markdown(tmp_path):
    md = tmp_path / "clase.md"
    md.write_text("# Título\n\nשלום", encoding="utf-8")

    assert "שלום" in extract_text(md)


def test_real_docx(tmp_path):
    from docx import Document

    path = tmp_path / "clase.docx"
    doc = Document()
    doc.add_paragraph("Primer párrafo")
    doc.add_paragraph("Segundo párrafo")
    doc.save(str(path))

    text = extract_text(path)
    assert "Primer párrafo" in text
    assert "Segundo párrafo" in text


def test_real_pdf(tmp_path):
    import fitz

    path = tmp_path / "clase.pdf"
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), "Hola mundo")
    doc.save(str(path))
    doc.close()

    assert "Hola mundo" in extract_text(path)


def test_real_xlsx_lists_every_sheet(tmp_path):
    import pandas as pd

    path = tmp_path / "datos.xlsx"
    with pd.ExcelWriter(path) as writer:
        pd.DataFrame({"tema": ["fotosíntesis"]}).to_excel(writer, sheet_name="Hoja1", index=False)
        pd.DataFrame({"tema": ["respiración"]}).to_excel(writer, sheet_name="Hoja2", index=False)

    text = extract_text(path)
    assert "# Hoja1" in text and "# Hoja2" in text
    assert "fotosíntesis" in text and "respiración" in text


def test_real_pptx(tmp_path):
    from pptx import Presentation

    path = tmp_path / "slides.pptx"
    prs = Presentation()
    slide = prs.slides.add_slide(prs.slide_layouts[1])
    slide.shapes.title.text = "Ciclo del agua"
    prs.save(str(path))

    text = extract_text(path)
    assert "--- Slide 1 ---" in text
    assert "Ciclo del agua" in text


def test_cap_content():
    short = cap_content("  corto  ", max_chars=100)
    assert short.text == "corto"
    assert not short.truncated

    long = cap_content("a" * 50, max_chars=10)
    assert long.text == "a" * 10
    assert long.truncated
