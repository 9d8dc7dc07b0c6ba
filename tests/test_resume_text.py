from __future__ import annotations

import io
import zipfile
from pathlib import Path

import pytest
from pypdf import PdfWriter

from jobdash.resume_text import extract_bytes, extract_text

_DOCX_XML = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body>"
    "<w:p><w:r><w:t>Jane </w:t></w:r><w:r><w:t>Doe</w:t></w:r></w:p>"
    "<w:p></w:p>"
    "<w:p><w:r><w:t>Go, SQL</w:t></w:r></w:p>"
    "</w:body></w:document>"
)


def test_plain_text_file(tmp_path: Path):
    path = tmp_path / "resume.txt"
    path.write_text("Jane Doe\nGo developer\n", encoding="utf-8")
    assert extract_text(path) == "Jane Doe\nGo developer\n"


def test_docx_paragraphs():
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("word/document.xml", _DOCX_XML)
    assert extract_bytes("Resume.DOCX", buf.getvalue()) == "Jane Doe\nGo, SQL"


def test_blank_pdf_has_no_text():
    writer = PdfWriter()
    writer.add_blank_page(width=612, height=792)
    buf = io.BytesIO()
    writer.write(buf)
    assert extract_bytes("resume.pdf", buf.getvalue()).strip() == ""


def test_unsupported_format():
    with pytest.raises(ValueError):
        extract_bytes("resume.rtf", b"{\\rtf1}")
