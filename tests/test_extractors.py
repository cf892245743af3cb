import io
import unittest
import zipfile

import fitz

from errors import ExtractionError
from extractors import EXTRACTORS, detect_kind, extract_text
from models import DocumentKind

_DOCX_BODY = (
    '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
    '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
    "<w:body><w:p><w:r><w:t>Orario: 9-18</w:t></w:r></w:p></w:body></w:document>"
)


def _make_docx() -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        zf.writestr("word/document.xml", _DOCX_BODY)
    return buf.getvalue()


def _make_pdf(text: str) -> bytes:
    doc = fitz.open()
    page = doc.new_page()
    page.insert_text((72, 72), text)
    data = doc.tobytes()
    doc.close()
    return data


class TestDetectKind(unittest.TestCase):
    def test_suffix_dispatch(self):
        self.assertEqual(detect_kind("manuale.PDF"), DocumentKind.PDF)
        self.assertEqual(detect_kind("note.docx"), DocumentKind.DOCX)
        self.assertEqual(detect_kind("policy.txt"), DocumentKind.TEXT)
        self.assertEqual(detect_kind("README"), DocumentKind.TEXT)
        self.assertEqual(detect_kind("old.doc"), DocumentKind.TEXT)

    def test_every_kind_has_an_extractor(self):
        self.assertEqual(set(EXTRACTORS), set(DocumentKind))


class TestExtractText(unittest.TestCase):
    def test_plain_text_is_decoded_as_utf8(self):
        self.assertEqual(extract_text("policy.txt", "Ferie: 20 giorni è".encode("utf-8")), "Ferie: 20 giorni è")

    def test_invalid_utf8_is_replaced_not_raised(self):
        text = extract_text("bad.txt", b"ok \xff\xfe end")
        self.assertTrue(text.startswith("ok "))
        self.assertTrue(text.endswith(" end"))

    def test_pdf_pages_are_labelled(self):
        text = extract_text("manuale.pdf", _make_pdf("Ferie: 20 giorni"))
        self.assertTrue(text.startswith("Page 1:\n"))
        self.assertIn("Ferie: 20 giorni", text)

    def test_docx_text(self):
        self.assertIn("Orario: 9-18", extract_text("note.docx", _make_docx()))

    def test_corrupt_pdf_raises_extraction_error(self):
        with self.assertRaises(ExtractionError) as ctx:
            extract_text("rotto.pdf", b"not a pdf at all")
        self.assertEqual(ctx.exception.filename, "rotto.pdf")

    def test_corrupt_docx_raises_extraction_error(self):
        with self.assertRaises(ExtractionError):
            extract_text("rotto.docx", b"not a zip")


if __name__ == "__main__":
    unittest.main()
