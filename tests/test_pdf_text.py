import io
import unittest
from unittest.mock import patch

import httpx
from pypdf import PdfWriter

from ingestion.pdf_text import (
    DocumentFetchError,
    extract_pdf_text,
    fetch_pdf_text,
    normalize_pdf_text,
)


def _blank_pdf() -> bytes:
    writer = PdfWriter()
    writer.add_blank_page(width=200, height=200)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


def _client(handler) -> httpx.AsyncClient:
    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


class TestNormalizePdfText(unittest.TestCase):
    def test_collapses_horizontal_whitespace(self):
        self.assertEqual(normalize_pdf_text("a  \t b"), "a b")

    def test_strips_blank_line_noise(self):
        self.assertEqual(normalize_pdf_text("  Q1.   What  \n\n  \nis this?  \n"), "Q1. What\nis this?")

    def test_empty(self):
        self.assertEqual(normalize_pdf_text(""), "")
        self.assertEqual(normalize_pdf_text(None), "")


class TestExtractPdfText(unittest.TestCase):
    def test_blank_pdf_has_no_text(self):
        self.assertEqual(extract_pdf_text(_blank_pdf()), "")

    def test_garbage_bytes_raise(self):
        with self.assertRaises(DocumentFetchError):
            extract_pdf_text(b"<html>not a pdf</html>")


class TestFetchPdfText(unittest.IsolatedAsyncioTestCase):
    async def test_non_success_status_raises(self):
        async with _client(lambda request: httpx.Response(404)) as client:
            with self.assertRaises(DocumentFetchError) as ctx:
                await fetch_pdf_text("https://example.org/missing.pdf", client=client)
        self.assertIn("https://example.org/missing.pdf", str(ctx.exception))

    async def test_transport_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        async with _client(handler) as client:
            with self.assertRaises(DocumentFetchError):
                await fetch_pdf_text("https://example.org/a.pdf", client=client)

    async def test_unparsable_body_raises(self):
        async with _client(lambda request: httpx.Response(200, content=b"oops")) as client:
            with self.assertRaises(DocumentFetchError):
                await fetch_pdf_text("https://example.org/a.pdf", client=client)

    async def test_success_returns_text(self):
        async with _client(lambda request: httpx.Response(200, content=_blank_pdf())) as client:
            self.assertEqual(await fetch_pdf_text("https://example.org/a.pdf", client=client), "")

    async def test_extracted_text_is_normalized_and_truncated(self):
        raw = "Q1.   Which  \t river \n\n\nflows  east.  " * 500
        with patch("ingestion.pdf_text.extract_pdf_text", return_value=raw) as extract:
            async with _client(lambda request: httpx.Response(200, content=b"%PDF-stub")) as client:
                text = await fetch_pdf_text("https://example.org/a.pdf", max_chars=100, client=client)

        extract.assert_called_once_with(b"%PDF-stub")
        self.assertEqual(len(text), 100)
        self.assertTrue(text.startswith("Q1. Which river\nflows east. Q1. Which river\nflows"))
        self.assertNotIn("  ", text)
        self.assertNotIn("\t", text)
        self.assertNotIn("\n\n", text)

    async def test_short_text_is_returned_whole(self):
        with patch("ingestion.pdf_text.extract_pdf_text", return_value="  Q1.  Name the   capital.  "):
            async with _client(lambda request: httpx.Response(200, content=b"%PDF-stub")) as client:
                text = await fetch_pdf_text("https://example.org/a.pdf", max_chars=100, client=client)
        self.assertEqual(text, "Q1. Name the capital.")


if __name__ == "__main__":
    unittest.main()
