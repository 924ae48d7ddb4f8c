import unittest

import httpx

from crawlsearch.errors import ExtractionServiceError
from crawlsearch.infra.extraction.tika import TikaClient


class TikaClientTests(unittest.IsolatedAsyncioTestCase):
    async def test_puts_raw_bytes_and_returns_text(self):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["method"] = request.method
            seen["url"] = str(request.url)
            seen["content_type"] = request.headers.get("content-type")
            seen["accept"] = request.headers.get("accept")
            seen["body"] = request.content
            return httpx.Response(200, text="extracted text", request=request)

        tika = TikaClient("http://tika:9998/", transport=httpx.MockTransport(handler))
        try:
            text = await tika.extract(b"%PDF-1.4 raw")
        finally:
            await tika.stop()
        self.assertEqual(text, "extracted text")
        self.assertEqual(seen["method"], "PUT")
        self.assertEqual(seen["url"], "http://tika:9998/tika")
        self.assertEqual(seen["content_type"], "application/octet-stream")
        self.assertEqual(seen["accept"], "text/plain")
        self.assertEqual(seen["body"], b"%PDF-1.4 raw")

    async def test_http_error_status(self):
        tika = TikaClient(
            "http://tika:9998",
            transport=httpx.MockTransport(lambda request: httpx.Response(422, request=request)),
        )
        with self.assertRaises(ExtractionServiceError) as ctx:
            await tika.extract(b"x")
        self.assertEqual(ctx.exception.code, "tika_http_error")
        await tika.stop()

    async def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("refused", request=request)

        tika = TikaClient("http://tika:9998", transport=httpx.MockTransport(handler))
        with self.assertRaises(ExtractionServiceError):
            await tika.extract(b"x")
        await tika.stop()
