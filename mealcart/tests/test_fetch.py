import asyncio
import unittest
from unittest import mock

import httpx

from mealcart.infra import fetch
from mealcart.infra.fetch import RecipeFetchError, fetch_recipe_sources, normalize_import_url
from mealcart.utilities.network import server_urls


def _client_factory(handler):
    real_client = httpx.AsyncClient

    def build(**kwargs):
        return real_client(transport=httpx.MockTransport(handler), **kwargs)
    return build


class TestNormalizeImportUrl(unittest.TestCase):

    def test_urls(self):
        cases = [
            ("example.com/recipe", "https://example.com/recipe"),
            ("  http://example.com/a?b=1 ", "http://example.com/a?b=1"),
            ("HTTPS://Example.com/x", "HTTPS://Example.com/x"),
            ("", ""),
            (None, ""),
            ("mailto:cook@example.com", ""),
            ("javascript:alert(1)", ""),
            ("http://127.0.0.1:8000/", ""),
            ("http://10.0.0.5/", ""),
            ("http://[::1]/", ""),
            ("http://printer.local/", ""),
        ]
        for raw, expected in cases:
            with self.subTest(raw=raw):
                self.assertEqual(normalize_import_url(raw), expected)


class TestFetchRecipeSources(unittest.TestCase):

    def test_both_fetches_succeed(self):
        with mock.patch.object(fetch, "fetch_direct", new=mock.AsyncMock(return_value="<html>direct</html>")), \
                mock.patch.object(fetch, "fetch_via_read_proxy", new=mock.AsyncMock(return_value="# proxy")):
            sources = asyncio.run(fetch_recipe_sources("https://example.com/r"))
        self.assertEqual(sources, [("direct", "<html>direct</html>"), ("read-proxy", "# proxy")])

    def test_failed_fetch_is_dropped(self):
        failing = mock.AsyncMock(side_effect=RecipeFetchError("Direct import failed with status 403"))
        with mock.patch.object(fetch, "fetch_direct", new=failing), \
                mock.patch.object(fetch, "fetch_via_read_proxy", new=mock.AsyncMock(return_value="# proxy")):
            sources = asyncio.run(fetch_recipe_sources("https://example.com/r"))
        self.assertEqual(sources, [("read-proxy", "# proxy")])


class TestHttpFetch(unittest.TestCase):

    def test_read_proxy_url_and_headers(self):
        seen = {}

        def handler(request):
            seen["url"] = str(request.url)
            seen["user-agent"] = request.headers["user-agent"]
            return httpx.Response(200, text="Title: Soup")

        with mock.patch.object(fetch.httpx, "AsyncClient", new=_client_factory(handler)):
            text = asyncio.run(fetch.fetch_via_read_proxy("https://example.com/soup"))
        self.assertEqual(text, "Title: Soup")
        self.assertEqual(seen["url"], "https://r.jina.ai/https://example.com/soup")
        self.assertEqual(seen["user-agent"], fetch.IMPORT_USER_AGENT)

    def test_bad_responses_raise(self):
        for status, body in ((404, "missing"), (200, "   ")):
            with self.subTest(status=status, body=body):
                def handler(request):
                    return httpx.Response(status, text=body)

                with mock.patch.object(fetch.httpx, "AsyncClient", new=_client_factory(handler)):
                    with self.assertRaises(RecipeFetchError):
                        asyncio.run(fetch.fetch_direct("https://example.com/soup"))

    def test_transport_errors_raise(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        with mock.patch.object(fetch.httpx, "AsyncClient", new=_client_factory(handler)):
            with self.assertRaises(RecipeFetchError):
                asyncio.run(fetch.fetch_direct("https://example.com/soup"))


class TestServerUrls(unittest.TestCase):

    def test_loopback_bind(self):
        self.assertEqual(server_urls("127.0.0.1", 8000), ["http://localhost:8000"])


if __name__ == '__main__':
    unittest.main()
