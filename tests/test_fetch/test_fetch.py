"""Tests for remote fetching and URL absolutization."""
from __future__ import annotations

import httpx
import pytest
from bs4 import BeautifulSoup

from cssinliner.errors import FetchError
from cssinliner.fetch import FetchedDocument, Fetcher, absolutize_css_urls, absolutize_links
from cssinliner.inliner import Inliner


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _client(routes: dict[str, tuple[int, str, str]]) -> httpx.Client:
    """Create an httpx client whose transport serves *routes* by URL."""

    def handler(request: httpx.Request) -> httpx.Response:
        status_code, content_type, body = routes.get(str(request.url), (404, "text/plain", "missing"))
        return httpx.Response(
            status_code=status_code,
            content=body.encode("utf-8"),
            headers={"content-type": content_type},
        )

    return httpx.Client(transport=httpx.MockTransport(handler))


# ---------------------------------------------------------------------------
# Fetcher
# ---------------------------------------------------------------------------


class TestFetcher:
    def test_fetch_html(self):
        client = _client({"http://example.com/a.html": (200, "text/html; charset=utf-8", "<p>hi</p>")})
        result = Fetcher(client=client).fetch("http://example.com/a.html")
        assert result == FetchedDocument(
            content="<p>hi</p>",
            base_url="http://example.com/a.html",
            content_type="text/html",
        )

    def test_fetch_sends_user_agent(self):
        seen: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request.headers["user-agent"])
            return httpx.Response(200, content=b"", headers={"content-type": "text/css"})

        client = httpx.Client(transport=httpx.MockTransport(handler))
        Fetcher(client=client, user_agent="Mailer/1.0").fetch("https://example.com/s.css")
        assert seen == ["Mailer/1.0"]

    def test_http_error_status(self):
        with pytest.raises(FetchError) as excinfo:
            Fetcher(client=_client({})).fetch("http://example.com/gone.html")
        assert excinfo.value.status_code == 404
        assert excinfo.value.url == "http://example.com/gone.html"

    def test_wrong_content_type(self):
        client = _client({"http://example.com/a.png": (200, "image/png", "xx")})
        with pytest.raises(FetchError, match="not an HTML document"):
            Fetcher(client=client).fetch("http://example.com/a.png")

    def test_unsupported_scheme(self):
        with pytest.raises(FetchError, match="Unsupported protocol"):
            Fetcher(client=_client({})).fetch("ftp://example.com/a.html")

    def test_transport_error(self):
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        client = httpx.Client(transport=httpx.MockTransport(handler))
        with pytest.raises(FetchError) as excinfo:
            Fetcher(client=client).fetch("http://example.com/a.html")
        assert isinstance(excinfo.value.cause, httpx.ConnectError)


# ---------------------------------------------------------------------------
# Absolutization
# ---------------------------------------------------------------------------


class TestAbsolutizeLinks:
    def test_rewrites_relative_references(self):
        soup = BeautifulSoup(
            '<img src="a.png"><a href="/b">b</a><a href="#top">t</a>'
            '<form action="post"></form><table><tr><td background="bg.gif"></td></tr></table>'
            '<script src="https://cdn.example.org/x.js"></script>',
            "html.parser",
        )
        absolutize_links(soup, "http://example.com/dir/page.html")
        assert soup.img["src"] == "http://example.com/dir/a.png"
        links = soup.find_all("a")
        assert links[0]["href"] == "http://example.com/b"
        assert links[1]["href"] == "#top"
        assert soup.form["action"] == "http://example.com/dir/post"
        assert soup.td["background"] == "http://example.com/dir/bg.gif"
        assert soup.script["src"] == "https://cdn.example.org/x.js"

    def test_no_base_leaves_document_alone(self):
        soup = BeautifulSoup('<img src="a.png">', "html.parser")
        absolutize_links(soup, None)
        assert soup.img["src"] == "a.png"


class TestAbsolutizeCssUrls:
    def test_relative_urls_rewritten(self):
        css = (
            "body { background: url(img/bg.png) } "
            ".x { background: url('http://cdn.com/a.png') } "
            '.y { background: url( "i.gif" ) }'
        )
        result = absolutize_css_urls(css, "http://example.com/css/site.css")
        assert "url('http://example.com/css/img/bg.png')" in result
        assert "url('http://cdn.com/a.png')" in result
        assert "url('http://example.com/css/i.gif')" in result

    def test_without_base(self):
        assert absolutize_css_urls("a { b: url(c.png) }", None) == "a { b: url(c.png) }"


# ---------------------------------------------------------------------------
# Inliner.fetch_file
# ---------------------------------------------------------------------------


class TestFetchFile:
    def _routes(self) -> dict[str, tuple[int, str, str]]:
        page = (
            "<html><head>"
            '<link rel="stylesheet" href="css/site.css">'
            "<style>p { background: url(dot.gif) }</style>"
            "</head><body><h1>Hi</h1><img src=\"logo.png\"><p>x</p></body></html>"
        )
        return {
            "http://example.com/news/index.html": (200, "text/html", page),
            "http://example.com/news/css/site.css": (
                200,
                "text/css",
                "h1 { color: red; background: url(../img/h.png) }",
            ),
        }

    def test_fetch_and_inline(self):
        inliner = Inliner(fetcher=Fetcher(client=_client(self._routes())))
        inliner.fetch_file("example.com/news/index.html")
        html = inliner.inlinify()

        assert 'src="http://example.com/news/logo.png"' in html
        assert "style=\"background:url('http://example.com/news/img/h.png');color:red;\"" in html
        assert "style=\"background:url('http://example.com/news/dot.gif');\"" in html
        assert "<style" not in html
        assert "<link" not in html
        assert inliner.content_warnings == []

    def test_fetch_failure_propagates(self):
        inliner = Inliner(fetcher=Fetcher(client=_client({})))
        with pytest.raises(FetchError):
            inliner.fetch_file("http://example.com/nothing.html")

    def test_close_releases_client(self):
        client = _client(self._routes())
        inliner = Inliner(fetcher=Fetcher(client=client))
        inliner.fetch_file("http://example.com/news/index.html")
        inliner.close()
        assert client.is_closed

    def test_close_without_fetching(self):
        inliner = Inliner()
        inliner.close()
        assert inliner._fetcher is None
