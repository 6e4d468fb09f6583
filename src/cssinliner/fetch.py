"""Retrieval of remote documents and stylesheets, and URL absolutization."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from urllib.parse import urljoin, urlsplit

import httpx
from bs4 import BeautifulSoup

from cssinliner.errors import FetchError

__all__ = ["FetchedDocument", "Fetcher", "absolutize_css_urls", "absolutize_links"]

logger = logging.getLogger(__name__)

_ACCEPTED_CONTENT_TYPES = ("text/html", "text/css")

# Relative url(...) references inside CSS text; absolute http(s) urls are left alone.
_CSS_URL_RE = re.compile(
    r"""
    (?P<prefix>url\()
    \s*["']?
    (?P<url>(?:(?!https?://)(?!\))[^"'])*)
    ["']?\s*
    (?=\))
    """,
    re.VERBOSE | re.IGNORECASE,
)

_SRC_TAGS = frozenset({"img", "frame", "input", "script"})
_HREF_TAGS = frozenset({"a", "area", "link"})


@dataclass(frozen=True)
class FetchedDocument:
    """A decoded HTML or CSS resource."""

    content: str
    base_url: str
    content_type: str


class Fetcher:
    """Thin wrapper around :mod:`httpx` that maps failures into FetchError."""

    def __init__(
        self,
        client: httpx.Client | None = None,
        user_agent: str = "Mozilla/4.0",
        timeout: float = 30.0,
    ) -> None:
        self.user_agent = user_agent
        self._client = client or httpx.Client(
            timeout=httpx.Timeout(timeout),
            follow_redirects=True,
        )

    def fetch(self, url: str) -> FetchedDocument:
        """GET *url* and return its decoded body.

        Raises FetchError for non-http(s) urls, transport failures, non-2xx
        responses, and content that is neither HTML nor CSS.
        """
        if urlsplit(url).scheme.lower() not in ("http", "https"):
            raise FetchError(f"Unsupported protocol in '{url}'", url=url)

        logger.info("Fetching %s", url)
        try:
            resp = self._client.get(url, headers={"User-Agent": self.user_agent})
        except httpx.HTTPError as exc:
            raise FetchError(
                f"There was an error in fetching the document for {url} : {exc}",
                url=url,
                cause=exc,
            ) from exc

        if not resp.is_success:
            raise FetchError(
                f"There was an error in fetching the document for {url} : {resp.reason_phrase}",
                url=url,
                status_code=resp.status_code,
            )

        content_type = resp.headers.get("content-type", "").split(";")[0].strip().lower()
        if content_type not in _ACCEPTED_CONTENT_TYPES:
            raise FetchError(
                "The web site address you entered is not an HTML document.",
                url=url,
                status_code=resp.status_code,
            )

        return FetchedDocument(
            content=resp.text,
            base_url=str(resp.url),
            content_type=content_type,
        )

    def close(self) -> None:
        """Close the underlying httpx client."""
        self._client.close()


def absolutize_links(soup: BeautifulSoup, base: str | None) -> None:
    """Rewrite relative src/href/action/background attributes against *base*."""
    for tag in soup.find_all(True):
        if tag.name in _SRC_TAGS:
            if tag.get("src") and base:
                tag["src"] = urljoin(base, tag["src"])
        elif tag.name == "form":
            if tag.get("action") is not None and base:
                tag["action"] = urljoin(base, tag["action"])
        elif tag.name in _HREF_TAGS:
            href = tag.get("href")
            if href and not href.startswith("#") and base:
                tag["href"] = urljoin(base, href)
        elif tag.name == "td":
            if tag.get("background") and base:
                tag["background"] = urljoin(base, tag["background"])


def absolutize_css_urls(css: str, base: str | None) -> str:
    """Rewrite relative ``url(...)`` references in *css* against *base*."""
    if not base:
        return css

    def replace(match: re.Match[str]) -> str:
        url = match.group("url").strip()
        if not url:
            return match.group(0)
        return f"{match.group('prefix')}'{urljoin(base, url)}'"

    return _CSS_URL_RE.sub(replace, css)
