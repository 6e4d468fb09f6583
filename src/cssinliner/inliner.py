"""Document-level inlining: read HTML, pull out its stylesheet, inline it."""

from __future__ import annotations

import codecs
import logging
import re
from pathlib import Path

from bs4 import BeautifulSoup, NavigableString, Tag, UnicodeDammit
from bs4.dammit import EncodingDetector

from cssinliner.cascade import CascadeResolver
from cssinliner.config import InlinerConfig
from cssinliner.diagnostics import ContentWarnings
from cssinliner.dom import SoupDocument, parse_html
from cssinliner.errors import InlinerError
from cssinliner.fetch import Fetcher, absolutize_css_urls, absolutize_links
from cssinliner.specificity import specificity
from cssinliner.stylesheet import parse_stylesheet

__all__ = ["Inliner"]

logger = logging.getLogger(__name__)

_SCREEN_MEDIA_RE = re.compile(r"\b(all|screen)\b", re.IGNORECASE)
_HTML_COMMENT_RE = re.compile(r"<!--|-->")


def _attribute_text(tag: Tag, name: str) -> str:
    value = tag.get(name)
    if isinstance(value, list):
        return " ".join(value)
    return value or ""


def _is_css_style(tag: Tag) -> bool:
    return _attribute_text(tag, "type").strip().lower() in ("", "text/css")


def _is_stylesheet_link(tag: Tag) -> bool:
    rel = _attribute_text(tag, "rel").lower().split()
    return (
        "stylesheet" in rel
        or _attribute_text(tag, "type").strip().lower() == "text/css"
        or _attribute_text(tag, "href").endswith(".css")
    )


def _style_text(tag: Tag) -> str:
    return "".join(str(child) for child in tag.contents if isinstance(child, NavigableString))


def _head_elements(soup: BeautifulSoup, name: str, relaxed: bool) -> list[Tag]:
    """Return the *name* elements that belong to the document head.

    Without a literal ``<head>``, elements written before the body (directly
    at the top level or under ``<html>``) make up the implied head.
    """
    if relaxed:
        return soup.find_all(name)
    head = soup.find("head")
    if head is not None:
        return head.find_all(name)
    return [
        tag
        for tag in soup.find_all(name)
        if tag.parent is soup or (tag.parent is not None and tag.parent.name == "html")
    ]


class Inliner:
    """Converts an HTML document's ``<style>`` blocks into inline styles.

    Typical use::

        inliner = Inliner(InlinerConfig(strip_attrs=True))
        inliner.read_file("newsletter.html")
        html = inliner.inlinify()
        for warning in inliner.content_warnings:
            print(warning)

    An instance owns its document tree; calls on one instance must not
    overlap.
    """

    def __init__(self, config: InlinerConfig | None = None, fetcher: Fetcher | None = None) -> None:
        self.config = config or InlinerConfig()
        self._fetcher = fetcher
        self._warnings = ContentWarnings(
            strict=self.config.warns_as_errors,
            handler=self.config.warning_handler,
        )
        self._html: str | None = None
        self._document: SoupDocument | None = None
        self._stylesheet: str | None = None

    # --- loading ---------------------------------------------------------------

    def read(self, html: str) -> None:
        """Parse *html* and set aside the stylesheet found in its ``<style>`` blocks.

        Only the head (written or implied) is searched unless the config is
        relaxed. The
        ``<style>`` elements are removed from the tree unless ``leave_style``.
        """
        if not html:
            raise InlinerError("You must pass in html data")

        self._document = SoupDocument(html)
        self._html = html
        self._stylesheet = self._extract_stylesheet(self._document)

    def read_file(self, filename: str | Path, charset: str | None = None) -> None:
        """Read an HTML file and hand its content to :meth:`read`.

        Without a usable *charset* the encoding is detected from the bytes
        (``<meta>`` declaration, byte-order mark, then utf-8 or windows-1252).
        """
        if not filename:
            raise InlinerError("You must pass in a filename argument")

        data = Path(filename).read_bytes()

        encoding = None
        if charset:
            try:
                encoding = codecs.lookup(charset).name
            except LookupError:
                logger.info("Unknown charset %r, detecting the encoding of %s", charset, filename)

        if encoding is not None:
            try:
                html = data.decode(encoding)
            except UnicodeDecodeError as exc:
                raise InlinerError(f"Unable to decode {filename} as {encoding}", cause=exc) from exc
        else:
            declared = EncodingDetector.find_declared_encoding(data, is_html=True)
            dammit = UnicodeDammit(
                data,
                known_definite_encodings=[declared] if declared else [],
                user_encodings=["utf-8", "windows-1252"],
                is_html=True,
            )
            if dammit.unicode_markup is None:
                raise InlinerError(f"Unable to detect the encoding of {filename}")
            logger.debug("Read %s as %s", filename, dammit.original_encoding)
            html = dammit.unicode_markup

        self.read(html)

    def fetch_file(self, url: str) -> None:
        """Fetch a remote HTML document, expand its stylesheets, and read it.

        Relative links are made absolute and every linked stylesheet is
        fetched and embedded as a ``<style>`` block before reading.
        """
        if not url:
            raise InlinerError("You must pass in a url argument")
        self.read(self._fetch_html(url))

    @property
    def fetcher(self) -> Fetcher:
        if self._fetcher is None:
            self._fetcher = Fetcher(user_agent=self.config.user_agent, timeout=self.config.timeout)
        return self._fetcher

    def close(self) -> None:
        """Close the fetcher's HTTP client, if one was opened."""
        if self._fetcher is not None:
            self._fetcher.close()

    # --- inlining --------------------------------------------------------------

    def inlinify(self) -> str:
        """Inline the stylesheet that was read and return the resulting HTML.

        Warnings from the previous run are discarded first. In strict mode
        the first warning raises ContentWarningError instead.
        """
        self._warnings.clear()

        if self._html is None or self._document is None:
            raise InlinerError("You must instantiate and read in your content before inlinifying")

        self._validate_html(self._html)

        stylesheet = parse_stylesheet(self._stylesheet or "", self._warnings)
        resolver = CascadeResolver(self._warnings, strip_attrs=self.config.strip_attrs)
        resolver.resolve(self._document, stylesheet)

        logger.info("Inlining finished with %d warning(s)", len(self._warnings))
        return self._document.render()

    def query(self, selector: str) -> list[Tag]:
        """Return the elements of the loaded document matching *selector*."""
        if self._document is None:
            raise InlinerError("You must read in your content before querying it")
        return self._document.query(selector)

    def specificity(self, selector: str) -> int:
        return specificity(selector)

    @property
    def content_warnings(self) -> list[str]:
        """Warnings from the most recent :meth:`inlinify` run."""
        return self._warnings.as_list()

    @property
    def stylesheet(self) -> str | None:
        """The raw stylesheet text extracted by :meth:`read`."""
        return self._stylesheet

    # --- helpers ---------------------------------------------------------------

    def _extract_stylesheet(self, document: SoupDocument) -> str:
        parts: list[str] = []
        for style in _head_elements(document.soup, "style", self.config.relaxed):
            if not _is_css_style(style):
                continue
            media = _attribute_text(style, "media")
            if not media or _SCREEN_MEDIA_RE.search(media):
                parts.append(_HTML_COMMENT_RE.sub("", _style_text(style)))
            if not self.config.leave_style:
                style.decompose()

        return "".join(parts)

    def _validate_html(self, html: str) -> None:
        """Report structural problems in the document as it was written."""
        if self.config.relaxed:
            return

        soup = parse_html(html)

        html_nodes = soup.find_all("html")
        if not html_nodes:
            self._warnings.report("Unexpected absence of html root node")
        elif len(html_nodes) > 1:
            self._warnings.report(
                "Unexpected spurious html root node(s) found within referenced document"
            )

        if len(soup.find_all("head")) > 1:
            self._warnings.report(
                "Unexpected spurious head node(s) found within referenced document"
            )
        if len(soup.find_all("body")) > 1:
            self._warnings.report(
                "Unexpected spurious body node(s) found within referenced document"
            )

        if any(_is_stylesheet_link(link) for link in soup.find_all("link", href=True)):
            self._warnings.report("Unexpected reference to remote stylesheet was not inlined")

        body = self._document.body if self._document is not None else None
        if body is not None and any(_is_css_style(s) for s in body.find_all("style")):
            self._warnings.report("Unexpected reference to stylesheet within document body skipped")

    def _fetch_html(self, url: str) -> str:
        if not re.match(r"^https?://", url, re.IGNORECASE):
            url = "http://" + url

        fetched = self.fetcher.fetch(url)
        soup = parse_html(fetched.content)

        absolutize_links(soup, fetched.base_url)
        self._expand_stylesheets(soup, fetched.base_url)

        return soup.decode()

    def _expand_stylesheets(self, soup: BeautifulSoup, base_url: str) -> None:
        """Embed linked stylesheets and absolutize ``url()`` references."""
        for style in _head_elements(soup, "style", self.config.relaxed):
            style.string = absolutize_css_urls(_style_text(style), base_url)

        for link in _head_elements(soup, "link", self.config.relaxed):
            if not link.get("href") or not _is_stylesheet_link(link):
                continue
            fetched = self.fetcher.fetch(_attribute_text(link, "href"))
            embedded = soup.new_tag("style", attrs={"type": "text/css", "rel": "stylesheet"})
            embedded.string = absolutize_css_urls(fetched.content, fetched.base_url)
            link.replace_with(embedded)
