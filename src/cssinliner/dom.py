"""HTML tree and selector queries backed by BeautifulSoup and soupsieve."""

from __future__ import annotations

from collections.abc import Hashable, Iterator
from typing import Any, Protocol

from bs4 import BeautifulSoup, Tag
from soupsieve import SelectorSyntaxError

from cssinliner.errors import SelectorError

__all__ = ["Document", "SoupDocument", "parse_html"]


class Document(Protocol):
    """The tree operations the cascade needs from an HTML document."""

    def query(self, selector: str) -> list[Any]:
        """Return every element matching *selector*; raise SelectorError if malformed."""
        ...

    def element_key(self, element: Any) -> Hashable:
        """Return an identity for *element*, stable for one resolution pass."""
        ...

    def iter_elements(self) -> Iterator[Any]: ...

    def get_attribute(self, element: Any, name: str) -> str | None: ...

    def set_attribute(self, element: Any, name: str, value: str) -> None: ...

    def remove_attribute(self, element: Any, name: str) -> None: ...


def parse_html(html: str) -> BeautifulSoup:
    """Parse *html* without inserting implied html/head/body elements."""
    return BeautifulSoup(html, "html.parser")


class SoupDocument:
    """A :class:`Document` over a BeautifulSoup tree.

    The tree is mutated in place; :meth:`render` serializes its current state.
    """

    def __init__(self, source: str | BeautifulSoup) -> None:
        self.soup = source if isinstance(source, BeautifulSoup) else parse_html(source)

    def query(self, selector: str) -> list[Tag]:
        try:
            return list(self.soup.select(selector))
        except (SelectorSyntaxError, NotImplementedError) as exc:
            # soupsieve rejects pseudo-elements and at-rule tokens as unimplemented
            detail = str(exc).splitlines()[0] if str(exc) else type(exc).__name__
            raise SelectorError(selector, detail, cause=exc) from exc

    def element_key(self, element: Tag) -> Hashable:
        return id(element)

    def iter_elements(self) -> Iterator[Tag]:
        return iter(self.soup.find_all(True))

    def get_attribute(self, element: Tag, name: str) -> str | None:
        value = element.get(name)
        if isinstance(value, list):
            return " ".join(value)
        return value

    def set_attribute(self, element: Tag, name: str, value: str) -> None:
        element[name] = value

    def remove_attribute(self, element: Tag, name: str) -> None:
        element.attrs.pop(name, None)

    @property
    def head(self) -> Tag | None:
        return self.soup.find("head")

    @property
    def body(self) -> Tag | None:
        return self.soup.find("body")

    def render(self) -> str:
        return self.soup.decode()

    def __repr__(self) -> str:
        return f"SoupDocument(elements={len(self.soup.find_all(True))})"
