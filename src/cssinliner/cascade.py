"""Cascade resolution: writes matched stylesheet rules onto inline styles."""

from __future__ import annotations

import logging
import re
from collections.abc import Hashable, Mapping
from dataclasses import dataclass
from typing import Any

from cssinliner.declarations import decode, encode
from cssinliner.diagnostics import ContentWarnings
from cssinliner.dom import Document
from cssinliner.errors import SelectorError
from cssinliner.specificity import specificity
from cssinliner.stylesheet.model import Rule, Stylesheet

__all__ = ["CascadeResolver", "MatchRecord", "NON_INLINEABLE_PSEUDOS", "resolve"]

logger = logging.getLogger(__name__)

# Pseudo-classes and pseudo-elements with no inline equivalent.
NON_INLINEABLE_PSEUDOS = (
    "active",
    "focus",
    "hover",
    "link",
    "visited",
    "after",
    "before",
    "selection",
    "target",
    "first-line",
    "first-letter",
    "first-child",
)

_PSEUDO_RE = re.compile(
    r"(?:^|[\w*\])(\s]):{1,2}(" + "|".join(map(re.escape, NON_INLINEABLE_PSEUDOS)) + r")(?![\w-])",
    re.IGNORECASE,
)

# Quoted strings and attribute selectors, blanked before looking for pseudos.
_QUOTED_RE = re.compile(r"'(?:\\.|[^'\\])*'" r'|"(?:\\.|[^"\\])*"')
_ATTRIBUTE_RE = re.compile(r"\[[^\]]*\]")

_STRIPPED_ATTRIBUTES = ("id", "class")


@dataclass(frozen=True)
class MatchRecord:
    """One (rule, element) match awaiting the merge step."""

    element: Any
    specificity: int
    position: int
    declarations: Mapping[str, str]


class CascadeResolver:
    """Inline the rules of a stylesheet into a document.

    For every element matched by at least one rule, matches are sorted by
    ``(specificity, position)`` lowest first and their declarations folded
    in that order, so heavier and later rules win. The element's own
    ``style`` attribute is folded last and always wins. A final pass
    rewrites every ``style`` attribute with de-duplicated, sorted properties.
    """

    def __init__(self, warnings: ContentWarnings | None = None, strip_attrs: bool = False) -> None:
        self.warnings = warnings if warnings is not None else ContentWarnings()
        self.strip_attrs = strip_attrs

    def resolve(self, document: Document, stylesheet: Stylesheet) -> None:
        for at_rule in stylesheet.at_rules:
            self.warnings.report(f"The directive '{at_rule.directive}' cannot be supported inline")

        matches: dict[Hashable, list[MatchRecord]] = {}
        for rule in stylesheet.rules:
            for record in self._match(document, rule):
                matches.setdefault(document.element_key(record.element), []).append(record)

        for records in matches.values():
            self._apply(document, records)

        logger.info(
            "Inlined %d rule(s) into %d element(s)", len(stylesheet.rules), len(matches)
        )
        self.collapse(document)

    def _match(self, document: Document, rule: Rule) -> list[MatchRecord]:
        selector = rule.selector

        bare = _ATTRIBUTE_RE.sub("[]", _QUOTED_RE.sub("''", selector))
        pseudo = _PSEUDO_RE.search(bare)
        if pseudo is not None:
            self.warnings.report(
                f"The pseudo-class ':{pseudo.group(1)}' cannot be supported inline"
            )
            return []

        if selector.startswith("@"):
            self.warnings.report(f"The directive '{selector}' cannot be supported inline")
            return []

        try:
            elements = document.query(selector)
        except SelectorError as exc:
            self.warnings.report(str(exc))
            return []

        weight = specificity(selector)
        logger.debug(
            "Rule %d %r (specificity %d) matched %d element(s)",
            rule.position,
            selector,
            weight,
            len(elements),
        )
        return [
            MatchRecord(
                element=element,
                specificity=weight,
                position=rule.position,
                declarations=rule.declarations,
            )
            for element in elements
        ]

    def _apply(self, document: Document, records: list[MatchRecord]) -> None:
        element = records[0].element

        merged: dict[str, str] = {}
        for record in sorted(records, key=lambda r: (r.specificity, r.position)):
            merged.update(record.declarations)

        # Styles already inline outrank every stylesheet rule.
        current = document.get_attribute(element, "style")
        if current is not None:
            merged.update(decode(current, self.warnings))
        elif not merged:
            return

        document.set_attribute(element, "style", encode(merged))

    def collapse(self, document: Document) -> None:
        """Rewrite every inline style with one sorted declaration per property."""
        for element in document.iter_elements():
            style = document.get_attribute(element, "style")
            if style:
                style = re.sub(r"[\t\n\r]", " ", style)
                declarations = decode(style, self.warnings)
                document.set_attribute(element, "style", encode(declarations, sort_keys=True))

            if self.strip_attrs:
                for name in _STRIPPED_ATTRIBUTES:
                    document.remove_attribute(element, name)


def resolve(
    document: Document,
    stylesheet: Stylesheet,
    warnings: ContentWarnings | None = None,
    strip_attrs: bool = False,
) -> None:
    """Inline *stylesheet* into *document* in place."""
    CascadeResolver(warnings, strip_attrs=strip_attrs).resolve(document, stylesheet)
