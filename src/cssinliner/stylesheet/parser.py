"""Hand-written parser for stylesheets destined for inlining.

Syntax example:
    h1, h2 { color: red; font-size: 20px }
    #footer td.note { color: #999; }
    @media print { h1 { color: black } }

Each comma-separated selector becomes its own :class:`Rule`, numbered in
source order. At-rules are captured verbatim as :class:`AtRule` records and
never interpreted.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum, auto
from types import MappingProxyType

from cssinliner.declarations import parse_declaration, split_declarations
from cssinliner.diagnostics import ContentWarnings
from cssinliner.stylesheet.model import AtRule, Rule, Stylesheet

__all__ = ["parse_stylesheet", "split_selector_group"]

logger = logging.getLogger(__name__)

_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)
_WHITESPACE_RE = re.compile(r"\s{2,}")

# Matches the prelude of an at-rule: @name prelude
_AT_RULE_RE = re.compile(
    r"""
    ^@(?P<name>[\w-]+)      # at-keyword
    \s*
    (?P<prelude>.*)$        # everything up to the block or semicolon
    """,
    re.VERBOSE | re.DOTALL,
)

# Vendor and legacy browser hacks (*zoom, _height, -webkit-*, \9) are never inlined.
_HACK_RE = re.compile(r"^\s*[*_-]|\\")


class _State(Enum):
    BEFORE_RULE = auto()
    IN_PRELUDE = auto()
    IN_BLOCK = auto()
    IN_STRING = auto()


@dataclass(frozen=True)
class _Chunk:
    text: str
    prelude: str
    block: str | None = None
    nested: bool = False
    closed: bool = True
    stray: bool = False


def _scan(text: str) -> Iterator[_Chunk]:
    """Split normalized stylesheet text into rule chunks."""
    state = _State.BEFORE_RULE
    resume = _State.IN_PRELUDE
    quote = ""
    start = brace = 0
    depth = 0
    nested = False
    i = 0
    while i < len(text):
        ch = text[i]
        if state is _State.IN_STRING:
            if ch == "\\":
                i += 1
            elif ch == quote:
                state = resume
        elif state is _State.BEFORE_RULE and ch.isspace():
            pass
        elif state in (_State.BEFORE_RULE, _State.IN_PRELUDE):
            if state is _State.BEFORE_RULE:
                start = i
                state = _State.IN_PRELUDE
            if ch in "\"'":
                quote, resume, state = ch, _State.IN_PRELUDE, _State.IN_STRING
            elif ch == "{":
                brace, depth, nested = i, 1, False
                state = _State.IN_BLOCK
            elif ch == ";" and text[start:i].lstrip().startswith("@"):
                yield _Chunk(text[start : i + 1], prelude=text[start:i])
                state = _State.BEFORE_RULE
            elif ch == "}":
                yield _Chunk(text[start : i + 1], prelude=text[start:i], stray=True)
                state = _State.BEFORE_RULE
        elif state is _State.IN_BLOCK:
            if ch in "\"'":
                quote, resume, state = ch, _State.IN_BLOCK, _State.IN_STRING
            elif ch == "{":
                depth += 1
                nested = True
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    yield _Chunk(
                        text[start : i + 1],
                        prelude=text[start:brace],
                        block=text[brace + 1 : i],
                        nested=nested,
                    )
                    state = _State.BEFORE_RULE
        i += 1

    if state is not _State.BEFORE_RULE:
        in_block = state is _State.IN_BLOCK or (
            state is _State.IN_STRING and resume is _State.IN_BLOCK
        )
        yield _Chunk(
            text[start:],
            prelude=text[start:brace] if in_block else text[start:],
            block=text[brace + 1 :] if in_block else None,
            closed=False,
        )


def split_selector_group(group: str) -> list[str]:
    """Split ``"h1, a[title='x,y']"`` on top-level commas."""
    selectors: list[str] = []
    depth = 0
    quote = ""
    start = 0
    for i, ch in enumerate(group):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch in "[(":
            depth += 1
        elif ch in "])" and depth:
            depth -= 1
        elif ch == "," and not depth:
            selectors.append(group[start:i])
            start = i + 1
    selectors.append(group[start:])
    return [s.strip() for s in selectors if s.strip()]


def _parse_block(block: str, group: str, warnings: ContentWarnings) -> dict[str, str]:
    """Parse the body of a rule into a property dictionary."""
    declarations: dict[str, str] = {}
    for fragment in split_declarations(block):
        if _HACK_RE.search(fragment):
            continue
        parsed = parse_declaration(fragment)
        if parsed is None:
            warnings.report(f"Invalid or unexpected property '{fragment}' in style '{group}'")
            continue
        name, value = parsed
        declarations[name] = value
    return declarations


def parse_stylesheet(source: str, warnings: ContentWarnings | None = None) -> Stylesheet:
    """Parse stylesheet text into a Stylesheet object.

    Malformed chunks and declarations are reported to *warnings* and skipped.
    Returns a Stylesheet containing all qualified rules in source order.
    """
    if warnings is None:
        warnings = ContentWarnings()

    if not source or not source.strip():
        warnings.report("No stylesheet data was found in the document")
        return Stylesheet()

    text = re.sub(r"[\t\n\r\f]", " ", source)
    text = _COMMENT_RE.sub("", text)

    rules: list[Rule] = []
    at_rules: list[AtRule] = []
    for chunk in _scan(text):
        group = _WHITESPACE_RE.sub(" ", chunk.prelude.strip())

        if group.startswith("@") and not chunk.stray and (chunk.closed or chunk.block is None):
            match = _AT_RULE_RE.match(group)
            if match is not None:
                block = chunk.block.strip() if chunk.block is not None else None
                at_rules.append(AtRule(match.group("name").lower(), match.group("prelude"), block))
                continue

        if chunk.stray or not chunk.closed or chunk.nested or not group or group.startswith("@"):
            warnings.report(f"Invalid or unexpected style data '{chunk.text}'")
            continue

        declarations = MappingProxyType(_parse_block(chunk.block or "", group, warnings))
        for selector in split_selector_group(group):
            rules.append(Rule(selector=selector, declarations=declarations, position=len(rules)))

    logger.debug("Parsed %d rule(s) and %d at-rule(s)", len(rules), len(at_rules))
    return Stylesheet(rules=tuple(rules), at_rules=tuple(at_rules))
