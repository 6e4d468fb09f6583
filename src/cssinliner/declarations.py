"""Declaration codec: ``prop:value;`` strings to mappings and back.

Example:
    >>> decode("color: red; Font-Size: 12px")
    {'color': 'red', 'font-size': '12px'}
    >>> encode({"color": "red", "font-size": "12px"})
    'color:red;font-size:12px;'
"""

from __future__ import annotations

import re
from collections.abc import Iterator, Mapping

from cssinliner.diagnostics import ContentWarnings

__all__ = ["decode", "encode", "split_declarations"]

# Matches a single declaration fragment: property: value
_DECLARATION_RE = re.compile(
    r"""
    ^\s*
    (?P<property>[\w.-]+)   # letters, digits, '.', '_' and '-'
    \s*:\s*
    (?P<value>.*?)          # value, trailing whitespace trimmed
    \s*$
    """,
    re.VERBOSE | re.DOTALL,
)


def split_declarations(text: str) -> Iterator[str]:
    """Yield the non-blank ``;``-separated fragments of *text*.

    Semicolons inside quotes or parentheses do not split, so values such as
    ``url(data:image/png;base64,...)`` stay whole.
    """
    start = 0
    depth = 0
    quote = ""
    for i, ch in enumerate(text):
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")" and depth:
            depth -= 1
        elif ch == ";" and not depth:
            if text[start:i].strip():
                yield text[start:i]
            start = i + 1
    if text[start:].strip():
        yield text[start:]


def parse_declaration(fragment: str) -> tuple[str, str] | None:
    """Return ``(property, value)`` for a fragment, or None if malformed."""
    match = _DECLARATION_RE.match(fragment)
    if match is None:
        return None
    return match.group("property").lower(), match.group("value")


def decode(
    style: str,
    warnings: ContentWarnings | None = None,
    context: str | None = None,
) -> dict[str, str]:
    """Split a style string into a property -> value mapping.

    Malformed fragments are reported to *warnings* (if given) and dropped.
    *context* names the style in the warning text and defaults to *style*.
    """
    declarations: dict[str, str] = {}
    for fragment in split_declarations(style):
        parsed = parse_declaration(fragment)
        if parsed is None:
            if warnings is not None:
                warnings.report(
                    f"Invalid or unexpected property '{fragment}' in style "
                    f"'{style if context is None else context}'"
                )
            continue
        name, value = parsed
        declarations[name] = value
    return declarations


def encode(declarations: Mapping[str, str], sort_keys: bool = False) -> str:
    """Serialize a mapping as ``prop:value;`` pairs."""
    keys = sorted(declarations) if sort_keys else list(declarations)
    return "".join(f"{key}:{declarations[key]};" for key in keys)
