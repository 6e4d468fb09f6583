"""CSS selector specificity.

A selector scores ``a*100 + b*10 + c`` where ``a`` counts ID selectors,
``b`` counts class, attribute and pseudo-class selectors, and ``c`` counts
element names (and ``::`` pseudo-elements). The universal selector and all
combinators score nothing.

A compound selector that names neither an element nor ``*`` (``#blah``,
``.foo``) stands for an implied element name and counts one toward ``c``,
so ``td #blah`` scores 102 and ``#blah td.foo span.bar`` scores 123. An
explicit ``*`` suppresses the implied element: ``*.warning`` scores 10.

The single-integer encoding aliases distinct triples once ``b`` or ``c``
reaches 10 (ten classes weigh the same as one ID). Use
:func:`specificity_counts` where the exact triple matters.
"""

from __future__ import annotations

from enum import Enum, auto

__all__ = ["specificity", "specificity_counts"]

_COMBINATORS = frozenset(">+~")


class _State(Enum):
    BEFORE_TERM = auto()  # at the start or just after a combinator
    IN_TERM = auto()  # inside a compound selector
    IN_BRACKET = auto()  # inside [attribute...]


def _is_name_char(ch: str) -> bool:
    return ch.isalnum() or ch in "_-\\" or ord(ch) > 127


def _name_end(selector: str, i: int) -> int:
    """Return the index just past the identifier starting at *i*."""
    while i < len(selector) and _is_name_char(selector[i]):
        i += 2 if selector[i] == "\\" else 1
    return min(i, len(selector))


def _arguments_end(selector: str, i: int) -> int:
    """Skip a parenthesized argument list such as ``(2n+1)`` starting at *i*."""
    if i >= len(selector) or selector[i] != "(":
        return i
    depth = 0
    quote = ""
    while i < len(selector):
        ch = selector[i]
        if quote:
            if ch == quote:
                quote = ""
        elif ch in "\"'":
            quote = ch
        elif ch == "(":
            depth += 1
        elif ch == ")":
            depth -= 1
            if depth == 0:
                return i + 1
        i += 1
    return i


def specificity_counts(selector: str) -> tuple[int, int, int]:
    """Return the ``(a, b, c)`` specificity triple for a single selector."""
    a = b = c = 0
    state = _State.BEFORE_TERM
    depth = 0
    quote = ""
    i = 0
    while i < len(selector):
        ch = selector[i]

        if state is _State.IN_BRACKET:
            if quote:
                if ch == "\\":
                    i += 1
                elif ch == quote:
                    quote = ""
            elif ch in "\"'":
                quote = ch
            elif ch == "[":
                depth += 1
            elif ch == "]":
                depth -= 1
                if depth == 0:
                    b += 1
                    state = _State.IN_TERM
            i += 1
            continue

        if ch.isspace() or ch in _COMBINATORS:
            state = _State.BEFORE_TERM
            i += 1
            continue

        if ch == "*":
            state = _State.IN_TERM
            i += 1
            continue

        if state is _State.BEFORE_TERM and _is_name_char(ch):
            c += 1
            state = _State.IN_TERM
            i = _name_end(selector, i)
            continue

        if state is _State.BEFORE_TERM and ch in "#.[:":
            # implied element name
            c += 1

        if ch in "#.":
            end = _name_end(selector, i + 1)
            if end > i + 1:
                if ch == "#":
                    a += 1
                else:
                    b += 1
            state = _State.IN_TERM
            i = max(end, i + 1)
        elif ch == "[":
            depth = 1
            state = _State.IN_BRACKET
            i += 1
        elif ch == ":":
            element = selector.startswith("::", i)
            start = i + (2 if element else 1)
            end = _name_end(selector, start)
            if end > start:
                if element:
                    c += 1
                else:
                    b += 1
            state = _State.IN_TERM
            i = max(_arguments_end(selector, end), start)
        else:
            i += 1

    return a, b, c


def specificity(selector: str) -> int:
    """Return the specificity of *selector* as a single integer.

    *selector* must be one selector, not a comma-separated group.

    >>> specificity("#blah td.foo span.bar")
    123
    """
    a, b, c = specificity_counts(selector)
    return a * 100 + b * 10 + c
