"""Stylesheet model: Rule, AtRule, and Stylesheet dataclasses."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field


@dataclass(frozen=True)
class Rule:
    """A qualified rule reduced to a single selector.

    Attributes:
        selector: One branch of the source selector group, e.g. ``"ul li"``.
        declarations: Lower-case property names mapped to their values. Rules
            split from the same group share this mapping.
        position: Ordinal of the rule within its stylesheet, strictly
            increasing in source order; the cascade tie-breaker.
    """

    selector: str
    declarations: Mapping[str, str]
    position: int


@dataclass(frozen=True)
class AtRule:
    """An at-rule kept verbatim, e.g. ``@media print { ... }``."""

    name: str  # "media", "import", "font-face"
    prelude: str  # "print", "url(foo.css)", ""
    block: str | None = None  # nested block text, None for statements

    @property
    def directive(self) -> str:
        return f"@{self.name} {self.prelude}".rstrip()


@dataclass(frozen=True)
class Stylesheet:
    """The rules parsed from a stylesheet, in source order."""

    rules: tuple[Rule, ...] = ()
    at_rules: tuple[AtRule, ...] = field(default=())

    def write(self) -> str:
        """Serialize the qualified rules back to CSS text.

        Grouped selectors come back out as separate rules, so the output may
        differ textually from the input while cascading identically.
        """
        lines: list[str] = []
        for rule in self.rules:
            lines.append(f"{rule.selector} {{")
            for prop in sorted(rule.declarations):
                lines.append(f"\t{prop}: {rule.declarations[prop]};")
            lines.append("}")
        return "".join(line + "\n" for line in lines)
