from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable


@dataclass(frozen=True)
class InlinerConfig:
    strip_attrs: bool = False  # drop id/class once styles are inlined
    leave_style: bool = False  # keep <style> elements in the output
    relaxed: bool = False  # look for <style> anywhere, skip structural checks
    warns_as_errors: bool = False
    user_agent: str = "Mozilla/4.0"
    timeout: float = 30.0
    warning_handler: Callable[[str], None] | None = field(
        default=None, compare=False, hash=False
    )
