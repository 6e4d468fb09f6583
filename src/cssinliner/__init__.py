"""cssinliner: move stylesheet rules onto inline style attributes."""
from __future__ import annotations

__version__ = "0.1.0"

from cssinliner.cascade import CascadeResolver, resolve  # noqa: E402
from cssinliner.config import InlinerConfig  # noqa: E402
from cssinliner.declarations import decode, encode  # noqa: E402
from cssinliner.diagnostics import ContentWarnings  # noqa: E402
from cssinliner.errors import (  # noqa: E402
    ContentWarningError,
    FetchError,
    InlinerError,
    SelectorError,
)
from cssinliner.inliner import Inliner  # noqa: E402
from cssinliner.specificity import specificity, specificity_counts  # noqa: E402
from cssinliner.stylesheet import AtRule, Rule, Stylesheet, parse_stylesheet  # noqa: E402

__all__ = [
    "__version__",
    "AtRule",
    "CascadeResolver",
    "ContentWarningError",
    "ContentWarnings",
    "FetchError",
    "Inliner",
    "InlinerConfig",
    "InlinerError",
    "Rule",
    "SelectorError",
    "Stylesheet",
    "decode",
    "encode",
    "parse_stylesheet",
    "resolve",
    "specificity",
    "specificity_counts",
]
