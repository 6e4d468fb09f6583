"""Content warnings: the recoverable anomalies found while inlining."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import Callable

from cssinliner.errors import ContentWarningError

logger = logging.getLogger(__name__)


class ContentWarnings:
    """A deduplicated collection of human-readable warning messages.

    Messages keep the order in which they were first reported, but callers
    should treat the collection as a set. When *strict* is true the first
    report raises :class:`ContentWarningError` instead of being collected.

    Attributes:
        strict: Promote every warning to an error.
        handler: Optional callback invoked once per newly collected message.
    """

    def __init__(
        self,
        strict: bool = False,
        handler: Callable[[str], None] | None = None,
    ) -> None:
        self.strict = strict
        self.handler = handler
        self._messages: dict[str, None] = {}

    def report(self, info: str) -> None:
        """Record *info*, or raise it when running in strict mode."""
        if self.strict:
            raise ContentWarningError(info)
        if info in self._messages:
            return
        self._messages[info] = None
        logger.warning("%s", info)
        if self.handler is not None:
            self.handler(info)

    def clear(self) -> None:
        self._messages.clear()

    def as_list(self) -> list[str]:
        return list(self._messages)

    def __contains__(self, info: object) -> bool:
        return info in self._messages

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._messages))

    def __len__(self) -> int:
        return len(self._messages)

    def __repr__(self) -> str:
        return f"ContentWarnings(strict={self.strict}, count={len(self._messages)})"
