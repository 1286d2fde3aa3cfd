"""
Diagnostic accumulator for a single schema build.

Every check appends to the collector instead of raising, so one run reports
the complete set of problems. A collector belongs to exactly one run.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .errors import SchemaValidationError

logger = logging.getLogger(__name__)


@dataclass
class Diagnostics:
    """Ordered, append-only list of formatted diagnostics."""

    messages: list[str] = field(default_factory=list)

    def add(self, message: str) -> None:
        """Record one diagnostic."""
        logger.debug("diagnostic: %s", message)
        self.messages.append(message)

    def __len__(self) -> int:
        return len(self.messages)

    def __bool__(self) -> bool:
        return bool(self.messages)

    def __iter__(self):
        return iter(self.messages)

    def raise_if_any(self) -> None:
        """Raise SchemaValidationError if anything was recorded."""
        if self.messages:
            raise SchemaValidationError(self.messages)
