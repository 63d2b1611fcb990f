"""Compensation log for multi-step workflows that span several backends."""

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

logger = logging.getLogger(__name__)

Compensation = Callable[[], Awaitable[object]]


@dataclass
class Saga:
    """Records an undo action after each completed step.

    compensate() runs the recorded actions in reverse order. A failing
    compensation is logged and the remaining ones still run.
    """

    name: str
    _compensations: list[tuple[str, Compensation]] = field(default_factory=list)

    def add_compensation(self, label: str, action: Compensation) -> None:
        self._compensations.append((label, action))

    @property
    def completed_steps(self) -> list[str]:
        return [label for label, _ in self._compensations]

    async def compensate(self) -> list[str]:
        """Undo completed steps newest first; return labels whose undo failed."""
        failed: list[str] = []
        while self._compensations:
            label, action = self._compensations.pop()
            try:
                await action()
                logger.info("%s: compensated %s", self.name, label)
            except Exception:
                logger.exception("%s: compensation for %s failed", self.name, label)
                failed.append(label)
        return failed
