"""Progress telemetry for the scrape pipeline."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Coroutine

logger = logging.getLogger(__name__)

# Async callback receiving ``(event_name, payload)``; used for SSE streaming.
EventCallback = Callable[[str, dict[str, Any]], Coroutine[Any, Any, None]]


async def emit_event(
    on_event: EventCallback | None,
    event: str,
    data: dict[str, Any] | None = None,
) -> None:
    """Emit a pipeline event if a callback is registered."""
    if on_event:
        logger.debug("scrape event emitted", extra={"event": event})
        await on_event(event, data or {})


def progress_step(concurrency: int) -> int:
    """Completions between progress reports; coarser at high parallelism."""
    return 200 if concurrency > 10 else 20


@dataclass
class ProgressTracker:
    """Counts finished page tasks and reports at a fixed cadence."""

    total: int
    step: int
    completed: int = 0
    scraped: int = 0

    def record(self, *, scraped: bool) -> bool:
        """Count one finished task. Returns ``True`` when a report is due."""
        self.completed += 1
        if scraped:
            self.scraped += 1
        return self.completed % self.step == 0 or self.completed == self.total

    def snapshot(self) -> dict[str, int]:
        return {"completed": self.completed, "total": self.total, "scraped": self.scraped}
