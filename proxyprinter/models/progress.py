"""
Progress reporting for deck processing runs.

Consumers register a callback before starting a run. Reporting is advisory:
there is no backpressure and events are delivered synchronously in the order
they are emitted.
"""

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum


class ProgressStage(str, Enum):
    """Stage of a deck processing run."""

    RESOLVE_CARDS = "resolve_cards"
    DOWNLOAD_IMAGES = "download_images"


@dataclass(frozen=True, slots=True)
class ProgressEvent:
    """
    A progress update.

    Attributes:
        stage: Stage the update belongs to
        percent: Completion of the stage (0-100), None for message-only events
        error_message: Human-readable error to surface, if any
    """

    stage: ProgressStage
    percent: float | None = None
    error_message: str | None = None


ProgressCallback = Callable[[ProgressEvent], None]


class ProgressReporter:
    """Fan-out of progress events to subscribed callbacks."""

    def __init__(self) -> None:
        self._subscribers: list[ProgressCallback] = []
        self._last_percent: dict[ProgressStage, float] = {}

    def subscribe(self, callback: ProgressCallback) -> Callable[[], None]:
        """Register `callback`; returns a function that unregisters it."""
        self._subscribers.append(callback)

        def unsubscribe() -> None:
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    def start(self, stage: ProgressStage) -> None:
        """Reset the stage and announce 0%."""
        self._last_percent.pop(stage, None)
        self.report(stage, 0.0)

    def report(self, stage: ProgressStage, percent: float) -> None:
        """Emit a percentage, never going below the last one for the stage."""
        percent = max(0.0, min(100.0, percent))
        percent = max(percent, self._last_percent.get(stage, 0.0))
        self._last_percent[stage] = percent
        self._emit(ProgressEvent(stage=stage, percent=percent))

    def error(self, stage: ProgressStage, message: str) -> None:
        """Emit an error message without a percentage."""
        self._emit(ProgressEvent(stage=stage, error_message=message))

    def _emit(self, event: ProgressEvent) -> None:
        for callback in list(self._subscribers):
            callback(event)
