"""Step-by-step audit progress on stderr."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

import click


class StepStatus(Enum):
    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class StepInfo:
    """One pipeline step and its timing."""

    name: str
    description: str
    status: StepStatus = StepStatus.PENDING
    started: float | None = None
    finished: float | None = None
    details: list[str] = field(default_factory=list)

    @property
    def duration(self) -> float | None:
        if self.started is None:
            return None
        return (self.finished or time.monotonic()) - self.started


_STYLES: dict[StepStatus, tuple[str, str]] = {
    StepStatus.PENDING: ("○", "bright_black"),
    StepStatus.RUNNING: ("◐", "yellow"),
    StepStatus.COMPLETED: ("✓", "green"),
    StepStatus.FAILED: ("✗", "red"),
}


def _echo_stderr(line: str) -> None:
    # click drops the ANSI styling when stderr is not a terminal
    click.echo(line, err=True)


class ProgressTracker:
    """
    Prints one line per step transition, numbered against the whole pipeline:

        [1/5] ◐ Loading documents ...
            → Loaded 42 of 42 files
        [1/5] ✓ Loading documents (0.2s)

    The report owns stdout, so `--format json` stays parseable.
    """

    def __init__(self, output: Callable[[str], None] | None = None):
        self.steps: dict[str, StepInfo] = {}
        self.output = output or _echo_stderr
        self._current: str | None = None

    def add_step(self, step_id: str, description: str) -> None:
        self.steps[step_id] = StepInfo(name=step_id, description=description)

    def start_step(self, step_id: str) -> None:
        step = self.steps.get(step_id)
        if step is None:
            return
        step.status = StepStatus.RUNNING
        step.started = time.monotonic()
        step.details.clear()
        self._current = step_id
        self._emit(step)

    def add_detail(self, detail: str) -> None:
        if self._current is None:
            return
        self.steps[self._current].details.append(detail)
        self.output(f"    → {detail}")

    def complete_step(self, step_id: str, success: bool = True) -> None:
        step = self.steps.get(step_id)
        if step is None:
            return
        step.status = StepStatus.COMPLETED if success else StepStatus.FAILED
        step.finished = time.monotonic()
        if self._current == step_id:
            self._current = None
        self._emit(step)

    def _emit(self, step: StepInfo) -> None:
        position = list(self.steps).index(step.name) + 1
        symbol, color = _STYLES[step.status]
        line = f"[{position}/{len(self.steps)}] {click.style(symbol, fg=color)} {step.description}"
        if step.status == StepStatus.RUNNING:
            line += click.style(" ...", dim=True)
        elif step.duration is not None:
            line += click.style(f" ({step.duration:.1f}s)", dim=True)
        self.output(line)


class ProgressCallback:
    """Adapter handed to CorpusAuditor; forwards step events to a tracker."""

    def __init__(self, tracker: ProgressTracker):
        self.tracker = tracker

    def on_step_start(self, step_id: str, description: str) -> None:
        if step_id not in self.tracker.steps:
            self.tracker.add_step(step_id, description)
        self.tracker.start_step(step_id)

    def on_step_detail(self, detail: str) -> None:
        self.tracker.add_detail(detail)

    def on_step_complete(self, step_id: str, success: bool = True) -> None:
        self.tracker.complete_step(step_id, success)


def create_pipeline_tracker(
    steps: list[tuple[str, str]],
    output: Callable[[str], None] | None = None,
) -> tuple[ProgressTracker, ProgressCallback]:
    """
    Create a tracker with all steps registered up front, so numbering is stable.

    Args:
        steps: (step_id, description) pairs in pipeline order
        output: Line sink, stderr by default
    """
    tracker = ProgressTracker(output=output)
    for step_id, description in steps:
        tracker.add_step(step_id, description)
    return tracker, ProgressCallback(tracker)


__all__ = [
    "ProgressTracker",
    "ProgressCallback",
    "StepStatus",
    "StepInfo",
    "create_pipeline_tracker",
]
