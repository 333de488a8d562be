"""Analysis run lifecycle, kept independent of the UI framework.

A run moves Idle -> Requesting -> Succeeded | Failed and may start again from
any resting state. Only one run can be in flight at a time.
"""
import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Tuple

from sentiment_board.analyzer import BatchAnalyzer
from sentiment_board.input_collector import InputCollector
from sentiment_board.models import AnalysisRequestItem, AnalysisResult

logger = logging.getLogger(__name__)

EMPTY_SUBMISSION_MESSAGE = "Please add some text to analyze."
ANALYSIS_FAILED_MESSAGE = (
    "An error occurred during analysis. The AI model may be temporarily unavailable "
    "or the input format is incorrect. Please try again."
)


class RunStatus(str, Enum):
    IDLE = "idle"
    REQUESTING = "requesting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


class RunEvent(str, Enum):
    START = "start"
    SUCCEED = "succeed"
    FAIL = "fail"
    RESET = "reset"


class InvalidTransition(RuntimeError):
    pass


class ValidationError(ValueError):
    """Submission rejected before any external call."""


@dataclass(frozen=True)
class RunState:
    status: RunStatus = RunStatus.IDLE
    results: Tuple[AnalysisResult, ...] = ()
    error: Optional[str] = None

    @property
    def loading(self) -> bool:
        return self.status is RunStatus.REQUESTING

    @property
    def has_results(self) -> bool:
        return self.status is RunStatus.SUCCEEDED and bool(self.results)


_RESTING = (RunStatus.IDLE, RunStatus.SUCCEEDED, RunStatus.FAILED)


def transition(
    state: RunState,
    event: RunEvent,
    results: Tuple[AnalysisResult, ...] = (),
    error: Optional[str] = None,
) -> RunState:
    """Return the state following `event`; raise InvalidTransition if not allowed."""
    if event is RunEvent.RESET:
        if state.loading:
            raise InvalidTransition("cannot reset while a request is in flight")
        return RunState()

    if event is RunEvent.START and state.status in _RESTING:
        return RunState(status=RunStatus.REQUESTING)

    if event is RunEvent.SUCCEED and state.loading:
        return RunState(status=RunStatus.SUCCEEDED, results=tuple(results))

    # Validation failures are reported from a resting state without a request.
    if event is RunEvent.FAIL and (state.loading or state.status in _RESTING):
        return RunState(status=RunStatus.FAILED, error=error or ANALYSIS_FAILED_MESSAGE)

    raise InvalidTransition(f"{event.value!r} not allowed from {state.status.value!r}")


class DashboardController:
    """Owns the entry list and the run state for one user session."""

    def __init__(
        self,
        analyzer: BatchAnalyzer,
        collector: Optional[InputCollector] = None,
        on_change: Optional[Callable[[RunState], None]] = None,
    ):
        self.analyzer = analyzer
        self.collector = collector or InputCollector()
        self.on_change = on_change
        self._state = RunState()

    @property
    def state(self) -> RunState:
        return self._state

    def _apply(self, event: RunEvent, **kwargs) -> RunState:
        self._state = transition(self._state, event, **kwargs)
        logger.debug("Run state -> %s", self._state.status.value)
        if self.on_change is not None:
            self.on_change(self._state)
        return self._state

    def can_analyze(self) -> bool:
        """True when no run is in flight and at least one entry has text."""
        return not self._state.loading and self.collector.has_content()

    def begin(self) -> List[AnalysisRequestItem]:
        """
        Validate the entries and enter Requesting.

        Raises:
            ValidationError: every entry is blank (state becomes Failed)
            InvalidTransition: a run is already in flight
        """
        if self._state.loading:
            raise InvalidTransition("an analysis run is already in progress")

        items = self.collector.valid_submission_set()
        if not items:
            self._apply(RunEvent.FAIL, error=EMPTY_SUBMISSION_MESSAGE)
            raise ValidationError(EMPTY_SUBMISSION_MESSAGE)

        self._apply(RunEvent.START)
        return items

    def finish(self, results: List[AnalysisResult]) -> RunState:
        logger.info("Analysis run succeeded with %d result(s)", len(results))
        return self._apply(RunEvent.SUCCEED, results=tuple(results))

    def fail(self, exc: BaseException) -> RunState:
        logger.error("Analysis run failed: %s", exc, exc_info=exc)
        return self._apply(RunEvent.FAIL, error=ANALYSIS_FAILED_MESSAGE)

    async def execute(self, items: List[AnalysisRequestItem]) -> RunState:
        """Await the analyzer off the event loop and settle the run."""
        try:
            results = await asyncio.to_thread(self.analyzer.analyze, items)
        except Exception as e:
            return self.fail(e)
        return self.finish(results)

    async def run(self) -> RunState:
        try:
            items = self.begin()
        except ValidationError:
            return self._state
        return await self.execute(items)

    def clear(self) -> None:
        """Reset inputs, results and error."""
        self.collector.reset()
        self._apply(RunEvent.RESET)
