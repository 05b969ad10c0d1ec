"""
Pipeline state machine.

``apply(state, event)`` is a pure function: it never performs I/O and returns
the input state unchanged for events that are not allowed in that state.
Events produced by a run carry the run id they belong to; events for any
other run are stale and ignored.
"""
import dataclasses
import typing as t

from vidscribe_app.config import Status
from vidscribe_app.core.models import PipelineResult, VideoAsset


@dataclasses.dataclass(frozen=True)
class PipelineState:
    """Single owned value describing the whole transcription lifecycle.

    Attributes:
        status: One of the ``Status`` names
        run_id: Monotonic id of the latest started (or cancelled) run
        engine_ready: Whether the transcoder finished initializing
        video: Currently selected video, if any
        result: Result of the last completed run
        error: Failure reason, only set in ``failed``
    """
    status: str = Status.IDLE
    run_id: int = 0
    engine_ready: bool = False
    video: t.Optional[VideoAsset] = None
    result: t.Optional[PipelineResult] = None
    error: t.Optional[str] = None

    @property
    def is_active(self) -> bool:
        return self.status in Status.ACTIVE

    @property
    def can_start(self) -> bool:
        return self.status == Status.READY and self.video is not None


# ===== events =====

@dataclasses.dataclass(frozen=True)
class InitStarted:
    pass


@dataclasses.dataclass(frozen=True)
class InitSucceeded:
    pass


@dataclasses.dataclass(frozen=True)
class InitFailed:
    reason: str


@dataclasses.dataclass(frozen=True)
class VideoSelected:
    video: VideoAsset


@dataclasses.dataclass(frozen=True)
class RunStarted:
    pass


@dataclasses.dataclass(frozen=True)
class AudioExtracted:
    run_id: int


@dataclasses.dataclass(frozen=True)
class TranscriptReceived:
    run_id: int


@dataclasses.dataclass(frozen=True)
class SegmentationDone:
    run_id: int
    result: PipelineResult


@dataclasses.dataclass(frozen=True)
class StageFailed:
    run_id: int
    reason: str


@dataclasses.dataclass(frozen=True)
class ResetRequested:
    pass


Event = t.Union[
    InitStarted, InitSucceeded, InitFailed, VideoSelected, RunStarted,
    AudioExtracted, TranscriptReceived, SegmentationDone, StageFailed,
    ResetRequested,
]

# status a run-scoped event must find, and the status it moves to
_RUN_STEPS = {
    AudioExtracted: (Status.EXTRACTING, Status.TRANSCRIBING),
    TranscriptReceived: (Status.TRANSCRIBING, Status.SEGMENTING),
}


def apply(state: PipelineState, event: Event) -> PipelineState:
    """Return the state that follows ``event``."""
    replace = dataclasses.replace
    status = state.status

    if isinstance(event, InitStarted):
        if status == Status.IDLE or (status == Status.FAILED and not state.engine_ready):
            return replace(state, status=Status.INITIALIZING, error=None)
        return state

    if isinstance(event, InitSucceeded):
        if status == Status.INITIALIZING:
            return replace(state, status=Status.READY, engine_ready=True)
        return state

    if isinstance(event, InitFailed):
        if status == Status.INITIALIZING:
            return replace(state, status=Status.FAILED, engine_ready=False, error=event.reason)
        return state

    if isinstance(event, VideoSelected):
        if status == Status.READY:
            return replace(state, video=event.video, result=None, error=None)
        return state

    if isinstance(event, RunStarted):
        if state.can_start:
            return replace(
                state,
                status=Status.EXTRACTING,
                run_id=state.run_id + 1,
                result=None,
                error=None,
            )
        return state

    if isinstance(event, (AudioExtracted, TranscriptReceived)):
        expected, following = _RUN_STEPS[type(event)]
        if event.run_id == state.run_id and status == expected:
            return replace(state, status=following)
        return state

    if isinstance(event, SegmentationDone):
        if event.run_id == state.run_id and status == Status.SEGMENTING:
            return replace(state, status=Status.DONE, result=event.result)
        return state

    if isinstance(event, StageFailed):
        if event.run_id == state.run_id and state.is_active:
            return replace(state, status=Status.FAILED, result=None, error=event.reason)
        return state

    if isinstance(event, ResetRequested):
        if status in (Status.DONE, Status.FAILED, Status.READY) or state.is_active:
            # an active run is cancelled by moving past its run id
            run_id = state.run_id + 1 if state.is_active else state.run_id
            return replace(
                state,
                status=Status.READY if state.engine_ready else Status.IDLE,
                run_id=run_id,
                video=None,
                result=None,
                error=None,
            )
        return state

    raise TypeError(f"Unknown pipeline event: {event!r}")
