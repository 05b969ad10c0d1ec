"""
Pipeline orchestration: extract audio, transcribe it, merge speaker turns.
"""
import logging
import typing as t

from vidscribe_app.config import Status
from vidscribe_app.core.errors import PipelineError
from vidscribe_app.core.extract import MediaExtractor
from vidscribe_app.core.models import (
    DiarizedTranscript,
    FlatTranscript,
    PipelineResult,
    RecognitionOptions,
    RecognitionResult,
    VideoAsset,
)
from vidscribe_app.core.segment import segment
from vidscribe_app.core.state import (
    AudioExtracted,
    Event,
    InitFailed,
    InitStarted,
    InitSucceeded,
    PipelineState,
    ResetRequested,
    RunStarted,
    SegmentationDone,
    StageFailed,
    TranscriptReceived,
    VideoSelected,
    apply,
)
from vidscribe_app.core.transcribe import TranscriptionClient

# Set up logging
logger = logging.getLogger(__name__)

Listener = t.Callable[[PipelineState], None]


def build_result(recognition: RecognitionResult, options: RecognitionOptions) -> PipelineResult:
    """Pick the diarized or flat variant for a finished transcription.

    Only the first channel is segmented. Speaker ids are not comparable
    across channels, so multichannel diarization is not merged.
    """
    if options.multichannel and options.diarize and recognition.channel_count > 1:
        logger.warning(
            "Multichannel diarization is not supported; using channel 0 of %d",
            recognition.channel_count,
        )

    turns = segment(recognition.words or [])
    if turns:
        return DiarizedTranscript(turns=tuple(turns))

    if options.diarize:
        logger.info("No speaker labels in response, falling back to flat transcript")
    return FlatTranscript(text=recognition.transcript)


class PipelineController:
    """Owns the pipeline state and drives one run at a time.

    Runs are sequential by construction: a run can only start from ``ready``
    and the state leaves ``ready`` before the first suspension point.
    """

    def __init__(
        self,
        extractor: MediaExtractor,
        transcriber: TranscriptionClient,
        options: RecognitionOptions | None = None,
    ):
        """Initialize the controller.

        Args:
            extractor: Audio extractor, shared by every run in the session
            transcriber: Speech-to-text client
            options: Recognition settings, defaults when not provided
        """
        self.extractor = extractor
        self.transcriber = transcriber
        self.options = options or RecognitionOptions()
        self._state = PipelineState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> PipelineState:
        return self._state

    @property
    def result(self) -> PipelineResult | None:
        return self._state.result

    @property
    def error(self) -> str | None:
        return self._state.error

    def add_listener(self, listener: Listener) -> None:
        """Register a callback invoked with every new state."""
        self._listeners.append(listener)

    def _dispatch(self, event: Event) -> PipelineState:
        previous = self._state
        self._state = apply(previous, event)
        if self._state is previous:
            logger.debug("Ignored %s in state %s", type(event).__name__, previous.status)
            return self._state

        if self._state.status != previous.status:
            logger.info("Pipeline %s -> %s", previous.status, self._state.status)
        for listener in self._listeners:
            listener(self._state)
        return self._state

    def _is_current(self, run_id: int) -> bool:
        if self._state.run_id != run_id:
            logger.warning("Discarding result of cancelled run %d", run_id)
            return False
        return True

    async def initialize(self) -> PipelineState:
        """Load the transcoder. Also used to retry after a failed load."""
        if self._dispatch(InitStarted()).status != Status.INITIALIZING:
            return self._state
        try:
            await self.extractor.initialize()
        except PipelineError as e:
            logger.error("Transcoder initialization failed: %s", e.message)
            return self._dispatch(InitFailed(e.message))
        return self._dispatch(InitSucceeded())

    def select_video(self, video: VideoAsset) -> PipelineState:
        """Replace the selected video and discard any previous result."""
        return self._dispatch(VideoSelected(video))

    def reset(self) -> PipelineState:
        """Return to ``ready`` (or ``idle`` without a transcoder)."""
        return self._dispatch(ResetRequested())

    async def start_run(self) -> PipelineState:
        """Run the full pipeline on the selected video.

        Ignored unless the state is ``ready`` with a video selected and the
        transcoder loaded.

        Returns:
            The state after the run (``done`` or ``failed``), or the unchanged
            state when the request was ignored
        """
        if not (self._state.can_start and self.extractor.is_ready):
            logger.warning("Run request ignored in state %s", self._state.status)
            return self._state

        state = self._dispatch(RunStarted())
        run_id = state.run_id
        video = state.video
        logger.info("Starting run %d for %s", run_id, video.filename)

        try:
            audio = await self.extractor.extract_audio(video)
        except PipelineError as e:
            logger.error("Run %d extraction failed: %s", run_id, e.message)
            return self._dispatch(StageFailed(run_id, e.message))
        if not self._is_current(run_id):
            return self._state
        self._dispatch(AudioExtracted(run_id))

        try:
            recognition = await self.transcriber.transcribe(audio, self.options)
        except PipelineError as e:
            logger.error("Run %d transcription failed: %s", run_id, e.message)
            return self._dispatch(StageFailed(run_id, e.message))
        del audio  # submitted; no later stage needs the bytes
        if not self._is_current(run_id):
            return self._state
        self._dispatch(TranscriptReceived(run_id))

        result = build_result(recognition, self.options)
        state = self._dispatch(SegmentationDone(run_id, result))
        logger.info("Run %d completed: %s transcript", run_id, result.kind)
        return state
