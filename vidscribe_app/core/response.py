"""
Partial model of the Deepgram pre-recorded response.

Every level of ``results.channels[].alternatives[].words[]`` may be missing.
The accessors here are the only place that walks the nested shape, so the
fallback to a flat transcript is a single code path.
"""
import logging
import typing as t

from pydantic import BaseModel, ConfigDict, ValidationError

from vidscribe_app.core.errors import TranscriptionError
from vidscribe_app.core.models import RecognitionResult, TaggedWord

logger = logging.getLogger(__name__)

_PERMISSIVE = ConfigDict(extra="ignore")


class ResponseWord(BaseModel):
    """One word entry. ``speaker`` is only present with diarization on."""
    word: str | None = None
    punctuated_word: str | None = None
    speaker: int | None = None
    start: float | None = None
    end: float | None = None
    model_config = _PERMISSIVE

    def display_text(self) -> str:
        """Punctuated form when available, raw token otherwise."""
        return self.punctuated_word or self.word or ""


class ResponseAlternative(BaseModel):
    transcript: str | None = None
    words: list[ResponseWord] | None = None
    model_config = _PERMISSIVE


class ResponseChannel(BaseModel):
    alternatives: list[ResponseAlternative] | None = None
    model_config = _PERMISSIVE


class ResponseResults(BaseModel):
    channels: list[ResponseChannel] | None = None
    model_config = _PERMISSIVE


class ListenResponse(BaseModel):
    results: ResponseResults | None = None
    model_config = _PERMISSIVE

    @classmethod
    def parse(cls, payload: t.Any) -> "ListenResponse":
        """Validate a decoded JSON body.

        Raises:
            TranscriptionError: If the body is not a JSON object or a present
                field has the wrong type
        """
        if not isinstance(payload, dict):
            raise TranscriptionError(
                f"Unexpected response body: {type(payload).__name__}"
            )
        try:
            return cls.model_validate(payload)
        except ValidationError as e:
            raise TranscriptionError(f"Malformed transcription response: {e}") from e

    def channel_count(self) -> int:
        if self.results is None or not self.results.channels:
            return 0
        return len(self.results.channels)

    def primary_alternative(self) -> ResponseAlternative | None:
        """Best alternative of the first channel, if any."""
        if self.results is None or not self.results.channels:
            return None
        alternatives = self.results.channels[0].alternatives
        if not alternatives:
            return None
        return alternatives[0]

    def transcript(self) -> str:
        alternative = self.primary_alternative()
        if alternative is None or alternative.transcript is None:
            return ""
        return alternative.transcript

    def words(self) -> list[TaggedWord] | None:
        """Words of the primary alternative, None when no words array was sent."""
        alternative = self.primary_alternative()
        if alternative is None or alternative.words is None:
            return None
        return [
            TaggedWord(text=w.display_text(), speaker_id=w.speaker)
            for w in alternative.words
        ]

    def to_result(self) -> RecognitionResult:
        words = self.words()
        logger.debug(
            "Parsed response: %d channel(s), %s word(s)",
            self.channel_count(),
            "no" if words is None else len(words),
        )
        return RecognitionResult(
            transcript=self.transcript(),
            words=words,
            channel_count=self.channel_count(),
        )
