"""
Pydantic models for the video transcription app.

This module contains the data transfer objects passed between the extractor,
the transcription client, the segmenter and the pipeline controller.
"""
import typing as t
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from vidscribe_app.config import (
    AUDIO_MIME_TYPE,
    DEFAULT_LANGUAGE,
    DEFAULT_MODEL,
)


class VideoAsset(BaseModel):
    """Raw video bytes plus the file name used to pick a decode path.

    Attributes:
        data: The video container bytes
        filename: Original file name; its extension is a demuxer hint
    """
    data: bytes
    filename: str = "input.mp4"
    model_config = ConfigDict(frozen=True)

    @property
    def extension(self) -> str:
        """Lower-case extension without the dot, or '' when absent."""
        return Path(self.filename).suffix.lstrip(".").lower()

    @classmethod
    def from_path(cls, path: t.Union[str, Path]) -> "VideoAsset":
        path = Path(path)
        return cls(data=path.read_bytes(), filename=path.name)


class AudioAsset(BaseModel):
    """Compressed audio payload produced from exactly one VideoAsset.

    Attributes:
        data: Encoded audio bytes
        mime_type: MIME type sent to the speech-to-text service
    """
    data: bytes
    mime_type: str = AUDIO_MIME_TYPE
    model_config = ConfigDict(frozen=True)

    @property
    def size(self) -> int:
        return len(self.data)


class RecognitionOptions(BaseModel):
    """Recognition settings for one run. Immutable once built.

    Attributes:
        language_code: Tag identifying the spoken language
        diarize: Separate speakers
        punctuate: Restore punctuation and casing
        multichannel: Transcribe each input channel independently
        model: Provider model name
    """
    language_code: str = DEFAULT_LANGUAGE
    diarize: bool = True
    punctuate: bool = True
    multichannel: bool = False
    model: str = DEFAULT_MODEL
    model_config = ConfigDict(frozen=True)

    def to_query_params(self) -> dict[str, str]:
        """Render the options as provider query parameters."""
        return {
            "model": self.model,
            "language": self.language_code,
            "diarize": str(self.diarize).lower(),
            "punctuate": str(self.punctuate).lower(),
            "multichannel": str(self.multichannel).lower(),
        }


class TaggedWord(BaseModel):
    """Single recognized word with an optional speaker label.

    Attributes:
        text: Display text (punctuated form when the provider sent one)
        speaker_id: Speaker index, None when diarization was unavailable
    """
    text: str
    speaker_id: int | None = None
    model_config = ConfigDict(frozen=True)


class SpeakerTurn(BaseModel):
    """Maximal run of consecutive words attributed to one speaker."""
    speaker_id: int
    text: str = Field(min_length=1)
    model_config = ConfigDict(frozen=True)


class RecognitionResult(BaseModel):
    """Successful speech-to-text payload.

    Attributes:
        transcript: Flat transcript of the first channel's best alternative
        words: Ordered words, None when the provider sent no words array
        channel_count: Number of channels present in the response
    """
    transcript: str = ""
    words: list[TaggedWord] | None = None
    channel_count: int = 0
    model_config = ConfigDict(frozen=True)


class FlatTranscript(BaseModel):
    """Undivided transcript text with no speaker attribution."""
    kind: t.Literal["flat"] = "flat"
    text: str
    model_config = ConfigDict(frozen=True)


class DiarizedTranscript(BaseModel):
    """Ordered speaker turns."""
    kind: t.Literal["diarized"] = "diarized"
    turns: tuple[SpeakerTurn, ...]
    model_config = ConfigDict(frozen=True)


PipelineResult = t.Annotated[
    t.Union[FlatTranscript, DiarizedTranscript],
    Field(discriminator="kind"),
]
