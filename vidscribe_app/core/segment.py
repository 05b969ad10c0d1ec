"""
Merge speaker-tagged words into speaker turns.
"""
import logging
import typing as t

from vidscribe_app.core.models import SpeakerTurn, TaggedWord

# Set up logging
logger = logging.getLogger(__name__)


def segment(words: t.Iterable[TaggedWord]) -> list[SpeakerTurn]:
    """Group consecutive words of the same speaker into turns.

    Words without a speaker label or without text are skipped and do not
    end the current turn, so ``A x, (none) y, A z`` yields a single
    ``A: "x z"`` turn. Word text is stripped and joined with one space.
    Speakers are compared by exact value; turn order follows word order.

    Args:
        words: Ordered words as returned by the transcription client

    Returns:
        Ordered speaker turns; empty when no word carries a speaker
    """
    turns: list[SpeakerTurn] = []
    current_speaker: int | None = None
    buffer: list[str] = []

    def flush():
        text = " ".join(buffer).strip()
        if current_speaker is not None and text:
            turns.append(SpeakerTurn(speaker_id=current_speaker, text=text))
        buffer.clear()

    for word in words:
        text = word.text.strip()
        if word.speaker_id is None or not text:
            continue
        if word.speaker_id != current_speaker:
            flush()
            current_speaker = word.speaker_id
        buffer.append(text)

    flush()

    logger.debug("Segmented words into %d turns", len(turns))
    return turns
