# -*- coding: utf-8 -*-
"""
Utilities for rendering pipeline results as text.
"""
import logging
from typing import Iterable, List

from vidscribe_app.core.models import DiarizedTranscript, PipelineResult, SpeakerTurn

# Set up logging
logger = logging.getLogger(__name__)


def turn_lines(turns: Iterable[SpeakerTurn]) -> List[str]:
    """Return one ``Speaker {id}: {text}`` line per turn."""
    return [f"Speaker {turn.speaker_id}: {turn.text}" for turn in turns]


def result_to_text(result: PipelineResult) -> str:
    """
    Render a result the way it is copied to the clipboard.

    Diarized results become ``Speaker {id}: {text}`` blocks separated by a
    blank line; flat results are returned as-is.
    """
    if isinstance(result, DiarizedTranscript):
        if not result.turns:
            logger.warning("result_to_text called with no speaker turns.")
        return "\n\n".join(turn_lines(result.turns))
    return result.text


def result_to_markdown(result: PipelineResult) -> str:
    """
    Render a result as Markdown with the speaker label in bold
    (e.g. "**Speaker 0:** Hello there"). Turns are separated by double
    newlines.
    """
    if isinstance(result, DiarizedTranscript):
        paragraphs = [f"**Speaker {t.speaker_id}:** {t.text}" for t in result.turns]
        logger.info("Formatted %d turns into Markdown.", len(paragraphs))
        return "\n\n".join(paragraphs)
    return result.text
