#!/usr/bin/env python3
"""
Command-line entry point for the video transcription app.
"""
import argparse
import asyncio
import logging
import sys
from pathlib import Path

import httpx

from vidscribe_app.config import (
    DEEPGRAM_API_KEY,
    DEEPGRAM_API_URL,
    DEFAULT_LANGUAGE,
    DEFAULT_MODEL,
    REQUEST_TIMEOUT_S,
    Status,
)
from vidscribe_app.core.extract import MediaExtractor
from vidscribe_app.core.formatting import result_to_markdown, result_to_text
from vidscribe_app.core.models import RecognitionOptions, VideoAsset
from vidscribe_app.core.pipeline import PipelineController
from vidscribe_app.core.transcribe import TranscriptionClient

logger = logging.getLogger(__name__)


# Configure logging
def setup_logging(verbose=False):
    """Set up logging configuration."""
    log_level = logging.DEBUG if verbose else logging.INFO
    log_format = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'

    logging.basicConfig(level=log_level, format=log_format, handlers=[logging.StreamHandler()])

    # Set more restrictive log level for noisy libraries
    logging.getLogger('httpx').setLevel(logging.WARNING)
    logging.getLogger('httpcore').setLevel(logging.WARNING)


def build_http_client(api_key: str, timeout: float = REQUEST_TIMEOUT_S) -> httpx.AsyncClient:
    """Create a pre-authorized client for the speech-to-text service."""
    return httpx.AsyncClient(
        headers={"Authorization": f"Token {api_key}"},
        timeout=timeout,
    )


async def run(video_path: Path, options: RecognitionOptions, api_key: str, url: str):
    """Initialize, run the pipeline once and return the final state."""
    async with build_http_client(api_key) as http:
        controller = PipelineController(
            MediaExtractor(),
            TranscriptionClient(http, url=url),
            options,
        )
        state = await controller.initialize()
        if state.status != Status.READY:
            return state

        controller.select_video(VideoAsset.from_path(video_path))
        return await controller.start_run()


def main(argv=None):
    """Main entry point."""
    parser = argparse.ArgumentParser(description='Transcribe the audio track of a video with speaker labels')
    parser.add_argument('video', type=Path, help='Path to the video file')
    parser.add_argument('--language', default=DEFAULT_LANGUAGE, help='Spoken language tag')
    parser.add_argument('--model', default=DEFAULT_MODEL, help='Recognition model name')
    parser.add_argument('--no-diarize', action='store_true', help='Do not separate speakers')
    parser.add_argument('--no-punctuate', action='store_true', help='Do not restore punctuation')
    parser.add_argument('--multichannel', action='store_true', help='Transcribe channels independently')
    parser.add_argument('--markdown', action='store_true', help='Render speakers in bold Markdown')
    parser.add_argument('--out', type=Path, help='Write the transcript to this file')
    parser.add_argument('--api-url', default=DEEPGRAM_API_URL, help=argparse.SUPPRESS)
    parser.add_argument('-v', '--verbose', action='store_true', help='Enable verbose logging')

    args = parser.parse_args(argv)
    setup_logging(args.verbose)

    if not args.video.exists():
        parser.error(f"Video not found: {args.video}")
    if not DEEPGRAM_API_KEY:
        parser.error("DEEPGRAM_API_KEY is not set")

    options = RecognitionOptions(
        language_code=args.language,
        diarize=not args.no_diarize,
        punctuate=not args.no_punctuate,
        multichannel=args.multichannel,
        model=args.model,
    )

    logger.info("Starting transcription of %s", args.video)
    state = asyncio.run(run(args.video, options, DEEPGRAM_API_KEY, args.api_url))

    if state.status != Status.DONE:
        print(f"Error: {state.error}", file=sys.stderr)
        return 1

    render = result_to_markdown if args.markdown else result_to_text
    text = render(state.result)
    if args.out:
        args.out.write_text(text + "\n", encoding="utf-8")
        logger.info("Transcript written to %s", args.out)
    else:
        print(text)
    return 0


if __name__ == '__main__':
    sys.exit(main())
