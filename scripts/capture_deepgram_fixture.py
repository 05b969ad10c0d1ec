#!/usr/bin/env python3
"""
Freeze a real Deepgram response for a clip into a JSON fixture.

Why?
    • Unit tests shouldn't call the paid speech-to-text service every run.
    • We extract and transcribe **once**, then reuse the JSON forever
      (regenerate only when you intentionally change model or options).

Outputs
-------
A file like tests/fixtures/deepgram_diarized.json with structure:
{
  "response":  { "results": { "channels": [...] } },   # raw provider JSON
  "copy_text": "Speaker 0: ...",                        # rendered snapshot
  "model_meta": {
        "model":        "nova",
        "diarize":      true,
        "generated_at": "2026-10-12T09:14:03Z"
  }
}
"""

from __future__ import annotations

import argparse
import asyncio
import json
import os
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict

# Add the parent directory to sys.path to make vidscribe_app importable
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from vidscribe_app.config import DEEPGRAM_API_URL, DEFAULT_LANGUAGE, DEFAULT_MODEL
from vidscribe_app.core.errors import PipelineError
from vidscribe_app.core.extract import MediaExtractor
from vidscribe_app.core.formatting import result_to_text
from vidscribe_app.core.models import RecognitionOptions, VideoAsset
from vidscribe_app.core.pipeline import build_result
from vidscribe_app.core.response import ListenResponse
from vidscribe_app.core.transcribe import TranscriptionClient
from vidscribe_app.main import build_http_client


async def build_fixture(
    video_path: Path,
    options: RecognitionOptions,
    api_key: str,
    url: str = DEEPGRAM_API_URL,
) -> Dict[str, Any]:
    """Run extraction and one real request; return a serialisable dict."""
    extractor = MediaExtractor()
    await extractor.initialize()
    audio = await extractor.extract_audio(VideoAsset.from_path(video_path))

    async with build_http_client(api_key) as http:
        raw = await TranscriptionClient(http, url=url).fetch_payload(audio, options)

    result = build_result(ListenResponse.parse(raw).to_result(), options)

    return {
        "response": raw,
        "copy_text": result_to_text(result),
        "model_meta": {
            "model": options.model,
            "diarize": options.diarize,
            "generated_at": datetime.now(timezone.utc).isoformat(timespec="seconds").replace("+00:00", "Z"),
        },
    }


# ---------- CLI -------------------------------------------------------------

def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(
        description="Generate a Deepgram JSON fixture for the unit tests."
    )
    parser.add_argument("--video", type=Path, required=True, help="Clip to transcribe.")
    parser.add_argument(
        "--out",
        type=Path,
        required=True,
        help="Where to write the JSON fixture (will overwrite).",
    )
    parser.add_argument("--model", default=DEFAULT_MODEL)
    parser.add_argument("--language", default=DEFAULT_LANGUAGE)
    parser.add_argument(
        "--no-diarize",
        action="store_true",
        help="Skip speaker diarization (flat transcript fixture).",
    )
    parser.add_argument(
        "--api-key",
        default=os.getenv("DEEPGRAM_API_KEY", ""),
        help="Deepgram API key (defaults to env DEEPGRAM_API_KEY).",
    )

    args = parser.parse_args(argv)

    if not args.video.exists():
        parser.error(f"Video not found: {args.video}")
    if not args.api_key:
        parser.error("No API key: pass --api-key or set DEEPGRAM_API_KEY")

    options = RecognitionOptions(
        language_code=args.language,
        diarize=not args.no_diarize,
        model=args.model,
    )

    print(f"[•] Transcribing {args.video} with Deepgram {args.model} …")
    try:
        fixture = asyncio.run(build_fixture(args.video, options, args.api_key))
    except PipelineError as e:
        sys.exit(f"[x] {e}")

    # Pretty-print JSON (ensure dirs exist)
    args.out.parent.mkdir(parents=True, exist_ok=True)
    with args.out.open("w", encoding="utf-8") as fh:
        json.dump(fixture, fh, ensure_ascii=False, indent=2)

    print(f"[✓] Fixture written → {args.out}")


if __name__ == "__main__":
    main()
