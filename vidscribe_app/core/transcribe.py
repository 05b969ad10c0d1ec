"""
Deepgram client for pre-recorded transcription with speaker diarization.
"""
import json
import logging

import httpx

from vidscribe_app.config import DEEPGRAM_API_URL
from vidscribe_app.core.errors import TranscriptionError
from vidscribe_app.core.models import AudioAsset, RecognitionOptions, RecognitionResult
from vidscribe_app.core.response import ListenResponse

# Set up logging
logger = logging.getLogger(__name__)


def _error_message(response: httpx.Response) -> str:
    """Pull the provider's own message out of an error response."""
    try:
        body = response.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        body = None
    if isinstance(body, dict):
        for key in ("err_msg", "reason", "message"):
            if body.get(key):
                return str(body[key])
    text = response.text.strip()
    return f"HTTP {response.status_code}: {text}" if text else f"HTTP {response.status_code}"


class TranscriptionClient:
    """Submits one audio payload per call. No retries, no caching.

    The injected ``httpx.AsyncClient`` must already carry the
    ``Authorization`` header; this class never touches credentials.
    """

    def __init__(self, http: httpx.AsyncClient, url: str = DEEPGRAM_API_URL):
        self.http = http
        self.url = url

    async def fetch_payload(self, audio: AudioAsset, options: RecognitionOptions) -> dict:
        """Send audio to the service and return the decoded JSON body as is.

        Raises:
            TranscriptionError: On network failure, non-2xx status or a body
                that is not JSON
        """
        logger.info(
            "Submitting %d bytes of %s (language=%s, diarize=%s)",
            audio.size, audio.mime_type, options.language_code, options.diarize,
        )
        try:
            response = await self.http.post(
                self.url,
                params=options.to_query_params(),
                content=audio.data,
                headers={"Content-Type": audio.mime_type},
            )
        except httpx.HTTPError as e:
            message = str(e) or type(e).__name__
            logger.error("Transcription request failed: %s", message)
            raise TranscriptionError(message) from e

        if response.is_error:
            message = _error_message(response)
            logger.error("Transcription service returned %d: %s", response.status_code, message)
            raise TranscriptionError(message)

        try:
            payload = response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise TranscriptionError(f"Invalid JSON in transcription response: {e}") from e
        return payload

    async def transcribe(
        self,
        audio: AudioAsset,
        options: RecognitionOptions,
    ) -> RecognitionResult:
        """Send audio to the service and parse the response.

        Args:
            audio: Encoded audio and its MIME type
            options: Recognition settings for this run

        Returns:
            RecognitionResult with the flat transcript and, when present,
            the tagged words of the first channel

        Raises:
            TranscriptionError: On network failure, non-2xx status or an
                unreadable body; the message is the provider's, unmodified
        """
        payload = await self.fetch_payload(audio, options)
        result = ListenResponse.parse(payload).to_result()
        logger.info(
            "Transcription completed: %d chars, %s words",
            len(result.transcript),
            "no" if result.words is None else len(result.words),
        )
        return result
