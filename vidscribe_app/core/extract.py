"""
ffmpeg wrapper that strips the video stream and encodes audio as MP3.
"""
import asyncio
import logging
import shutil
import subprocess
import tempfile
import typing as t
from pathlib import Path

import ffmpeg

from vidscribe_app.config import (
    AUDIO_CODEC,
    AUDIO_FORMAT,
    AUDIO_MIME_TYPE,
    AUDIO_QUALITY,
    FFMPEG_BINARY,
    FFPROBE_BINARY,
)
from vidscribe_app.core.errors import ExtractionError, InitializationError
from vidscribe_app.core.models import AudioAsset, VideoAsset

# Set up logging
logger = logging.getLogger(__name__)

LogCallback = t.Callable[[str], None]


def _last_diagnostic(stderr: bytes | None) -> str | None:
    """Return the last non-empty line of ffmpeg's stderr."""
    if not stderr:
        return None
    lines = [ln.strip() for ln in stderr.decode(errors="replace").splitlines()]
    lines = [ln for ln in lines if ln]
    return lines[-1] if lines else None


class MediaExtractor:
    """Audio extractor backed by the ffmpeg/ffprobe binaries.

    The binaries are resolved once by :meth:`initialize`; the resolved engine
    is then shared by every run in the session.
    """

    def __init__(
        self,
        ffmpeg_binary: str = FFMPEG_BINARY,
        ffprobe_binary: str = FFPROBE_BINARY,
        log_callback: LogCallback | None = None,
    ):
        self.ffmpeg_binary = ffmpeg_binary
        self.ffprobe_binary = ffprobe_binary
        self.log_callback = log_callback
        self._ffmpeg_path: str | None = None
        self._ffprobe_path: str | None = None

    @property
    def is_ready(self) -> bool:
        return self._ffmpeg_path is not None and self._ffprobe_path is not None

    async def initialize(self) -> None:
        """Resolve both binaries and check that ffmpeg starts.

        Raises:
            InitializationError: If either binary is missing or unusable
        """
        if self.is_ready:
            return
        ffmpeg_path = self._resolve(self.ffmpeg_binary)
        ffprobe_path = self._resolve(self.ffprobe_binary)

        try:
            proc = await asyncio.to_thread(
                subprocess.run,
                [ffmpeg_path, "-hide_banner", "-version"],
                capture_output=True,
            )
        except OSError as e:
            raise InitializationError(f"Could not start {ffmpeg_path}: {e}") from e
        if proc.returncode != 0:
            message = _last_diagnostic(proc.stderr) or f"{ffmpeg_path} exited with {proc.returncode}"
            raise InitializationError(message)

        version = proc.stdout.decode(errors="replace").splitlines()
        logger.info("Transcoder ready: %s", version[0] if version else ffmpeg_path)
        self._ffmpeg_path = ffmpeg_path
        self._ffprobe_path = ffprobe_path

    def _resolve(self, binary: str) -> str:
        path = shutil.which(binary)
        if path is None:
            raise InitializationError(f"Executable not found: {binary}")
        return path

    async def extract_audio(self, video: VideoAsset) -> AudioAsset:
        """Convert a video container into an MP3 payload.

        Args:
            video: Video bytes and file name hint

        Returns:
            AudioAsset holding the encoded MP3 bytes

        Raises:
            InitializationError: If called before :meth:`initialize`
            ExtractionError: If ffmpeg rejects or fails on the input
        """
        if not self.is_ready:
            raise InitializationError("Transcoder is not initialized")
        logger.info("Extracting audio from %s (%d bytes)", video.filename, len(video.data))
        data = await asyncio.to_thread(self._extract_sync, video)
        logger.info("Audio extracted: %d bytes", len(data))
        return AudioAsset(data=data, mime_type=AUDIO_MIME_TYPE)

    def _extract_sync(self, video: VideoAsset) -> bytes:
        # ffmpeg needs a seekable input for most containers, so go through
        # a scoped temp dir that is removed on every exit path.
        suffix = f".{video.extension}" if video.extension else ""
        with tempfile.TemporaryDirectory(prefix="vidscribe_") as temp_dir:
            input_path = Path(temp_dir) / f"input{suffix}"
            output_path = Path(temp_dir) / f"output.{AUDIO_FORMAT}"
            try:
                input_path.write_bytes(video.data)
            except OSError as e:
                raise ExtractionError(f"Could not stage input: {e}") from e

            self._check_audio_stream(input_path)

            try:
                _, stderr = (
                    ffmpeg
                    .input(str(input_path))
                    .output(
                        str(output_path),
                        vn=None,
                        acodec=AUDIO_CODEC,
                        format=AUDIO_FORMAT,
                        **{"q:a": AUDIO_QUALITY},
                    )
                    .overwrite_output()
                    .run(cmd=self._ffmpeg_path, capture_stdout=True, capture_stderr=True)
                )
            except ffmpeg.Error as e:
                self._forward_log(e.stderr)
                message = _last_diagnostic(e.stderr) or str(e)
                logger.error("ffmpeg failed: %s", message)
                raise ExtractionError(message) from e
            except OSError as e:
                raise ExtractionError(str(e)) from e

            self._forward_log(stderr)

            if not output_path.exists() or output_path.stat().st_size == 0:
                raise ExtractionError("Transcoder produced no audio output")
            try:
                return output_path.read_bytes()
            except OSError as e:
                raise ExtractionError(str(e)) from e

    def _check_audio_stream(self, input_path: Path) -> None:
        """Fail early with a readable message when there is nothing to extract."""
        try:
            info = ffmpeg.probe(str(input_path), cmd=self._ffprobe_path)
        except ffmpeg.Error as e:
            self._forward_log(e.stderr)
            raise ExtractionError(_last_diagnostic(e.stderr) or str(e)) from e
        except OSError as e:
            raise ExtractionError(str(e)) from e

        streams = info.get("streams", [])
        if not any(s.get("codec_type") == "audio" for s in streams):
            raise ExtractionError("Input has no audio stream")
        duration = info.get("format", {}).get("duration")
        if duration:
            logger.debug("Input duration: %s s", duration)

    def _forward_log(self, stderr: bytes | None) -> None:
        if not stderr:
            return
        for line in stderr.decode(errors="replace").splitlines():
            if not line.strip():
                continue
            logger.debug("[ffmpeg] %s", line)
            if self.log_callback:
                self.log_callback(line)
