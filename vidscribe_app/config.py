"""
Global configuration settings for the video transcription app.
"""
import os
from dotenv import load_dotenv

# Load environment variables from .env file if present
load_dotenv()

# Transcoder binaries (resolved once at extractor initialization)
FFMPEG_BINARY = os.environ.get("FFMPEG_BINARY", "ffmpeg")
FFPROBE_BINARY = os.environ.get("FFPROBE_BINARY", "ffprobe")

# Audio output settings
AUDIO_CODEC = "libmp3lame"
AUDIO_FORMAT = "mp3"
AUDIO_MIME_TYPE = "audio/mpeg"
AUDIO_QUALITY = "2"  # VBR, roughly 190 kbps

# Deepgram speech-to-text
DEEPGRAM_API_URL = os.environ.get("DEEPGRAM_API_URL", "https://api.deepgram.com/v1/listen")
DEEPGRAM_API_KEY = os.environ.get("DEEPGRAM_API_KEY", "")
DEFAULT_MODEL = "nova"
DEFAULT_LANGUAGE = "en"        # BCP-47 language tag
REQUEST_TIMEOUT_S = float(os.environ.get("REQUEST_TIMEOUT_S", "300"))


# Pipeline state names
class Status:
    IDLE = "idle"
    INITIALIZING = "initializing"
    READY = "ready"
    EXTRACTING = "extracting"
    TRANSCRIBING = "transcribing"
    SEGMENTING = "segmenting"
    DONE = "done"
    FAILED = "failed"

    ACTIVE = (EXTRACTING, TRANSCRIBING, SEGMENTING)
