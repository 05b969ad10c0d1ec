"""
Pytest configuration file for the vidscribe test suite.
"""

import json
import os
import sys
from pathlib import Path
import pytest

from vidscribe_app.core.models import AudioAsset, RecognitionResult, VideoAsset
from vidscribe_app.core.response import ListenResponse

# Add the parent directory to sys.path to allow imports from the root directory
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

# Define path to fixture data
FIXTURE_PATH = Path(__file__).parent / "fixtures" / "deepgram_diarized.json"

@pytest.fixture(scope="session")
def fixture_data():
    """Load JSON fixture into a python dict."""
    return json.loads(FIXTURE_PATH.read_text(encoding="utf-8"))

@pytest.fixture(scope="session")
def fixture_recognition(fixture_data):
    """Return a RecognitionResult parsed from the frozen provider response."""
    return ListenResponse.parse(fixture_data["response"]).to_result()

@pytest.fixture
def video():
    return VideoAsset(data=b"\x00\x00\x00\x18ftypmp42", filename="clip.mp4")

@pytest.fixture
def audio():
    return AudioAsset(data=b"ID3\x03\x00fake-mp3")

@pytest.fixture
def extractor(mocker, audio):
    """Ready extractor stand-in that returns a fixed audio payload."""
    fake = mocker.Mock()
    fake.is_ready = False

    async def initialize():
        fake.is_ready = True

    fake.initialize = mocker.AsyncMock(side_effect=initialize)
    fake.extract_audio = mocker.AsyncMock(return_value=audio)
    return fake

@pytest.fixture
def transcriber(mocker, fixture_recognition):
    """Transcription client stand-in answering with the fixture response."""
    fake = mocker.Mock()
    fake.transcribe = mocker.AsyncMock(return_value=fixture_recognition)
    return fake

@pytest.fixture
def recognition():
    """Factory for small hand-written recognition results."""
    def make(words=None, transcript="", channel_count=1):
        return RecognitionResult(transcript=transcript, words=words, channel_count=channel_count)
    return make

# Define custom markers for categorizing tests
def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line("markers", "optional: mark test as optional (may be skipped)")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow (may take longer to run)")

# Setup logging for tests
@pytest.fixture(scope="session", autouse=True)
def setup_logging():
    """Configure logging for tests."""
    import logging
    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )
    yield
