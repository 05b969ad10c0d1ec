"""
Unit tests for Pydantic models in the vidscribe_app.
"""
import pytest
from pydantic import TypeAdapter, ValidationError

from vidscribe_app.core.models import (
    AudioAsset,
    DiarizedTranscript,
    FlatTranscript,
    PipelineResult,
    RecognitionOptions,
    SpeakerTurn,
    TaggedWord,
    VideoAsset,
)


def test_video_asset_extension():
    """The file name hint is reduced to a lower-case extension."""
    assert VideoAsset(data=b"x", filename="Talk.MOV").extension == "mov"
    assert VideoAsset(data=b"x", filename="noext").extension == ""


def test_video_asset_from_path(tmp_path):
    path = tmp_path / "meeting.webm"
    path.write_bytes(b"webm-bytes")

    video = VideoAsset.from_path(path)
    assert video.data == b"webm-bytes"
    assert video.filename == "meeting.webm"
    assert video.extension == "webm"


def test_audio_asset_defaults():
    audio = AudioAsset(data=b"1234")
    assert audio.mime_type == "audio/mpeg"
    assert audio.size == 4


def test_recognition_options_defaults_and_query():
    options = RecognitionOptions()
    assert options.diarize is True
    assert options.punctuate is True
    assert options.multichannel is False

    params = RecognitionOptions(language_code="de", diarize=False).to_query_params()
    assert params == {
        "model": "nova",
        "language": "de",
        "diarize": "false",
        "punctuate": "true",
        "multichannel": "false",
    }


def test_recognition_options_are_immutable():
    options = RecognitionOptions()
    with pytest.raises(ValidationError):
        options.diarize = False


def test_tagged_word_speaker_optional():
    assert TaggedWord(text="hi").speaker_id is None
    assert TaggedWord(text="hi", speaker_id=2).speaker_id == 2


def test_speaker_turn_rejects_empty_text():
    """Test SpeakerTurn model validation errors."""
    with pytest.raises(ValidationError):
        SpeakerTurn(speaker_id=0, text="")

    with pytest.raises(ValidationError):
        SpeakerTurn(text="hello")  # Missing speaker_id


def test_pipeline_result_discriminator():
    adapter = TypeAdapter(PipelineResult)

    flat = adapter.validate_python({"kind": "flat", "text": "abc"})
    assert isinstance(flat, FlatTranscript)

    diarized = adapter.validate_python(
        {"kind": "diarized", "turns": [{"speaker_id": 1, "text": "yo"}]}
    )
    assert isinstance(diarized, DiarizedTranscript)
    assert diarized.turns == (SpeakerTurn(speaker_id=1, text="yo"),)
