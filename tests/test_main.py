"""
Command-line surface: argument handling and output, pipeline mocked.
"""
import pytest

from vidscribe_app import main as cli
from vidscribe_app.config import Status
from vidscribe_app.core.models import DiarizedTranscript, FlatTranscript, SpeakerTurn
from vidscribe_app.core.state import PipelineState


@pytest.fixture
def clip(tmp_path):
    path = tmp_path / "clip.mp4"
    path.write_bytes(b"v")
    return path


@pytest.fixture
def api_key(mocker):
    mocker.patch.object(cli, "DEEPGRAM_API_KEY", "test-key")


def fake_run(mocker, state):
    async def run(video_path, options, api_key, url):
        return state
    return mocker.patch.object(cli, "run", side_effect=run)


def test_prints_copy_text(mocker, clip, api_key, capsys):
    result = DiarizedTranscript(turns=(SpeakerTurn(speaker_id=0, text="Hi."),
                                       SpeakerTurn(speaker_id=1, text="Hello.")))
    run = fake_run(mocker, PipelineState(status=Status.DONE, result=result))

    assert cli.main([str(clip), "--language", "fr", "--no-diarize"]) == 0

    assert capsys.readouterr().out == "Speaker 0: Hi.\n\nSpeaker 1: Hello.\n"
    options = run.call_args.args[1]
    assert options.language_code == "fr"
    assert options.diarize is False


def test_writes_markdown_file(mocker, clip, api_key, tmp_path):
    result = DiarizedTranscript(turns=(SpeakerTurn(speaker_id=0, text="Hi."),))
    fake_run(mocker, PipelineState(status=Status.DONE, result=result))
    out = tmp_path / "out.md"

    assert cli.main([str(clip), "--markdown", "--out", str(out)]) == 0
    assert out.read_text(encoding="utf-8") == "**Speaker 0:** Hi.\n"


def test_failure_exit_code(mocker, clip, api_key, capsys):
    fake_run(mocker, PipelineState(status=Status.FAILED, error="unsupported codec"))

    assert cli.main([str(clip)]) == 1
    assert "unsupported codec" in capsys.readouterr().err


def test_flat_result(mocker, clip, api_key, capsys):
    fake_run(mocker, PipelineState(status=Status.DONE, result=FlatTranscript(text="flat words")))
    assert cli.main([str(clip)]) == 0
    assert capsys.readouterr().out == "flat words\n"


def test_missing_api_key(mocker, clip):
    mocker.patch.object(cli, "DEEPGRAM_API_KEY", "")
    with pytest.raises(SystemExit):
        cli.main([str(clip)])


def test_missing_video(api_key, tmp_path):
    with pytest.raises(SystemExit):
        cli.main([str(tmp_path / "nope.mp4")])


def test_http_client_is_authorized():
    http = cli.build_http_client("abc", timeout=5)
    assert http.headers["Authorization"] == "Token abc"
    assert http.timeout.read == 5
