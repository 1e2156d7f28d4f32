"""End-to-end tests for audio_extractor.service with ffmpeg mocked out."""

import subprocess
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from audio_extractor.models import ExtractionRequest, ValidatedRequest
from audio_extractor.reporting import NullReporter
from audio_extractor.service import plan_extraction, run_extraction


@pytest.fixture
def lockdown(tmp_path):
    path = tmp_path / "lockdown.mp4"
    path.write_bytes(b"\x00")
    return path


@pytest.fixture
def ffmpeg_on_path():
    with patch("audio_extractor.ffmpeg.shutil.which", return_value="/usr/bin/ffmpeg"):
        yield


@pytest.fixture
def fake_run():
    with patch("audio_extractor.ffmpeg.subprocess.run") as run:
        yield run


def _ffmpeg_cmd(run):
    return run.call_args[0][0]


def _value_after(cmd, flag):
    return cmd[cmd.index(flag) + 1]


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


def test_default_speech_extraction(lockdown, ffmpeg_on_path, fake_run):
    result = run_extraction(ExtractionRequest(input_file=str(lockdown)), NullReporter(), probe=None)

    assert result.success
    assert result.exit_code == 0
    assert result.output_path == lockdown.parent / "lockdown_tts.wav"

    cmd = _ffmpeg_cmd(fake_run)
    assert cmd[0] == "/usr/bin/ffmpeg"
    flt = _value_after(cmd, "-af")
    assert "highpass=f=80" in flt
    assert "lowpass=f=11000" in flt
    assert "aresample=24000" in flt
    assert "loudnorm=I=-16" in flt
    assert cmd[-1] == str(lockdown.parent / "lockdown_tts.wav")


def test_start_and_duration_name(tmp_path, ffmpeg_on_path, fake_run):
    podcast = tmp_path / "podcast.mp4"
    podcast.write_bytes(b"\x00")
    request = ExtractionRequest(input_file=str(podcast), start="00:05:30", duration="00:00:20")

    result = run_extraction(request, NullReporter(), probe=None)

    assert result.output_path == tmp_path / "podcast_tts_s00-05-30_d00-00-20.wav"
    cmd = _ffmpeg_cmd(fake_run)
    assert _value_after(cmd, "-ss") == "00:05:30"
    assert _value_after(cmd, "-t") == "00:00:20"


def test_end_before_start_never_launches(lockdown, ffmpeg_on_path, fake_run):
    request = ExtractionRequest(input_file=str(lockdown), start="00:01:00", end="00:00:59")

    result = run_extraction(request, NullReporter())

    assert not result.success
    assert result.exit_code == 2
    assert result.error_kind == "EndBeforeStart"
    fake_run.assert_not_called()


def test_explicit_output_is_used(lockdown, ffmpeg_on_path, fake_run):
    target = lockdown.parent / "custom.wav"
    request = ExtractionRequest(input_file=str(lockdown), output=str(target), no_tts=True)

    result = run_extraction(request, NullReporter(), probe=None)

    assert result.output_path == target
    assert "-af" not in _ffmpeg_cmd(fake_run)


# ---------------------------------------------------------------------------
# Collision avoidance
# ---------------------------------------------------------------------------


def test_existing_output_gets_numbered(lockdown, ffmpeg_on_path, fake_run):
    (lockdown.parent / "lockdown_tts.wav").touch()
    reporter = MagicMock()

    result = run_extraction(ExtractionRequest(input_file=str(lockdown)), reporter, probe=None)

    expected = lockdown.parent / "lockdown_tts_001.wav"
    assert result.output_path == expected
    reporter.info.assert_any_call(f"Output exists -> {expected}")
    assert _ffmpeg_cmd(fake_run)[-2:] == ["-n", str(expected)]


def test_force_reuses_existing_name(lockdown, ffmpeg_on_path, fake_run):
    (lockdown.parent / "lockdown_tts.wav").touch()
    request = ExtractionRequest(input_file=str(lockdown), force=True)

    result = run_extraction(request, NullReporter(), probe=None)

    expected = lockdown.parent / "lockdown_tts.wav"
    assert result.output_path == expected
    assert _ffmpeg_cmd(fake_run)[-2:] == ["-y", str(expected)]


# ---------------------------------------------------------------------------
# Failures
# ---------------------------------------------------------------------------


def test_tool_not_found(lockdown, fake_run):
    with patch("audio_extractor.ffmpeg.shutil.which", return_value=None):
        result = run_extraction(ExtractionRequest(input_file=str(lockdown)), NullReporter(), probe=None)

    assert result.error_kind == "ToolNotFound"
    assert result.exit_code == 2
    fake_run.assert_not_called()


def test_tool_execution_failed(lockdown, ffmpeg_on_path):
    reporter = MagicMock()
    error = subprocess.CalledProcessError(1, ["ffmpeg"])
    with patch("audio_extractor.ffmpeg.subprocess.run", side_effect=error):
        result = run_extraction(ExtractionRequest(input_file=str(lockdown)), reporter, probe=None)

    assert not result.success
    assert result.exit_code == 10
    assert result.error_kind == "ToolExecutionFailed"
    reporter.error.assert_called_once_with("ffmpeg failed (1)")


def test_unexpected_os_error(lockdown, ffmpeg_on_path):
    with patch(
        "audio_extractor.ffmpeg.subprocess.run", side_effect=PermissionError("denied")
    ):
        result = run_extraction(ExtractionRequest(input_file=str(lockdown)), NullReporter(), probe=None)

    assert result.error_kind == "Unexpected"
    assert result.exit_code == 2
    assert "denied" in result.error


def test_range_exceeding_probed_duration(lockdown, ffmpeg_on_path, fake_run):
    probe = MagicMock(return_value=30.0)
    request = ExtractionRequest(input_file=str(lockdown), start="00:01:00")

    result = run_extraction(request, NullReporter(), probe=probe)

    assert result.error_kind == "RangeExceedsMedia"
    probe.assert_called_once_with(str(lockdown), None)
    fake_run.assert_not_called()


def test_duration_lookup_gets_requested_ffmpeg_path(lockdown, fake_run):
    lookup = MagicMock(return_value=30.0)
    request = ExtractionRequest(
        input_file=str(lockdown), start="00:01:00", ffmpeg_path="/opt/ffmpeg"
    )

    run_extraction(request, NullReporter(), probe=lookup)

    lookup.assert_called_once_with(str(lockdown), "/opt/ffmpeg")


def test_unknown_probed_duration_does_not_fail(lockdown, ffmpeg_on_path, fake_run):
    request = ExtractionRequest(input_file=str(lockdown), start="00:01:00")
    result = run_extraction(request, NullReporter(), probe=lambda path, ffmpeg_path: None)
    assert result.success


# ---------------------------------------------------------------------------
# Best-effort side effects and verbose output
# ---------------------------------------------------------------------------


def test_autoplay_opens_output(lockdown, ffmpeg_on_path, fake_run):
    request = ExtractionRequest(input_file=str(lockdown), autoplay=True)
    with patch("audio_extractor.service.open_in_default_app") as opener:
        result = run_extraction(request, NullReporter(), probe=None)

    opener.assert_called_once_with(result.output_path)


def test_autoplay_failure_is_only_a_warning(lockdown, ffmpeg_on_path, fake_run):
    reporter = MagicMock()
    request = ExtractionRequest(input_file=str(lockdown), autoplay=True)
    with patch(
        "audio_extractor.service.open_in_default_app", side_effect=OSError("no viewer")
    ):
        result = run_extraction(request, reporter, probe=None)

    assert result.success
    reporter.warning.assert_called_once()
    assert "no viewer" in reporter.warning.call_args[0][0]


def test_verbose_reports_command_line(lockdown, ffmpeg_on_path, fake_run):
    reporter = MagicMock()
    request = ExtractionRequest(input_file=str(lockdown), verbose=True)

    run_extraction(request, reporter, probe=None)

    messages = [c[0][0] for c in reporter.info.call_args_list]
    assert "Running ffmpeg:" in messages
    assert any(m.startswith('"/usr/bin/ffmpeg" -hide_banner') for m in messages)


# ---------------------------------------------------------------------------
# plan_extraction
# ---------------------------------------------------------------------------


def test_plan_extraction(lockdown, ffmpeg_on_path):
    request = ExtractionRequest(input_file=str(lockdown), no_tts=True, channels=1)
    plan = plan_extraction(ValidatedRequest(request=request))

    assert plan.ffmpeg_path == "/usr/bin/ffmpeg"
    assert plan.output_path == Path(lockdown.parent / "lockdown_out.wav")
    assert plan.speech_mode is False
    assert plan.args[-1] == str(plan.output_path)
