"""Tests for the audio module."""
import subprocess
import pytest
from unittest.mock import patch, MagicMock
from stream_captions.audio import ffmpeg_ok, to_wav_16k_mono


class TestFfmpegOk:
    """Tests for ffmpeg_ok function."""

    @patch('stream_captions.audio.shutil.which')
    def test_ffmpeg_found(self, mock_which):
        """Test detection when ffmpeg is on PATH."""
        mock_which.return_value = "/usr/bin/ffmpeg"
        assert ffmpeg_ok() is True
        mock_which.assert_called_once_with("ffmpeg")

    @patch('stream_captions.audio.shutil.which')
    def test_ffmpeg_missing(self, mock_which):
        """Test detection when ffmpeg is missing."""
        mock_which.return_value = None
        assert ffmpeg_ok() is False


class TestToWav16kMono:
    """Tests for to_wav_16k_mono function."""

    @patch('stream_captions.audio.subprocess.run')
    def test_conversion_command(self, mock_run):
        """Test the ffmpeg command used for conversion."""
        mock_run.return_value = MagicMock(returncode=0, stderr="")
        to_wav_16k_mono("talk.mp4", "/tmp/out.wav")

        cmd = mock_run.call_args[0][0]
        assert cmd[0] == "ffmpeg"
        assert cmd[cmd.index("-i") + 1] == "talk.mp4"
        assert cmd[cmd.index("-ac") + 1] == "1"
        assert cmd[cmd.index("-ar") + 1] == "16000"
        assert cmd[-1] == "/tmp/out.wav"

    @patch('stream_captions.audio.subprocess.run')
    def test_conversion_failure(self, mock_run):
        """Test that a failed conversion raises with the stderr tail."""
        stderr = "\n".join(f"line {i}" for i in range(50))
        mock_run.return_value = MagicMock(returncode=1, stderr=stderr)

        with pytest.raises(subprocess.CalledProcessError) as exc_info:
            to_wav_16k_mono("broken.mp4", "/tmp/out.wav")

        assert exc_info.value.returncode == 1
        assert exc_info.value.stderr.splitlines()[0] == "line 30"
        assert exc_info.value.stderr.splitlines()[-1] == "line 49"
