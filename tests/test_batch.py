"""Tests for the batch module."""
import pytest
from pathlib import Path
from stream_captions.batch import (
    MEDIA_EXTS,
    caption_suffix,
    iter_media_files_in_dir,
    expand_inputs,
    default_output_for,
    preflight_one,
)


class TestMediaExts:
    """Tests for MEDIA_EXTS constant."""

    def test_media_exts_common_formats(self):
        """Test that common audio and video formats are included."""
        assert {".mp3", ".wav", ".m4a", ".flac", ".mp4", ".mkv"}.issubset(MEDIA_EXTS)


class TestIterMediaFilesInDir:
    """Tests for iter_media_files_in_dir function."""

    def test_iter_empty_directory(self, tmp_path):
        """Test iterating over empty directory."""
        assert list(iter_media_files_in_dir(tmp_path)) == []

    def test_iter_media_files_sorted(self, tmp_path):
        """Test that media files come back in sorted order."""
        for name in ("b.mp3", "a.wav", "c.mp4"):
            (tmp_path / name).touch()
        result = list(iter_media_files_in_dir(tmp_path))
        assert [p.name for p in result] == ["a.wav", "b.mp3", "c.mp4"]

    def test_iter_media_files_ignores_non_media(self, tmp_path):
        """Test that non-media files are skipped."""
        (tmp_path / "notes.txt").touch()
        (tmp_path / "talk.vtt").touch()
        (tmp_path / "talk.mp3").touch()
        result = list(iter_media_files_in_dir(tmp_path))
        assert [p.name for p in result] == ["talk.mp3"]

    def test_iter_media_files_recursive(self, tmp_path):
        """Test that subdirectories are searched."""
        sub = tmp_path / "sub"
        sub.mkdir()
        (sub / "deep.flac").touch()
        assert list(iter_media_files_in_dir(tmp_path)) == [sub / "deep.flac"]

    def test_iter_media_files_case_insensitive(self, tmp_path):
        """Test that extensions match regardless of case."""
        (tmp_path / "loud.MP3").touch()
        assert len(list(iter_media_files_in_dir(tmp_path))) == 1


class TestExpandInputs:
    """Tests for expand_inputs function."""

    def test_expand_inputs_single_file(self, tmp_path):
        """Test expanding single file input."""
        test_file = tmp_path / "test.mp3"
        test_file.touch()
        assert expand_inputs([str(test_file)]) == [test_file]

    def test_expand_inputs_directory(self, tmp_path):
        """Test expanding directory input."""
        (tmp_path / "test1.mp3").touch()
        (tmp_path / "test2.mp4").touch()
        assert len(expand_inputs([str(tmp_path)])) == 2

    def test_expand_inputs_glob_pattern(self, tmp_path):
        """Test expanding glob pattern."""
        (tmp_path / "test1.mp3").touch()
        (tmp_path / "test2.mp3").touch()
        (tmp_path / "test.mp4").touch()
        result = expand_inputs([str(tmp_path / "*.mp3")])
        assert len(result) == 2
        assert all(p.suffix == ".mp3" for p in result)

    def test_expand_inputs_deduplication(self, tmp_path):
        """Test that duplicate paths are removed."""
        test_file = tmp_path / "test.mp3"
        test_file.touch()
        assert len(expand_inputs([str(test_file), str(test_file), str(tmp_path)])) == 1

    def test_expand_inputs_missing_kept(self, tmp_path):
        """Test that missing files are passed through for preflight to report."""
        missing = tmp_path / "missing.mp3"
        assert expand_inputs([str(missing)]) == [missing]

    def test_expand_inputs_empty_list(self):
        """Test expanding empty input list."""
        assert expand_inputs([]) == []


class TestDefaultOutputFor:
    """Tests for default_output_for function."""

    def test_caption_suffix(self):
        """Test the suffix for each caption format."""
        assert caption_suffix(True) == ".srt"
        assert caption_suffix(False) == ".vtt"

    def test_default_output_no_outdir(self, tmp_path):
        """Test default output next to the input."""
        input_file = tmp_path / "test.mp3"
        assert default_output_for(input_file, None, False) == tmp_path / "test.vtt"

    def test_default_output_with_outdir(self, tmp_path):
        """Test default output with outdir."""
        input_file = tmp_path / "sub" / "test.mp3"
        outdir = tmp_path / "output"
        assert default_output_for(input_file, outdir, True) == outdir / "test.srt"


class TestPreflightOne:
    """Tests for preflight_one function."""

    def test_preflight_input_not_found(self, tmp_path):
        """Test preflight when input doesn't exist."""
        success, msg = preflight_one(tmp_path / "nonexistent.mp3", tmp_path / "out.vtt", False)
        assert success is False
        assert "not found" in msg.lower()

    def test_preflight_input_is_directory(self, tmp_path):
        """Test preflight when input is a directory."""
        input_path = tmp_path / "dir"
        input_path.mkdir()
        success, msg = preflight_one(input_path, tmp_path / "out.vtt", False)
        assert success is False
        assert "directory" in msg.lower()

    def test_preflight_output_exists_no_overwrite(self, tmp_path):
        """Test preflight when output exists and overwrite disabled."""
        input_path = tmp_path / "input.mp3"
        input_path.touch()
        output_path = tmp_path / "out.vtt"
        output_path.touch()
        success, msg = preflight_one(input_path, output_path, False)
        assert success is False
        assert "--overwrite" in msg

    def test_preflight_output_exists_with_overwrite(self, tmp_path):
        """Test preflight when output exists and overwrite enabled."""
        input_path = tmp_path / "input.mp3"
        input_path.touch()
        output_path = tmp_path / "out.vtt"
        output_path.touch()
        assert preflight_one(input_path, output_path, True) == (True, "")

    def test_preflight_output_is_directory(self, tmp_path):
        """Test preflight when output path is a directory."""
        input_path = tmp_path / "input.mp3"
        input_path.touch()
        output_path = tmp_path / "outdir"
        output_path.mkdir()
        success, msg = preflight_one(input_path, output_path, True)
        assert success is False
        assert "directory" in msg.lower()
