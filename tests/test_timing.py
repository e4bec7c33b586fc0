"""Tests for the timing module."""
import pytest
from stream_captions.models import TICKS_PER_SECOND, CaptionChunk
from stream_captions.timing import assign_times, seconds_to_ticks


def make_chunk(count):
    return CaptionChunk(lines=["x" * count], char_count=count)


class TestTickConversion:
    """Tests for seconds/ticks conversion."""

    def test_seconds_to_ticks(self):
        """Test converting seconds to ticks."""
        assert seconds_to_ticks(0.0) == 0
        assert seconds_to_ticks(1.5) == 15_000_000
        assert seconds_to_ticks(1.3) == 13_000_000


class TestAssignTimes:
    """Tests for assign_times function."""

    def test_assign_single_chunk(self):
        """Test that a single chunk spans the whole result."""
        out = assign_times([make_chunk(11)], 5 * TICKS_PER_SECOND, 2 * TICKS_PER_SECOND)
        assert out[0].begin_ticks == 5 * TICKS_PER_SECOND
        assert out[0].end_ticks == 7 * TICKS_PER_SECOND

    def test_assign_proportional(self):
        """Test that longer chunks get proportionally more time."""
        out = assign_times([make_chunk(30), make_chunk(10)], 1000, 400)
        assert (out[0].begin_ticks, out[0].end_ticks) == (1000, 1300)
        assert (out[1].begin_ticks, out[1].end_ticks) == (1300, 1400)

    def test_assign_contiguous_and_exact_end(self):
        """Test that ranges are contiguous and the last ends exactly at offset + duration."""
        out = assign_times([make_chunk(1), make_chunk(1), make_chunk(1)], 0, 10)
        assert [(c.begin_ticks, c.end_ticks) for c in out] == [(0, 3), (3, 6), (6, 10)]

    def test_assign_zero_duration(self):
        """Test that a zero-length result gives zero-length chunks."""
        out = assign_times([make_chunk(4), make_chunk(6)], 700, 0)
        assert all(c.begin_ticks == 700 and c.end_ticks == 700 for c in out)

    def test_assign_empty(self):
        """Test timing an empty chunk list."""
        assert assign_times([], 0, 100) == []

    def test_assign_returns_copies(self):
        """Test that the input chunks are left untimed."""
        chunks = [make_chunk(5)]
        out = assign_times(chunks, 0, 100)
        assert chunks[0].begin_ticks is None
        assert out[0] is not chunks[0]
        assert out[0].lines is not chunks[0].lines
