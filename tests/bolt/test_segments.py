"""Tests for the segment accumulator."""

import dataclasses

import pytest

from stormscope.bolt.segments import MAIN_PATH_DEPTH, Segment, SegmentAccumulator


class TestSegment:
    def test_flat_coordinates(self):
        seg = Segment(points=((1.0, 2.0), (3.0, 4.0)), width=1.0)
        assert seg.flat() == [1.0, 2.0, 3.0, 4.0]
        assert len(seg) == 2

    def test_frozen(self):
        seg = Segment(points=((0.0, 0.0), (1.0, 1.0)), width=1.0)
        with pytest.raises(dataclasses.FrozenInstanceError):
            seg.width = 5.0


class TestSegmentAccumulator:
    def test_starts_empty(self, accumulator):
        assert len(accumulator) == 0
        assert accumulator.did_strike is False
        assert accumulator.max_width == 0.0
        assert accumulator.all_segments() == ()

    def test_commit_records_segment(self, accumulator):
        seg = accumulator.commit([(0, 0), (1, 5)], 3.0)
        assert seg is not None
        assert seg.width == 3.0
        assert seg.depth == MAIN_PATH_DEPTH
        assert accumulator.did_strike is True
        assert accumulator.all_segments() == (seg,)

    def test_degenerate_discarded(self, accumulator):
        assert accumulator.commit([(0, 0)], 3.0) is None
        assert accumulator.commit([], 3.0) is None
        assert len(accumulator) == 0
        assert accumulator.did_strike is False

    def test_width_floor(self, accumulator):
        seg = accumulator.commit([(0, 0), (1, 1)], 0.1)
        assert seg.width == 0.5

    def test_max_width_tracks_unclamped(self, accumulator):
        accumulator.commit([(0, 0), (1, 1)], 0.2)
        assert accumulator.max_width == pytest.approx(0.2)
        accumulator.commit([(0, 0), (1, 1)], 6.0, depth=1)
        accumulator.commit([(0, 0), (1, 1)], 2.0, depth=2)
        assert accumulator.max_width == 6.0

    def test_order_preserved(self, accumulator):
        widths = [4.0, 2.0, 6.0]
        for w in widths:
            accumulator.commit([(0, 0), (w, w)], w)
        assert [s.width for s in accumulator.all_segments()] == widths

    def test_points_copied(self, accumulator):
        points = [(0, 0), (1, 1)]
        seg = accumulator.commit(points, 1.0)
        points.append((2, 2))
        assert len(seg.points) == 2
