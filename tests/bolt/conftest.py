"""Shared fixtures for bolt tests."""

import random

import numpy as np
import pytest

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.segments import SegmentAccumulator
from stormscope.bolt.surface import RasterSurface


class NoBitmapSurface(RasterSurface):
    """Surface whose fast bitmap path is unavailable."""

    async def create_bitmap(self):
        raise RuntimeError("bitmap encoding not supported")


class BrokenSurface(NoBitmapSurface):
    """Surface where both extraction paths fail."""

    def get_image_data(self) -> np.ndarray:
        raise RuntimeError("pixel readback denied")


class RecordingSurface(RasterSurface):
    """Records the drawing state at every stroke."""

    def __init__(self, width, height):
        super().__init__(width, height)
        self.strokes = []

    def stroke(self):
        self.strokes.append(self.state)
        super().stroke()


@pytest.fixture
def rng() -> random.Random:
    return random.Random(1234)


@pytest.fixture
def no_branch_config() -> BoltConfig:
    """Main channel only."""
    return BoltConfig(branch_chance=0.0)


@pytest.fixture
def accumulator() -> SegmentAccumulator:
    return SegmentAccumulator()


@pytest.fixture
def struck_accumulator() -> SegmentAccumulator:
    acc = SegmentAccumulator()
    acc.commit([(10.0, 0.0), (12.0, 20.0), (9.0, 40.0)], 8.0)
    return acc


@pytest.fixture
def recording_surface():
    return RecordingSurface


@pytest.fixture
def no_bitmap_surface():
    return NoBitmapSurface


@pytest.fixture
def broken_surface():
    return BrokenSurface
