"""Tests for result packaging."""

import numpy as np
import pytest
from PIL import Image

from stormscope.bolt.packager import GenerationResult, package_result, shake_intensity
from stormscope.bolt.surface import RasterSurface


class TestShakeIntensity:
    def test_no_strike_is_zero(self):
        assert shake_intensity(8.0, did_strike=False) == 0.0

    def test_scales_with_width(self):
        assert shake_intensity(8.0, did_strike=True) == pytest.approx(8 / 12)

    def test_floor_for_thin_strikes(self):
        assert shake_intensity(0.1, did_strike=True) == 0.04

    def test_capped_at_one(self):
        assert shake_intensity(30.0, did_strike=True) == 1.0


class TestGenerationResult:
    def test_success_message_has_no_error(self):
        msg = GenerationResult(image=None, shake_intensity=0.5, did_strike=True).to_message()
        assert set(msg) == {"image", "shakeIntensity", "didStrike"}

    def test_failed_shape(self):
        result = GenerationResult.failed("boom")
        assert result.to_message() == {
            "image": None,
            "shakeIntensity": 0.0,
            "didStrike": False,
            "error": "boom",
        }

    def test_failed_never_empty_error(self):
        assert GenerationResult.failed("").error


class TestPackageResult:
    @pytest.mark.asyncio
    async def test_prefers_bitmap(self, struck_accumulator):
        result = await package_result(RasterSurface(40, 30), struck_accumulator)
        assert isinstance(result.image, Image.Image)
        assert result.is_bitmap
        assert result.did_strike is True
        assert result.shake_intensity == pytest.approx(8 / 12)
        assert result.error is None

    @pytest.mark.asyncio
    async def test_falls_back_to_pixels(self, struck_accumulator, no_bitmap_surface):
        result = await package_result(no_bitmap_surface(40, 30), struck_accumulator)
        assert isinstance(result.image, np.ndarray)
        assert result.image.shape == (30, 40, 4)
        assert not result.is_bitmap
        assert result.did_strike is True
        assert result.shake_intensity == pytest.approx(8 / 12)
        assert result.error is None

    @pytest.mark.asyncio
    async def test_both_paths_fail(self, struck_accumulator, broken_surface):
        result = await package_result(broken_surface(40, 30), struck_accumulator)
        assert result.image is None
        assert result.shake_intensity == 0.0
        assert result.did_strike is False
        assert "denied" in result.error

    @pytest.mark.asyncio
    async def test_no_strike(self, accumulator):
        result = await package_result(RasterSurface(40, 30), accumulator)
        assert result.did_strike is False
        assert result.shake_intensity == 0.0
        assert result.image is not None
        assert np.asarray(result.image).max() == 0

    @pytest.mark.asyncio
    async def test_custom_reference_width(self, struck_accumulator):
        result = await package_result(RasterSurface(4, 4), struck_accumulator, reference_width=16.0)
        assert result.shake_intensity == pytest.approx(0.5)
