"""Tests for storm-sky compositing and post-processing."""

import numpy as np
import pytest

from stormscope.bolt.colorgrade import (
    add_glow,
    composite_over,
    sky_gradient,
    storm_preview,
    tone_map_soft,
    vignette,
)


def _bolt_layer(h: int = 60, w: int = 80) -> np.ndarray:
    layer = np.zeros((h, w, 4), dtype=np.uint8)
    layer[:, w // 2 - 1 : w // 2 + 2] = (255, 255, 255, 255)
    return layer


class TestSkyGradient:
    def test_shape_and_dtype(self):
        sky = sky_gradient(80, 60)
        assert sky.shape == (60, 80, 3)
        assert sky.dtype == np.uint8

    def test_darker_at_top(self):
        sky = sky_gradient(80, 60)
        assert sky[0].mean() < sky[-1].mean()

    def test_endpoints(self):
        sky = sky_gradient(4, 10, top=(0, 0, 0), bottom=(100, 100, 100))
        assert tuple(sky[0, 0]) == (0, 0, 0)
        assert tuple(sky[-1, 0]) == (100, 100, 100)


class TestCompositeOver:
    def test_additive_brightens(self):
        bg = np.full((60, 80, 3), 40, dtype=np.uint8)
        out = composite_over(bg, _bolt_layer())
        assert out[30, 40].min() == 255
        assert tuple(out[30, 0]) == (40, 40, 40)

    def test_alpha_blend(self):
        bg = np.full((10, 10, 3), 100, dtype=np.uint8)
        layer = np.zeros((10, 10, 4), dtype=np.uint8)
        layer[..., :3] = 200
        layer[..., 3] = 255
        out = composite_over(bg, layer, additive=False)
        assert out.max() == 200

    def test_transparent_overlay_passthrough(self):
        bg = np.random.randint(0, 255, (20, 30, 3), dtype=np.uint8)
        out = composite_over(bg, np.zeros((20, 30, 4), dtype=np.uint8))
        np.testing.assert_array_equal(out, bg)

    def test_size_mismatch(self):
        with pytest.raises(ValueError):
            composite_over(np.zeros((10, 10, 3), np.uint8), np.zeros((5, 5, 4), np.uint8))


class TestPostProcessing:
    def test_glow_zero_intensity_passthrough(self):
        frame = np.random.randint(0, 255, (30, 40, 3), dtype=np.uint8)
        np.testing.assert_array_equal(add_glow(frame, intensity=0.0), frame)

    def test_glow_brightens(self):
        frame = np.full((30, 40, 3), 128, dtype=np.uint8)
        assert add_glow(frame, intensity=0.5, radius=5).mean() >= frame.mean()

    def test_vignette_darkens_corners(self):
        frame = np.full((100, 100, 3), 200, dtype=np.uint8)
        out = vignette(frame, strength=0.5)
        assert out[50, 50].mean() > out[0, 0].mean()

    def test_tone_map_compresses_highlights(self):
        frame = np.full((10, 10, 3), 255, dtype=np.uint8)
        assert tone_map_soft(frame).max() < 255

    def test_tone_map_leaves_shadows(self):
        frame = np.full((10, 10, 3), 60, dtype=np.uint8)
        np.testing.assert_array_equal(tone_map_soft(frame), frame)


class TestStormPreview:
    def test_output(self):
        frame = storm_preview(_bolt_layer())
        assert frame.shape == (60, 80, 3)
        assert frame.dtype == np.uint8

    def test_bolt_visible_over_sky(self):
        frame = storm_preview(_bolt_layer())
        assert frame[30, 40].mean() > frame[30, 5].mean() + 100
