"""
Storm-sky compositing and post-processing for bolt previews.

Places a transparent bolt image over a dark storm sky, then adds bloom,
vignette and a soft highlight shoulder so the core doesn't clip flat.
"""

import numpy as np
from PIL import Image, ImageFilter


def sky_gradient(
    width: int,
    height: int,
    top: tuple = (8, 10, 22),
    bottom: tuple = (38, 42, 60),
) -> np.ndarray:
    """
    Vertical storm-sky gradient.

    Args:
        width: Frame width.
        height: Frame height.
        top: RGB at the top edge.
        bottom: RGB at the bottom edge.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    t = np.linspace(0.0, 1.0, max(height, 1), dtype=np.float32)[:height, None]
    top_f = np.asarray(top, dtype=np.float32)
    bottom_f = np.asarray(bottom, dtype=np.float32)
    rows = top_f + (bottom_f - top_f) * t
    sky = np.broadcast_to(rows[:, None, :], (height, width, 3))
    return sky.astype(np.uint8)


def composite_over(
    background: np.ndarray,
    overlay: np.ndarray,
    additive: bool = True,
) -> np.ndarray:
    """
    Composite a straight-alpha RGBA overlay onto an RGB background.

    Args:
        background: (H, W, 3) uint8.
        overlay: (H, W, 4) uint8 RGBA, e.g. a bolt image.
        additive: Add the overlay light instead of alpha-blending it.

    Returns:
        (H, W, 3) uint8.
    """
    if background.shape[:2] != overlay.shape[:2]:
        raise ValueError(
            f"Size mismatch: background {background.shape[:2]} vs overlay {overlay.shape[:2]}"
        )

    bg = background.astype(np.float32) / 255.0
    rgb = overlay[:, :, :3].astype(np.float32) / 255.0
    alpha = overlay[:, :, 3:4].astype(np.float32) / 255.0

    if additive:
        out = bg + rgb * alpha
    else:
        out = bg * (1.0 - alpha) + rgb * alpha

    return (np.clip(out, 0, 1) * 255 + 0.5).astype(np.uint8)


def add_glow(
    frame: np.ndarray,
    intensity: float = 0.3,
    radius: int = 15,
) -> np.ndarray:
    """
    Screen-blend a gaussian-blurred copy for bloom.

    Args:
        frame: (H, W, 3) uint8 RGB array.
        intensity: Glow opacity (0-1).
        radius: Blur radius in pixels.

    Returns:
        (H, W, 3) uint8 RGB array.
    """
    if intensity <= 0:
        return frame

    blurred = Image.fromarray(frame).filter(ImageFilter.GaussianBlur(radius=radius))
    a = frame.astype(np.float32) / 255.0
    b = np.asarray(blurred, dtype=np.float32) / 255.0 * intensity
    screen = 1.0 - (1.0 - a) * (1.0 - b)

    return (screen * 255).astype(np.uint8)


def vignette(frame: np.ndarray, strength: float = 0.4) -> np.ndarray:
    """Radial darkening toward the corners. ``strength`` 0 is a no-op."""
    if strength <= 0:
        return frame

    h, w = frame.shape[:2]
    cy, cx = h / 2, w / 2
    max_r = max(np.sqrt(cx ** 2 + cy ** 2), 1e-6)

    y = np.arange(h, dtype=np.float32) - cy
    x = np.arange(w, dtype=np.float32) - cx
    xg, yg = np.meshgrid(x, y)
    r = np.sqrt(xg ** 2 + yg ** 2) / max_r

    vign = 1.0 - np.clip(r * strength, 0, 1) ** 2
    return (frame.astype(np.float32) * vign[:, :, np.newaxis]).astype(np.uint8)


def tone_map_soft(frame: np.ndarray, shoulder: float = 0.85) -> np.ndarray:
    """
    Compress highlights above ``shoulder`` (fraction of 255) with a
    Reinhard-style curve; everything below passes through.
    """
    threshold = shoulder * 255.0
    headroom = 255.0 - threshold

    f = frame.astype(np.float32)
    above = np.maximum(f - threshold, 0.0)
    compressed = threshold + above * headroom / (above + headroom)
    return np.where(f > threshold, compressed, f).astype(np.uint8)


def storm_preview(
    bolt_rgba: np.ndarray,
    glow_intensity: float = 0.35,
    glow_radius: int = 10,
    vignette_strength: float = 0.35,
) -> np.ndarray:
    """
    Full preview chain: sky, bolt, bloom, vignette, tone map.

    Args:
        bolt_rgba: (H, W, 4) uint8 bolt image.

    Returns:
        (H, W, 3) uint8 RGB frame.
    """
    h, w = bolt_rgba.shape[:2]
    frame = composite_over(sky_gradient(w, h), bolt_rgba)
    frame = add_glow(frame, intensity=glow_intensity, radius=glow_radius)
    frame = vignette(frame, strength=vignette_strength)
    return tone_map_soft(frame)
