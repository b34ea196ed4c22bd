"""
Two-pass bolt renderer.

Draws every committed segment twice: once as a wide, blurred, additive
glow and once as a narrow bright core. Drawing state is set once per pass
rather than once per segment.
"""

from typing import Optional, Sequence, Tuple

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.segments import Segment
from stormscope.bolt.surface import DrawingSurface


def lightning_color(
    line_width: float,
    reference_width: float = 12.0,
) -> Tuple[int, int, int, float]:
    """
    Core stroke colour for a segment width.

    Width is normalized against ``reference_width`` and pushed through a
    gentle power curve. Alpha never drops below 0.25 so the thinnest
    committed segment stays faintly visible.
    """
    normalized = max(0.0, min(1.0, line_width / reference_width))
    brightness = normalized ** 0.9 * 0.95 + 0.05
    col = int(round(255 * brightness))
    alpha = max(0.25, brightness)
    return (col, col, col, alpha)


def _trace(surface: DrawingSurface, segment: Segment):
    surface.begin_path()
    (x, y), rest = segment.points[0], segment.points[1:]
    surface.move_to(x, y)
    for x, y in rest:
        surface.line_to(x, y)
    surface.stroke()


class TwoPassRenderer:
    """Renders segment lists onto a DrawingSurface."""

    def __init__(self, config: Optional[BoltConfig] = None):
        self.cfg = config or BoltConfig()

    def render(self, surface: DrawingSurface, segments: Sequence[Segment]):
        """
        Clear the surface and draw the glow and core passes.

        An empty segment list leaves the surface fully transparent.
        """
        surface.clear_rect(0, 0, surface.width, surface.height)
        if not segments:
            return

        surface.set_line_cap("round")
        surface.set_line_join("round")
        self._glow_pass(surface, segments)
        self._core_pass(surface, segments)

    def _glow_pass(self, surface: DrawingSurface, segments: Sequence[Segment]):
        cfg = self.cfg
        surface.save()
        surface.set_composite_mode("lighter")
        surface.set_shadow(cfg.glow_blur, cfg.glow_shadow_color)
        surface.set_stroke_style(cfg.glow_stroke_color)
        for seg in segments:
            surface.set_line_width(max(cfg.glow_min_width, seg.width * cfg.glow_width_factor))
            _trace(surface, seg)
        surface.restore()

    def _core_pass(self, surface: DrawingSurface, segments: Sequence[Segment]):
        cfg = self.cfg
        surface.save()
        surface.set_composite_mode("source-over")
        surface.set_shadow(0)
        for seg in segments:
            surface.set_line_width(max(cfg.core_min_width, seg.width))
            surface.set_stroke_style(lightning_color(seg.width, cfg.reference_width))
            _trace(surface, seg)
        surface.restore()
