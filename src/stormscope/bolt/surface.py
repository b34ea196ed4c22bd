"""
2D drawing surface capability and its numpy/Pillow raster backend.

The renderer and packager only talk to ``DrawingSurface``: path building,
stroke state, a shadow (blur) setting, a compositing mode and two ways of
getting pixels back out. ``RasterSurface`` implements it on a float32
premultiplied RGBA buffer:
- Strokes are rasterized per call with PIL.ImageDraw into a coverage mask,
  cropped to the path's bounding box.
- Shadows are a gaussian blur of that mask (sigma = blur / 2).
- "source-over" and "lighter" (additive) compositing.
"""

import abc
import math
from typing import Any, Dict, List, Optional, Sequence, Tuple

import numpy as np
from PIL import Image, ImageDraw
from scipy.ndimage import gaussian_filter

Color = Tuple[int, int, int, float]

COMPOSITE_MODES = ("source-over", "lighter")
LINE_CAPS = ("butt", "round", "square")
LINE_JOINS = ("miter", "round", "bevel")

TRANSPARENT: Color = (0, 0, 0, 0.0)


def _normalize_color(color: Sequence[float]) -> Color:
    """Accepts (r, g, b) or (r, g, b, a) with channels 0-255 and alpha 0-1."""
    if len(color) == 3:
        r, g, b = color
        a = 1.0
    elif len(color) == 4:
        r, g, b, a = color
    else:
        raise ValueError(f"Expected an RGB or RGBA color, got {color!r}")
    return (int(r), int(g), int(b), float(min(max(a, 0.0), 1.0)))


class DrawingSurface(abc.ABC):
    """
    Opaque 2D drawing capability.

    Drawing state (stroke style, width, caps, shadow, compositing) lives
    here; subclasses implement the path primitives, stroking and the two
    pixel extraction paths.
    """

    def __init__(self, width: int, height: int):
        if width < 0 or height < 0:
            raise ValueError(f"Surface dimensions must be non-negative, got {width}x{height}")
        self.width = int(width)
        self.height = int(height)
        self._state: Dict[str, Any] = {
            "stroke_style": (0, 0, 0, 1.0),
            "line_width": 1.0,
            "line_cap": "butt",
            "line_join": "miter",
            "shadow_blur": 0.0,
            "shadow_color": TRANSPARENT,
            "composite_mode": "source-over",
        }
        self._saved: List[Dict[str, Any]] = []

    # --- State ---

    def save(self):
        self._saved.append(dict(self._state))

    def restore(self):
        if self._saved:
            self._state = self._saved.pop()

    def set_stroke_style(self, color: Sequence[float]):
        self._state["stroke_style"] = _normalize_color(color)

    def set_line_width(self, width: float):
        if width > 0 and math.isfinite(width):
            self._state["line_width"] = float(width)

    def set_line_cap(self, cap: str):
        if cap not in LINE_CAPS:
            raise ValueError(f"Unknown line cap: {cap}")
        self._state["line_cap"] = cap

    def set_line_join(self, join: str):
        if join not in LINE_JOINS:
            raise ValueError(f"Unknown line join: {join}")
        self._state["line_join"] = join

    def set_shadow(self, blur: float, color: Sequence[float] = TRANSPARENT):
        self._state["shadow_blur"] = max(0.0, float(blur))
        self._state["shadow_color"] = _normalize_color(color)

    def set_composite_mode(self, mode: str):
        if mode not in COMPOSITE_MODES:
            raise ValueError(f"Unknown composite mode: {mode}")
        self._state["composite_mode"] = mode

    @property
    def state(self) -> Dict[str, Any]:
        return dict(self._state)

    # --- Primitives ---

    @abc.abstractmethod
    def clear_rect(self, x: float, y: float, w: float, h: float):
        """Reset a region to fully transparent."""

    @abc.abstractmethod
    def begin_path(self):
        pass

    @abc.abstractmethod
    def move_to(self, x: float, y: float):
        pass

    @abc.abstractmethod
    def line_to(self, x: float, y: float):
        pass

    @abc.abstractmethod
    def arc(self, cx: float, cy: float, radius: float, start: float, end: float,
            anticlockwise: bool = False):
        pass

    @abc.abstractmethod
    def stroke(self):
        """Stroke the current path with the current state."""

    # --- Extraction ---

    @abc.abstractmethod
    async def create_bitmap(self) -> Image.Image:
        """Fast path: an independent bitmap of the surface."""

    @abc.abstractmethod
    def get_image_data(self) -> np.ndarray:
        """Slow path: a (H, W, 4) uint8 RGBA copy of the pixels."""


class RasterSurface(DrawingSurface):
    """In-memory raster surface backed by numpy and Pillow."""

    def __init__(self, width: int, height: int):
        super().__init__(width, height)
        # Premultiplied RGBA in [0, 1]
        self.buffer = np.zeros((self.height, self.width, 4), dtype=np.float32)
        self._subpaths: List[List[Tuple[float, float]]] = []

    def clear_rect(self, x: float, y: float, w: float, h: float):
        x0 = int(max(0, math.floor(x)))
        y0 = int(max(0, math.floor(y)))
        x1 = int(min(self.width, math.ceil(x + w)))
        y1 = int(min(self.height, math.ceil(y + h)))
        if x1 > x0 and y1 > y0:
            self.buffer[y0:y1, x0:x1] = 0.0

    def begin_path(self):
        self._subpaths = []

    def move_to(self, x: float, y: float):
        self._subpaths.append([(float(x), float(y))])

    def line_to(self, x: float, y: float):
        if not self._subpaths:
            self.move_to(x, y)
            return
        self._subpaths[-1].append((float(x), float(y)))

    def arc(self, cx: float, cy: float, radius: float, start: float, end: float,
            anticlockwise: bool = False):
        if radius < 0:
            raise ValueError("Arc radius must be non-negative")
        sweep = end - start
        if anticlockwise:
            if sweep > 0:
                sweep = sweep % (2 * math.pi) - 2 * math.pi
        elif sweep < 0:
            sweep = sweep % (2 * math.pi)
        sweep = max(-2 * math.pi, min(2 * math.pi, sweep))

        n = max(8, int(abs(sweep) * max(radius, 1.0) / 2))
        for i in range(n + 1):
            a = start + sweep * i / n
            self.line_to(cx + math.cos(a) * radius, cy + math.sin(a) * radius)

    def _path_bounds(self, pad: float) -> Optional[Tuple[int, int, int, int]]:
        xs = [p[0] for sub in self._subpaths for p in sub]
        ys = [p[1] for sub in self._subpaths for p in sub]
        if not xs:
            return None
        x0 = int(max(0, math.floor(min(xs) - pad)))
        y0 = int(max(0, math.floor(min(ys) - pad)))
        x1 = int(min(self.width, math.ceil(max(xs) + pad) + 1))
        y1 = int(min(self.height, math.ceil(max(ys) + pad) + 1))
        if x1 <= x0 or y1 <= y0:
            return None
        return x0, y0, x1, y1

    def _coverage(self, bounds: Tuple[int, int, int, int]) -> np.ndarray:
        """Rasterize the current path into a float coverage mask for ``bounds``."""
        x0, y0, x1, y1 = bounds
        st = self._state
        line_width = st["line_width"]
        pixel_width = max(1, int(round(line_width)))

        mask = Image.new("L", (x1 - x0, y1 - y0), 0)
        draw = ImageDraw.Draw(mask)
        joint = "curve" if st["line_join"] == "round" else None
        for sub in self._subpaths:
            pts = [(x - x0, y - y0) for x, y in sub]
            if len(pts) >= 2:
                draw.line(pts, fill=255, width=pixel_width, joint=joint)
            if st["line_cap"] == "round" and pixel_width > 1:
                r = pixel_width / 2.0
                for px, py in (pts[0], pts[-1]):
                    draw.ellipse([px - r, py - r, px + r, py + r], fill=255)

        coverage = np.asarray(mask, dtype=np.float32) / 255.0
        # Sub-pixel strokes are approximated by fading a 1px line
        if line_width < 1.0:
            coverage *= line_width
        return coverage

    def _composite(self, bounds: Tuple[int, int, int, int], coverage: np.ndarray, color: Color):
        x0, y0, x1, y1 = bounds
        r, g, b, a = color
        alpha = coverage * a
        src = np.empty(coverage.shape + (4,), dtype=np.float32)
        src[:, :, 0] = alpha * (r / 255.0)
        src[:, :, 1] = alpha * (g / 255.0)
        src[:, :, 2] = alpha * (b / 255.0)
        src[:, :, 3] = alpha

        dst = self.buffer[y0:y1, x0:x1]
        if self._state["composite_mode"] == "lighter":
            np.minimum(dst + src, 1.0, out=dst)
        else:
            dst *= (1.0 - src[:, :, 3:4])
            dst += src

    def stroke(self):
        if not self._subpaths or self.width == 0 or self.height == 0:
            return

        st = self._state
        blur = st["shadow_blur"]
        shadow_color = st["shadow_color"]
        has_shadow = blur > 0 and shadow_color[3] > 0

        sigma = blur / 2.0
        pad = st["line_width"] / 2.0 + 2.0
        if has_shadow:
            pad += sigma * 3.0
        bounds = self._path_bounds(pad)
        if bounds is None:
            return

        coverage = self._coverage(bounds)
        if has_shadow:
            shadow = gaussian_filter(coverage, sigma=sigma)
            self._composite(bounds, shadow, shadow_color)
        self._composite(bounds, coverage, st["stroke_style"])

    def get_image_data(self) -> np.ndarray:
        alpha = self.buffer[:, :, 3:4]
        rgb = np.where(alpha > 0, self.buffer[:, :, :3] / np.maximum(alpha, 1e-6), 0.0)
        out = np.empty((self.height, self.width, 4), dtype=np.uint8)
        out[:, :, :3] = (np.clip(rgb, 0, 1) * 255 + 0.5).astype(np.uint8)
        out[:, :, 3] = (np.clip(alpha[:, :, 0], 0, 1) * 255 + 0.5).astype(np.uint8)
        return out

    async def create_bitmap(self) -> Image.Image:
        if self.width == 0 or self.height == 0:
            return Image.new("RGBA", (self.width, self.height))
        return Image.fromarray(self.get_image_data())
