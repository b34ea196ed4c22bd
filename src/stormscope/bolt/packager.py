"""
Result packaging.

Turns a rendered surface plus the accumulator's strike statistics into a
GenerationResult. The bitmap path is preferred; the raw pixel buffer is the
fallback. Failures never escape: they become an empty result with an error.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

import numpy as np
from PIL import Image

from stormscope.bolt.segments import SegmentAccumulator
from stormscope.bolt.surface import DrawingSurface

logger = logging.getLogger(__name__)

ImagePayload = Union[Image.Image, np.ndarray, None]


@dataclass
class GenerationResult:
    """One finished strike, ready to hand to the caller."""
    image: ImagePayload
    shake_intensity: float
    did_strike: bool
    error: Optional[str] = None

    @property
    def is_bitmap(self) -> bool:
        return isinstance(self.image, Image.Image)

    def to_message(self) -> Dict[str, Any]:
        msg: Dict[str, Any] = {
            "image": self.image,
            "shakeIntensity": self.shake_intensity,
            "didStrike": self.did_strike,
        }
        if self.error is not None:
            msg["error"] = self.error
        return msg

    @classmethod
    def failed(cls, error: str) -> "GenerationResult":
        return cls(image=None, shake_intensity=0.0, did_strike=False, error=error or "unknown error")


def shake_intensity(
    max_width: float,
    did_strike: bool,
    reference_width: float = 12.0,
    floor: float = 0.04,
) -> float:
    """Shake scalar in [0, 1]; any real strike gets at least ``floor``."""
    if not did_strike:
        return 0.0
    return max(floor, min(1.0, max_width / reference_width))


async def package_result(
    surface: DrawingSurface,
    accumulator: SegmentAccumulator,
    reference_width: float = 12.0,
    min_shake: float = 0.04,
) -> GenerationResult:
    """Extract the surface image and attach the strike statistics."""
    try:
        image: ImagePayload = await surface.create_bitmap()
    except Exception as e:
        logger.debug("Bitmap encoding unavailable (%s), reading raw pixels", e)
        try:
            image = surface.get_image_data()
        except Exception as ex:
            logger.warning("Surface extraction failed: %s", ex)
            return GenerationResult.failed(str(ex) or type(ex).__name__)

    return GenerationResult(
        image=image,
        shake_intensity=shake_intensity(
            accumulator.max_width, accumulator.did_strike, reference_width, min_shake
        ),
        did_strike=accumulator.did_strike,
    )
