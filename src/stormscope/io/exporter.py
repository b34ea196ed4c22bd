"""
Strike result serialization.

Writes worker responses to PNG files with an optional JSON sidecar, and
encodes them as JSON-safe dicts (base64 PNG) for transport.
"""

import base64
import io
import json
from pathlib import Path
from typing import Any, Dict, Optional, Union

import numpy as np
from PIL import Image

from stormscope.bolt.colorgrade import storm_preview

RESULT_SCHEMA_VERSION = "1.0"


def image_to_array(image: Union[Image.Image, np.ndarray, None]) -> Optional[np.ndarray]:
    """Normalize either image payload to a (H, W, 4) uint8 RGBA array."""
    if image is None:
        return None
    if isinstance(image, Image.Image):
        return np.asarray(image.convert("RGBA"), dtype=np.uint8)
    arr = np.asarray(image, dtype=np.uint8)
    if arr.ndim != 3 or arr.shape[2] != 4:
        raise ValueError(f"Expected (H, W, 4) RGBA pixels, got shape {arr.shape}")
    return arr


def encode_png(pixels: np.ndarray) -> bytes:
    """PNG-encode a (H, W, 4) uint8 array."""
    buf = io.BytesIO()
    Image.fromarray(pixels).save(buf, format="PNG")
    return buf.getvalue()


class ResultExporter:
    """
    Exports strike responses.

    Accepts the response dicts produced by BoltWorker (``image``,
    ``shakeIntensity``, ``didStrike`` and optionally ``error``).
    """

    def __init__(self, precision: int = 4):
        """
        Args:
            precision: Decimal places for floating point values.
        """
        self.precision = precision

    def _round(self, value: float) -> float:
        return round(float(value), self.precision)

    def metadata(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """Everything except the pixels."""
        pixels = image_to_array(message.get("image"))
        meta: Dict[str, Any] = {
            "schema_version": RESULT_SCHEMA_VERSION,
            "shakeIntensity": self._round(message.get("shakeIntensity", 0.0)),
            "didStrike": bool(message.get("didStrike", False)),
            "width": int(pixels.shape[1]) if pixels is not None else 0,
            "height": int(pixels.shape[0]) if pixels is not None else 0,
        }
        if message.get("error"):
            meta["error"] = str(message["error"])
        return meta

    def to_dict(self, message: Dict[str, Any]) -> Dict[str, Any]:
        """JSON-safe dict with the image as base64 PNG (or None)."""
        data = self.metadata(message)
        pixels = image_to_array(message.get("image"))
        if pixels is not None and pixels.size > 0:
            data["image"] = base64.b64encode(encode_png(pixels)).decode("ascii")
            data["imageFormat"] = "png"
        else:
            data["image"] = None
        return data

    def to_json(self, message: Dict[str, Any]) -> str:
        return json.dumps(self.to_dict(message))

    def save(
        self,
        message: Dict[str, Any],
        output_path: Union[str, Path],
        sidecar: bool = False,
        preview: bool = False,
    ) -> Path:
        """
        Write the strike image as PNG.

        Args:
            message: Worker response.
            output_path: PNG path.
            sidecar: Also write ``<stem>.json`` with shake/strike metadata.
            preview: Composite the bolt over a storm sky instead of saving
                the transparent layer.

        Returns:
            Path to the PNG.
        """
        pixels = image_to_array(message.get("image"))
        if pixels is None:
            raise ValueError(f"Response has no image: {message.get('error', 'unknown error')}")
        if pixels.size == 0:
            raise ValueError("Response image is empty (zero-sized canvas)")

        output_path = Path(output_path)
        output_path.parent.mkdir(parents=True, exist_ok=True)

        if preview:
            Image.fromarray(storm_preview(pixels)).save(output_path, format="PNG")
        else:
            Image.fromarray(pixels).save(output_path, format="PNG")

        if sidecar:
            meta_path = output_path.with_suffix(".json")
            with open(meta_path, "w") as f:
                json.dump(self.metadata(message), f, indent=2)

        return output_path
