"""Procedural lightning bolt generation and compositing."""

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.generator import generate_segments
from stormscope.bolt.packager import GenerationResult
from stormscope.bolt.renderer import TwoPassRenderer
from stormscope.bolt.surface import DrawingSurface, RasterSurface
from stormscope.bolt.worker import BoltWorker
from stormscope.io.exporter import ResultExporter

__version__ = "0.1.0"
__all__ = [
    "BoltConfig",
    "BoltWorker",
    "DrawingSurface",
    "GenerationResult",
    "RasterSurface",
    "ResultExporter",
    "TwoPassRenderer",
    "generate_segments",
]
