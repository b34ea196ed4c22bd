"""
Bolt generator: geometry, two-pass rendering and result packaging.
"""

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.generator import BranchTask, GenerationState, generate_segments
from stormscope.bolt.packager import GenerationResult, package_result, shake_intensity
from stormscope.bolt.renderer import TwoPassRenderer, lightning_color
from stormscope.bolt.segments import Segment, SegmentAccumulator
from stormscope.bolt.surface import DrawingSurface, RasterSurface
from stormscope.bolt.worker import BoltWorker, parse_request
