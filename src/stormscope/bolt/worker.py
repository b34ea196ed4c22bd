"""
One-shot request/response boundary for bolt generation.

A request is a plain dict ({"width", "height", "seed"}); the response is
the dict produced by GenerationResult.to_message(). Every request gets
exactly one response, including when generation or extraction fails.

Geometry generation and rendering run synchronously; the only await is the
bitmap extraction. ``request`` pushes the synchronous stage onto a thread
pool so concurrent requests don't block the event loop, and ``submit`` is
the entry point for plain threaded callers.
"""

import asyncio
import logging
import random
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Dict, Optional, Tuple

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.generator import generate_segments
from stormscope.bolt.packager import GenerationResult, package_result
from stormscope.bolt.renderer import TwoPassRenderer
from stormscope.bolt.segments import SegmentAccumulator
from stormscope.bolt.surface import DrawingSurface, RasterSurface

logger = logging.getLogger(__name__)

SurfaceFactory = Callable[[int, int], DrawingSurface]

MAX_DIMENSION = 16384


def _dimension(value: Any, name: str, default: int) -> int:
    if value is None:
        return default
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{name} must be a number, got {value!r}")
    if isinstance(value, float):
        if not value.is_integer():
            raise ValueError(f"{name} must be a whole number, got {value!r}")
        value = int(value)
    if value < 0 or value > MAX_DIMENSION:
        raise ValueError(f"{name} must be in [0, {MAX_DIMENSION}], got {value}")
    return value


def parse_request(
    message: Optional[Dict[str, Any]],
    config: Optional[BoltConfig] = None,
) -> Tuple[int, int, Optional[int]]:
    """
    Validate a request message.

    Returns (width, height, seed). Missing dimensions fall back to the
    config defaults; an explicit 0 is kept.
    """
    cfg = config or BoltConfig()
    msg = message or {}
    width = _dimension(msg.get("width"), "width", cfg.width)
    height = _dimension(msg.get("height"), "height", cfg.height)
    seed = msg.get("seed")
    if seed is not None and (isinstance(seed, bool) or not isinstance(seed, int)):
        raise ValueError(f"seed must be an integer, got {seed!r}")
    return width, height, seed


class BoltWorker:
    """
    Stateless bolt generator behind a request/response boundary.

    Holds only configuration and a thread pool; every request builds its
    own surface, accumulator and random source.
    """

    def __init__(
        self,
        config: Optional[BoltConfig] = None,
        surface_factory: SurfaceFactory = RasterSurface,
        max_workers: Optional[int] = None,
    ):
        self.cfg = config or BoltConfig()
        self.surface_factory = surface_factory
        self.max_workers = max_workers
        self._executor: Optional[ThreadPoolExecutor] = None

    @property
    def executor(self) -> ThreadPoolExecutor:
        if self._executor is None:
            self._executor = ThreadPoolExecutor(
                max_workers=self.max_workers, thread_name_prefix="stormscope-bolt"
            )
        return self._executor

    def draw(
        self,
        width: int,
        height: int,
        seed: Optional[int] = None,
    ) -> Tuple[DrawingSurface, SegmentAccumulator]:
        """Generate geometry and render both passes. Synchronous."""
        rng = random.Random(seed)
        accumulator = generate_segments(width, height, rng, self.cfg)
        surface = self.surface_factory(width, height)
        TwoPassRenderer(self.cfg).render(surface, accumulator.all_segments())
        return surface, accumulator

    async def _package(self, surface: DrawingSurface, accumulator: SegmentAccumulator) -> GenerationResult:
        return await package_result(
            surface,
            accumulator,
            reference_width=self.cfg.reference_width,
            min_shake=self.cfg.min_shake,
        )

    async def handle(self, message: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Serve one request on the current event loop."""
        try:
            width, height, seed = parse_request(message, self.cfg)
            surface, accumulator = self.draw(width, height, seed)
            result = await self._package(surface, accumulator)
        except Exception as e:
            logger.exception("Bolt generation failed")
            result = GenerationResult.failed(str(e) or type(e).__name__)
        return result.to_message()

    async def request(self, message: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Serve one request with the synchronous stage on the thread pool."""
        try:
            width, height, seed = parse_request(message, self.cfg)
            loop = asyncio.get_running_loop()
            surface, accumulator = await loop.run_in_executor(
                self.executor, self.draw, width, height, seed
            )
            result = await self._package(surface, accumulator)
        except Exception as e:
            logger.exception("Bolt generation failed")
            result = GenerationResult.failed(str(e) or type(e).__name__)
        return result.to_message()

    def _serve(self, message: Optional[Dict[str, Any]]) -> Dict[str, Any]:
        return asyncio.run(self.handle(message))

    def submit(self, message: Optional[Dict[str, Any]] = None) -> Future:
        """Queue a request from synchronous code; resolves to the response dict."""
        return self.executor.submit(self._serve, message)

    def close(self):
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.close()
