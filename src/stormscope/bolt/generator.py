"""
Fractal bolt geometry generator.

Steps a wandering-but-trending main channel from the top centre of the
canvas toward a random bearing, spawning branches along the way:
- Main channel: wide, constant width, biased 7% per step toward its target.
- Branches: narrower, tighter wander, occasionally thin out, split into a
  fresh segment and maybe fork a nested branch.

Branches are queued on an explicit worklist rather than recursed into, so
fan-out is bounded by the depth cap and every loop by its step cap.
"""

import math
import random
from dataclasses import dataclass
from typing import List, Optional

from stormscope.bolt.config import BoltConfig
from stormscope.bolt.segments import Point, SegmentAccumulator


@dataclass
class GenerationState:
    """Mutable stepping state owned by one path or branch loop."""
    position: Point
    bearing: float
    stroke_width: float
    target_bearing: float
    step_count: int = 0

    def advance(self, step: float) -> Point:
        x, y = self.position
        self.position = (x + math.sin(self.bearing) * step, y + math.cos(self.bearing) * step)
        self.step_count += 1
        return self.position

    def steer(self, noise: float, bias: float):
        """Add bearing noise, then relax toward the target."""
        self.bearing += noise
        self.bearing -= (self.bearing - self.target_bearing) * bias


@dataclass
class BranchTask:
    """A pending branch waiting on the worklist."""
    start: Point
    target_bearing: float
    width: float
    depth: int


def generate_main_path(
    width: int,
    height: int,
    rng: random.Random,
    accumulator: SegmentAccumulator,
    pending: List[BranchTask],
    config: Optional[BoltConfig] = None,
):
    """
    Step the main channel until it leaves the bottom edge or hits its step cap.

    Branch spawns are appended to ``pending``; the channel itself is
    committed once, at its initial width.
    """
    cfg = config or BoltConfig()
    state = GenerationState(
        position=(width / 2.0, 0.0),
        bearing=cfg.main_start_bearing,
        stroke_width=cfg.main_width,
        target_bearing=rng.uniform(-cfg.main_target_spread, cfg.main_target_spread),
    )
    step_scale = rng.uniform(*cfg.main_step_scale)
    max_steps = cfg.max_main_steps(height)

    points: List[Point] = [state.position]
    while state.position[1] < height and state.step_count < max_steps:
        step = step_scale * rng.uniform(*cfg.main_step_jitter)
        nx, ny = state.advance(step)
        state.steer(rng.uniform(-cfg.main_wander, cfg.main_wander), cfg.main_bias)
        points.append((nx, ny))

        # Branching thins out toward the bottom of the canvas
        if rng.random() < cfg.branch_chance * (1.0 - ny / height):
            pending.append(BranchTask(
                start=(nx, ny),
                target_bearing=state.target_bearing
                + rng.uniform(-cfg.branch_bearing_spread, cfg.branch_bearing_spread),
                width=state.stroke_width * rng.uniform(*cfg.branch_width_range),
                depth=0,
            ))

    accumulator.commit(points, cfg.main_width)


def run_branch(
    task: BranchTask,
    height: int,
    rng: random.Random,
    accumulator: SegmentAccumulator,
    pending: List[BranchTask],
    config: Optional[BoltConfig] = None,
):
    """
    Step one branch to completion.

    Nested forks are pushed onto ``pending`` instead of being run inline.
    Tasks deeper than the depth cap are ignored.
    """
    cfg = config or BoltConfig()
    if task.depth > cfg.max_branch_depth:
        return

    state = GenerationState(
        position=task.start,
        bearing=task.target_bearing,
        stroke_width=task.width,
        target_bearing=task.target_bearing,
    )
    points: List[Point] = [state.position]

    while state.position[1] < height and state.step_count < cfg.max_branch_steps:
        nx, ny = state.advance(rng.uniform(*cfg.branch_step_range))
        state.steer(rng.uniform(-cfg.branch_wander, cfg.branch_wander), cfg.branch_bias)
        points.append((nx, ny))

        if rng.random() < cfg.decay_chance:
            accumulator.commit(points, state.stroke_width, task.depth)

            state.stroke_width *= rng.uniform(*cfg.decay_factor_range)
            if state.stroke_width < cfg.min_branch_width:
                return

            if rng.random() < cfg.rebranch_chance:
                pending.append(BranchTask(
                    start=(nx, ny),
                    target_bearing=task.target_bearing
                    + rng.uniform(-cfg.rebranch_bearing_spread, cfg.rebranch_bearing_spread),
                    width=state.stroke_width * cfg.rebranch_width_factor,
                    depth=task.depth + 1,
                ))

            points = [(nx, ny)]

    accumulator.commit(points, state.stroke_width, task.depth)


def generate_segments(
    width: int,
    height: int,
    rng: Optional[random.Random] = None,
    config: Optional[BoltConfig] = None,
) -> SegmentAccumulator:
    """
    Generate a full bolt: the main channel plus every branch it spawns.

    Returns the populated accumulator. A zero-height canvas produces no
    segments.
    """
    cfg = config or BoltConfig()
    rng = rng or random.Random()
    accumulator = SegmentAccumulator(min_width=cfg.min_segment_width)

    if width <= 0 or height <= 0:
        return accumulator

    pending: List[BranchTask] = []
    generate_main_path(width, height, rng, accumulator, pending, cfg)

    # LIFO so nested forks run before their pending siblings
    while pending:
        task = pending.pop()
        run_branch(task, height, rng, accumulator, pending, cfg)

    return accumulator
