"""
Tuning constants for the bolt generator, renderer and packager.
"""

import math
from dataclasses import dataclass
from typing import Tuple

RGBA = Tuple[int, int, int, float]


@dataclass
class BoltConfig:
    """Configuration for a single lightning strike."""
    width: int = 800
    height: int = 600

    # Main channel
    main_start_bearing: float = math.pi / 6
    main_target_spread: float = math.pi / 6  # target bearing in [-spread, spread]
    main_step_scale: Tuple[float, float] = (2.0, 4.0)
    main_step_jitter: Tuple[float, float] = (0.8, 2.0)
    main_wander: float = 0.5
    main_bias: float = 0.07
    main_width: float = 8.0
    min_main_steps: int = 40

    # Branch spawning off the main channel
    branch_chance: float = 0.03
    branch_bearing_spread: float = 1.0
    branch_width_range: Tuple[float, float] = (0.4, 0.9)

    # Branch stepping
    branch_step_range: Tuple[float, float] = (1.0, 2.6)
    branch_wander: float = 0.4
    branch_bias: float = 0.06
    max_branch_steps: int = 140
    max_branch_depth: int = 2

    # Empirical tuning, no derivation behind these two
    decay_chance: float = 0.02
    rebranch_chance: float = 0.12
    decay_factor_range: Tuple[float, float] = (0.6, 0.95)
    min_branch_width: float = 0.35
    rebranch_width_factor: float = 0.8
    rebranch_bearing_spread: float = 0.6

    # Segments
    min_segment_width: float = 0.5

    # Rendering
    reference_width: float = 12.0
    glow_width_factor: float = 2.4
    glow_min_width: float = 1.0
    glow_blur: float = 12.0
    glow_shadow_color: RGBA = (200, 220, 255, 0.9)
    glow_stroke_color: RGBA = (220, 230, 255, 0.9)
    core_min_width: float = 0.6

    # Shake
    min_shake: float = 0.04

    def max_main_steps(self, height: int) -> int:
        """Step cap for the main channel, scaled with canvas height."""
        return max(self.min_main_steps, int(height // 4))
