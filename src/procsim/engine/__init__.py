from procsim.engine.simulator import (
    build_visual_frame,
    simulate,
    simulate_clamped,
    simulate_over_time,
)
from procsim.engine.trajectory import Trajectory

__all__ = [
    "simulate",
    "simulate_clamped",
    "simulate_over_time",
    "build_visual_frame",
    "Trajectory",
]
