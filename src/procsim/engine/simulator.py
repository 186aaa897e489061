from __future__ import annotations

import logging
import math
from collections.abc import Iterator, Mapping

import numpy as np

from procsim.config import get_settings
from procsim.engine.trajectory import Trajectory
from procsim.errors import InvalidParameterError, UnknownProcessError
from procsim.models.common import ParameterSet, ResultSet, read_parameters
from procsim.models.crystallization import (
    STEPPED_OPTIONAL_PARAMETERS,
    STEPPED_REQUIRED_PARAMETERS,
    frame_count,
    iter_crystallizer,
    lookup_habit,
    lookup_liquid,
)
from procsim.models.fermentation import REQUIRED_PARAMETERS as FERMENTATION_PARAMETERS
from procsim.models.fermentation import TIME_STEP_H, iter_states, step_count
from procsim.registry import ProcessKind, get_model, get_schema, resolve_kind

logger = logging.getLogger(__name__)

DEFAULT_CRYSTALLIZATION_DURATION = 10.0


def simulate(
    kind: str | ProcessKind,
    parameters: ParameterSet,
    *,
    version: str | None = None,
) -> ResultSet:
    """Dispatch ``parameters`` unmodified to the registered model for ``kind``.

    Raises ``UnknownProcessError`` for an unregistered kind or variant and
    ``InvalidParameterError`` when a required input is missing or not finite.
    Range clamping is left to the caller; see ``simulate_clamped``.
    """
    model = get_model(kind, version)
    logger.debug("Simulating %s (%s) with %s", model.kind.value, model.version, dict(parameters))
    results = model(parameters)
    logger.debug("Simulated %s: %d outputs", model.kind.value, len(results))
    return results


def simulate_clamped(
    kind: str | ProcessKind,
    parameters: Mapping[str, object],
    *,
    version: str | None = None,
) -> ResultSet:
    """Clamp ``parameters`` against the process schema, then simulate."""
    clamped = get_schema(kind).clamp(parameters)
    return simulate(kind, clamped, version=version)


def _resolve_seed(seed: int | None) -> int:
    if seed is not None:
        return seed
    configured = get_settings().random_seed
    if configured is not None:
        return configured
    return int(np.random.SeedSequence().entropy)


def _fermentation_trajectory(
    parameters: ParameterSet,
    duration: float | None,
    dt: float | None,
) -> Trajectory:
    if dt is not None and not math.isclose(dt, TIME_STEP_H):
        msg = f"fermentation integrates with a fixed {TIME_STEP_H} h step"
        raise InvalidParameterError("dt", msg)
    values = read_parameters(parameters, FERMENTATION_PARAMETERS)
    horizon = values["time"] if duration is None else duration
    snapshot_parameters = dict(parameters)

    def factory() -> Iterator[dict[str, float]]:
        return (state.to_dict() for state in iter_states(snapshot_parameters, horizon))

    return Trajectory(ProcessKind.FERMENTATION.value, factory, step_count(horizon) + 1)


def _crystallization_trajectory(
    parameters: ParameterSet,
    duration: float | None,
    dt: float | None,
    seed: int | None,
    liquid: str,
    habit: str,
) -> Trajectory:
    step = get_settings().crystallization_dt if dt is None else dt
    if step <= 0:
        raise InvalidParameterError("dt", "must be positive")
    horizon = DEFAULT_CRYSTALLIZATION_DURATION if duration is None else duration
    read_parameters(parameters, STEPPED_REQUIRED_PARAMETERS, STEPPED_OPTIONAL_PARAMETERS)
    try:
        lookup_liquid(liquid)
    except ValueError as exc:
        raise InvalidParameterError("liquid", str(exc)) from exc
    try:
        lookup_habit(habit)
    except ValueError as exc:
        raise InvalidParameterError("habit", str(exc)) from exc

    resolved_seed = _resolve_seed(seed)
    snapshot_parameters = dict(parameters)

    def factory() -> Iterator[dict[str, object]]:
        return iter_crystallizer(
            snapshot_parameters,
            horizon,
            dt=step,
            rng=np.random.default_rng(resolved_seed),
            liquid=liquid,
            habit=habit,
        )

    return Trajectory(ProcessKind.CRYSTALLIZATION.value, factory, frame_count(horizon, step) + 1)


def simulate_over_time(
    kind: str | ProcessKind,
    parameters: ParameterSet,
    duration: float | None = None,
    *,
    dt: float | None = None,
    seed: int | None = None,
    liquid: str = "water",
    habit: str = "cubic",
) -> Trajectory:
    """Expose the intermediate states of a time-stepped model as a ``Trajectory``.

    Fermentation steps the Monod model at a fixed 0.1 h and runs for
    ``parameters["time"]`` unless ``duration`` is given. Crystallization runs
    the stochastic nucleation model; ``seed`` falls back to the configured
    ``random_seed`` and then to fresh entropy drawn once, so the returned
    trajectory replays identically on every iteration.
    """
    process = resolve_kind(kind)
    if duration is not None and (not math.isfinite(duration) or duration < 0):
        raise InvalidParameterError("duration", "must be a finite, non-negative number")
    logger.debug("Building %s trajectory (duration=%s, dt=%s)", process.value, duration, dt)

    if process is ProcessKind.FERMENTATION:
        return _fermentation_trajectory(parameters, duration, dt)
    if process is ProcessKind.CRYSTALLIZATION:
        return _crystallization_trajectory(parameters, duration, dt, seed, liquid, habit)
    raise UnknownProcessError(process.value, f"Process {process.value!r} has no time-stepped model")


def _coerce_float(value: object, default: float = 0.0) -> float:
    try:
        number = float(value)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return default
    return number if math.isfinite(number) else default


def _coerce_value(value: object) -> float | int | list[float]:
    if isinstance(value, (int, np.integer)) and not isinstance(value, bool):
        return int(value)
    if isinstance(value, (list, tuple, np.ndarray)):
        return [_coerce_float(item) for item in value]
    return _coerce_float(value)


def build_visual_frame(
    kind: str | ProcessKind,
    parameters: Mapping[str, object],
    results: Mapping[str, object],
) -> dict[str, object]:
    """Map one simulation into a JSON-safe payload for a renderer.

    The returned dict and its nested dicts are fresh; a renderer may keep
    adding per-frame fields without touching the simulation outputs.
    """
    process = resolve_kind(kind)
    return {
        "process": process.value,
        "parameters": {name: _coerce_float(value) for name, value in parameters.items()},
        "results": {name: _coerce_value(value) for name, value in results.items()},
    }


__all__ = [
    "simulate",
    "simulate_clamped",
    "simulate_over_time",
    "build_visual_frame",
    "DEFAULT_CRYSTALLIZATION_DURATION",
]
