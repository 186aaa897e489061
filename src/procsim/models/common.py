from __future__ import annotations

import math
from collections.abc import Iterable, Mapping

from procsim.errors import InvalidParameterError

ParameterSet = Mapping[str, float]
ResultValue = float | int | list[float]
ResultSet = dict[str, ResultValue]

EPSILON = 1e-9


def clamp(value: float, min_value: float, max_value: float) -> float:
    return max(min_value, min(value, max_value))


def floor_positive(value: float, floor: float = EPSILON) -> float:
    return max(value, floor)


def finite_or_zero(value: float) -> float:
    return value if math.isfinite(value) else 0.0


def safe_power(base: float, exponent: float) -> float:
    """``base ** exponent`` that yields ``inf`` instead of raising on overflow."""
    try:
        return base**exponent
    except OverflowError:
        return math.inf


def read_parameters(
    parameters: ParameterSet,
    required: Iterable[str],
    optional: Mapping[str, float] | None = None,
) -> dict[str, float]:
    """Pull named numeric inputs out of a parameter mapping.

    Required names must be present; optional names fall back to their defaults.
    Non-numeric and non-finite values are rejected rather than coerced.
    """
    values: dict[str, float] = {}
    for name in required:
        if name not in parameters:
            raise InvalidParameterError(name, "missing required parameter")
        values[name] = as_finite_float(name, parameters[name])
    for name, default in (optional or {}).items():
        raw = parameters.get(name)
        values[name] = default if raw is None else as_finite_float(name, raw)
    return values


def as_finite_float(name: str, raw: object) -> float:
    if isinstance(raw, bool):
        raise InvalidParameterError(name, "expected a number, got a boolean")
    try:
        value = float(raw)  # type: ignore[arg-type]
    except (TypeError, ValueError) as exc:
        raise InvalidParameterError(name, f"expected a number, got {raw!r}") from exc
    if not math.isfinite(value):
        raise InvalidParameterError(name, "value must be finite")
    return value


def sanitize_results(results: Mapping[str, object]) -> ResultSet:
    """Replace NaN/inf by 0 in scalar and sequence outputs."""
    cleaned: ResultSet = {}
    for key, value in results.items():
        if isinstance(value, int) and not isinstance(value, bool):
            cleaned[key] = value
        elif isinstance(value, (list, tuple)):
            cleaned[key] = [finite_or_zero(float(item)) for item in value]
        else:
            cleaned[key] = finite_or_zero(float(value))  # type: ignore[arg-type]
    return cleaned


__all__ = [
    "ParameterSet",
    "ResultSet",
    "ResultValue",
    "EPSILON",
    "clamp",
    "floor_positive",
    "finite_or_zero",
    "safe_power",
    "as_finite_float",
    "read_parameters",
    "sanitize_results",
]
