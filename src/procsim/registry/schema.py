from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass

from procsim.errors import InvalidParameterError
from procsim.models.common import as_finite_float


@dataclass(frozen=True)
class ParameterSpec:
    name: str
    minimum: float
    maximum: float
    step: float
    default: float
    unit: str = ""
    required: bool = True

    def __post_init__(self) -> None:
        if not self.name:
            msg = "name must be non-empty"
            raise ValueError(msg)
        if not self.minimum <= self.maximum:
            msg = f"{self.name}: minimum must not exceed maximum"
            raise ValueError(msg)
        if not self.minimum <= self.default <= self.maximum:
            msg = f"{self.name}: default must lie within [minimum, maximum]"
            raise ValueError(msg)
        if self.step <= 0:
            msg = f"{self.name}: step must be positive"
            raise ValueError(msg)

    def clamp(self, value: float) -> float:
        return max(self.minimum, min(float(value), self.maximum))

    def to_dict(self) -> dict[str, object]:
        return {
            "name": self.name,
            "min": self.minimum,
            "max": self.maximum,
            "step": self.step,
            "default": self.default,
            "unit": self.unit,
            "required": self.required,
        }


@dataclass(frozen=True)
class ParameterSchema:
    """Ordered, immutable list of slider descriptors for one process."""

    kind: str
    parameters: tuple[ParameterSpec, ...]

    def __post_init__(self) -> None:
        names = [spec.name for spec in self.parameters]
        if len(names) != len(set(names)):
            msg = f"{self.kind}: parameter names must be unique"
            raise ValueError(msg)

    def __iter__(self) -> Iterator[ParameterSpec]:
        return iter(self.parameters)

    def __len__(self) -> int:
        return len(self.parameters)

    def __contains__(self, name: object) -> bool:
        return any(spec.name == name for spec in self.parameters)

    @property
    def names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.parameters)

    @property
    def required_names(self) -> tuple[str, ...]:
        return tuple(spec.name for spec in self.parameters if spec.required)

    def get(self, name: str) -> ParameterSpec:
        for spec in self.parameters:
            if spec.name == name:
                return spec
        raise InvalidParameterError(name, f"not a parameter of {self.kind}")

    def defaults(self) -> dict[str, float]:
        return {spec.name: spec.default for spec in self.parameters}

    def clamp(self, parameters: Mapping[str, object]) -> dict[str, float]:
        """Return a complete parameter set with every value clamped into its range.

        Missing optional parameters take their defaults; unknown names, missing
        required names and non-finite values raise ``InvalidParameterError``.
        """
        for name in parameters:
            if name not in self:
                raise InvalidParameterError(name, f"not a parameter of {self.kind}")

        clamped: dict[str, float] = {}
        for spec in self.parameters:
            raw = parameters.get(spec.name)
            if raw is None:
                if spec.required:
                    raise InvalidParameterError(spec.name, "missing required parameter")
                clamped[spec.name] = spec.default
                continue
            clamped[spec.name] = spec.clamp(as_finite_float(spec.name, raw))
        return clamped

    def to_list(self) -> list[dict[str, object]]:
        return [spec.to_dict() for spec in self.parameters]


__all__ = ["ParameterSpec", "ParameterSchema"]
