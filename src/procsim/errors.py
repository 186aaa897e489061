from __future__ import annotations


class ProcessSimulationError(Exception):
    """Base class for every error raised by the simulation core."""


class UnknownProcessError(ProcessSimulationError, LookupError):
    def __init__(self, kind: object, detail: str | None = None) -> None:
        self.kind = kind
        msg = detail or f"Unknown process: {kind!r}"
        super().__init__(msg)


class UnknownVariantError(UnknownProcessError):
    def __init__(self, kind: object, version: object, available: tuple[str, ...]) -> None:
        self.version = version
        self.available = available
        options = ", ".join(available)
        detail = f"Unknown variant {version!r} for process {kind!r}; available: {options}"
        super().__init__(kind, detail)


class InvalidParameterError(ProcessSimulationError, ValueError):
    def __init__(self, name: str, reason: str) -> None:
        self.name = name
        self.reason = reason
        super().__init__(f"Invalid parameter {name!r}: {reason}")


__all__ = [
    "ProcessSimulationError",
    "UnknownProcessError",
    "UnknownVariantError",
    "InvalidParameterError",
]
