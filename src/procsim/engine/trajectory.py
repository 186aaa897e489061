from __future__ import annotations

from collections.abc import Callable, Iterable, Iterator, Mapping

import pandas as pd

Snapshot = dict[str, object]
SnapshotFactory = Callable[[], Iterable[Mapping[str, object]]]


class Trajectory:
    """Lazy, finite and restartable sequence of simulation snapshots.

    Every iteration calls ``factory`` again, so a trajectory replays from its
    initial state each time; stochastic processes replay with the same seed.
    Snapshots are handed out as fresh dicts that callers may extend.
    """

    def __init__(self, process: str, factory: SnapshotFactory, length: int) -> None:
        if length < 1:
            msg = "length must be at least 1"
            raise ValueError(msg)
        self.process = process
        self._factory = factory
        self._length = length

    def __iter__(self) -> Iterator[Snapshot]:
        for snapshot in self._factory():
            yield dict(snapshot)

    def __len__(self) -> int:
        return self._length

    def __repr__(self) -> str:
        return f"Trajectory(process={self.process!r}, length={self._length})"

    def final(self) -> Snapshot:
        last: Snapshot = {}
        for snapshot in self:
            last = snapshot
        return last

    def to_frame(self) -> pd.DataFrame:
        return pd.DataFrame(list(self))


__all__ = ["Trajectory", "Snapshot"]
