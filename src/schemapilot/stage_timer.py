# Copyright (C) 2025-2026 Retio AI
# SPDX-License-Identifier: AGPL-3.0-only

"""Per-stage latency for one pipeline run.

Used as a context manager around the classify/policy/assemble/validate
sequence: each ``stage()`` call closes the previous stage, leaving the
block closes the last one (also when a stage raises, so ``current_stage``
is only meaningful inside the block).
"""

from __future__ import annotations

import time
from collections.abc import Callable
from dataclasses import dataclass

Clock = Callable[[], int]


def _ms(start_ns: int, end_ns: int) -> float:
    return round((end_ns - start_ns) / 1e6, 3)


@dataclass(slots=True)
class StageRecord:
    name: str
    start_ns: int
    end_ns: int = 0

    @property
    def elapsed_ms(self) -> float:
        return _ms(self.start_ns, self.end_ns)


class StageTimer:
    __slots__ = ("_clock", "_done", "_running", "_origin_ns")

    def __init__(self, clock: Clock = time.monotonic_ns) -> None:
        self._clock = clock
        self._done: list[StageRecord] = []
        self._running: StageRecord | None = None
        self._origin_ns = clock()

    def __enter__(self) -> StageTimer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.finalize()

    def _close_running(self, now: int) -> None:
        if self._running is not None:
            self._running.end_ns = now
            self._done.append(self._running)
            self._running = None

    def stage(self, name: str) -> None:
        """Close the running stage (if any) and open *name*."""
        now = self._clock()
        self._close_running(now)
        self._running = StageRecord(name=name, start_ns=now)

    def finalize(self) -> None:
        """Close the running stage.  Safe to call more than once."""
        self._close_running(self._clock())

    @property
    def current_stage(self) -> str | None:
        return self._running.name if self._running else None

    @property
    def stage_names(self) -> list[str]:
        """Completed stages, in order."""
        return [s.name for s in self._done]

    def elapsed_per_stage(self) -> dict[str, float]:
        """``{stage: ms}``; a still-running stage is measured up to now."""
        result = {s.name: s.elapsed_ms for s in self._done}
        if self._running is not None:
            result[self._running.name] = _ms(self._running.start_ns, self._clock())
        return result

    def total_ms(self) -> float:
        return _ms(self._origin_ns, self._clock())

    def summary(self) -> str:
        """``classify=0.412 policy=0.051 ...`` for one-line log messages."""
        return " ".join(f"{name}={ms}" for name, ms in self.elapsed_per_stage().items())
