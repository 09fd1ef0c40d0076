"""Per-unit read outcomes.

Readers never abort on a single bad file or row. Each unit either contributes
an item or is recorded as skipped with a reason, and the caller decides how to
surface the skips (the CLI logs them as warnings).
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class SkippedUnit:
    source: str
    unit: str
    reason: str


@dataclass
class ReadResult(Generic[T]):
    items: list[T] = field(default_factory=list)
    skipped: list[SkippedUnit] = field(default_factory=list)

    def add(self, item: T) -> None:
        self.items.append(item)

    def skip(self, source: str, unit: str, reason: str) -> None:
        self.skipped.append(SkippedUnit(source=source, unit=unit, reason=reason))

    def extend(self, other: ReadResult[T]) -> None:
        self.items.extend(other.items)
        self.skipped.extend(other.skipped)


def log_skipped(result: ReadResult, logger: logging.Logger) -> None:
    for unit in result.skipped:
        logger.warning("Skipped %s %s: %s", unit.source, unit.unit, unit.reason)
