"""Metrics that modules expose."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Protocol, runtime_checkable


@dataclass(frozen=True)
class Metric:
    """A single named metric whose current value ``read`` returns."""

    name: str
    read: Callable[[], float]
    description: str = ""


@runtime_checkable
class MetricsProvider(Protocol):
    """A module that provides a list of metrics."""

    def metrics(self) -> list[Metric]:
        """Return the metrics."""