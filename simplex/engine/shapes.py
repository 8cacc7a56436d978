"""Shape — a named output blend target with a stable index."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class Shape:
    name: str
    # Position in the solver output vector
    index: int
