"""
parity_net module: neural/example.py

A labeled (input, target) pair.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Sequence, Tuple


@dataclass(frozen=True)
class Example:
    inputs: Tuple[float, ...]
    target: Tuple[float, ...]

    @classmethod
    def of(cls, inputs: Sequence[float], target: Sequence[float]) -> "Example":
        return cls(inputs=tuple(float(v) for v in inputs), target=tuple(float(v) for v in target))
