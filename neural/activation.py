"""
parity_net module: neural/activation.py

Scalar math shared by the forward and backward passes.
"""

from __future__ import annotations
import math
from typing import List, Sequence


def logistic(x: float) -> float:
    # two branches so exp() only ever sees a non-positive argument
    if x >= 0.0:
        return 1.0 / (1.0 + math.exp(-x))
    e = math.exp(x)
    return e / (1.0 + e)


def logistic_derivative(x: float) -> float:
    s = logistic(x)
    return s * (1.0 - s)


def distance(a: Sequence[float], b: Sequence[float]) -> float:
    """Euclidean distance between two vectors of equal length."""
    if len(a) != len(b):
        raise ValueError(f"Vectors differ in length ({len(a)} vs {len(b)})")
    return math.sqrt(sum((x - y) ** 2 for x, y in zip(a, b)))


def softmax(values: Sequence[float]) -> List[float]:
    m = max(values)
    exps = [math.exp(v - m) for v in values]
    total = sum(exps)
    return [v / total for v in exps]
