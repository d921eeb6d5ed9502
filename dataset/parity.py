"""
parity_net module: dataset/parity.py

Toy dataset: a byte as 8 bits (most significant first), labeled by parity.
Targets are one-hot over (odd, even).
"""

from __future__ import annotations
from typing import Iterable, List, Sequence

from neural.example import Example

ODD_TARGET = (1.0, 0.0)
EVEN_TARGET = (0.0, 1.0)
LABELS = ("odd", "even")


def encode_byte(value: int) -> Example:
    if not 0 <= value <= 255:
        raise ValueError(f"Expected a byte (0..255), got {value}")
    bits = [float((value >> shift) & 1) for shift in range(7, -1, -1)]
    target = EVEN_TARGET if value % 2 == 0 else ODD_TARGET
    return Example.of(bits, target)


def parity_dataset(values: Iterable[int] = range(256)) -> List[Example]:
    return [encode_byte(v) for v in values]


def predicted_label(output: Sequence[float]) -> str:
    best = max(range(len(output)), key=lambda i: output[i])
    return LABELS[best]
