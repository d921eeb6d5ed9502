"""
parity_net module: neural/synapse.py

Weighted directed connection into a weighted-sum neuron.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from neural.neuron import Neuron


@dataclass(eq=False)
class Synapse:
    src: "Neuron"
    weight: float
