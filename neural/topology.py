"""
parity_net module: neural/topology.py

Builders for fully connected layered networks.
"""

from __future__ import annotations
import random
from typing import List, Optional, Sequence

import config
from neural.layer import Layer
from neural.network import Network
from neural.neuron import ConstantNeuron, Neuron, WeightedSumNeuron


def build_network(
    layer_sizes: Sequence[int] = config.LAYER_SIZES,
    seed: Optional[int] = None,
    default_input: float = config.DEFAULT_INPUT,
) -> Network:
    """
    First layer: constant neurons at ``default_input``.
    Every later layer: weighted-sum neurons linked to all of the previous
    layer, weights uniform in [0, 1), bias 0.
    Neuron ids are handed out in build order.
    """
    if any(size < 1 for size in layer_sizes):
        raise ValueError(f"Layer sizes must be positive: {list(layer_sizes)}")

    rng = random.Random(seed)
    next_id = 0
    layers: List[Layer] = []
    previous: Optional[Layer] = None

    for size in layer_sizes:
        neurons: List[Neuron] = []
        for _ in range(size):
            if previous is None:
                neurons.append(ConstantNeuron(id=next_id, amount=default_input))
            else:
                weights = [rng.random() for _ in range(len(previous))]
                neurons.append(WeightedSumNeuron(id=next_id, inputs=previous.neurons, weights=weights))
            next_id += 1
        layer = Layer(neurons)
        layers.append(layer)
        previous = layer

    return Network(layers)


def build_predesigned_network() -> Network:
    """
    [8, 2] network wired by hand to read the two lowest bits:
    output 0 (odd) favours bit 0, output 1 (even) favours bit 1.
    """
    net = build_network([8, 2], seed=0)
    odd, even = net.last_layer.weighted_neurons()

    odd.weights = [0.0] * 8
    even.weights = [0.0] * 8
    odd.set_weight(6, -1.0)
    odd.set_weight(7, +1.0)
    even.set_weight(6, +1.0)
    even.set_weight(7, -1.0)
    return net
