"""
parity_net module: neural/network.py

Layered network: forward evaluation, quadratic cost, and stochastic
gradient descent with explicit backpropagation.

Lifecycle:
  - idle: no batch evaluated yet, cost() raises NoEvaluationYet
  - evaluated: last batch cached, cost() recomputes it against the
    current parameters
train() mutates parameters in place and leaves the cached batch alone.
Single-threaded: one evaluate/train call in flight per instance.
"""

from __future__ import annotations
import logging
import random
from dataclasses import dataclass
from typing import List, Optional, Sequence

import config
from neural.errors import InputShapeMismatch, NoEvaluationYet
from neural.example import Example
from neural.layer import Layer
from neural.neuron import NeuronKind, WeightedSumNeuron

logger = logging.getLogger(__name__)


@dataclass
class BatchEvaluation:
    outputs: List[List[float]]
    cost: float


@dataclass
class TrainingReport:
    minibatches: int
    final_step_size: float


def partition(examples: Sequence[Example], size: int) -> List[List[Example]]:
    """Split into consecutive non-overlapping groups; the last one may be short."""
    if size < 1:
        raise ValueError(f"Minibatch size must be positive, got {size}")
    return [list(examples[i:i + size]) for i in range(0, len(examples), size)]


class Network:
    def __init__(self, layers: Sequence[Layer], output_size: int = config.OUTPUT_SIZE):
        self.layers: List[Layer] = list(layers)
        self.last_evaluation_set: Optional[List[Example]] = None
        self._validate(output_size)

    def _validate(self, output_size: int) -> None:
        if len(self.layers) < 2:
            raise ValueError("A network needs an input layer and at least one weighted layer")
        if any(n.kind != NeuronKind.CONSTANT for n in self.layers[0]):
            raise ValueError("The first layer may only hold constant neurons")
        for idx, layer in enumerate(self.layers[1:], start=1):
            if len(layer) == 0:
                raise ValueError(f"Layer {idx} is empty")
            if len(layer.weighted_neurons()) != len(layer):
                raise ValueError(f"Layer {idx} may only hold weighted-sum neurons")
            # strict layering: inputs come only from the layer right before
            previous = {id(n) for n in self.layers[idx - 1]}
            for n in layer:
                if any(id(p) not in previous for p in n.predecessors()):
                    raise ValueError(
                        f"Neuron {n.id} in layer {idx} reads from outside layer {idx - 1}"
                    )
        if len(self.last_layer) != output_size:
            raise ValueError(
                f"Output layer has {len(self.last_layer)} neurons, expected {output_size}"
            )

    def __str__(self) -> str:
        sizes = " ".join(str(len(layer)) for layer in self.layers)
        return f"Network with {len(self.layers)} layers: {sizes}"

    @property
    def first_layer(self) -> Layer:
        return self.layers[0]

    @property
    def last_layer(self) -> Layer:
        return self.layers[-1]

    def weighted_neurons(self) -> List[WeightedSumNeuron]:
        out: List[WeightedSumNeuron] = []
        for layer in self.layers:
            out.extend(layer.weighted_neurons())
        return out

    def reset(self) -> None:
        # every layer once; no need to bubble upwards
        for layer in self.layers:
            for n in layer:
                n.invalidate()

    # ---- forward ----

    def load(self, vector: Sequence[float]) -> None:
        """Write ``vector`` into the input constants without evaluating."""
        if len(vector) != len(self.first_layer):
            raise InputShapeMismatch(len(self.first_layer), len(vector))
        for neuron, value in zip(self.first_layer, vector):
            neuron.amount = float(value)

    def evaluate(self, vector: Sequence[float]) -> List[float]:
        self.load(vector)
        return self.last_layer.normalized_output()

    def evaluate_batch(self, examples: Sequence[Example]) -> BatchEvaluation:
        self.last_evaluation_set = list(examples)
        outputs = [self.evaluate(ex.inputs) for ex in self.last_evaluation_set]
        return BatchEvaluation(outputs=outputs, cost=self.cost())

    def cost(self) -> float:
        """Quadratic cost of the last evaluated batch: sum(||y - a||^2) / 2n."""
        if self.last_evaluation_set is None:
            raise NoEvaluationYet()
        if not self.last_evaluation_set:
            return 0.0

        total = 0.0
        for ex in self.last_evaluation_set:
            out = self.evaluate(ex.inputs)
            total += sum((a - y) ** 2 for a, y in zip(out, ex.target))
        return total / (2 * len(self.last_evaluation_set))

    # ---- training ----

    def train(
        self,
        examples: Sequence[Example],
        step_size: float = config.STEP_SIZE,
        decay: float = config.STEP_DECAY,
        minibatch_size: int = config.MINIBATCH_SIZE,
        rng: random.Random | None = None,
    ) -> TrainingReport:
        """
        Stochastic gradient descent over shuffled, non-overlapping minibatches.

        Not transactional: if error propagation raises, updates applied for
        earlier minibatches stay in place.
        """
        rng = rng or random.Random()
        shuffled = list(examples)
        rng.shuffle(shuffled)
        minibatches = partition(shuffled, minibatch_size)

        for idx, batch in enumerate(minibatches):
            self.last_layer.output_error_for_batch(batch, feed=lambda ex: self.load(ex.inputs))
            # reverse order: each layer needs the errors of the one after it
            for layer in reversed(self.layers[:-1]):
                layer.propagate_error()

            # last layer first, so every update reads pre-update upstream outputs
            for layer in reversed(self.layers):
                for neuron in layer:
                    neuron.apply_gradient(step_size)

            logger.debug("minibatch %d/%d (%d examples) step=%.5f", idx + 1, len(minibatches), len(batch), step_size)
            step_size *= decay

        return TrainingReport(minibatches=len(minibatches), final_step_size=step_size)
