"""
parity_net module: neural/layer.py

Ordered group of neurons. Order matters: it is the index correspondence
with weight vectors and with the components of a label.
"""

from __future__ import annotations
from typing import Callable, Iterator, List, Optional, Sequence

from neural.activation import distance, logistic_derivative, softmax
from neural.example import Example
from neural.neuron import Neuron, NeuronKind, WeightedSumNeuron, invalidate_upstream


class Layer:
    def __init__(self, neurons: Sequence[Neuron] = ()):
        self.neurons: List[Neuron] = list(neurons)

    def __len__(self) -> int:
        return len(self.neurons)

    def __iter__(self) -> Iterator[Neuron]:
        return iter(self.neurons)

    def __getitem__(self, index: int) -> Neuron:
        return self.neurons[index]

    def __str__(self) -> str:
        return f"Layer with {len(self.neurons)} neurons."

    def weighted_neurons(self) -> List[WeightedSumNeuron]:
        return [n for n in self.neurons if n.kind == NeuronKind.WEIGHTED_SUM]

    def reset(self) -> None:
        # one sweep over everything upstream, so shared predecessors are cleared once
        invalidate_upstream(self.neurons)

    def outputs(self) -> List[float]:
        return [n.output() for n in self.neurons]

    def normalized_output(self) -> List[float]:
        """Softmax over the layer's activations, recomputed from fresh caches."""
        self.reset()
        return softmax(self.outputs())

    # ---- backward ----

    def propagate_error(self) -> List[float]:
        """
        Hidden-layer error step.

        Must run after the next layer downstream has its errors set.
        NeuronKindMismatch / NotLinked from weight lookups propagate.
        """
        errors: List[float] = []
        for n in self.neurons:
            downstream = 0.0
            for linked in n.linked_neurons:
                downstream += linked.weight_of(n) * linked.error
            err = downstream * logistic_derivative(n.sum())
            n.error = err
            errors.append(err)
        return errors

    def output_error_for(self, example: Example) -> List[float]:
        """
        Output-layer error for one example.

        The distance term is one scalar shared by every neuron in the layer,
        not the per-component difference.
        """
        dist = distance(self.normalized_output(), example.target)
        errors = [dist * logistic_derivative(n.sum()) for n in self.neurons]
        for n, err in zip(self.neurons, errors):
            n.error = err
        return errors

    def output_error_for_batch(
        self,
        examples: Sequence[Example],
        feed: Optional[Callable[[Example], None]] = None,
    ) -> List[float]:
        """
        Mean output error over ``examples``, written onto the two neurons.

        ``feed`` loads an example's inputs into the network before its error
        is taken. Without it every example is scored against whatever input
        is currently loaded.
        """
        if not examples:
            raise ValueError("Cannot compute output error for an empty batch")
        if len(self.neurons) != 2:
            raise ValueError(f"Output error expects exactly 2 neurons, layer has {len(self.neurons)}")

        totals = [0.0, 0.0]
        for ex in examples:
            if feed is not None:
                feed(ex)
            errors = self.output_error_for(ex)
            totals[0] += errors[0]
            totals[1] += errors[1]

        averaged = [totals[0] / len(examples), totals[1] / len(examples)]
        self.neurons[0].error = averaged[0]
        self.neurons[1].error = averaged[1]
        return averaged
