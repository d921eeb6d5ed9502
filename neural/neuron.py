"""
parity_net module: neural/neuron.py

Neuron primitives for a strictly layered feed-forward network.

Two kinds share one capability set:
  - ConstantNeuron holds an externally set amount (used to inject inputs)
  - WeightedSumNeuron squashes a weighted sum of its predecessors' outputs

Forward evaluation pulls through predecessor references. Backpropagation
walks the other way through ``linked_neurons``, which are plain forward
references and never imply ownership (the Layer owns its neurons).
"""

from __future__ import annotations
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from typing import ClassVar, Iterable, List, Optional, Sequence, Set

from neural.activation import logistic
from neural.errors import NeuronKindMismatch, NotLinked
from neural.synapse import Synapse


class NeuronKind(Enum):
    CONSTANT = 0
    WEIGHTED_SUM = 1


class Neuron(ABC):
    kind: ClassVar[NeuronKind]
    id: int
    linked_neurons: List["Neuron"]

    @abstractmethod
    def output(self) -> float:
        ...

    @abstractmethod
    def sum(self) -> float:
        ...

    @abstractmethod
    def reset(self) -> None:
        """Clear cached output here and in the whole upstream subgraph."""

    @abstractmethod
    def invalidate(self) -> None:
        """Clear this neuron's own cached output only."""

    @property
    @abstractmethod
    def error(self) -> float:
        ...

    @error.setter
    @abstractmethod
    def error(self, value: float) -> None:
        ...

    @abstractmethod
    def predecessors(self) -> Sequence["Neuron"]:
        ...

    @abstractmethod
    def weight_of(self, candidate: "Neuron") -> float:
        ...

    @abstractmethod
    def add_link(self, downstream: "Neuron") -> None:
        ...

    @abstractmethod
    def apply_gradient(self, step_size: float) -> None:
        ...

    @abstractmethod
    def weight_into(self, consumer: "WeightedSumNeuron") -> float:
        """
        Weight on the edge from this neuron into ``consumer``.

        Second half of ``weight_of``: each kind answers for itself, so the
        caller never has to inspect types.
        """


def invalidate_upstream(neurons: Iterable[Neuron]) -> None:
    """Invalidate every neuron reachable backwards from ``neurons``, once each."""
    seen: Set[int] = set()
    stack = list(neurons)
    while stack:
        n = stack.pop()
        key = id(n)
        if key in seen:
            continue
        seen.add(key)
        n.invalidate()
        stack.extend(n.predecessors())


@dataclass(eq=False)
class ConstantNeuron(Neuron):
    kind: ClassVar[NeuronKind] = NeuronKind.CONSTANT

    id: int
    amount: float = 0.0
    # constants have no backward dependency; kept empty
    linked_neurons: List[Neuron] = field(default_factory=list, repr=False)

    def output(self) -> float:
        return self.amount

    def sum(self) -> float:
        return self.amount

    def reset(self) -> None:
        pass

    def invalidate(self) -> None:
        pass

    @property
    def error(self) -> float:
        return 0.0

    @error.setter
    def error(self, value: float) -> None:
        pass  # writes ignored

    def predecessors(self) -> Sequence[Neuron]:
        return ()

    def weight_of(self, candidate: Neuron) -> float:
        return 0.0

    def add_link(self, downstream: Neuron) -> None:
        pass

    def apply_gradient(self, step_size: float) -> None:
        pass

    def weight_into(self, consumer: "WeightedSumNeuron") -> float:
        raise NeuronKindMismatch(
            f"Constant neuron {self.id} does not publish weights to neuron {consumer.id}"
        )


class WeightedSumNeuron(Neuron):
    """
    Logistic unit over an ordered list of synapses.

    sum()    = sum(w_i * pred_i.output()) - bias
    output() = logistic(sum()), cached until invalidated
    """

    kind: ClassVar[NeuronKind] = NeuronKind.WEIGHTED_SUM

    def __init__(
        self,
        id: int,
        inputs: Sequence[Neuron],
        weights: Sequence[float],
        bias: float = 0.0,
    ):
        if len(inputs) != len(weights):
            raise ValueError(
                f"Neuron {id}: {len(inputs)} predecessors but {len(weights)} weights"
            )
        self.id = id
        self.synapses: List[Synapse] = [Synapse(src=n, weight=float(w)) for n, w in zip(inputs, weights)]
        self.linked_neurons: List[Neuron] = []
        self._bias = float(bias)
        self._error = 0.0
        self._cached_output: Optional[float] = None

        for n in inputs:
            n.add_link(self)

    def __repr__(self) -> str:
        return f"WeightedSumNeuron(id={self.id}, inputs={len(self.synapses)}, bias={self._bias:.4f})"

    # ---- parameters ----

    @property
    def bias(self) -> float:
        return self._bias

    @bias.setter
    def bias(self, value: float) -> None:
        self._bias = float(value)
        self.invalidate()

    @property
    def weights(self) -> List[float]:
        return [s.weight for s in self.synapses]

    @weights.setter
    def weights(self, values: Sequence[float]) -> None:
        if len(values) != len(self.synapses):
            raise ValueError(
                f"Neuron {self.id}: expected {len(self.synapses)} weights, got {len(values)}"
            )
        for s, w in zip(self.synapses, values):
            s.weight = float(w)
        self.invalidate()

    def set_weight(self, index: int, value: float) -> None:
        self.synapses[index].weight = float(value)
        self.invalidate()

    # ---- forward ----

    def sum(self) -> float:
        total = 0.0
        for s in self.synapses:
            total += s.weight * s.src.output()
        return total - self._bias

    def output(self) -> float:
        if self._cached_output is None:
            self._cached_output = logistic(self.sum())
        return self._cached_output

    def invalidate(self) -> None:
        self._cached_output = None

    def reset(self) -> None:
        invalidate_upstream([self])

    def predecessors(self) -> Sequence[Neuron]:
        return [s.src for s in self.synapses]

    # ---- backward ----

    @property
    def error(self) -> float:
        return self._error

    @error.setter
    def error(self, value: float) -> None:
        self._error = float(value)

    def add_link(self, downstream: Neuron) -> None:
        self.linked_neurons.append(downstream)

    def weight_of(self, candidate: Neuron) -> float:
        return candidate.weight_into(self)

    def weight_into(self, consumer: "WeightedSumNeuron") -> float:
        for s in consumer.synapses:
            if s.src is self:
                return s.weight
        raise NotLinked(f"Neuron {self.id} is not a predecessor of neuron {consumer.id}")

    def apply_gradient(self, step_size: float) -> None:
        # predecessor outputs are read before anything here changes
        inputs = [s.src.output() for s in self.synapses]
        self._bias -= step_size * self._error
        for s, x in zip(self.synapses, inputs):
            s.weight -= step_size * x * self._error
        self.invalidate()
