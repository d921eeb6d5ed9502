"""
parity_net module: neural/errors.py

Typed failures raised by the evaluation/training engine.
"""

from __future__ import annotations


class NeuralNetError(Exception):
    """Base class for contract violations inside a network."""


class InputShapeMismatch(NeuralNetError):
    """Input vector length does not match the first layer."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Expected an input of length {expected}, got {actual}")
        self.expected = expected
        self.actual = actual


class NoEvaluationYet(NeuralNetError):
    """cost() was requested before any batch evaluation."""

    def __init__(self):
        super().__init__("No evaluation set: call evaluate_batch() before cost()")


class NeuronKindMismatch(NeuralNetError):
    """A constant neuron was asked for as a weighted predecessor."""


class NotLinked(NeuralNetError):
    """A weighted-sum neuron is not a predecessor of the neuron queried."""
