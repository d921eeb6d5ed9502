import logging

import pytest

from neural.layer import Layer
from neural.network import Network
from neural.neuron import ConstantNeuron, WeightedSumNeuron
from neural.topology import build_network, build_predesigned_network


@pytest.fixture(autouse=True)
def setup_logging():
    """Keep engine logging quiet unless a test asks for it."""
    logging.getLogger("neural").setLevel(logging.WARNING)
    yield
    logging.getLogger("neural").setLevel(logging.NOTSET)


@pytest.fixture
def predesigned():
    return build_predesigned_network()


@pytest.fixture
def zero_network():
    """[8, 2] network with every weight and bias at zero."""
    net = build_network([8, 2], seed=1)
    for n in net.weighted_neurons():
        n.weights = [0.0] * len(n.synapses)
        n.bias = 0.0
    return net


@pytest.fixture
def deep_network():
    return build_network([8, 4, 3, 2], seed=3)


@pytest.fixture
def tiny_graph():
    """
    Hand-wired [2, 2, 2] network.

    Returns (network, inputs, hidden, outputs) so tests can reach each neuron.
    """
    c0 = ConstantNeuron(id=0, amount=1.0)
    c1 = ConstantNeuron(id=1, amount=0.5)
    h0 = WeightedSumNeuron(id=2, inputs=[c0, c1], weights=[0.4, -0.3], bias=0.1)
    h1 = WeightedSumNeuron(id=3, inputs=[c0, c1], weights=[-0.2, 0.8], bias=-0.2)
    o0 = WeightedSumNeuron(id=4, inputs=[h0, h1], weights=[0.6, -0.5], bias=0.0)
    o1 = WeightedSumNeuron(id=5, inputs=[h0, h1], weights=[-0.7, 0.9], bias=0.3)
    net = Network([Layer([c0, c1]), Layer([h0, h1]), Layer([o0, o1])])
    return net, (c0, c1), (h0, h1), (o0, o1)
