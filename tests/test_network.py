import random

import pytest

from dataset.parity import encode_byte, parity_dataset
from neural.activation import logistic, softmax
from neural.errors import InputShapeMismatch, NoEvaluationYet, NotLinked
from neural.example import Example
from neural.layer import Layer
from neural.network import Network, partition
from neural.neuron import ConstantNeuron, WeightedSumNeuron
from neural.topology import build_network


class TestConstruction:
    def test_str(self, deep_network):
        assert str(deep_network) == "Network with 4 layers: 8 4 3 2"

    def test_needs_two_layers(self):
        with pytest.raises(ValueError):
            Network([Layer([ConstantNeuron(id=0)])])

    def test_first_layer_must_be_constant(self):
        c = ConstantNeuron(id=0)
        h = WeightedSumNeuron(id=1, inputs=[c], weights=[1.0])
        o = [WeightedSumNeuron(id=2 + i, inputs=[h], weights=[1.0]) for i in range(2)]
        with pytest.raises(ValueError):
            Network([Layer([h]), Layer(o)])

    def test_later_layers_must_be_weighted(self):
        with pytest.raises(ValueError):
            Network([Layer([ConstantNeuron(id=0)]), Layer([ConstantNeuron(id=1), ConstantNeuron(id=2)])])

    def test_rejects_skip_connection(self):
        c0, c1 = ConstantNeuron(id=0), ConstantNeuron(id=1)
        h = WeightedSumNeuron(id=2, inputs=[c0, c1], weights=[1.0, 1.0])
        # output 4 reaches back past the hidden layer to c1
        o = [
            WeightedSumNeuron(id=3, inputs=[h], weights=[1.0]),
            WeightedSumNeuron(id=4, inputs=[h, c1], weights=[1.0, 1.0]),
        ]
        with pytest.raises(ValueError, match="Neuron 4 in layer 2"):
            Network([Layer([c0, c1]), Layer([h]), Layer(o)])

    def test_rejects_predecessor_outside_network(self):
        stray = ConstantNeuron(id=9)
        c = ConstantNeuron(id=0)
        o = [WeightedSumNeuron(id=1 + i, inputs=[c, stray], weights=[1.0, 1.0]) for i in range(2)]
        with pytest.raises(ValueError):
            Network([Layer([c]), Layer(o)])

    def test_output_layer_must_be_two_wide(self):
        c = ConstantNeuron(id=0)
        o = [WeightedSumNeuron(id=1 + i, inputs=[c], weights=[1.0]) for i in range(3)]
        with pytest.raises(ValueError):
            Network([Layer([c]), Layer(o)])


class TestEvaluate:
    @pytest.mark.parametrize("value", [0, 1, 2, 62, 63, 65, 200, 255])
    def test_output_is_a_distribution(self, deep_network, value):
        out = deep_network.evaluate(encode_byte(value).inputs)
        assert len(out) == 2
        assert all(0.0 < p < 1.0 for p in out)
        assert sum(out) == pytest.approx(1.0)

    def test_is_idempotent(self, deep_network):
        vector = encode_byte(77).inputs
        assert deep_network.evaluate(vector) == deep_network.evaluate(vector)

    def test_reflects_latest_input(self, deep_network):
        a = deep_network.evaluate(encode_byte(0).inputs)
        b = deep_network.evaluate(encode_byte(255).inputs)
        assert a != b
        assert deep_network.evaluate(encode_byte(0).inputs) == a

    @pytest.mark.parametrize("length", [0, 7, 9])
    def test_rejects_wrong_input_length(self, predesigned, length):
        with pytest.raises(InputShapeMismatch) as excinfo:
            predesigned.evaluate([0.0] * length)
        assert excinfo.value.expected == 8
        assert excinfo.value.actual == length

    def test_predesigned_network_reads_parity_of_two(self, predesigned):
        out = predesigned.evaluate([0, 0, 0, 0, 0, 0, 1, 0])
        assert out[1] > out[0]
        assert out == pytest.approx(softmax([logistic(-1.0), logistic(1.0)]))

    def test_large_input_saturates(self, predesigned):
        out = predesigned.evaluate([0, 0, 0, 0, 0, 0, 1000.0, 0])
        assert out == pytest.approx(softmax([0.0, 1.0]))
        assert all(0.0 < p < 1.0 for p in out)
        out = predesigned.evaluate([0, 0, 0, 0, 0, 0, 0, 1000.0])
        assert out[0] > out[1]

    def test_predesigned_network_reads_parity_of_one(self, predesigned):
        out = predesigned.evaluate(encode_byte(1).inputs)
        assert out[0] > out[1]


class TestCost:
    def test_requires_batch_evaluation(self, deep_network):
        with pytest.raises(NoEvaluationYet):
            deep_network.cost()

    def test_single_vector_evaluate_does_not_enable_cost(self, deep_network):
        deep_network.evaluate(encode_byte(3).inputs)
        with pytest.raises(NoEvaluationYet):
            deep_network.cost()

    def test_halved_mean_squared_error(self, predesigned):
        result = predesigned.evaluate_batch([encode_byte(2)])
        out = softmax([logistic(-1.0), logistic(1.0)])
        expected = ((out[0] - 0.0) ** 2 + (out[1] - 1.0) ** 2) / 2
        assert result.cost == pytest.approx(expected)
        assert predesigned.cost() == pytest.approx(expected)

    def test_batch_evaluation_outputs(self, predesigned):
        examples = parity_dataset([2, 3, 4])
        result = predesigned.evaluate_batch(examples)
        assert len(result.outputs) == 3
        assert result.outputs[0] == predesigned.evaluate(examples[0].inputs)
        assert predesigned.last_evaluation_set == examples

    def test_cost_tracks_current_parameters(self, predesigned):
        before = predesigned.evaluate_batch(parity_dataset()).cost
        predesigned.train(parity_dataset(), rng=random.Random(0))
        assert predesigned.cost() != before

    def test_empty_batch_costs_nothing(self, predesigned):
        assert predesigned.evaluate_batch([]).cost == 0.0


class TestPartition:
    def test_keeps_trailing_remainder(self):
        examples = parity_dataset(range(25))
        groups = partition(examples, 10)
        assert [len(g) for g in groups] == [10, 10, 5]
        assert [ex for g in groups for ex in g] == examples

    def test_rejects_non_positive_size(self):
        with pytest.raises(ValueError):
            partition(parity_dataset(range(3)), 0)


class TestTrain:
    def test_one_minibatch_moves_output_toward_zero_target(self, zero_network):
        ex = Example.of([1.0] * 8, [0.0, 1.0])
        odd, even = zero_network.last_layer.weighted_neurons()
        zero_network.evaluate(ex.inputs)
        before = odd.output()
        before_even = even.output()

        report = zero_network.train([ex] * 10, rng=random.Random(0))

        assert report.minibatches == 1
        assert report.final_step_size == pytest.approx(0.1 * 0.95)
        # one shared distance term: both neurons get the same positive error
        assert odd.error == pytest.approx(even.error)
        assert odd.error > 0
        for n in (odd, even):
            assert all(w < 0 for w in n.weights)
            assert n.bias < 0
        zero_network.evaluate(ex.inputs)
        assert odd.output() < before
        # the target-1 output falls too: the shared error is never negative
        assert even.output() < before_even

    def test_exact_update_for_one_minibatch(self, zero_network):
        ex = Example.of([1.0] * 8, [0.0, 1.0])
        zero_network.train([ex] * 10, step_size=0.1, rng=random.Random(0))

        # softmax(0.5, 0.5) is (0.5, 0.5): distance sqrt(0.5), derivative at 0 is 0.25
        err = 0.5 ** 0.5 * 0.25
        for n in zero_network.weighted_neurons():
            assert n.bias == pytest.approx(-0.1 * err)
            assert n.weights == pytest.approx([-0.1 * err] * 8)

    def test_large_inputs_train_without_overflow(self, predesigned):
        examples = [Example.of([0, 0, 0, 0, 0, 0, 1000.0, -1000.0], [0.0, 1.0])] * 10
        report = predesigned.train(examples, rng=random.Random(0))
        assert report.minibatches == 1
        out = predesigned.evaluate(examples[0].inputs)
        assert sum(out) == pytest.approx(1.0)

    def test_weight_vector_lengths_unchanged(self, deep_network):
        before = [len(n.weights) for n in deep_network.weighted_neurons()]
        deep_network.train(parity_dataset(), rng=random.Random(5))
        assert [len(n.weights) for n in deep_network.weighted_neurons()] == before

    def test_step_size_decays_per_minibatch(self, deep_network):
        report = deep_network.train(parity_dataset(range(25)), step_size=1.0, decay=0.5, rng=random.Random(1))
        assert report.minibatches == 3
        assert report.final_step_size == pytest.approx(0.125)

    def test_custom_minibatch_size(self, deep_network):
        report = deep_network.train(parity_dataset(range(12)), minibatch_size=4, rng=random.Random(1))
        assert report.minibatches == 3

    def test_does_not_reorder_callers_examples(self, deep_network):
        examples = parity_dataset(range(30))
        snapshot = list(examples)
        deep_network.train(examples, rng=random.Random(2))
        assert examples == snapshot

    def test_seeded_training_is_reproducible(self):
        a = build_network([8, 3, 2], seed=11)
        b = build_network([8, 3, 2], seed=11)
        a.train(parity_dataset(), rng=random.Random(4))
        b.train(parity_dataset(), rng=random.Random(4))
        assert [n.weights for n in a.weighted_neurons()] == [n.weights for n in b.weighted_neurons()]

    def test_touches_hidden_layers(self, deep_network):
        hidden = deep_network.layers[1].weighted_neurons()
        before = [list(n.weights) for n in hidden]
        deep_network.train(parity_dataset(), rng=random.Random(3))
        assert [n.weights for n in hidden] != before

    def test_link_errors_abort_training(self, deep_network):
        hidden = deep_network.layers[1].weighted_neurons()
        stranger = WeightedSumNeuron(id=999, inputs=[deep_network.first_layer[0]], weights=[1.0])
        hidden[0].add_link(stranger)
        with pytest.raises(NotLinked):
            deep_network.train(parity_dataset(range(20)), rng=random.Random(0))


def test_reset_sweeps_every_layer(deep_network):
    vector = list(encode_byte(9).inputs)
    deep_network.evaluate(vector)
    stale = deep_network.last_layer.outputs()

    deep_network.first_layer[0].amount = 5.0
    assert deep_network.last_layer.outputs() == stale

    deep_network.reset()
    fresh = deep_network.last_layer.outputs()
    assert fresh != stale

    deep_network.evaluate([5.0] + vector[1:])
    assert deep_network.last_layer.outputs() == fresh
