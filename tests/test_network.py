"""
Tests for layers, networks and the forward/backward algorithms.

Run with: python -m pytest tests/test_network.py -v
"""

import math

import pytest
import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from layernet.core.activations import IDENTITY, SIGMOID, sigmoid, threshold
from layernet.core.errors import (
    DimensionMismatch,
    EmptyNetwork,
    InvalidArgument,
    InvalidEndpoint,
    RangeViolation,
)
from layernet.core.layers import Layer
from layernet.core.network import Network
from layernet.core.units import Unit


def chain(*activations, weights=None):
    """Build a network with one unit per layer, each wired to the previous one."""
    network = Network()
    for activation in activations:
        network.add_layer(Layer([Unit(activation)]))
    for layer in network.layers[1:]:
        layer[0].connect_inputs(layer.previous.units)
    if weights is not None:
        network.set_weights([[[]]] + [[[w]] for w in weights])
    return network


@pytest.fixture
def two_input_network():
    """2 identity inputs fully wired into one sigmoid output."""
    network = Network()
    network.add_layer(Layer([Unit(), Unit()]))
    network.add_layer(Layer([Unit(SIGMOID)]))
    network.layers[1][0].connect_inputs(network.layers[0].units)
    network.set_weights([[[], []], [[0.4, -0.6]]])
    return network


class TestLayerLinks:
    """Tests for layer ordering and neighbour references."""

    def test_link_integrity(self):
        """Appending three layers wires previous/next both ways."""
        network = Network()
        l0, l1, l2 = Layer(), Layer(), Layer()
        for layer in (l0, l1, l2):
            network.add_layer(layer)

        assert l0.previous is None and l0.next is l1
        assert l1.previous is l0 and l1.next is l2
        assert l2.previous is l1 and l2.next is None
        assert [l0.index, l1.index, l2.index] == [0, 1, 2]
        assert network.input_layer is l0
        assert network.output_layer is l2

    def test_add_layer_rejects_non_layers(self):
        """Only Layer objects can be appended."""
        with pytest.raises(InvalidArgument):
            Network().add_layer('layer')

    def test_layer_cannot_join_two_networks(self):
        """A layer belongs to at most one network."""
        layer = Layer()
        Network().add_layer(layer)
        with pytest.raises(InvalidArgument):
            Network().add_layer(layer)

    def test_layer_rejects_non_units(self):
        """Layers only hold Units."""
        with pytest.raises(InvalidEndpoint):
            Layer().add_unit(3.0)

    def test_adapt_weights_requires_callable(self):
        """A missing rule is reported, not crashed on."""
        network = chain(IDENTITY, SIGMOID, weights=[0.1])
        with pytest.raises(InvalidArgument):
            network.layers[1].adapt_weights(None)
        assert network.get_weights()[1] == [[0.1]]

    def test_adapt_weights_applies_rule_once(self):
        """Every incoming connection of the layer is rewritten exactly once."""
        network = chain(IDENTITY, SIGMOID, weights=[0.25])
        calls = []

        def rule(connection):
            calls.append(connection)
            return connection.weight * 2

        network.layers[1].adapt_weights(rule)
        assert len(calls) == 1
        assert network.get_weights()[1] == [[0.5]]

    def test_adapt_weights_failure_leaves_layer_untouched(self, two_input_network):
        """A rule that fails part-way writes no weights at all."""
        seen = []

        def rule(connection):
            seen.append(connection)
            if len(seen) == 2:
                raise RuntimeError("rule failed")
            return 99.0

        with pytest.raises(RuntimeError):
            two_input_network.output_layer.adapt_weights(rule)
        assert len(seen) == 2
        assert two_input_network.get_weights()[1] == [[0.4, -0.6]]


class TestForward:
    """Tests for forward propagation."""

    def test_threshold_example(self):
        """Identity -> Threshold(0) with weight 1."""
        network = chain(IDENTITY, threshold(0.0), weights=[1.0])

        assert network.forward([0.5]) == [1.0]
        assert network.layers[1][0].input == pytest.approx(0.5)
        assert network.forward([-0.5]) == [0.0]

    def test_sigmoid_example(self):
        """Identity -> Sigmoid with weight 0 outputs exactly 0.5."""
        network = chain(IDENTITY, SIGMOID, weights=[0.0])
        assert network.forward([1]) == [0.5]

    def test_input_layer_is_passthrough(self):
        """Input units take the input values without any activation."""
        network = Network()
        network.add_layer(Layer([Unit(SIGMOID), Unit(SIGMOID)]))
        assert network.forward([0.3, -1.0]) == [0.3, -1.0]

    def test_forward_is_deterministic(self, two_input_network):
        """Same weights and input give bit-identical outputs."""
        first = two_input_network.forward([0.2, -0.9])
        second = two_input_network.forward([0.2, -0.9])
        assert first == second

    def test_multi_layer_values(self):
        """Outputs follow the layer-by-layer formula."""
        network = chain(IDENTITY, SIGMOID, SIGMOID, weights=[0.5, -1.5])
        expected = sigmoid(-1.5 * sigmoid(0.5 * 0.8))
        assert network.forward([0.8]) == [pytest.approx(expected)]

    def test_range_violation(self, two_input_network):
        """Values outside [-1, 1] are rejected."""
        with pytest.raises(RangeViolation):
            two_input_network.forward([2, 0])
        with pytest.raises(RangeViolation):
            two_input_network.forward([0, -1.0001])
        with pytest.raises(RangeViolation):
            two_input_network.forward([float('nan'), 0])

    def test_bounds_are_inclusive(self, two_input_network):
        """-1 and 1 are valid inputs."""
        assert len(two_input_network.forward([-1, 1])) == 1

    def test_dimension_mismatch(self, two_input_network):
        """Input length must match the input layer."""
        with pytest.raises(DimensionMismatch):
            two_input_network.forward([0])
        with pytest.raises(DimensionMismatch):
            two_input_network.forward([0, 0, 0])

    def test_non_numeric_input(self, two_input_network):
        """Non-numbers are invalid arguments."""
        with pytest.raises(InvalidArgument):
            two_input_network.forward(['a', 0])
        with pytest.raises(InvalidArgument):
            two_input_network.forward(None)

    def test_failed_forward_leaves_outputs(self, two_input_network):
        """A rejected input does not touch cached outputs."""
        before = two_input_network.forward([0.1, 0.2])
        with pytest.raises(RangeViolation):
            two_input_network.forward([0.5, 3.0])
        assert two_input_network.input_layer.outputs == [0.1, 0.2]
        assert two_input_network.output_layer.outputs == before

    def test_empty_network(self):
        """Networks without layers or with an empty input/output layer cannot run forward."""
        with pytest.raises(EmptyNetwork):
            Network().forward([])

        network = Network()
        network.add_layer(Layer())
        with pytest.raises(EmptyNetwork):
            network.forward([])

        network = Network([Layer([Unit()]), Layer()])
        with pytest.raises(EmptyNetwork):
            network.forward([0.5])
        assert network.input_layer[0].output == 0.0


class TestInitialize:
    """Tests for weight initialization."""

    def test_constant_generator(self, two_input_network):
        """A constant generator sets every trainable weight."""
        two_input_network.initialize(lambda: 0.3)
        assert two_input_network.get_weights() == [[[], []], [[0.3, 0.3]]]

        two_input_network.initialize(lambda: 0.3)
        assert two_input_network.get_weights() == [[[], []], [[0.3, 0.3]]]

    def test_one_draw_per_connection(self):
        """The generator is called once per non-input connection."""
        network = Network()
        network.add_layer(Layer([Unit(), Unit()]))
        network.add_layer(Layer([Unit(SIGMOID) for _ in range(3)]))
        network.add_layer(Layer([Unit(SIGMOID)]))
        for layer in network.layers[1:]:
            for unit in layer:
                unit.connect_inputs(layer.previous.units)

        draws = []

        def generator():
            draws.append(1)
            return len(draws) / 10

        network.initialize(generator)
        assert len(draws) == network.n_connections == 9
        weights = sorted(w for layer in network.get_weights() for unit in layer for w in unit)
        assert weights == pytest.approx([i / 10 for i in range(1, 10)])

    def test_generator_must_be_callable(self, two_input_network):
        """Non-callables are rejected before any write."""
        with pytest.raises(InvalidArgument):
            two_input_network.initialize(0.3)
        assert two_input_network.get_weights()[1] == [[0.4, -0.6]]


class TestTrain:
    """Tests for backpropagation."""

    def test_gradient_sanity(self):
        """A 1-1 sigmoid network moves monotonically toward its target."""
        network = chain(IDENTITY, SIGMOID, weights=[0.0])

        outputs = []
        for _ in range(10):
            network.train([1], [1], rate=0.5)
            outputs.append(network.forward([1])[0])

        errors = [1 - o for o in outputs]
        assert all(b > a for a, b in zip(outputs, outputs[1:]))
        assert all(b < a for a, b in zip(errors, errors[1:]))

    def test_first_step_value(self):
        """One step from weight 0: 0 + 0.5 * (0.5 * 0.5 * 0.5) * 1."""
        network = chain(IDENTITY, SIGMOID, weights=[0.0])
        network.train([1], [1], rate=0.5)
        assert network.get_weights()[1] == [[pytest.approx(0.0625)]]
        assert network.output_layer[0].error == pytest.approx(0.125)

    def test_hidden_layer_update(self):
        """
        Hidden errors read the output weights after they were adapted.

        input -> sigmoid hidden -> sigmoid output, both weights 0.5.
        """
        network = chain(IDENTITY, SIGMOID, SIGMOID, weights=[0.5, 0.5])
        network.train([1], [1], rate=1.0)

        h = sigmoid(0.5)
        o = sigmoid(0.5 * h)
        e_out = o * (1 - o) * (1 - o)
        w_out = 0.5 + e_out * h
        e_hidden = h * (1 - h) * w_out * e_out
        w_hidden = 0.5 + e_hidden * 1.0

        weights = network.get_weights()
        assert weights[2][0][0] == pytest.approx(w_out)
        assert weights[1][0][0] == pytest.approx(w_hidden)
        assert network.layers[1][0].error == pytest.approx(e_hidden)

    def test_threshold_hidden_layer_update(self):
        """Threshold units pass error back without derivative scaling."""
        network = chain(IDENTITY, threshold(0.0), IDENTITY, weights=[1.0, 0.5])
        network.train([0.5], [1.0], rate=0.1)

        weights = network.get_weights()
        # Output: error 0.5, weight 0.5 + 0.1 * 0.5 * 1
        assert weights[2][0][0] == pytest.approx(0.55)
        # Hidden: error 0.55 * 0.5, weight 1 + 0.1 * 0.275 * 0.5
        assert weights[1][0][0] == pytest.approx(1.01375)

    def test_input_layer_error_untouched(self):
        """The input layer never gets an error of its own."""
        network = chain(IDENTITY, SIGMOID, SIGMOID, weights=[0.3, 0.3])
        network.train([1], [0], rate=0.5)
        assert network.input_layer[0].error == 0.0

    def test_target_dimension_mismatch(self, two_input_network):
        """Target length must match the output layer; nothing changes."""
        before = two_input_network.get_weights()
        with pytest.raises(DimensionMismatch):
            two_input_network.train([0.1, 0.2], [1, 0], rate=0.5)
        assert two_input_network.get_weights() == before
        assert two_input_network.output_layer.outputs == [0.0]

    def test_invalid_input_leaves_state(self, two_input_network):
        """Bad inputs fail before the forward pass writes anything."""
        before = two_input_network.get_weights()
        with pytest.raises(RangeViolation):
            two_input_network.train([0.1, 5], [1], rate=0.5)
        with pytest.raises(DimensionMismatch):
            two_input_network.train([0.1], [1], rate=0.5)
        assert two_input_network.get_weights() == before
        assert two_input_network.input_layer.outputs == [0.0, 0.0]

    def test_invalid_rate_and_targets(self, two_input_network):
        """Rate and targets must be real numbers."""
        with pytest.raises(InvalidArgument):
            two_input_network.train([0, 0], [1], rate='fast')
        with pytest.raises(InvalidArgument):
            two_input_network.train([0, 0], [1], rate=math.nan)
        with pytest.raises(InvalidArgument):
            two_input_network.train([0, 0], ['yes'], rate=0.5)

    def test_train_needs_two_layers(self):
        """A lone input layer has nothing to train."""
        network = Network()
        network.add_layer(Layer([Unit()]))
        with pytest.raises(EmptyNetwork):
            network.train([0.5], [1], rate=0.5)
        with pytest.raises(EmptyNetwork):
            Network().train([], [], rate=0.5)

    def test_empty_output_layer(self):
        """An output layer without units is reported explicitly."""
        network = Network()
        network.add_layer(Layer([Unit()]))
        network.add_layer(Layer())
        with pytest.raises(EmptyNetwork):
            network.train([0.5], [], rate=0.5)


class TestWeightsAndSerialization:
    """Tests for weight access and to_dict/from_dict."""

    def test_set_weights_validates_shape(self, two_input_network):
        """A wrongly shaped weight list is rejected without partial writes."""
        with pytest.raises(DimensionMismatch):
            two_input_network.set_weights([[[], []], [[1.0]]])
        with pytest.raises(DimensionMismatch):
            two_input_network.set_weights([[[], []]])
        assert two_input_network.get_weights()[1] == [[0.4, -0.6]]

    def test_round_trip_preserves_outputs(self):
        """A rebuilt network computes the same outputs."""
        network = chain(IDENTITY, threshold(0.1), SIGMOID, weights=[0.9, -0.4])
        rebuilt = Network.from_dict(network.to_dict())

        assert rebuilt.get_weights() == network.get_weights()
        assert rebuilt.layers[1][0].activation == threshold(0.1)
        for x in (-1.0, 0.0, 0.5, 1.0):
            assert rebuilt.forward([x]) == network.forward([x])

    def test_from_dict_rejects_missing_source(self):
        """Inputs must refer to units inside the network."""
        data = chain(IDENTITY, SIGMOID, weights=[0.5]).to_dict()
        data['layers'][1]['units'][0]['inputs'][0][1] = 7
        with pytest.raises(InvalidArgument):
            Network.from_dict(data)

    @pytest.mark.parametrize('entry', [
        [0.0, 0, 0.5],
        [0, '0', 0.5],
        [0, 0],
        [0, 0, 'heavy'],
    ])
    def test_from_dict_rejects_malformed_inputs(self, entry):
        """Positions must be integer pairs followed by a real weight."""
        data = chain(IDENTITY, SIGMOID, weights=[0.5]).to_dict()
        data['layers'][1]['units'][0]['inputs'][0] = entry
        with pytest.raises(InvalidArgument):
            Network.from_dict(data)

    def test_from_dict_rejects_missing_keys(self):
        data = chain(IDENTITY, SIGMOID, weights=[0.5]).to_dict()
        del data['layers'][1]['units'][0]['activation']
        with pytest.raises(InvalidArgument):
            Network.from_dict(data)
        with pytest.raises(InvalidArgument):
            Network.from_dict({})

    def test_from_dict_rejects_skip_connections(self):
        """Inputs may only come from the layer directly below."""
        data = chain(IDENTITY, SIGMOID, SIGMOID, weights=[0.5, 0.5]).to_dict()
        data['layers'][2]['units'][0]['inputs'][0][0] = 0
        with pytest.raises(InvalidArgument):
            Network.from_dict(data)

    def test_to_dict_rejects_skip_connections(self):
        network = chain(IDENTITY, SIGMOID, SIGMOID)
        network.layers[2][0].connect_inputs(network.layers[0].units)
        with pytest.raises(InvalidArgument):
            network.to_dict()

    def test_to_dict_rejects_outside_source(self):
        """Connections from units outside the network cannot be serialized."""
        network = chain(IDENTITY, SIGMOID)
        network.layers[1][0].connect_inputs(Unit())
        with pytest.raises(InvalidArgument):
            network.to_dict()

    def test_repr(self, two_input_network):
        assert 'connections=2' in repr(two_input_network)
