"""
Layered feed-forward network with forward propagation and
backpropagation via the delta rule.

Layer 0 is the input layer: its units are fed directly and never
computed. The last layer is the output layer. Propagation is strictly
sequential across layers: outputs flow in increasing index order,
errors in decreasing index order.
"""

import logging
import math
from numbers import Real
from typing import Any, Callable, Dict, Iterable, List, Optional, Sequence

from .activations import Activation
from .errors import DimensionMismatch, EmptyNetwork, InvalidArgument, RangeViolation
from .layers import Layer
from .units import Connection, Unit

logger = logging.getLogger(__name__)

INPUT_MIN = -1.0
INPUT_MAX = 1.0


def _as_reals(values: Iterable[Any], what: str) -> List[float]:
    """Convert a sequence of real numbers to floats, rejecting anything else."""
    try:
        values = list(values)
    except TypeError:
        raise InvalidArgument(f"{what} must be a sequence of numbers, got {type(values).__name__}") from None

    result = []
    for i, value in enumerate(values):
        if not isinstance(value, Real):
            raise InvalidArgument(f"{what}[{i}] must be a real number, got {type(value).__name__}")
        result.append(float(value))
    return result


class Network:
    """
    An ordered pipeline of layers.

    Layers are appended with add_layer(); wiring between units is done on
    the units themselves (Unit.connect_inputs) or through the builders.
    """

    def __init__(self, layers: Optional[Iterable[Layer]] = None):
        self.layers: List[Layer] = []
        for layer in layers or []:
            self.add_layer(layer)

    def add_layer(self, layer: Layer) -> Layer:
        """Append a layer and fix up the neighbour links."""
        if not isinstance(layer, Layer):
            raise InvalidArgument(f"Argument must be a Layer, got {type(layer).__name__}")
        if layer.network is not None:
            raise InvalidArgument("Layer already belongs to a network")

        last_layer = self.layers[-1] if self.layers else None
        layer.network = self
        layer.previous = last_layer
        layer.next = None
        if last_layer is not None:
            last_layer.next = layer

        self.layers.append(layer)
        return layer

    @property
    def input_layer(self) -> Optional[Layer]:
        return self.layers[0] if self.layers else None

    @property
    def output_layer(self) -> Optional[Layer]:
        return self.layers[-1] if self.layers else None

    @property
    def n_connections(self) -> int:
        return sum(len(unit.incoming) for layer in self.layers for unit in layer)

    def _check_input(self, inputs: Iterable[Any]) -> List[float]:
        if not self.layers:
            raise EmptyNetwork("Network has no layers")
        if len(self.input_layer) == 0:
            raise EmptyNetwork("Input layer has no units")
        if len(self.layers) > 1 and len(self.output_layer) == 0:
            raise EmptyNetwork("Output layer has no units")

        values = _as_reals(inputs, 'input')
        if len(values) != len(self.input_layer):
            raise DimensionMismatch(
                f"Expected {len(self.input_layer)} input values, got {len(values)}"
            )
        for i, value in enumerate(values):
            # NaN fails both comparisons
            if not INPUT_MIN <= value <= INPUT_MAX:
                raise RangeViolation(
                    f"input[{i}] = {value} is outside [{INPUT_MIN}, {INPUT_MAX}]"
                )
        return values

    def _propagate(self, values: List[float]) -> List[float]:
        for unit, value in zip(self.input_layer, values):
            unit.output = value

        for layer in self.layers[1:]:
            layer.compute_outputs()

        return self.output_layer.outputs

    def forward(self, inputs: Sequence[float]) -> List[float]:
        """
        Propagate an input vector through the network.

        Args:
            inputs: One value in [-1, 1] per input unit.

        Returns:
            Outputs of the last layer.

        Raises:
            EmptyNetwork: No layers, or an empty input or output layer.
            InvalidArgument: A value is not a real number.
            DimensionMismatch: Wrong number of input values.
            RangeViolation: A value lies outside [-1, 1].
        """
        return self._propagate(self._check_input(inputs))

    def initialize(self, generator: Callable[[], float]) -> None:
        """
        Set every trainable weight to a fresh generator() draw.

        Input-layer units have no incoming connections, so every other
        layer's incoming connection receives exactly one draw.
        """
        if not callable(generator):
            raise InvalidArgument(f"Weight generator must be callable, got {type(generator).__name__}")

        connections = [c for layer in self.layers[1:] for c in layer.connections()]
        weights = [float(generator()) for _ in connections]
        for connection, weight in zip(connections, weights):
            connection.weight = weight

        logger.debug("Initialized %d weights", len(connections))

    def train(self, inputs: Sequence[float], targets: Sequence[float], rate: float) -> None:
        """
        One online backpropagation step.

        Runs a forward pass, computes output errors against `targets`, then
        walks back from the output layer adapting weights with the delta
        rule: weight += rate * destination.error * source.output.

        Raises:
            EmptyNetwork: Fewer than two layers, or an empty input/output layer.
            InvalidArgument: `rate` or a target is not a real number.
            DimensionMismatch: Wrong number of inputs or targets.
            RangeViolation: An input value lies outside [-1, 1].
        """
        if len(self.layers) < 2:
            raise EmptyNetwork("Training needs an input layer and an output layer")
        if len(self.output_layer) == 0:
            raise EmptyNetwork("Output layer has no units")
        if not isinstance(rate, Real) or math.isnan(rate):
            raise InvalidArgument(f"Learning rate must be a real number, got {rate!r}")

        target_values = _as_reals(targets, 'target')
        if len(target_values) != len(self.output_layer):
            raise DimensionMismatch(
                f"Expected {len(self.output_layer)} target values, got {len(target_values)}"
            )
        values = self._check_input(inputs)

        self._propagate(values)

        rate = float(rate)

        def delta_rule(connection: Connection) -> float:
            return connection.weight + rate * connection.destination.error * connection.source.output

        for unit, target in zip(self.output_layer, target_values):
            unit.compute_output_error(target)
        self.output_layer.adapt_weights(delta_rule)

        # The input layer has no incoming connections and no error of its own
        for layer in reversed(self.layers[1:-1]):
            for unit in layer:
                unit.compute_error()
            layer.adapt_weights(delta_rule)

    def get_weights(self) -> List[List[List[float]]]:
        """Incoming weights, indexed [layer][unit][connection]."""
        return [[[c.weight for c in unit.incoming] for unit in layer] for layer in self.layers]

    def set_weights(self, weights: Sequence[Sequence[Sequence[float]]]) -> None:
        """Load weights in the shape returned by get_weights()."""
        if len(weights) != len(self.layers):
            raise DimensionMismatch(f"Expected weights for {len(self.layers)} layers, got {len(weights)}")

        flat = []
        for i, (layer, layer_weights) in enumerate(zip(self.layers, weights)):
            if len(layer_weights) != len(layer):
                raise DimensionMismatch(
                    f"Layer {i}: expected weights for {len(layer)} units, got {len(layer_weights)}"
                )
            for j, (unit, unit_weights) in enumerate(zip(layer, layer_weights)):
                if len(unit_weights) != len(unit.incoming):
                    raise DimensionMismatch(
                        f"Layer {i} unit {j}: expected {len(unit.incoming)} weights, "
                        f"got {len(unit_weights)}"
                    )
                values = _as_reals(unit_weights, f"weights[{i}][{j}]")
                flat.extend(zip(unit.incoming, values))

        for connection, weight in flat:
            connection.weight = weight

    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize topology and weights.

        Each incoming connection is stored as [layer_index, unit_index, weight]
        locating its source unit.
        """
        positions = {
            id(unit): (i, j)
            for i, layer in enumerate(self.layers)
            for j, unit in enumerate(layer)
        }

        layers = []
        for i, layer in enumerate(self.layers):
            units = []
            for unit in layer:
                inputs = []
                for connection in unit.incoming:
                    position = positions.get(id(connection.source))
                    if position is None or position[0] != i - 1:
                        raise InvalidArgument(f"{unit!r} has an input from outside the previous layer")
                    inputs.append([position[0], position[1], connection.weight])
                units.append({
                    'name': unit.name,
                    'activation': unit.activation.to_dict(),
                    'inputs': inputs,
                })
            layers.append({'units': units})

        return {'version': '1.0', 'layers': layers}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Network':
        """
        Rebuild a network serialized with to_dict().

        Raises:
            InvalidArgument: Malformed data, or an input that does not come
                from the previous layer.
        """
        try:
            layers_data = data['layers']
            network = cls()
            for layer_data in layers_data:
                layer = Layer([
                    Unit(Activation.from_dict(u['activation']), name=u.get('name'))
                    for u in layer_data['units']
                ])
                network.add_layer(layer)
            unit_inputs = [
                [unit_data['inputs'] for unit_data in layer_data['units']]
                for layer_data in layers_data
            ]
        except (KeyError, TypeError) as e:
            raise InvalidArgument(f"Malformed network data: {e!r}") from None

        for i, (layer, layer_inputs) in enumerate(zip(network.layers, unit_inputs)):
            for unit, inputs in zip(layer, layer_inputs):
                for entry in inputs:
                    if not isinstance(entry, (list, tuple)) or len(entry) != 3:
                        raise InvalidArgument(f"Input entries are [layer, unit, weight], got {entry!r}")
                    layer_index, unit_index, weight = entry
                    if not isinstance(layer_index, int) or not isinstance(unit_index, int):
                        raise InvalidArgument(f"Unit positions must be integers, got {entry!r}")
                    if layer_index != i - 1:
                        raise InvalidArgument(
                            f"Layer {i} can only take inputs from layer {i - 1}, got {layer_index}"
                        )
                    if not 0 <= unit_index < len(network.layers[layer_index]):
                        raise InvalidArgument(
                            f"Input refers to missing unit ({layer_index}, {unit_index})"
                        )
                    if not isinstance(weight, Real):
                        raise InvalidArgument(f"Weight must be a real number, got {weight!r}")
                    source = network.layers[layer_index].units[unit_index]
                    for connection in unit.connect_inputs(source):
                        connection.weight = float(weight)

        return network

    def __len__(self):
        return len(self.layers)

    def __iter__(self):
        return iter(self.layers)

    def __repr__(self):
        arch = "→".join(str(len(layer)) for layer in self.layers) or "empty"
        return f"Network(arch={arch}, connections={self.n_connections})"
