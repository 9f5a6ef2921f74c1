"""
Construction helpers built on the core wiring primitive.

These add many units at once and wire the default "fully connected to
the previous layer" topology.
"""

from typing import Callable, List, Optional, Sequence, Union

from .activations import Activation, IDENTITY, get_activation
from .errors import InvalidArgument
from .layers import Layer
from .network import Network
from .units import Unit

CONNECTION_MODES = ('full', 'none')

ActivationLike = Union[Activation, str]


def _resolve_activation(activation: ActivationLike) -> Activation:
    if isinstance(activation, Activation):
        return activation
    if isinstance(activation, str):
        return get_activation(activation)
    raise InvalidArgument(f"Expected an Activation or a name, got {type(activation).__name__}")


def add_units(
    layer: Layer,
    activation: ActivationLike,
    n: int,
    connection: str = 'full'
) -> List[Unit]:
    """
    Append n new units to a layer.

    Args:
        layer: Layer to extend. For 'full' wiring it should already be in a
            network so that its previous layer is known.
        activation: Activation or registry name for every new unit.
        n: Number of units to add.
        connection: 'full' wires each unit to every unit of the previous
            layer; 'none' leaves them unwired.

    Returns:
        The new units, in order.
    """
    if connection not in CONNECTION_MODES:
        raise InvalidArgument(
            f"Unknown connection mode '{connection}'. Available: {', '.join(CONNECTION_MODES)}"
        )
    if not isinstance(n, int) or n < 0:
        raise InvalidArgument(f"Number of units must be a non-negative integer, got {n!r}")
    activation = _resolve_activation(activation)

    sources = []
    if connection == 'full' and layer.previous is not None:
        sources = layer.previous.units

    units = []
    for _ in range(n):
        unit = Unit(activation)
        unit.connect_inputs(sources)
        units.append(layer.add_unit(unit))
    return units


def build_network(
    layer_sizes: Sequence[int],
    hidden_activation: ActivationLike = 'sigmoid',
    output_activation: ActivationLike = 'sigmoid',
    generator: Optional[Callable[[], float]] = None
) -> Network:
    """
    Build a fully connected network.

    Args:
        layer_sizes: Units per layer, input layer first, e.g. [2, 3, 1].
        hidden_activation: Activation of every layer between input and output.
        output_activation: Activation of the last layer.
        generator: Optional weight generator passed to Network.initialize.
    """
    if len(layer_sizes) < 1:
        raise InvalidArgument("At least one layer size is required")
    for size in layer_sizes:
        if not isinstance(size, int) or size < 1:
            raise InvalidArgument(f"Layer sizes must be positive integers, got {size!r}")

    network = Network()
    last = len(layer_sizes) - 1
    for i, size in enumerate(layer_sizes):
        if i == 0:
            activation = IDENTITY
        elif i == last:
            activation = output_activation
        else:
            activation = hidden_activation
        layer = network.add_layer(Layer())
        add_units(layer, activation, size)

    if generator is not None:
        network.initialize(generator)
    return network
