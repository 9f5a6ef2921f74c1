"""Layers: ordered groups of units inside a network."""

import logging
from typing import Callable, Iterator, List, Optional, TYPE_CHECKING

from .errors import InvalidArgument, InvalidEndpoint
from .units import Connection, Unit

if TYPE_CHECKING:
    from .network import Network

logger = logging.getLogger(__name__)

WeightRule = Callable[[Connection], float]


class Layer:
    """
    An ordered sequence of units.

    `previous` and `next` are maintained by Network.add_layer and always
    mirror the network's layer order.
    """

    def __init__(self, units: Optional[List[Unit]] = None):
        self.units: List[Unit] = []
        self.network: Optional['Network'] = None
        self.previous: Optional['Layer'] = None
        self.next: Optional['Layer'] = None

        for unit in units or []:
            self.add_unit(unit)

    def add_unit(self, unit: Unit) -> Unit:
        if not isinstance(unit, Unit):
            raise InvalidEndpoint(f"Layer can only hold Units, got {type(unit).__name__}")
        self.units.append(unit)
        return unit

    @property
    def outputs(self) -> List[float]:
        return [unit.output for unit in self.units]

    @property
    def errors(self) -> List[float]:
        return [unit.error for unit in self.units]

    @property
    def index(self) -> Optional[int]:
        """Position in the owning network, or None if detached."""
        if self.network is None:
            return None
        return self.network.layers.index(self)

    def connections(self) -> Iterator[Connection]:
        """Iterate over every incoming connection of every unit, in order."""
        for unit in self.units:
            yield from unit.incoming

    def compute_outputs(self) -> List[float]:
        """
        Compute every unit's input sum and output from the previous layer.

        The previous layer's outputs must already be final for this pass.
        """
        return [unit.compute_output(unit.compute_input()) for unit in self.units]

    def adapt_weights(self, rule: WeightRule) -> None:
        """
        Replace every incoming weight with rule(connection).

        All new weights are computed before any is written, so the rule
        always sees the weights as they were when the call started.
        """
        if not callable(rule):
            raise InvalidArgument(f"Weight rule must be callable, got {type(rule).__name__}")

        connections = list(self.connections())
        new_weights = [float(rule(c)) for c in connections]
        for connection, weight in zip(connections, new_weights):
            connection.weight = weight

    def __len__(self):
        return len(self.units)

    def __iter__(self):
        return iter(self.units)

    def __getitem__(self, i: int) -> Unit:
        return self.units[i]

    def __repr__(self):
        return f"Layer(units={len(self.units)}, index={self.index})"
