"""
Units and the weighted connections between them.

A Connection is a single object referenced from two places: the source
unit's outgoing list and the destination unit's incoming list. A weight
written through either view is therefore visible through the other.
"""

import logging
from typing import Iterable, List, Optional, Union

from .activations import Activation, IDENTITY, activate, hidden_error, output_error
from .errors import InvalidArgument, InvalidEndpoint

logger = logging.getLogger(__name__)


class Connection:
    """Directed, weighted edge from one unit to another."""

    __slots__ = ('source', 'destination', 'weight')

    def __init__(self, source: 'Unit', destination: 'Unit', weight: float = 0.0):
        self.source = source
        self.destination = destination
        self.weight = weight

    @classmethod
    def create(cls, source: 'Unit', destination: 'Unit') -> 'Connection':
        """
        Create an edge and register it on both endpoints.

        Raises:
            InvalidEndpoint: If either endpoint is not a Unit.
        """
        if not isinstance(source, Unit):
            raise InvalidEndpoint(f"Connection source must be a Unit, got {type(source).__name__}")
        if not isinstance(destination, Unit):
            raise InvalidEndpoint(
                f"Connection destination must be a Unit, got {type(destination).__name__}"
            )

        connection = cls(source, destination)
        source.outgoing.append(connection)
        destination.incoming.append(connection)
        return connection

    def __repr__(self):
        return f"Connection({self.source!r} -> {self.destination!r}, weight={self.weight:.4f})"


class Unit:
    """
    A computational node.

    Holds its incoming and outgoing connections, the cached weighted input
    sum, the output of the last forward pass and the error of the last
    backward pass. The activation decides how input becomes output and how
    error is scaled.
    """

    def __init__(self, activation: Activation = IDENTITY, name: Optional[str] = None):
        if not isinstance(activation, Activation):
            raise InvalidArgument(f"activation must be an Activation, got {type(activation).__name__}")

        self.activation = activation
        self.name = name
        self.incoming: List[Connection] = []
        self.outgoing: List[Connection] = []

        self.input = 0.0
        self.output = 0.0
        self.error = 0.0

    def has_input_from(self, unit: 'Unit') -> bool:
        return any(c.source is unit for c in self.incoming)

    def has_output_to(self, unit: 'Unit') -> bool:
        return any(c.destination is unit for c in self.outgoing)

    def connect_inputs(self, sources: Union['Unit', Iterable['Unit']]) -> List[Connection]:
        """
        Wire this unit's inputs from the given source units.

        Sources already connected to this unit are skipped. Every source is
        checked before any connection is made.

        Args:
            sources: A Unit or an iterable of Units.

        Returns:
            The connections created by this call.

        Raises:
            InvalidEndpoint: If any source is not a Unit.
        """
        if isinstance(sources, Unit):
            sources = [sources]
        try:
            sources = list(sources)
        except TypeError:
            raise InvalidEndpoint(
                f"Expected a Unit or an iterable of Units, got {type(sources).__name__}"
            ) from None

        for source in sources:
            if not isinstance(source, Unit):
                raise InvalidEndpoint(f"Connection must be to a Unit, got {type(source).__name__}")

        created = []
        for source in sources:
            if self.has_input_from(source):
                continue
            created.append(Connection.create(source, self))

        if created:
            logger.debug("Wired %d inputs into %r", len(created), self)
        return created

    def compute_input(self) -> float:
        """Recompute and cache the weighted sum of the sources' current outputs."""
        self.input = sum((c.weight * c.source.output for c in self.incoming), 0.0)
        return self.input

    def compute_output(self, value: float) -> float:
        self.output = activate(self.activation, value)
        return self.output

    def compute_output_error(self, target: float) -> float:
        """Error against a target value; used on output units only."""
        self.error = output_error(self.activation, self.output, target)
        return self.error

    def compute_error(self) -> float:
        """Error propagated back from the units this one feeds."""
        downstream = sum((c.weight * c.destination.error for c in self.outgoing), 0.0)
        self.error = hidden_error(self.activation, self.output, downstream)
        return self.error

    def __repr__(self):
        if self.name:
            return f"Unit({self.name}, {self.activation.name})"
        return f"Unit({self.activation.name}, in={len(self.incoming)}, out={len(self.outgoing)})"
