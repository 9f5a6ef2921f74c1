"""
Error taxonomy for the network engine.

Every error is raised synchronously at the call site that violated a
precondition; nothing in the core catches and recovers from them.
"""


class NetworkError(ValueError):
    """Base class for all layernet errors."""


class InvalidEndpoint(NetworkError, TypeError):
    """An argument expected to be a Unit is not one."""


class DimensionMismatch(NetworkError):
    """Input or target length does not match the layer it feeds."""


class RangeViolation(NetworkError):
    """An input value lies outside the closed interval [-1, 1]."""


class InvalidArgument(NetworkError, TypeError):
    """A required callable or value is missing, or has the wrong type."""


class EmptyNetwork(NetworkError):
    """The network has no layers, or its input/output layer has no units."""
