"""Core network engine: units, layers, networks and their propagation."""

from .errors import (
    NetworkError,
    InvalidEndpoint,
    DimensionMismatch,
    RangeViolation,
    InvalidArgument,
    EmptyNetwork,
)
from .activations import (
    Activation,
    ActivationKind,
    IDENTITY,
    SIGMOID,
    threshold,
    ACTIVATIONS,
    get_activation,
)
from .units import Connection, Unit
from .layers import Layer
from .network import Network
from .builders import add_units, build_network
from .training import Trainer, TrainingConfig, evaluate, predict

__all__ = [
    'NetworkError',
    'InvalidEndpoint',
    'DimensionMismatch',
    'RangeViolation',
    'InvalidArgument',
    'EmptyNetwork',
    'Activation',
    'ActivationKind',
    'IDENTITY',
    'SIGMOID',
    'threshold',
    'ACTIVATIONS',
    'get_activation',
    'Connection',
    'Unit',
    'Layer',
    'Network',
    'add_units',
    'build_network',
    'Trainer',
    'TrainingConfig',
    'evaluate',
    'predict',
]
