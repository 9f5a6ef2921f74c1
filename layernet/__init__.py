"""layernet - a small layered feed-forward network engine."""

from .core import (
    Network,
    Layer,
    Unit,
    Connection,
    IDENTITY,
    SIGMOID,
    threshold,
    build_network,
    Trainer,
    TrainingConfig,
)

__version__ = '0.1.0'

__all__ = [
    'Network',
    'Layer',
    'Unit',
    'Connection',
    'IDENTITY',
    'SIGMOID',
    'threshold',
    'build_network',
    'Trainer',
    'TrainingConfig',
]
