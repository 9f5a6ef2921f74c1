"""
Activation behaviour for units.

A unit's activation decides two things:
- how its weighted input sum becomes an output (forward pass)
- how an error signal is scaled before it is stored (backward pass)

Three variants exist:
- Identity: passthrough, used by input layers
- Threshold: step function, has no usable derivative
- Sigmoid: logistic function, scales error by output * (1 - output)

Variants without a derivative propagate the error unscaled.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import numpy as np


class ActivationKind(Enum):
    IDENTITY = 'identity'
    THRESHOLD = 'threshold'
    SIGMOID = 'sigmoid'


@dataclass(frozen=True)
class Activation:
    """An activation variant plus its parameters."""
    kind: ActivationKind
    threshold: float = 0.0  # Only read by THRESHOLD

    @property
    def name(self) -> str:
        return self.kind.value

    @property
    def differentiable(self) -> bool:
        return self.kind is ActivationKind.SIGMOID

    def to_dict(self) -> Dict[str, Any]:
        data = {'kind': self.kind.value}
        if self.kind is ActivationKind.THRESHOLD:
            data['threshold'] = self.threshold
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Activation':
        return get_activation(data['kind'], **{k: v for k, v in data.items() if k != 'kind'})

    def __repr__(self):
        if self.kind is ActivationKind.THRESHOLD:
            return f"Activation(threshold, t={self.threshold})"
        return f"Activation({self.name})"


IDENTITY = Activation(ActivationKind.IDENTITY)
SIGMOID = Activation(ActivationKind.SIGMOID)


def threshold(t: float = 0.0) -> Activation:
    """Step activation firing when the input is strictly greater than t."""
    return Activation(ActivationKind.THRESHOLD, float(t))


def sigmoid(x: float) -> float:
    """Logistic function, bounded (0, 1)."""
    # Clip to avoid overflow
    x = np.clip(x, -500, 500)
    return float(1 / (1 + np.exp(-x)))


def activate(activation: Activation, x: float) -> float:
    """Map a weighted input sum to an output."""
    kind = activation.kind
    if kind is ActivationKind.IDENTITY:
        return float(x)
    if kind is ActivationKind.THRESHOLD:
        return 1.0 if x > activation.threshold else 0.0
    if kind is ActivationKind.SIGMOID:
        return sigmoid(x)
    raise ValueError(f"Unhandled activation kind: {kind}")


def scale_error(activation: Activation, output: float, error: float) -> float:
    """
    Apply the activation's derivative to a raw error signal.

    Sigmoid multiplies by output * (1 - output). Identity and Threshold
    return the error unchanged; for Threshold this means backpropagation
    through the unit is not a true gradient step.
    """
    kind = activation.kind
    if kind is ActivationKind.SIGMOID:
        return output * (1 - output) * error
    if kind in (ActivationKind.IDENTITY, ActivationKind.THRESHOLD):
        return error
    raise ValueError(f"Unhandled activation kind: {kind}")


def output_error(activation: Activation, output: float, target: float) -> float:
    """Error of an output unit against its target."""
    return scale_error(activation, output, target - output)


def hidden_error(activation: Activation, output: float, downstream: float) -> float:
    """Error of a hidden unit, given the weighted sum of downstream errors."""
    return scale_error(activation, output, downstream)


# Registry of activation variants with their default parameters
ACTIVATIONS: Dict[str, Activation] = {
    'identity': IDENTITY,
    'threshold': threshold(0.0),
    'sigmoid': SIGMOID,
}

_PROPERTIES: Dict[str, Dict[str, Any]] = {
    'identity': {
        'differentiable': False,
        'range': (None, None),  # Unbounded
        'description': 'Passthrough - used for input layers',
    },
    'threshold': {
        'differentiable': False,
        'range': (0, 1),
        'description': 'Step function - fires when input exceeds the threshold',
    },
    'sigmoid': {
        'differentiable': True,
        'range': (0, 1),
        'description': 'Logistic function - smooth, bounded between 0 and 1',
    },
}


def get_activation(name: str, **params) -> Activation:
    """Get an activation by name, optionally overriding its parameters."""
    if name not in ACTIVATIONS:
        available = ', '.join(ACTIVATIONS.keys())
        raise ValueError(f"Unknown activation '{name}'. Available: {available}")
    if name == 'threshold':
        return threshold(params.get('threshold', 0.0))
    if params:
        raise ValueError(f"Activation '{name}' takes no parameters, got {sorted(params)}")
    return ACTIVATIONS[name]


def list_activations() -> Dict[str, Dict[str, Any]]:
    """List all available activations with their properties."""
    return {name: dict(props) for name, props in _PROPERTIES.items()}
