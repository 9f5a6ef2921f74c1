"""
Toy datasets for network experimentation.

Every dataset keeps its inputs inside [-1, 1], the range networks accept,
and uses 0/1 targets so sigmoid outputs can be read as class scores.

Logic gates encode false as -1 and true as 1.
"""

import itertools

import numpy as np
from typing import Tuple, Dict, Optional, Callable

from ..config import INPUT_RANGE


def _truth_table(
    n_bits: int,
    rule: Callable[[Tuple[int, ...]], int]
) -> Tuple[np.ndarray, np.ndarray]:
    rows = list(itertools.product([0, 1], repeat=n_bits))
    X = np.array([[2 * bit - 1 for bit in row] for row in rows], dtype=float)
    y = np.array([rule(row) for row in rows], dtype=int)
    return X, y


def and_gate() -> Tuple[np.ndarray, np.ndarray]:
    """Logical AND - linearly separable."""
    return _truth_table(2, lambda r: int(all(r)))


def or_gate() -> Tuple[np.ndarray, np.ndarray]:
    """Logical OR - linearly separable."""
    return _truth_table(2, lambda r: int(any(r)))


def nand_gate() -> Tuple[np.ndarray, np.ndarray]:
    """Logical NAND - linearly separable."""
    return _truth_table(2, lambda r: int(not all(r)))


def xor_gate() -> Tuple[np.ndarray, np.ndarray]:
    """
    Logical XOR - the simplest non-linearly separable problem.

    Requires at least one hidden layer to solve.
    """
    return _truth_table(2, lambda r: r[0] ^ r[1])


def parity(n_bits: int = 3) -> Tuple[np.ndarray, np.ndarray]:
    """
    n-bit parity: 1 when an odd number of inputs are true.

    Args:
        n_bits: Number of inputs

    Returns:
        X: Features of shape (2**n_bits, n_bits)
        y: Labels of shape (2**n_bits,)
    """
    if n_bits < 1:
        raise ValueError(f"n_bits must be at least 1, got {n_bits}")
    return _truth_table(n_bits, lambda r: sum(r) % 2)


def noisy_xor(
    n_samples: int = 200,
    noise: float = 0.1,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    XOR with Gaussian noise around the four corners, clipped to [-1, 1].

    Args:
        n_samples: Number of samples
        noise: Standard deviation of Gaussian noise
        seed: Random seed

    Returns:
        X: Features of shape (n_samples, 2)
        y: Labels of shape (n_samples,)
    """
    rng = np.random.default_rng(seed)

    n_per_corner = n_samples // 4
    corners = [(-1, 1, 1), (1, -1, 1), (1, 1, 0), (-1, -1, 0)]

    X_parts = []
    y_parts = []
    for cx, cy, label in corners:
        X_parts.append(rng.normal(size=(n_per_corner, 2)) * noise + np.array([cx, cy]) * 0.8)
        y_parts.append(np.full(n_per_corner, label))

    X = np.clip(np.vstack(X_parts), *INPUT_RANGE)
    y = np.hstack(y_parts)

    indices = rng.permutation(len(y))
    return X[indices], y[indices].astype(int)


def circle(
    n_samples: int = 200,
    radius: float = 0.6,
    seed: Optional[int] = None
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Points uniform in the square, labelled 1 inside a centred circle.

    Tests: Closed, curved decision boundary
    """
    rng = np.random.default_rng(seed)
    X = rng.uniform(*INPUT_RANGE, size=(n_samples, 2))
    y = (np.sqrt(np.sum(X ** 2, axis=1)) < radius).astype(int)
    return X, y


# Dataset registry with metadata
DATASETS: Dict[str, Dict] = {
    'and': {
        'function': and_gate,
        'description': 'Logical AND on two inputs',
        'n_inputs': 2,
        'requires_hidden': False,
        'default_params': {},
    },
    'or': {
        'function': or_gate,
        'description': 'Logical OR on two inputs',
        'n_inputs': 2,
        'requires_hidden': False,
        'default_params': {},
    },
    'nand': {
        'function': nand_gate,
        'description': 'Logical NAND on two inputs',
        'n_inputs': 2,
        'requires_hidden': False,
        'default_params': {},
    },
    'xor': {
        'function': xor_gate,
        'description': 'Logical XOR on two inputs',
        'n_inputs': 2,
        'requires_hidden': True,
        'default_params': {},
    },
    'parity': {
        'function': parity,
        'description': 'Odd parity of n binary inputs',
        'n_inputs': 3,
        'requires_hidden': True,
        'default_params': {'n_bits': 3},
    },
    'noisy_xor': {
        'function': noisy_xor,
        'description': 'XOR corners with Gaussian noise',
        'n_inputs': 2,
        'requires_hidden': True,
        'default_params': {'n_samples': 200, 'noise': 0.1},
    },
    'circle': {
        'function': circle,
        'description': 'Inside vs. outside a centred circle',
        'n_inputs': 2,
        'requires_hidden': True,
        'default_params': {'n_samples': 200, 'radius': 0.6},
    },
}


def get_dataset(
    name: str,
    **kwargs
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Get a dataset by name.

    Args:
        name: Dataset name
        **kwargs: Override default parameters

    Returns:
        X: Features
        y: Labels
    """
    if name not in DATASETS:
        available = ', '.join(DATASETS.keys())
        raise ValueError(f"Unknown dataset '{name}'. Available: {available}")

    dataset_info = DATASETS[name]
    params = dataset_info['default_params'].copy()
    params.update(kwargs)

    return dataset_info['function'](**params)


def list_datasets() -> Dict[str, Dict]:
    """List all available datasets with their metadata."""
    return {
        name: {k: v for k, v in info.items() if k != 'function'}
        for name, info in DATASETS.items()
    }
