"""
Weight generators for Network.initialize.

Each factory returns a zero-argument callable producing one weight per
call. Seeded generators draw from their own numpy Generator, so two
generators built with the same seed yield the same sequence.
"""

from typing import Callable, Dict, Optional

import numpy as np

WeightGenerator = Callable[[], float]


def constant(value: float = 0.0) -> WeightGenerator:
    """Every weight gets the same value."""
    value = float(value)

    def generate() -> float:
        return value

    return generate


def uniform(low: float = -0.5, high: float = 0.5, seed: Optional[int] = None) -> WeightGenerator:
    """Weights drawn uniformly from [low, high)."""
    if low > high:
        raise ValueError(f"low ({low}) must not exceed high ({high})")
    rng = np.random.default_rng(seed)

    def generate() -> float:
        return float(rng.uniform(low, high))

    return generate


def normal(std: float = 0.5, seed: Optional[int] = None) -> WeightGenerator:
    """Zero-mean Gaussian weights."""
    if std < 0:
        raise ValueError(f"std must be non-negative, got {std}")
    rng = np.random.default_rng(seed)

    def generate() -> float:
        return float(rng.normal(0.0, std))

    return generate


def xavier(fan_in: int, fan_out: int, seed: Optional[int] = None) -> WeightGenerator:
    """Glorot uniform: limits of +/- sqrt(6 / (fan_in + fan_out))."""
    if fan_in + fan_out <= 0:
        raise ValueError("fan_in + fan_out must be positive")
    limit = np.sqrt(6.0 / (fan_in + fan_out))
    return uniform(-limit, limit, seed=seed)


GENERATORS: Dict[str, Callable[..., WeightGenerator]] = {
    'constant': constant,
    'uniform': uniform,
    'normal': normal,
    'xavier': xavier,
}


def get_generator(name: str, **kwargs) -> WeightGenerator:
    """Build a weight generator by name."""
    if name not in GENERATORS:
        available = ', '.join(GENERATORS.keys())
        raise ValueError(f"Unknown generator '{name}'. Available: {available}")
    return GENERATORS[name](**kwargs)
