"""Toy datasets for training networks."""

from .toy import (
    and_gate,
    or_gate,
    nand_gate,
    xor_gate,
    parity,
    noisy_xor,
    circle,
    DATASETS,
    get_dataset,
    list_datasets,
)

__all__ = [
    'and_gate',
    'or_gate',
    'nand_gate',
    'xor_gate',
    'parity',
    'noisy_xor',
    'circle',
    'DATASETS',
    'get_dataset',
    'list_datasets',
]
