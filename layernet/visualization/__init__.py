"""Visualization utilities for networks."""

from .plots import (
    plot_decision_boundary,
    plot_training_history,
    plot_activation_functions,
    plot_weight_distribution,
    figure_to_base64,
)

__all__ = [
    'plot_decision_boundary',
    'plot_training_history',
    'plot_activation_functions',
    'plot_weight_distribution',
    'figure_to_base64',
]
