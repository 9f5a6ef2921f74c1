"""
Matplotlib-based visualization for networks.

These functions create static plots for analysis and documentation.
"""

import numpy as np
from typing import Optional, List, Tuple, Dict
import io
import base64

# Matplotlib imports with non-GUI backend
import matplotlib
matplotlib.use('Agg')
import matplotlib.pyplot as plt
from matplotlib.colors import LinearSegmentedColormap

from ..core.activations import ACTIVATIONS, activate
from ..core.errors import DimensionMismatch
from ..config import INPUT_RANGE
from ..core.network import Network
from ..core.training import predict


DECISION_CMAP = LinearSegmentedColormap.from_list(
    'decision', ['#3498db', '#ecf0f1', '#e74c3c']
)


def plot_decision_boundary(
    network: Network,
    X: np.ndarray,
    y: np.ndarray,
    resolution: int = 60,
    title: Optional[str] = None,
    figsize: Tuple[int, int] = (6, 5),
    ax: Optional[plt.Axes] = None
) -> plt.Figure:
    """
    Plot the first output of a 2-input network over the input square.

    Args:
        network: Network with two input units
        X: Data features, plotted on top
        y: Data labels
        resolution: Grid points per axis
        title: Plot title
        figsize: Figure size
        ax: Existing axes to plot on

    Returns:
        matplotlib Figure
    """
    if network.input_layer is None or len(network.input_layer) != 2:
        raise DimensionMismatch("Decision boundaries can only be drawn for 2-input networks")

    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    xx, yy = np.meshgrid(
        np.linspace(*INPUT_RANGE, resolution),
        np.linspace(*INPUT_RANGE, resolution)
    )
    grid = np.c_[xx.ravel(), yy.ravel()]
    outputs = predict(network, grid)[:, 0].reshape(xx.shape)

    contour = ax.contourf(xx, yy, outputs, levels=50, cmap=DECISION_CMAP, alpha=0.8)
    plt.colorbar(contour, ax=ax, label='output')
    if outputs.min() < 0.5 < outputs.max():
        ax.contour(xx, yy, outputs, levels=[0.5], colors='black', linewidths=2)

    X = np.asarray(X)
    ax.scatter(X[:, 0], X[:, 1], c=np.asarray(y).ravel(), cmap='RdBu', edgecolors='white',
               s=50, linewidths=1, zorder=10)

    ax.set_xlim(*INPUT_RANGE)
    ax.set_ylim(*INPUT_RANGE)
    ax.set_xlabel('x₁')
    ax.set_ylabel('x₂')
    ax.set_title(title or f'{network!r}')
    ax.set_aspect('equal')

    return fig


def plot_training_history(
    history: Dict[str, List[float]],
    figsize: Tuple[int, int] = (10, 4),
    title: Optional[str] = None
) -> plt.Figure:
    """
    Plot training history (loss and accuracy) as recorded by Trainer.

    Returns:
        matplotlib Figure
    """
    fig, (ax1, ax2) = plt.subplots(1, 2, figsize=figsize)

    epochs = history.get('epoch') or list(range(len(history['loss'])))

    ax1.plot(epochs, history['loss'], 'b-', linewidth=2)
    ax1.set_xlabel('Epoch')
    ax1.set_ylabel('Mean squared error')
    ax1.set_title('Training Loss')
    ax1.grid(True, alpha=0.3)
    if history['loss'] and min(history['loss']) > 0:
        ax1.set_yscale('log')

    ax2.plot(epochs, history['accuracy'], 'g-', linewidth=2)
    ax2.set_xlabel('Epoch')
    ax2.set_ylabel('Accuracy')
    ax2.set_title('Training Accuracy')
    ax2.grid(True, alpha=0.3)
    ax2.set_ylim(0, 1.05)

    if title:
        fig.suptitle(title)

    plt.tight_layout()
    return fig


def plot_activation_functions(
    activations: Optional[List[str]] = None,
    x_range: Tuple[float, float] = (-5, 5),
    figsize: Tuple[int, int] = (12, 4)
) -> plt.Figure:
    """Plot the registered activation functions side by side."""
    if activations is None:
        activations = list(ACTIVATIONS.keys())

    fig, axes = plt.subplots(1, len(activations), figsize=figsize)
    if len(activations) == 1:
        axes = [axes]

    x = np.linspace(x_range[0], x_range[1], 201)

    for ax, name in zip(axes, activations):
        act = ACTIVATIONS[name]
        ax.plot(x, [activate(act, v) for v in x], 'b-', linewidth=2)
        ax.axhline(y=0, color='gray', linewidth=0.5)
        ax.axvline(x=0, color='gray', linewidth=0.5)
        ax.set_title(name)
        ax.set_xlabel('input')
        ax.grid(True, alpha=0.3)

    plt.tight_layout()
    return fig


def plot_weight_distribution(
    network: Network,
    figsize: Tuple[int, int] = (10, 4)
) -> plt.Figure:
    """
    Plot the distribution of incoming weights of each non-input layer.

    Returns:
        matplotlib Figure
    """
    layer_weights = [
        [w for unit_weights in layer for w in unit_weights]
        for layer in network.get_weights()[1:]
    ]
    n_layers = max(len(layer_weights), 1)
    fig, axes = plt.subplots(1, n_layers, figsize=figsize)
    if n_layers == 1:
        axes = [axes]

    for i, (ax, weights) in enumerate(zip(axes, layer_weights)):
        ax.hist(weights, bins=30, color='steelblue', edgecolor='white', alpha=0.8)
        ax.axvline(x=0, color='red', linewidth=1, linestyle='--')
        ax.set_title(f'Layer {i + 1} ({len(weights)} weights)')
        ax.set_xlabel('Weight value')
        ax.set_ylabel('Count')

    plt.tight_layout()
    return fig


def figure_to_base64(fig: plt.Figure) -> str:
    """Convert matplotlib figure to base64 string for web display."""
    buf = io.BytesIO()
    fig.savefig(buf, format='png', dpi=100, bbox_inches='tight')
    buf.seek(0)
    img_base64 = base64.b64encode(buf.read()).decode('utf-8')
    plt.close(fig)
    return img_base64
