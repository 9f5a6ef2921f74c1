"""
Training utilities for networks.

Networks learn online: every sample is one Network.train call, there is
no batching. The Trainer wraps that loop with shuffling, history
recording, early stopping and progress logging.
"""

import logging
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Tuple

import numpy as np

from .errors import DimensionMismatch, InvalidArgument
from .network import Network

logger = logging.getLogger(__name__)


@dataclass
class TrainingConfig:
    """Configuration for training."""
    epochs: int = 1000
    learning_rate: float = 0.5
    shuffle: bool = True
    seed: Optional[int] = None
    record_every: int = 10
    target_loss: Optional[float] = None  # Stop once the epoch loss reaches this
    log_every: int = 100

    def __post_init__(self):
        if not isinstance(self.epochs, int) or self.epochs < 0:
            raise InvalidArgument(f"epochs must be a non-negative integer, got {self.epochs!r}")
        if not isinstance(self.record_every, int) or self.record_every < 1:
            raise InvalidArgument(f"record_every must be a positive integer, got {self.record_every!r}")
        if not isinstance(self.log_every, int) or self.log_every < 0:
            raise InvalidArgument(f"log_every must be a non-negative integer, got {self.log_every!r}")


def _as_samples(X, y) -> Tuple[np.ndarray, np.ndarray]:
    """Coerce features to (n, inputs) and targets to (n, outputs)."""
    X = np.asarray(X, dtype=float)
    y = np.asarray(y, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    y = y.reshape(len(y), -1)
    if len(X) != len(y):
        raise DimensionMismatch(f"Got {len(X)} samples but {len(y)} targets")
    return X, y


def predict(network: Network, X) -> np.ndarray:
    """Forward every sample; returns an array of shape (n, outputs)."""
    X = np.asarray(X, dtype=float)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    return np.array([network.forward(x) for x in X])


def evaluate(network: Network, X, y) -> Dict[str, float]:
    """
    Mean squared error and accuracy over a dataset.

    Accuracy counts a sample as correct when every output rounded at 0.5
    matches its target.
    """
    X, y = _as_samples(X, y)
    output = predict(network, X)
    loss = float(np.mean((y - output) ** 2))
    accuracy = float(np.mean(np.all((output > 0.5).astype(int) == y, axis=1)))
    return {'loss': loss, 'accuracy': accuracy}


class Trainer:
    """
    Online backpropagation trainer.

    Supports:
    - Per-epoch shuffling with a reproducible seed
    - Early stopping on a target loss
    - History recording and callbacks
    """

    def __init__(self, network: Network, config: Optional[TrainingConfig] = None):
        self.network = network
        self.config = config or TrainingConfig()
        self.history: Dict[str, List] = {}

    def train(
        self,
        X,
        y,
        callbacks: Optional[List[Callable]] = None
    ) -> Dict[str, List]:
        """
        Train the network.

        Args:
            X: Training features, one row per sample, values in [-1, 1]
            y: Training targets, one row (or scalar) per sample
            callbacks: Functions called as callback(epoch, history) whenever
                history is recorded

        Returns:
            Training history with 'epoch', 'loss' and 'accuracy' lists
        """
        X, y = _as_samples(X, y)
        n_samples = len(X)
        callbacks = callbacks or []
        rng = np.random.default_rng(self.config.seed)

        self.history = {
            'epoch': [],
            'loss': [],
            'accuracy': [],
        }

        for epoch in range(self.config.epochs):
            if self.config.shuffle:
                indices = rng.permutation(n_samples)
            else:
                indices = np.arange(n_samples)

            for i in indices:
                self.network.train(X[i], y[i], self.config.learning_rate)

            is_last = epoch == self.config.epochs - 1
            should_record = epoch % self.config.record_every == 0 or is_last
            if not should_record and self.config.target_loss is None:
                continue

            metrics = evaluate(self.network, X, y)
            reached_target = (
                self.config.target_loss is not None
                and metrics['loss'] <= self.config.target_loss
            )

            if should_record or reached_target:
                self.history['epoch'].append(epoch)
                self.history['loss'].append(metrics['loss'])
                self.history['accuracy'].append(metrics['accuracy'])

                if self.config.log_every and epoch % self.config.log_every == 0:
                    logger.info(
                        "Epoch %d: loss=%.4f, accuracy=%.4f",
                        epoch, metrics['loss'], metrics['accuracy']
                    )

                for callback in callbacks:
                    callback(epoch, self.history)

            if reached_target:
                logger.info("Reached target loss %.4f at epoch %d", self.config.target_loss, epoch)
                break

        return self.history


def train_network(network: Network, X, y, **kwargs) -> Dict[str, List]:
    """Convenience function to train a network."""
    config = TrainingConfig(**kwargs)
    trainer = Trainer(network, config)
    return trainer.train(X, y)
