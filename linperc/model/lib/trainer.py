"""trainer.py: Online and offline perceptron weight updates.

Decision function for a sample ``x`` restricted to the active features::

    activation = bias + sum(weight[i] * x[i])
    sign       = +1 if activation > 0 else -1
    label      =  1 if activation > 0 else 0

Training uses the signed error ``c = sign(true) - sign(predicted)`` in {-2, 0, 2}
and the update ``weight += 0.5 * learning_rate * c * x``. The online variant
applies the update after every sample; the offline (batch) variant evaluates
every sample against the weights fixed at the start of the epoch and applies
the summed update once per epoch. Epochs repeat until the weights no longer
change or ``depth`` epochs have run.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Tuple

import numpy as np

from linperc.model.core.config import UpdateMethod


class TrainingState(str, Enum):
    INITIALIZED = "initialized"
    TRAINING = "training"
    CONVERGED = "converged"
    DEPTH_EXHAUSTED = "depth_exhausted"


@dataclass(frozen=True)
class TrainingResult:
    """Outcome of one training run.

    Attributes:
        weights: Final weight vector (read-only).
        method: Update method that produced the weights.
        state: Terminal state, converged or depth exhausted.
        epochs: Number of epochs run.
        mistakes: Misclassified samples seen during each epoch.
    """
    weights: np.ndarray
    method: UpdateMethod
    state: TrainingState
    epochs: int
    mistakes: Tuple[int, ...]

    @property
    def converged(self) -> bool:
        return self.state is TrainingState.CONVERGED


def activation(X: np.ndarray, weights: np.ndarray, bias: float = 0.0) -> np.ndarray:
    """Bias plus the weighted sum of the features for every row of ``X``."""
    return bias + np.asarray(X, dtype=np.float64) @ weights


def to_sign(values) -> np.ndarray:
    """Map activations (or labels) to +1 where strictly positive, -1 otherwise."""
    return np.where(np.asarray(values) > 0, 1, -1)


def to_label(values) -> np.ndarray:
    """Map activations to class labels, 1 where strictly positive, 0 otherwise."""
    return (np.asarray(values) > 0).astype(np.int64)


class PerceptronTrainer:
    """Runs the perceptron update rule until convergence or ``depth`` epochs.

    The trainer never touches its inputs: the starting weights are copied and
    the returned :class:`TrainingResult` owns a fresh, read-only weight vector.
    """

    def __init__(self, learning_rate: int = 1, depth: int = 10, bias: float = 0.0,
                 convergence_tol: float = 0.0):
        self.learning_rate = learning_rate
        self.depth = depth
        self.bias = bias
        self.convergence_tol = convergence_tol
        self.state = TrainingState.INITIALIZED

    @classmethod
    def from_config(cls, config) -> "PerceptronTrainer":
        return cls(
            learning_rate=config.learning_rate,
            depth=config.depth,
            bias=config.bias,
            convergence_tol=config.convergence_tol,
        )

    def train(self, X: np.ndarray, y: np.ndarray, initial_weights: np.ndarray,
              method: UpdateMethod) -> TrainingResult:
        """Train from ``initial_weights`` with the given update method.

        Args:
            X (np.ndarray): Matrix of shape (n_samples, n_active_features), already
                restricted to the active feature subset.
            y (np.ndarray): Labels in {0, 1}.
            initial_weights (np.ndarray): Starting weights, one per column of ``X``.
            method (UpdateMethod): Online or offline updates.

        Returns:
            TrainingResult: Final weights and training statistics.
        """
        logger = logging.getLogger("trainer.train")
        X = np.asarray(X, dtype=np.float64)
        if X.shape[1] != initial_weights.shape[0]:
            raise ValueError(f"{X.shape[1]} features but {initial_weights.shape[0]} weights")
        if X.shape[0] != len(y):
            raise ValueError("X and y length mismatch")

        method = UpdateMethod.parse(method)
        epoch_fn = self._online_epoch if method is UpdateMethod.ONLINE else self._offline_epoch
        signs = to_sign(y)
        weights = np.array(initial_weights, dtype=np.float64)
        mistakes = []

        self.state = TrainingState.TRAINING
        for epoch in range(1, self.depth + 1):
            previous = weights.copy()
            mistakes.append(epoch_fn(X, signs, weights))
            logger.debug("%s epoch %d: %d mistakes", method.value, epoch, mistakes[-1])
            if self._unchanged(previous, weights):
                self.state = TrainingState.CONVERGED
                break
        else:
            self.state = TrainingState.DEPTH_EXHAUSTED

        weights.setflags(write=False)
        return TrainingResult(
            weights=weights,
            method=method,
            state=self.state,
            epochs=len(mistakes),
            mistakes=tuple(mistakes),
        )

    def online(self, X, y, initial_weights) -> TrainingResult:
        return self.train(X, y, initial_weights, UpdateMethod.ONLINE)

    def offline(self, X, y, initial_weights) -> TrainingResult:
        return self.train(X, y, initial_weights, UpdateMethod.OFFLINE)

    def _online_epoch(self, X: np.ndarray, signs: np.ndarray, weights: np.ndarray) -> int:
        step = 0.5 * self.learning_rate
        mistakes = 0
        for x, target in zip(X, signs):
            c = target - (1 if self.bias + x @ weights > 0 else -1)
            # applied for every sample, c == 0 included
            weights += step * c * x
            mistakes += c != 0
        return int(mistakes)

    def _offline_epoch(self, X: np.ndarray, signs: np.ndarray, weights: np.ndarray) -> int:
        c = signs - to_sign(activation(X, weights, self.bias))
        delta = 0.5 * self.learning_rate * (c @ X)
        weights += delta
        return int(np.count_nonzero(c))

    def _unchanged(self, previous: np.ndarray, current: np.ndarray) -> bool:
        if self.convergence_tol > 0:
            return bool(np.allclose(previous, current, rtol=0.0, atol=self.convergence_tol))
        return bool(np.array_equal(previous, current))
