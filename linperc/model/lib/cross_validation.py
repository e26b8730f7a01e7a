"""cross_validation.py: Choosing between online and offline updates.

For every fold both update methods are trained from the same starting weights
on the remaining folds and scored on the held-out fold. The method with the
lower average misclassification percentage is used for the final training.
Offline is selected only on a strict improvement; a tie keeps online.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Tuple

import numpy as np
from sklearn.model_selection import KFold

from linperc.errors import ConfigurationError
from linperc.model.core.config import UpdateMethod
from linperc.model.lib.trainer import PerceptronTrainer, activation, to_label
from linperc.model.lib.weights import WeightInitializer


def select_update_method(online_error: float, offline_error: float) -> UpdateMethod:
    """Offline wins only if its error is strictly lower; ties go to online."""
    if offline_error < online_error:
        return UpdateMethod.OFFLINE
    return UpdateMethod.ONLINE


def error_percentage(X: np.ndarray, y: np.ndarray, weights: np.ndarray, bias: float) -> float:
    """Percentage of rows of ``X`` misclassified by ``weights``."""
    if len(y) == 0:
        return 0.0
    preds = to_label(activation(X, weights, bias))
    return 100.0 * float(np.count_nonzero(preds != y)) / len(y)


@dataclass(frozen=True)
class CrossValidationResult:
    """Per-fold error percentages of both update methods and the selection."""
    online_errors: Tuple[float, ...]
    offline_errors: Tuple[float, ...]

    @property
    def online_error(self) -> float:
        return float(np.mean(self.online_errors))

    @property
    def offline_error(self) -> float:
        return float(np.mean(self.offline_errors))

    @property
    def selected(self) -> UpdateMethod:
        return select_update_method(self.online_error, self.offline_error)


class CrossValidator:
    """k-fold comparison of the online and offline updates.

    Folds are contiguous and unshuffled, as a standard cross-validation split:
    fold ``i`` is held out once while the other ``k - 1`` folds train.
    """

    def __init__(self, folds: int, trainer: PerceptronTrainer, initializer: WeightInitializer):
        if folds < 2:
            raise ConfigurationError(f"The number of folds must be >= 2, got {folds}")
        self.folds = folds
        self.trainer = trainer
        self.initializer = initializer

    def split(self, n_samples: int) -> Iterator[Tuple[np.ndarray, np.ndarray]]:
        """Yield (train_idx, test_idx) for every fold."""
        if n_samples < self.folds:
            raise ConfigurationError(
                f"Cannot run {self.folds}-fold cross-validation on {n_samples} samples"
            )
        yield from KFold(n_splits=self.folds, shuffle=False).split(np.zeros((n_samples, 1)))

    def evaluate(self, X: np.ndarray, y: np.ndarray,
                 rng: np.random.Generator = None) -> CrossValidationResult:
        """Score both update methods on every fold.

        Args:
            X (np.ndarray): Matrix restricted to the active features.
            y (np.ndarray): Labels in {0, 1}.
            rng (np.random.Generator): Source for the per-fold starting weights.

        Returns:
            CrossValidationResult: Per-fold errors for online and offline.
        """
        logger = logging.getLogger("cross_validation.evaluate")
        online_errors, offline_errors = [], []
        bias = self.trainer.bias
        for fold, (tr_idx, te_idx) in enumerate(self.split(X.shape[0])):
            start = self.initializer(X.shape[1], rng)
            online = self.trainer.online(X[tr_idx], y[tr_idx], start)
            offline = self.trainer.offline(X[tr_idx], y[tr_idx], start)
            online_errors.append(error_percentage(X[te_idx], y[te_idx], online.weights, bias))
            offline_errors.append(error_percentage(X[te_idx], y[te_idx], offline.weights, bias))
            logger.debug("Fold %d: online %.2f%%, offline %.2f%%",
                         fold, online_errors[-1], offline_errors[-1])

        result = CrossValidationResult(tuple(online_errors), tuple(offline_errors))
        logger.info("Average error online %.2f%%, offline %.2f%% -> %s",
                    result.online_error, result.offline_error, result.selected.value)
        return result

    def select(self, X: np.ndarray, y: np.ndarray,
               rng: np.random.Generator = None) -> UpdateMethod:
        return self.evaluate(X, y, rng).selected
