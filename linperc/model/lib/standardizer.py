"""standardizer.py: Per-feature standardization with stored training statistics.

The mean and the population standard deviation (divide by N) of every column
are computed once from the training data and reused unchanged for every later
transform. A constant column has a standard deviation of zero; by default the
division is left unguarded and produces non-finite values (``nan`` for the
constant column itself), which then propagate into training. With
``guard_zero_std`` the zero deviation is replaced by 1 so the column becomes 0.
"""
import logging
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class StandardizationParams:
    """Per-feature statistics computed from a training set."""
    mean: np.ndarray
    std: np.ndarray
    guarded: bool = False

    @property
    def n_features(self) -> int:
        return int(self.mean.shape[0])

    @property
    def zero_std_columns(self) -> np.ndarray:
        return np.flatnonzero(self.std == 0)

    def transform(self, X: np.ndarray) -> np.ndarray:
        """Rescale ``X`` with the stored statistics.

        Args:
            X (np.ndarray): Matrix of shape (n_samples, n_features).

        Returns:
            np.ndarray: New standardized matrix; ``X`` is left untouched.
        """
        X = np.asarray(X, dtype=np.float64)
        if X.shape[-1] != self.n_features:
            raise ValueError(f"Expected {self.n_features} features, got {X.shape[-1]}")
        std = self.std
        if self.guarded:
            std = np.where(std == 0, 1.0, std)
        with np.errstate(divide="ignore", invalid="ignore"):
            return (X - self.mean) / std


class Standardizer:
    """Fits :class:`StandardizationParams` on training data."""

    def __init__(self, guard_zero_std: bool = False):
        self.guard_zero_std = guard_zero_std

    def fit(self, X: np.ndarray) -> StandardizationParams:
        """Compute mean and population standard deviation of every column.

        Args:
            X (np.ndarray): Training matrix of shape (n_samples, n_features).

        Returns:
            StandardizationParams: The stored statistics.
        """
        logger = logging.getLogger("standardizer.fit")
        X = np.asarray(X, dtype=np.float64)
        if X.shape[0] == 0:
            raise ValueError("Cannot standardize an empty dataset")
        mean = X.mean(axis=0)
        std = np.sqrt(((X - mean) ** 2).mean(axis=0))
        params = StandardizationParams(mean=mean, std=std, guarded=self.guard_zero_std)

        zero_cols = params.zero_std_columns
        if zero_cols.size:
            if self.guard_zero_std:
                logger.info("Constant columns %s left at 0 after standardization", zero_cols.tolist())
            else:
                logger.warning(
                    "Constant columns %s have zero standard deviation; standardized values are not finite",
                    zero_cols.tolist(),
                )
        return params

    def fit_transform(self, X: np.ndarray):
        """Fit the statistics and rescale ``X``.

        Returns:
            tuple: (standardized matrix, StandardizationParams)
        """
        params = self.fit(X)
        return params.transform(X), params
