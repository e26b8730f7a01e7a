"""Shared fixtures for the test suite."""
import importlib
import pkgutil

import numpy as np
import pytest

import linperc.metric as metric_pkg
import linperc.model as model_pkg


def _load_all(pkg):
    for modinfo in pkgutil.walk_packages(pkg.__path__, prefix=pkg.__name__ + "."):
        importlib.import_module(modinfo.name)


# Registries are filled by import side effects, as in run_exp.py
_load_all(model_pkg)
_load_all(metric_pkg)


@pytest.fixture
def rng():
    return np.random.default_rng(0)


@pytest.fixture
def separable(rng):
    """Two clusters around (2, 2) with label 1 and (-2, -2) with label 0."""
    pos = rng.normal(loc=2.0, scale=0.5, size=(20, 2))
    neg = rng.normal(loc=-2.0, scale=0.5, size=(20, 2))
    X = np.vstack([pos, neg])
    y = np.array([1] * 20 + [0] * 20)
    order = rng.permutation(len(y))
    return X[order], y[order]


@pytest.fixture
def wide(rng):
    """Ten features, label decided by the sign of the first three."""
    X = rng.normal(size=(60, 10))
    y = (X[:, :3].sum(axis=1) > 0).astype(int)
    return X, y


@pytest.fixture
def offline_wins():
    """With zero start weights and one epoch, 2-fold CV scores online 75% and offline 25% error."""
    return np.array([[1.0], [-1.0], [1.0], [2.0]]), np.array([1, 0, 1, 0])


@pytest.fixture
def online_wins():
    """With unit start weights and one epoch, 2-fold CV scores online 0% and offline 25% error."""
    return np.array([[1.0], [-1.0], [1.0], [1.0]]), np.array([0, 0, 0, 0])


@pytest.fixture
def cv_tie():
    """Both methods classify every held-out sample correctly."""
    return np.array([[1.0], [-1.0], [1.0], [-1.0]]), np.array([1, 0, 1, 0])


def _clusters_with_outliers(outlier_rows):
    """200 alternating samples around (2, 2) (label 1) and (-2, -2) (label 0), about 3% of
    labels flipped, and a label-1 outlier at (-30, -30) in each of ``outlier_rows``."""
    rng = np.random.default_rng(7)
    y = np.tile([1, 0], 100)
    X = rng.normal(size=(200, 2)) + np.where(y[:, None] == 1, 2.0, -2.0)
    y = np.where(rng.random(200) < 0.03, 1 - y, y)
    X[outlier_rows] = -30.0
    y[outlier_rows] = 1
    return X, y


@pytest.fixture
def outliers_last():
    """Every 50-sample block ends with the outlier, so online training always finishes on it."""
    return _clusters_with_outliers([49, 99, 149, 199])


@pytest.fixture
def outliers_first():
    """Every 50-sample block starts with the outlier, online training recovers before the block ends."""
    return _clusters_with_outliers([0, 50, 100, 150])
