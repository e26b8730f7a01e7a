"""base.py: Estimator interface of the perceptron models and the name registry
the experiment runner builds them from."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Self, Type

import numpy as np
from numpy.typing import ArrayLike


MODEL_REGISTRY: Dict[str, Type[BaseEstimator]] = {}


def register_model(name: str) -> Callable[[Type[BaseEstimator]], Type[BaseEstimator]]:
    """Class decorator adding the class to ``MODEL_REGISTRY`` under ``name``.

    Raises:
        ValueError: If ``name`` already points at a different class.
    """
    def add(cls: Type[BaseEstimator]) -> Type[BaseEstimator]:
        current = MODEL_REGISTRY.setdefault(name, cls)
        if current is not cls:
            raise ValueError(f"'{name}' is already taken by {current.__name__}")
        return cls
    return add


def make_model(name: str) -> Type[BaseEstimator]:
    """Class registered as ``name``.

    Raises:
        KeyError: Listing the registered names when ``name`` is unknown.
    """
    if name not in MODEL_REGISTRY:
        raise KeyError(f"No model registered as '{name}', choose from {sorted(MODEL_REGISTRY)}")
    return MODEL_REGISTRY[name]


class BaseEstimator(ABC):
    """fit/predict classifier that keeps its constructor keywords in ``params``.

    Subclasses derive all of their state from ``params`` in ``__init__``, so
    ``set_params`` simply rebuilds the estimator; a fitted model is discarded.
    """

    def __init__(self, **params: Any):
        self.params: Dict[str, Any] = dict(params)

    def get_params(self) -> Dict[str, Any]:
        return dict(self.params)

    def set_params(self, **params: Any) -> Self:
        merged = {**self.params, **params}
        self.__init__(**merged)
        return self

    @abstractmethod
    def fit(self, X: ArrayLike, y: ArrayLike) -> Self:
        """Train on ``X`` (n_samples, n_features) and labels ``y`` in {0, 1}."""
        raise NotImplementedError

    @abstractmethod
    def predict(self, X: ArrayLike) -> np.ndarray:
        """Labels in {0, 1}, one per row of ``X``."""
        raise NotImplementedError

    def score(self, X: ArrayLike, y: ArrayLike) -> float:
        """Fraction of rows of ``X`` whose predicted label equals ``y``."""
        y = np.asarray(y)
        if y.size == 0:
            raise ValueError("score needs at least one sample")
        preds = self.predict(X)
        if preds.shape != y.shape:
            raise ValueError(f"{preds.shape[0]} predictions for {y.shape[0]} labels")
        return float(np.mean(preds == y))
