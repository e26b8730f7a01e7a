"""base_metrics.py: Metric interface and the registry the YAML metric list refers to."""
from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional, Type

from linperc.datasets import Split

METRIC_REGISTRY: Dict[str, Type["BaseMetric"]] = {}


def register_metric():
    """Class decorator adding a metric to ``METRIC_REGISTRY`` under its ``NAME``.

    Raises:
        ValueError: If the class has no NAME or the NAME is taken.
    """
    def add(cls: Type[BaseMetric]) -> Type[BaseMetric]:
        if not cls.NAME:
            raise ValueError(f"{cls.__name__} needs a NAME to be registered")
        if cls.NAME in METRIC_REGISTRY:
            raise ValueError(f"Metric '{cls.NAME}' is already taken by {METRIC_REGISTRY[cls.NAME].__name__}")
        METRIC_REGISTRY[cls.NAME] = cls
        return cls
    return add


def get_metric(name: str) -> Type[BaseMetric]:
    """Metric class registered as ``name``.

    Raises:
        KeyError: Listing the registered names when ``name`` is unknown.
    """
    if name not in METRIC_REGISTRY:
        raise KeyError(f"No metric registered as '{name}', choose from {sorted(METRIC_REGISTRY)}")
    return METRIC_REGISTRY[name]


class BaseMetric(ABC):
    """A named score of a fitted model on one fold.

    ``compute`` receives ``{"train": labels, "test": labels, "model": estimator}``,
    the fold itself and any extra keys given for the metric in the config file.
    """
    NAME: Optional[str] = None

    @abstractmethod
    def compute(self, predictions: Dict[str, Any], split: Split, **params: Any) -> Dict[str, Any]:
        raise NotImplementedError
