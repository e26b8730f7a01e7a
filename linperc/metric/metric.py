"""metric.py: The configured metric list and its evaluation on a fold."""
import logging
from typing import Any, Dict, List, Tuple

import yaml

from linperc.datasets import Split
from linperc.metric.base_metrics import BaseMetric, get_metric


class Metrics:
    """Metrics named in a YAML file, evaluated in file order::

        metrics:
          - name: accuracy
          - name: convergence

    Keys other than ``name`` are passed to the metric's ``compute``. Unknown
    names fail when the file is loaded, before any model is trained.
    """

    def __init__(self, config_file: str):
        with open(config_file, "r", encoding="utf-8") as file:
            config = yaml.safe_load(file) or {}
        entries = config.get("metrics")
        if not entries:
            raise ValueError(f"Metrics config {config_file} has no 'metrics' list")
        self.metrics: List[Tuple[BaseMetric, Dict[str, Any]]] = [
            (get_metric(entry["name"])(), {k: v for k, v in entry.items() if k != "name"})
            for entry in entries
        ]

    def evaluate(self, model, split: Split) -> Dict[str, Any]:
        """Predict both parts of ``split`` once and merge every metric's output."""
        logger = logging.getLogger("Metrics.evaluate")
        predictions = {
            "train": model.predict(split.X_train),
            "test": model.predict(split.X_test),
            "model": model,
        }
        result: Dict[str, Any] = {}
        for metric, params in self.metrics:
            scores = metric.compute(predictions, split, **params)
            logger.debug("%s: %s", metric.NAME, scores)
            result.update(scores)
        return result
