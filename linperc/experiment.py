"""experiment.py: Outer k-fold evaluation of one registered model on one dataset."""
import logging
import os
import time
import json

import numpy as np

from linperc.datasets import DatasetLoader, Split
from linperc.hparams import Hparams
from linperc.metric.metric import Metrics
from linperc.utils import NumpyEncoder


class Experiment:
    """Every fold trains a fresh estimator on its training part, scores it with
    the configured metrics and writes ``<model>_<dataset>_fold_<k>.json`` into
    the run's result directory.
    """

    def __init__(self, dataset: DatasetLoader, params: Hparams, metrics: Metrics):
        self.dataset = dataset
        self.params = params
        self.metrics = metrics

        self.model = None
        self.fold_idx = None
        self.result = {}

    def training(self, split: Split):
        logger = logging.getLogger("experiment.training")
        self.model = self.params.model_class(**self.params.model_params)
        start = time.perf_counter()
        self.model.fit(split.X_train, split.y_train)
        self.result["train_time"] = time.perf_counter() - start
        logger.info("Fold %s: fitted %s on %s in %.3fs", self.fold_idx, self.params.model_name,
                    split.X_train.shape, self.result["train_time"])

    def testing(self, split: Split):
        logger = logging.getLogger("experiment.testing")
        self.result.update(self.metrics.evaluate(self.model, split))
        logger.info("Fold %s result: %s", self.fold_idx, json.dumps(self.result, cls=NumpyEncoder))

    def cross_validate(self, fold=None) -> None:
        """Run every outer fold, or only ``fold`` when given."""
        logger = logging.getLogger("experiment.cross_validate")
        for split in self.dataset.kfold_splits(n_splits=self.params.k_folds):
            if fold is not None and split.fold_id != fold:
                continue
            self.fold_idx = split.fold_id
            self.result = {}
            labels, counts = np.unique(split.y_train, return_counts=True)
            logger.info("Fold %s: label counts %s", self.fold_idx, dict(zip(labels.tolist(), counts.tolist())))
            self.training(split)
            self.testing(split)
            self.save_result()

    def result_path(self) -> str:
        # csv datasets are named by their path
        dataset = os.path.splitext(os.path.basename(self.dataset.dataset_name))[0]
        return os.path.join(self.params.result_dir,
                            f"{self.params.model_name}_{dataset}_fold_{self.fold_idx}.json")

    def save_result(self) -> None:
        path = self.result_path()
        logging.getLogger("experiment.save_result").info("Saving result to %s", path)
        os.makedirs(os.path.dirname(path), exist_ok=True)
        state = {"hparams": self.params.get_state(), "fold": self.fold_idx, "result": self.result}
        with open(path, "w", encoding="utf-8") as file:
            json.dump(state, file, indent=4, cls=NumpyEncoder)
