""" datasets.py:  Binary classification datasets and their outer train/test folds. """
import logging
import os
from argparse import Namespace
from dataclasses import dataclass
from typing import Dict, Iterator, Optional, Tuple

from sklearn.datasets import fetch_openml, make_classification
from sklearn.model_selection import StratifiedKFold

import numpy as np
import pandas as pd

from linperc.errors import ValidationError
from linperc.model.lib.validation import check_attributes, check_labels

# name -> (OpenML data id, target value mapped to label 1)
OPENML_DATASETS: Dict[str, Tuple[int, str]] = {
    "adult": (1590, ">50K"),
    "banknote": (1462, "2"),
    "blood": (1464, "2"),
    "breast-w": (15, "malignant"),
    "diabetes": (37, "tested_positive"),
    "ionosphere": (59, "g"),
    "sonar": (40, "Mine"),
    "spambase": (44, "1"),
}


def parse_dataset_id(s: str) -> Tuple[str, Optional[str]]:
    """Supports 'sonar', 'sonar@openml' and 'path/to/file.csv@csv' forms."""
    if "@" in s:
        name, src = s.rsplit("@", 1)
        return name.strip(), src.strip()
    return s.strip(), None


def encode_binary_labels(values: pd.Series, positive=None) -> np.ndarray:
    """Map a two-valued label column to {0, 1}.

    Labels already in {0, 1} are kept. Otherwise ``positive`` maps to 1 and
    everything else to 0, or, without ``positive``, the larger of the two
    distinct values (compared as strings) maps to 1.

    Raises:
        ValidationError: If the column has more than two distinct values.
    """
    values = pd.Series(values)
    if positive is not None:
        return (values.astype(str) == str(positive)).to_numpy(dtype=np.int64)
    uniq = sorted(values.dropna().unique().tolist(), key=str)
    if set(uniq) <= {0, 1}:
        return values.to_numpy(dtype=np.int64)
    if len(uniq) != 2:
        raise ValidationError(f"Need exactly two classes, got {len(uniq)}: {uniq[:10]}")
    return (values == uniq[1]).to_numpy(dtype=np.int64)


@dataclass
class Split:
    fold_id: int

    X_train: np.ndarray
    y_train: np.ndarray
    X_test: np.ndarray
    y_test: np.ndarray


class DatasetLoader:
    """Loads a dataset by name into ``X`` (float64), ``y`` (0/1) and ``feat_name``.

    Names are the keys of ``OPENML_DATASETS`` (optionally ``name@openml``),
    ``synthetic`` for a seeded scikit-learn problem, or ``path/to/file.csv@csv``.
    ``args`` may carry ``label_column`` for CSV files and ``n_samples`` /
    ``n_features`` for synthetic data.
    """

    def __init__(self, dataset_name: str, random_state=None, args: Namespace = None):
        self.dataset_name, self.source = parse_dataset_id(dataset_name)
        self.rs = random_state
        self.X: Optional[np.ndarray] = None
        self.y: Optional[np.ndarray] = None
        self.feat_name: Optional[np.ndarray] = None
        options = vars(args) if args is not None else {}

        logging.getLogger("datasets.load").info("Loading dataset: %s", dataset_name)
        if self.source == "csv":
            self.load_csv(self.dataset_name, options.get("label_column"))
        elif self.source not in (None, "openml"):
            raise ValueError(f"Unknown source '{self.source}' for dataset {self.dataset_name}")
        elif self.dataset_name == "synthetic":
            self.load_synthetic(int(options.get("n_samples", 500)), int(options.get("n_features", 10)))
        elif self.dataset_name in OPENML_DATASETS:
            self.load_openml(self.dataset_name)
        else:
            raise KeyError(f"Unknown dataset '{self.dataset_name}', known: "
                           f"{sorted(OPENML_DATASETS) + ['synthetic', '<path>@csv']}")

    def _set(self, X, y, feat_name):
        X = np.asarray(X, dtype=np.float64)
        y = check_labels(y)
        keep = ~np.isnan(X).any(axis=1)
        self.X, self.y = X[keep], y[keep]
        self.feat_name = np.asarray(feat_name)
        logging.getLogger("datasets.load").info(
            "%s: %d rows (%d dropped for missing values), %d features",
            self.dataset_name, len(self.y), int((~keep).sum()), self.X.shape[1])

    def load_csv(self, path: str, label_column: Optional[str] = None):
        """Local CSV file with a header row; the label is the last column by default."""
        if not os.path.exists(path):
            raise FileNotFoundError(f"Dataset file not found: {path}")
        frame = pd.read_csv(path)
        label = label_column if label_column is not None else frame.columns[-1]
        features = frame.drop(columns=[label])
        check_attributes(features)
        self._set(features.to_numpy(dtype=np.float64), encode_binary_labels(frame[label]),
                  features.columns.to_numpy())

    def load_synthetic(self, n_samples: int, n_features: int):
        X, y = make_classification(
            n_samples=n_samples,
            n_features=n_features,
            n_informative=max(2, n_features // 2),
            n_redundant=0,
            random_state=self.rs,
        )
        self._set(X, y, [f"x{i}" for i in range(n_features)])

    def load_openml(self, name: str):
        """Fetch from OpenML; '?' cells count as missing, categorical columns are one-hot encoded."""
        data_id, positive = OPENML_DATASETS[name]
        bunch = fetch_openml(data_id=data_id, as_frame=True)
        frame = bunch.data.replace("?", np.nan)
        keep = frame.notna().all(axis=1)
        frame, target = frame[keep], bunch.target[keep]
        categorical = frame.select_dtypes(include=["object", "category"]).columns
        if len(categorical):
            frame = pd.get_dummies(frame, columns=categorical, drop_first=True)
        self._set(frame.to_numpy(dtype=np.float64), encode_binary_labels(target, positive=positive),
                  frame.columns.to_numpy())

    def kfold_splits(self, n_splits: int = 5, shuffle: bool = True) -> Iterator[Split]:
        """Yield stratified outer train/test splits.

        Args:
            n_splits (int): Number of outer folds.
            shuffle (bool): Shuffle rows before splitting (seeded by the loader's random state).
        """
        skf = StratifiedKFold(n_splits=n_splits, shuffle=shuffle,
                              random_state=self.rs if shuffle else None)
        for fold_id, (tr_idx, te_idx) in enumerate(skf.split(self.X, self.y)):
            yield Split(
                fold_id=fold_id,
                X_train=self.X[tr_idx], y_train=self.y[tr_idx],
                X_test=self.X[te_idx], y_test=self.y[te_idx],
            )
