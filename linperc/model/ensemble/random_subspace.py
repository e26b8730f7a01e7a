"""random_subspace.py: Random-subspace ensemble of linear perceptrons.

Every sub-model is a perceptron restricted to a random subset of the features
and trained on all samples (random subspace bagging, no row resampling). The
ensemble predicts by majority vote; label 1 wins ties.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import asdict
from typing import List, Optional

import numpy as np
from numpy.typing import ArrayLike

from linperc.errors import ConfigurationError
from linperc.hparams import Hparams, register_hparams
from linperc.model.core.base import BaseEstimator, register_model
from linperc.model.core.config import EnsembleConfig, enhanced_config, simple_config
from linperc.model.lib.standardizer import StandardizationParams, Standardizer
from linperc.model.lib.validation import as_feature_matrix, check_attributes, check_labels
from linperc.model.standard.perceptron import Perceptron, perceptron_params
from linperc.utils import as_generator, str2bool


def default_subset_size(n_features: int) -> int:
    """Square root of the feature count, rounded half up."""
    return int(np.sqrt(n_features) + 0.5)


def draw_feature_subset(n_features: int, size: int, rng: np.random.Generator) -> np.ndarray:
    """Draw ``size`` distinct feature indices in [0, n_features), sorted ascending.

    Indices are sampled one at a time and duplicates are rejected until the
    subset is full.

    Raises:
        ConfigurationError: If ``size`` is not in [1, n_features].
    """
    if size < 1 or size > n_features:
        raise ConfigurationError(
            f"Subset size {size} must be between 1 and the number of features ({n_features})"
        )
    chosen: List[int] = []
    while len(chosen) < size:
        idx = int(rng.integers(n_features))
        if idx not in chosen:
            chosen.append(idx)
    return np.array(sorted(chosen), dtype=np.int64)


@register_model("random_perceptron")
class RandomSubspacePerceptron(BaseEstimator):
    """Majority-vote ensemble of perceptrons on random feature subsets.

    Args:
        ensemble_size (int): Number of sub-models, greater than 1.
        subset_size (int, optional): Features per sub-model, defaults to
            ``round(sqrt(n_features))``.
        enhanced_members (bool): Train enhanced members (offline updates chosen
            against online by cross-validation unless overridden) instead of
            plain online perceptrons.
        standardize (bool): Standardize the data once for all members.
        check_attributes (bool): Validate the data once for all members.
        guard_zero_std (bool): Guard zero standard deviations.
        random_state (int | np.random.Generator, optional): Source of the per-member seeds.
        **params: Fields of :class:`PerceptronConfig` shared by the members.
    """

    def __init__(self, **params):
        super().__init__(**params)
        params = dict(params)
        self.random_state = params.pop("random_state", None)
        ensemble_fields = {
            key: params.pop(key)
            for key in ("ensemble_size", "subset_size", "enhanced_members",
                        "standardize", "check_attributes", "guard_zero_std")
            if key in params
        }
        member_factory = enhanced_config if ensemble_fields.get("enhanced_members") else simple_config
        self.config = EnsembleConfig(member=member_factory(**params), **ensemble_fields)

        self.estimators_: List[Perceptron] = []
        self.feature_subsets_: List[np.ndarray] = []
        self.member_seeds_: Optional[np.ndarray] = None
        self.standardization_: Optional[StandardizationParams] = None
        self.n_features_: Optional[int] = None

    @property
    def is_trained(self) -> bool:
        return bool(self.estimators_)

    def resolve_subset_size(self, n_features: int) -> int:
        size = self.config.subset_size
        if size is None:
            return max(1, default_subset_size(n_features))
        if size > n_features:
            raise ConfigurationError(
                f"subset_size ({size}) cannot be greater than the number of features ({n_features})"
            )
        return size

    def fit(self, X, y):
        """Validate and standardize once, then train every member on its own subset.

        Args:
            X (ArrayLike): Feature matrix of shape (n_samples, n_features).
            y (ArrayLike): Labels in {0, 1}.

        Returns:
            RandomSubspacePerceptron: This fitted ensemble.
        """
        logger = logging.getLogger("RandomSubspacePerceptron.fit")
        cfg = self.config
        rng = as_generator(self.random_state)

        if cfg.check_attributes:
            check_attributes(X)
        X = as_feature_matrix(X)
        y = check_labels(y)
        if X.shape[0] != y.shape[0]:
            raise ValueError("X and y length mismatch")

        n_features = X.shape[1]
        size = self.resolve_subset_size(n_features)

        self.standardization_ = None
        if cfg.standardize:
            X, self.standardization_ = Standardizer(cfg.guard_zero_std).fit_transform(X)

        member_params = asdict(cfg.member_config())
        self.member_seeds_ = rng.integers(np.iinfo(np.int32).max, size=cfg.ensemble_size)
        logger.info("Training %d %s perceptrons on %d of %d features",
                    cfg.ensemble_size, "enhanced" if cfg.enhanced_members else "simple",
                    size, n_features)

        estimators, subsets = [], []
        for seed in self.member_seeds_:
            member_rng = np.random.default_rng(int(seed))
            subset = draw_feature_subset(n_features, size, member_rng)
            member = Perceptron(feature_subset=subset, random_state=member_rng, **member_params)
            member.fit(X, y)
            estimators.append(member)
            subsets.append(subset)

        self.estimators_ = estimators
        self.feature_subsets_ = subsets
        self.n_features_ = n_features
        return self

    def _check_trained(self):
        if not self.estimators_:
            raise RuntimeError("Ensemble has not been trained. Call fit() first.")

    def transform(self, X: ArrayLike) -> np.ndarray:
        """Apply the ensemble's stored standardization to incoming samples."""
        self._check_trained()
        X = as_feature_matrix(X)
        if X.shape[1] != self.n_features_:
            raise ValueError(f"Ensemble expects {self.n_features_} features, got {X.shape[1]}")
        if self.standardization_ is not None:
            X = self.standardization_.transform(X)
        return X

    def member_predictions(self, X: ArrayLike) -> np.ndarray:
        """Labels of every member, shape (n_members, n_samples)."""
        X = self.transform(X)
        return np.array([member.predict(X) for member in self.estimators_])

    def vote(self, X: ArrayLike) -> np.ndarray:
        """Vote tally per sample, shape (n_samples, 2): votes for label 0 and label 1."""
        preds = self.member_predictions(X)
        ones = preds.sum(axis=0)
        return np.column_stack([preds.shape[0] - ones, ones]).astype(np.int64)

    def predict(self, X):
        """Label 1 unless the votes for 0 strictly outnumber the votes for 1."""
        votes = self.vote(X)
        return np.where(votes[:, 0] > votes[:, 1], 0, 1)


@register_hparams("random_perceptron")
def parse_ensemble_options(hparams: Hparams, options: argparse.Namespace):
    """Member options plus the ensemble's own. Members default to the enhanced
    settings, which only take effect with ``--enhanced_members``."""
    defaults = EnsembleConfig()
    params = perceptron_params(enhanced_config(), options)
    # validated and standardized once by the ensemble
    for key in ("check_attributes", "standardize", "guard_zero_std"):
        params.pop(key)

    def get(name, cast):
        return cast(getattr(options, name)) if hasattr(options, name) else getattr(defaults, name)

    subset_size = getattr(options, "subset_size", None)
    params.update({
        "ensemble_size": get("ensemble_size", int),
        "subset_size": int(subset_size) if subset_size not in (None, "auto") else None,
        "enhanced_members": get("enhanced_members", str2bool),
        "standardize": get("standardize", str2bool),
        "check_attributes": get("check_attributes", str2bool),
        "guard_zero_std": get("guard_zero_std", str2bool),
        "random_state": hparams.rs,
    })
    hparams.model_params = params
