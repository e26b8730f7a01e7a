"""perceptron.py: Simple and enhanced linear perceptron classifiers.

The simple perceptron trains online on the raw features. The enhanced
perceptron is the same estimator with other defaults: it standardizes the
features and picks between online and offline updates with k-fold
cross-validation. ``fit`` produces an immutable :class:`PerceptronModel`.
"""
from __future__ import annotations

import argparse
import logging
from dataclasses import dataclass
from typing import Optional, Sequence

import numpy as np
from numpy.typing import ArrayLike

from linperc.hparams import Hparams, register_hparams
from linperc.model.core.base import BaseEstimator, register_model
from linperc.model.core.config import PerceptronConfig, UpdateMethod, enhanced_config, simple_config
from linperc.model.lib.cross_validation import CrossValidationResult, CrossValidator
from linperc.model.lib.standardizer import StandardizationParams, Standardizer
from linperc.model.lib.trainer import PerceptronTrainer, TrainingResult, activation, to_label
from linperc.model.lib.validation import as_feature_matrix, check_attributes, check_labels
from linperc.model.lib.weights import WeightInitializer
from linperc.utils import as_generator, str2bool


@dataclass(frozen=True)
class PerceptronModel:
    """A trained perceptron.

    Attributes:
        weights: One weight per index of ``feature_subset``.
        bias: Constant added to every activation.
        feature_subset: Sorted column indices read by the model.
        n_features: Width of the matrices the model accepts.
        standardization: Statistics applied to incoming samples, if any.
        training: Result of the final training run.
        cross_validation: Result of the update-method selection, if it ran.
    """
    weights: np.ndarray
    bias: float
    feature_subset: np.ndarray
    n_features: int
    standardization: Optional[StandardizationParams]
    training: TrainingResult
    cross_validation: Optional[CrossValidationResult] = None

    @property
    def update_method(self) -> UpdateMethod:
        return self.training.method

    def _prepare(self, X: ArrayLike) -> np.ndarray:
        X = as_feature_matrix(X)
        if X.shape[1] != self.n_features:
            raise ValueError(f"Model expects {self.n_features} features, got {X.shape[1]}")
        if self.standardization is not None:
            X = self.standardization.transform(X)
        return X[:, self.feature_subset]

    def decision_function(self, X: ArrayLike) -> np.ndarray:
        return activation(self._prepare(X), self.weights, self.bias)

    def predict(self, X: ArrayLike) -> np.ndarray:
        return to_label(self.decision_function(X))


@register_model("perceptron")
class Perceptron(BaseEstimator):
    """Linear perceptron estimator with the simple defaults (online, raw features).

    Args:
        feature_subset (Sequence[int], optional): Columns the model reads, all
            columns when omitted. Used by the random-subspace ensemble.
        random_state (int | np.random.Generator, optional): Source for the weight
            initialisation.
        **params: Fields of :class:`PerceptronConfig`.
    """
    config_factory = staticmethod(simple_config)

    def __init__(self, **params):
        super().__init__(**params)
        params = dict(params)
        self.feature_subset: Optional[Sequence[int]] = params.pop("feature_subset", None)
        self.random_state = params.pop("random_state", None)
        self.config = self.config_factory(**params)
        self.model_: Optional[PerceptronModel] = None

    @property
    def is_trained(self) -> bool:
        return self.model_ is not None

    def _resolve_subset(self, n_features: int) -> np.ndarray:
        if self.feature_subset is None:
            return np.arange(n_features)
        subset = np.asarray(self.feature_subset, dtype=np.int64)
        if subset.size and (subset.min() < 0 or subset.max() >= n_features):
            raise ValueError(f"Feature subset {subset.tolist()} out of range for {n_features} features")
        if np.unique(subset).size != subset.size:
            raise ValueError(f"Feature subset {subset.tolist()} contains duplicates")
        return np.sort(subset)

    def fit(self, X, y):
        """Train the perceptron.

        Steps: validate attributes, standardize, initialise weights, optionally
        select the update method by cross-validation, then train on all samples.

        Args:
            X (ArrayLike): Feature matrix of shape (n_samples, n_features).
            y (ArrayLike): Labels in {0, 1}.

        Returns:
            Perceptron: This fitted estimator.
        """
        logger = logging.getLogger("Perceptron.fit")
        cfg = self.config
        rng = as_generator(self.random_state)

        if cfg.check_attributes:
            check_attributes(X)
        X = as_feature_matrix(X)
        y = check_labels(y)
        if X.shape[0] != y.shape[0]:
            raise ValueError("X and y length mismatch")

        standardization = None
        if cfg.standardize:
            X, standardization = Standardizer(cfg.guard_zero_std).fit_transform(X)

        subset = self._resolve_subset(X.shape[1])
        X_active = X[:, subset]

        initializer = WeightInitializer(cfg.randomize_weights, cfg.weight_fill_value)
        trainer = PerceptronTrainer.from_config(cfg)
        weights = initializer(subset.size, rng)

        cv_result = None
        method = cfg.update_method
        if cfg.use_cross_validation:
            cv_result = CrossValidator(cfg.folds, trainer, initializer).evaluate(X_active, y, rng)
            method = cv_result.selected

        training = trainer.train(X_active, y, weights, method)
        logger.debug("Trained %s perceptron on %d features: %s after %d epochs",
                     method.value, subset.size, training.state.value, training.epochs)

        subset.setflags(write=False)
        self.model_ = PerceptronModel(
            weights=training.weights,
            bias=cfg.bias,
            feature_subset=subset,
            n_features=X.shape[1],
            standardization=standardization,
            training=training,
            cross_validation=cv_result,
        )
        return self

    def _check_trained(self) -> PerceptronModel:
        if self.model_ is None:
            raise RuntimeError("Model has not been trained. Call fit() first.")
        return self.model_

    def predict(self, X):
        return self._check_trained().predict(X)

    def decision_function(self, X):
        return self._check_trained().decision_function(X)

    @property
    def weights_(self) -> np.ndarray:
        return self._check_trained().weights

    @property
    def update_method_(self) -> UpdateMethod:
        return self._check_trained().update_method


@register_model("enhanced_perceptron")
class EnhancedPerceptron(Perceptron):
    """Perceptron with the enhanced defaults: standardized features, offline
    updates and the update method picked by 4-fold cross-validation. Any
    default can still be overridden through ``**params``."""
    config_factory = staticmethod(enhanced_config)


def perceptron_params(defaults: PerceptronConfig, args) -> dict:
    """Read the perceptron options from parsed command-line arguments."""
    def get(name, cast):
        return cast(getattr(args, name)) if hasattr(args, name) else getattr(defaults, name)

    return {
        "randomize_weights": get("randomize_weights", str2bool),
        "weight_fill_value": get("weight_fill_value", float),
        "learning_rate": get("learning_rate", int),
        "depth": get("depth", int),
        "bias": get("bias", float),
        "check_attributes": get("check_attributes", str2bool),
        "standardize": get("standardize", str2bool),
        "update_method": get("update_method", UpdateMethod.parse),
        "use_cross_validation": get("use_cross_validation", str2bool),
        "folds": get("folds", int),
        "guard_zero_std": get("guard_zero_std", str2bool),
        "convergence_tol": get("convergence_tol", float),
    }


@register_hparams("perceptron")
def parse_perceptron_options(hparams: Hparams, options: argparse.Namespace):
    hparams.model_params = perceptron_params(simple_config(), options)
    hparams.model_params["random_state"] = hparams.rs


@register_hparams("enhanced_perceptron")
def parse_enhanced_options(hparams: Hparams, options: argparse.Namespace):
    hparams.model_params = perceptron_params(enhanced_config(), options)
    hparams.model_params["random_state"] = hparams.rs
