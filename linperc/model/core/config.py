"""config.py: Configuration structures for the perceptron models.

A single ``PerceptronConfig`` describes both the simple and the enhanced
perceptron; the two only differ in their defaults. ``EnsembleConfig`` wraps a
member configuration with the random-subspace options. All validation happens
at construction time and raises ``ConfigurationError``.
"""
from __future__ import annotations

from dataclasses import dataclass, fields, replace
from enum import Enum
from typing import Any, Dict, Optional

from linperc.errors import ConfigurationError


class UpdateMethod(str, Enum):
    """Weight update strategy used during training."""
    ONLINE = "online"
    OFFLINE = "offline"

    @classmethod
    def parse(cls, value) -> "UpdateMethod":
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError as e:
            raise ConfigurationError(
                f"Unknown update method {value!r}, expected one of {[m.value for m in cls]}"
            ) from e


@dataclass(frozen=True)
class PerceptronConfig:
    """Options for a single perceptron.

    Attributes:
        randomize_weights: Draw initial weights uniformly from (-0.5, 0.5) instead of
            filling them with ``weight_fill_value``.
        weight_fill_value: Constant used for every initial weight when not randomizing.
        learning_rate: Step multiplier of the weight update.
        depth: Maximum number of epochs.
        bias: Constant added to every activation. Never updated by training.
        check_attributes: Verify that every feature column is numeric before training.
        standardize: Rescale features to zero mean and unit variance.
        update_method: Update used when cross-validation is disabled.
        use_cross_validation: Pick the update method by k-fold cross-validation.
        folds: Number of cross-validation folds.
        guard_zero_std: Replace a zero standard deviation by 1 when standardizing.
        convergence_tol: Absolute tolerance of the epoch-to-epoch weight comparison,
            0 means exact equality.
    """
    randomize_weights: bool = True
    weight_fill_value: float = 1.0
    learning_rate: int = 1
    depth: int = 10
    bias: float = 0.0
    check_attributes: bool = True
    standardize: bool = False
    update_method: UpdateMethod = UpdateMethod.ONLINE
    use_cross_validation: bool = False
    folds: int = 4
    guard_zero_std: bool = False
    convergence_tol: float = 1e-12

    def __post_init__(self):
        object.__setattr__(self, "update_method", UpdateMethod.parse(self.update_method))
        if self.folds < 2:
            raise ConfigurationError(f"The number of folds must be >= 2, got {self.folds}")
        if self.depth < 1:
            raise ConfigurationError(f"depth must be >= 1, got {self.depth}")
        if self.convergence_tol < 0:
            raise ConfigurationError(f"convergence_tol must be >= 0, got {self.convergence_tol}")

    def to_dict(self) -> Dict[str, Any]:
        return {f.name: getattr(self, f.name) for f in fields(self)}


def simple_config(**overrides: Any) -> PerceptronConfig:
    """Defaults of the plain online perceptron."""
    return PerceptronConfig(**overrides)


def enhanced_config(**overrides: Any) -> PerceptronConfig:
    """Defaults of the enhanced perceptron: standardized data, offline updates,
    update method chosen by 4-fold cross-validation."""
    params: Dict[str, Any] = {
        "standardize": True,
        "update_method": UpdateMethod.OFFLINE,
        "use_cross_validation": True,
        "folds": 4,
    }
    params.update(overrides)
    return PerceptronConfig(**params)


@dataclass(frozen=True)
class EnsembleConfig:
    """Options for the random-subspace perceptron ensemble.

    Attributes:
        member: Configuration shared by every sub-model. Defaults to
            ``enhanced_config()`` for enhanced members, ``simple_config()`` otherwise.
        ensemble_size: Number of sub-models, must be greater than 1.
        subset_size: Features per sub-model, ``None`` for ``round(sqrt(n_features))``.
        enhanced_members: Use enhanced members (update method, cross-validation and
            folds taken from ``member``) instead of plain online perceptrons.
        standardize: Standardize the whole dataset once before training members.
        check_attributes: Validate the dataset once before training members.
        guard_zero_std: Guard zero standard deviations in the ensemble standardizer.
    """
    member: Optional[PerceptronConfig] = None
    ensemble_size: int = 500
    subset_size: Optional[int] = None
    enhanced_members: bool = False
    standardize: bool = True
    check_attributes: bool = True
    guard_zero_std: bool = False

    def __post_init__(self):
        if self.member is None:
            member = enhanced_config() if self.enhanced_members else simple_config()
            object.__setattr__(self, "member", member)
        if self.ensemble_size <= 1:
            raise ConfigurationError(
                f"The number of ensembles must be greater than 1, got {self.ensemble_size}"
            )
        if self.subset_size is not None and self.subset_size < 1:
            raise ConfigurationError(f"subset_size must be >= 1, got {self.subset_size}")

    def member_config(self) -> PerceptronConfig:
        """Configuration actually handed to each sub-model.

        The ensemble validates and standardizes once for all members, so members do
        neither. Plain members always train online without cross-validation.
        """
        if self.enhanced_members:
            return replace(self.member, check_attributes=False, standardize=False)
        return replace(
            self.member,
            check_attributes=False,
            standardize=False,
            update_method=UpdateMethod.ONLINE,
            use_cross_validation=False,
        )
