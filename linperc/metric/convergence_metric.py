""" convergence_metric.py:  Training diagnostics of perceptron models. """
from typing import Any, Dict

import numpy as np

from linperc.metric.base_metrics import BaseMetric, register_metric
from linperc.model.ensemble.random_subspace import RandomSubspacePerceptron
from linperc.model.standard.perceptron import Perceptron


@register_metric()
class ConvergenceMetric(BaseMetric):
    """
    Reports how training ended. For a single perceptron: epochs, terminal state,
    the update method used and the cross-validation errors when they were
    computed. For an ensemble: the fraction of members that converged, their
    mean epoch count and how many of them trained offline.
    """

    NAME = "convergence"

    def compute(self, predictions, split_data, **params) -> Dict[str, Any]:
        model = predictions["model"]
        if isinstance(model, Perceptron):
            return self._single(model)
        if isinstance(model, RandomSubspacePerceptron):
            return self._ensemble(model)
        raise TypeError(f"Convergence metric does not support {type(model).__name__}")

    @staticmethod
    def _single(model: Perceptron) -> Dict[str, Any]:
        fitted = model.model_
        result = {
            "epochs": fitted.training.epochs,
            "converged": fitted.training.converged,
            "state": fitted.training.state.value,
            "update_method": fitted.update_method.value,
            "mistakes_per_epoch": np.array(fitted.training.mistakes),
        }
        if fitted.cross_validation is not None:
            result["cv_online_error_pct"] = fitted.cross_validation.online_error
            result["cv_offline_error_pct"] = fitted.cross_validation.offline_error
        return result

    @staticmethod
    def _ensemble(model: RandomSubspacePerceptron) -> Dict[str, Any]:
        trainings = [member.model_.training for member in model.estimators_]
        return {
            "ensemble_size": len(trainings),
            "converged_fraction": float(np.mean([t.converged for t in trainings])),
            "mean_epochs": float(np.mean([t.epochs for t in trainings])),
            "offline_members": int(sum(t.method.value == "offline" for t in trainings)),
        }
