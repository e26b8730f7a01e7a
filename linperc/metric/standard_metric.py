""" standard_metric.py:  Accuracy and misclassification percentage on both parts of a fold. """
from typing import Dict

from sklearn.metrics import accuracy_score

from linperc.metric.base_metrics import BaseMetric, register_metric


@register_metric()
class AccuracyMetric(BaseMetric):
    """
    Fraction of correctly classified samples on the train and test parts.
    """

    NAME = "accuracy"

    def compute(self, predictions, split_data, **params) -> Dict[str, float]:
        train_score = accuracy_score(split_data.y_train, predictions["train"])
        test_score = accuracy_score(split_data.y_test, predictions["test"])
        return {"train_accuracy": train_score, "test_accuracy": test_score}


@register_metric()
class ErrorRateMetric(BaseMetric):
    """
    Misclassification percentage, the figure the perceptron's cross-validation
    uses when it compares update methods.
    """

    NAME = "error_rate"

    def compute(self, predictions, split_data, **params) -> Dict[str, float]:
        train_err = 100.0 * (1.0 - accuracy_score(split_data.y_train, predictions["train"]))
        test_err = 100.0 * (1.0 - accuracy_score(split_data.y_test, predictions["test"]))
        return {"train_error_pct": train_err, "test_error_pct": test_err}
