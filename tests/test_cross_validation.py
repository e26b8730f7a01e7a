import numpy as np
import pytest

from linperc.errors import ConfigurationError
from linperc.model.core.config import UpdateMethod
from linperc.model.lib.cross_validation import (CrossValidator, error_percentage,
                                                select_update_method)
from linperc.model.lib.trainer import PerceptronTrainer
from linperc.model.lib.weights import WeightInitializer


def make_validator(fill, folds=2, depth=1):
    return CrossValidator(folds, PerceptronTrainer(depth=depth),
                          WeightInitializer(randomize=False, fill_value=fill))


def test_select_update_method_rule():
    assert select_update_method(30.0, 20.0) is UpdateMethod.OFFLINE
    assert select_update_method(20.0, 30.0) is UpdateMethod.ONLINE
    assert select_update_method(25.0, 25.0) is UpdateMethod.ONLINE


def test_error_percentage():
    X = np.array([[1.0], [-1.0], [2.0], [-3.0]])
    y = np.array([1, 1, 1, 0])
    assert error_percentage(X, y, np.array([1.0]), 0.0) == 25.0


def test_folds_are_contiguous():
    splits = list(make_validator(0.0, folds=3).split(7))
    assert len(splits) == 3
    tests = [te.tolist() for _, te in splits]
    assert tests == [[0, 1, 2], [3, 4], [5, 6]]


def test_offline_selected(offline_wins):
    X, y = offline_wins
    result = make_validator(0.0).evaluate(X, y)
    assert result.online_errors == (100.0, 50.0)
    assert result.offline_errors == (0.0, 50.0)
    assert result.online_error == 75.0
    assert result.offline_error == 25.0
    assert result.selected is UpdateMethod.OFFLINE


def test_online_selected(online_wins):
    X, y = online_wins
    result = make_validator(1.0).evaluate(X, y)
    assert result.online_errors == (0.0, 0.0)
    assert result.offline_errors == (50.0, 0.0)
    assert make_validator(1.0).select(X, y) is UpdateMethod.ONLINE


def test_tie_keeps_online(cv_tie):
    X, y = cv_tie
    result = make_validator(0.0).evaluate(X, y)
    assert result.online_error == result.offline_error == 0.0
    assert result.selected is UpdateMethod.ONLINE


def test_too_few_samples():
    with pytest.raises(ConfigurationError):
        make_validator(0.0, folds=4).evaluate(np.ones((3, 1)), np.array([0, 1, 0]))


def test_folds_below_two():
    with pytest.raises(ConfigurationError):
        make_validator(0.0, folds=1)


def test_random_starts_drawn_per_fold(wide):
    X, y = wide
    validator = CrossValidator(4, PerceptronTrainer(depth=3), WeightInitializer())
    a = validator.evaluate(X, y, np.random.default_rng(5))
    b = validator.evaluate(X, y, np.random.default_rng(5))
    assert a == b
    assert len(a.online_errors) == 4


def test_offline_selected_on_noisy_clusters(outliers_last):
    # from inverted weights every clean sample is an offline mistake, the outliers are not
    X, y = outliers_last
    result = make_validator(-1.0, folds=4).evaluate(X, y)
    assert len(result.offline_errors) == 4
    assert result.offline_error < 15.0
    assert result.online_error > 50.0
    assert result.selected is UpdateMethod.OFFLINE


def test_online_selected_on_noisy_clusters(outliers_first):
    # offline sums three outlier updates, online works them off within the block
    X, y = outliers_first
    result = make_validator(1.0, folds=4).evaluate(X, y)
    assert result.offline_error > 50.0
    assert result.online_error < result.offline_error
    assert result.selected is UpdateMethod.ONLINE
