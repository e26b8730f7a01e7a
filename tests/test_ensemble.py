import numpy as np
import pytest

from linperc.errors import ConfigurationError, ValidationError
from linperc.model.core.base import make_model
from linperc.model.core.config import UpdateMethod
from linperc.model.ensemble.random_subspace import (RandomSubspacePerceptron,
                                                    default_subset_size,
                                                    draw_feature_subset)


@pytest.mark.parametrize("n_features, expected", [(1, 1), (2, 1), (6, 2), (7, 3), (10, 3), (100, 10)])
def test_default_subset_size(n_features, expected):
    assert default_subset_size(n_features) == expected


def test_draw_feature_subset_properties(rng):
    for _ in range(20):
        subset = draw_feature_subset(10, 4, rng)
        assert subset.tolist() == sorted(set(subset.tolist()))
        assert len(subset) == 4
        assert subset.min() >= 0 and subset.max() < 10
    np.testing.assert_array_equal(draw_feature_subset(5, 5, rng), np.arange(5))


@pytest.mark.parametrize("size", [0, 6])
def test_draw_feature_subset_bounds(rng, size):
    with pytest.raises(ConfigurationError):
        draw_feature_subset(5, size, rng)


def test_registered():
    assert make_model("random_perceptron") is RandomSubspacePerceptron


def test_fit_builds_members(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=7, random_state=0).fit(X, y)
    assert ens.is_trained
    assert len(ens.estimators_) == 7
    assert len(ens.member_seeds_) == 7
    for member, subset in zip(ens.estimators_, ens.feature_subsets_):
        assert len(subset) == 3
        np.testing.assert_array_equal(member.model_.feature_subset, subset)
        assert not member.config.check_attributes
        assert not member.config.standardize
        assert member.update_method_ is UpdateMethod.ONLINE
        assert member.model_.cross_validation is None


def test_members_reproducible_from_seed(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=3, random_state=4).fit(X, y)
    rng = np.random.default_rng(int(ens.member_seeds_[1]))
    np.testing.assert_array_equal(draw_feature_subset(10, 3, rng), ens.feature_subsets_[1])


def test_same_seed_same_ensemble(wide):
    X, y = wide
    a = RandomSubspacePerceptron(ensemble_size=5, random_state=3).fit(X, y)
    b = RandomSubspacePerceptron(ensemble_size=5, random_state=3).fit(X, y)
    for sa, sb in zip(a.feature_subsets_, b.feature_subsets_):
        np.testing.assert_array_equal(sa, sb)
    np.testing.assert_array_equal(a.predict(X), b.predict(X))


def test_vote_matches_member_tally(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=3, standardize=False, random_state=1).fit(X, y)
    member_preds = np.array([m.predict(X) for m in ens.estimators_])
    votes = ens.vote(X)
    np.testing.assert_array_equal(votes[:, 1], member_preds.sum(axis=0))
    np.testing.assert_array_equal(votes.sum(axis=1), np.full(len(X), 3))
    expected = (member_preds.sum(axis=0) >= 2).astype(int)
    np.testing.assert_array_equal(ens.predict(X), expected)


def test_tie_goes_to_one(wide, monkeypatch):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=2, random_state=0).fit(X, y)
    monkeypatch.setattr(ens, "member_predictions", lambda _X: np.array([[0, 0, 1], [1, 0, 1]]))
    np.testing.assert_array_equal(ens.predict(X[:3]), [1, 0, 1])


def test_standardizes_once_and_at_predict(wide):
    X, y = wide
    X = X * 100.0 + 50.0
    ens = RandomSubspacePerceptron(ensemble_size=3, random_state=2).fit(X, y)
    assert ens.standardization_ is not None
    Xt = ens.transform(X)
    np.testing.assert_allclose(Xt.mean(axis=0), 0.0, atol=1e-10)
    # members see the standardized matrix
    member = ens.estimators_[0]
    np.testing.assert_array_equal(
        ens.member_predictions(X)[0], member.predict(Xt)
    )


def test_ensemble_learns(separable):
    X, y = separable
    # one feature per member, each feature alone separates the clusters
    ens = RandomSubspacePerceptron(ensemble_size=11, depth=50, random_state=0).fit(X, y)
    assert all(len(s) == 1 for s in ens.feature_subsets_)
    assert ens.score(X, y) >= 0.95


def test_enhanced_members(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=3, enhanced_members=True,
                                   update_method="offline", use_cross_validation=True,
                                   folds=3, random_state=0).fit(X, y)
    for member in ens.estimators_:
        assert member.config.use_cross_validation
        assert member.config.folds == 3
        assert len(member.model_.cross_validation.online_errors) == 3
        assert not member.config.standardize


def test_explicit_subset_size(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=2, subset_size=10, random_state=0).fit(X, y)
    for subset in ens.feature_subsets_:
        np.testing.assert_array_equal(subset, np.arange(10))


def test_subset_size_too_large(wide):
    X, y = wide
    with pytest.raises(ConfigurationError):
        RandomSubspacePerceptron(ensemble_size=2, subset_size=11).fit(X, y)


def test_ensemble_size_must_exceed_one():
    with pytest.raises(ConfigurationError):
        RandomSubspacePerceptron(ensemble_size=1)


def test_validates_once():
    with pytest.raises(ValidationError):
        RandomSubspacePerceptron(ensemble_size=2).fit([[1.0, "x"], [2.0, "y"]], [0, 1])


def test_predict_before_fit():
    with pytest.raises(RuntimeError):
        RandomSubspacePerceptron(ensemble_size=2).predict([[1.0]])


def test_wrong_width_at_predict(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=2, random_state=0).fit(X, y)
    with pytest.raises(ValueError):
        ens.predict(X[:, :4])


def test_enhanced_members_default_to_cross_validation(wide):
    X, y = wide
    ens = RandomSubspacePerceptron(ensemble_size=3, enhanced_members=True, random_state=0)
    assert ens.config.member_config().update_method is UpdateMethod.OFFLINE
    assert ens.config.member_config().use_cross_validation
    ens.fit(X, y)
    for member in ens.estimators_:
        assert member.config.use_cross_validation
        assert len(member.model_.cross_validation.online_errors) == 4
