from argparse import Namespace

import pytest

from linperc.hparams import Hparams, update_hparams
from linperc.model.core.config import UpdateMethod
from linperc.model.ensemble.random_subspace import RandomSubspacePerceptron
from linperc.model.standard.perceptron import EnhancedPerceptron, Perceptron


def make_args(tmp_path, model):
    return Namespace(model=model, random_state=3, k_folds=3,
                     output_dir=str(tmp_path / "out"), result_dir="result")


def parsed(tmp_path, model, **options):
    return update_hparams(Hparams(make_args(tmp_path, model)), Namespace(**options))


def test_defaults_without_args(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    hp = Hparams()
    assert hp.model_name is None
    assert hp.k_folds == 5
    assert hp.model_params == {}
    assert not (tmp_path / "out").exists()


def test_creates_result_dir(tmp_path):
    hp = Hparams(make_args(tmp_path, "perceptron"))
    assert (tmp_path / "out" / "result").is_dir()
    assert hp.model_class is Perceptron
    assert hp.get_state()["random_state"] == 3


def test_simple_options_from_strings(tmp_path):
    hp = parsed(tmp_path, "perceptron", depth="50", randomize_weights="false",
                weight_fill_value="0.5", bias="-1")
    params = hp.model_params
    assert params["depth"] == 50
    assert params["randomize_weights"] is False
    assert params["weight_fill_value"] == 0.5
    assert params["bias"] == -1.0
    assert params["update_method"] is UpdateMethod.ONLINE
    assert params["random_state"] == 3
    assert hp.model_class(**params).config.depth == 50


def test_enhanced_options(tmp_path):
    hp = parsed(tmp_path, "enhanced_perceptron", standardize="no")
    assert hp.model_class is EnhancedPerceptron
    assert hp.model_params["update_method"] is UpdateMethod.OFFLINE
    assert hp.model_params["use_cross_validation"] is True
    assert hp.model_params["standardize"] is False


def test_ensemble_options(tmp_path):
    hp = parsed(tmp_path, "random_perceptron", ensemble_size="9", subset_size="auto",
                enhanced_members=True)
    params = hp.model_params
    assert params["ensemble_size"] == 9
    assert params["subset_size"] is None
    assert params["enhanced_members"] is True
    assert params["standardize"] is True
    model = hp.model_class(**params)
    assert isinstance(model, RandomSubspacePerceptron)
    assert model.config.member_config().update_method is UpdateMethod.OFFLINE
    assert model.config.member_config().use_cross_validation


def test_ensemble_defaults(tmp_path):
    params = parsed(tmp_path, "random_perceptron").model_params
    assert params["ensemble_size"] == 500
    assert params["enhanced_members"] is False
    model = RandomSubspacePerceptron(**params)
    assert model.config.member_config().update_method is UpdateMethod.ONLINE


def test_unknown_model(tmp_path):
    with pytest.raises(KeyError):
        Hparams(make_args(tmp_path, "svm"))
