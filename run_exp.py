"""run_exp.py: Command-line entry point of the perceptron experiments.

    python run_exp.py --model enhanced_perceptron --dataset sonar --depth 50
    python run_exp.py --model random_perceptron --dataset data/heart.csv@csv --ensemble_size 101

Options the runner does not define itself (``--depth 50``, ``--standardize false``,
``--label_column target``, ...) are passed on as strings to the model's
registered option parser and to the dataset loader.
"""
import argparse
import importlib
import logging
import os
import pkgutil

import linperc.metric
import linperc.model
from linperc.datasets import DatasetLoader
from linperc.experiment import Experiment
from linperc.hparams import Hparams, update_hparams
from linperc.metric.metric import Metrics
from linperc.model.core.base import MODEL_REGISTRY


def import_plugins(*packages):
    """Import every public submodule so the model and metric decorators register them."""
    for package in packages:
        for info in pkgutil.walk_packages(package.__path__, prefix=package.__name__ + "."):
            if not any(part.startswith("_") for part in info.name.split(".")):
                importlib.import_module(info.name)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Evaluate a perceptron model with outer k-fold cross-validation.")
    parser.add_argument("--model", required=True, choices=sorted(MODEL_REGISTRY))
    parser.add_argument("--dataset", default="sonar",
                        help="OpenML dataset name, 'synthetic', or path/to/file.csv@csv")
    parser.add_argument("--random_state", type=int, default=42)
    parser.add_argument("--k_folds", type=int, default=5, help="Number of outer folds")
    parser.add_argument("--fold", type=int, help="Run only this outer fold")
    parser.add_argument("--output_dir", default="out")
    parser.add_argument("--result_dir", default="result", help="Sub-directory of --output_dir for JSON results")
    parser.add_argument("--config", default="config/default.yaml", help="YAML list of metrics")
    parser.add_argument("--log_level", default="INFO")
    parser.add_argument("--log_file", default="out/log/experiments.log")
    return parser


def model_options(tokens) -> argparse.Namespace:
    """``--key value`` pairs keep the value as a string, a bare ``--flag`` becomes True."""
    options, key = {}, None
    for token in tokens:
        if token.startswith("--"):
            key = token[2:]
            options[key] = True
        elif key is None:
            raise ValueError(f"Unexpected argument {token!r}, expected --key value or --flag")
        else:
            options[key] = token
            key = None
    return argparse.Namespace(**options)


def configure_logging(level: str, log_file: str):
    os.makedirs(os.path.dirname(log_file) or ".", exist_ok=True)
    logging.basicConfig(
        level=level.upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        handlers=[logging.FileHandler(log_file), logging.StreamHandler()],
    )


def main(argv=None):
    import_plugins(linperc.model, linperc.metric)
    args, extra = build_parser().parse_known_args(argv)
    options = model_options(extra)
    configure_logging(args.log_level, args.log_file)

    metrics = Metrics(args.config)
    dataset = DatasetLoader(args.dataset, args.random_state, options)
    hparams = update_hparams(Hparams(args), options)
    hparams.dataset_name = dataset.dataset_name
    logging.getLogger("main").info("%s with %s", hparams.model_name, hparams.model_params)

    Experiment(dataset, hparams, metrics).cross_validate(fold=args.fold)


if __name__ == "__main__":
    main()
