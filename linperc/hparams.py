"""hparams.py: Run settings of one experiment and the per-model option parsers.

Every model module registers a function that turns raw command-line options
(strings such as ``--depth 50`` or ``--standardize false``) into typed
constructor keywords for that model.
"""
import os
from argparse import Namespace
from typing import Any, Callable, Dict

from linperc.model.core.base import make_model

OptionParser = Callable[["Hparams", Namespace], None]
PARAM_REGISTRY: Dict[str, OptionParser] = {}


def register_hparams(model_name: str):
    """Register the option parser of ``model_name``."""
    def add(fn: OptionParser) -> OptionParser:
        PARAM_REGISTRY[model_name] = fn
        return fn
    return add


def update_hparams(hp: "Hparams", options: Namespace) -> "Hparams":
    """Fill ``hp.model_params`` from ``options`` with the parser of ``hp.model_name``.

    Raises:
        KeyError: If no parser is registered for the model.
    """
    if hp.model_name not in PARAM_REGISTRY:
        raise KeyError(f"No option parser for model '{hp.model_name}', known: {sorted(PARAM_REGISTRY)}")
    PARAM_REGISTRY[hp.model_name](hp, options)
    return hp


class Hparams:
    """Settings shared by every fold of a run.

    Built from the parsed runner arguments (``model``, ``random_state``,
    ``k_folds``, ``output_dir``, ``result_dir``); without arguments only the
    defaults are set and nothing is created on disk.
    """

    def __init__(self, args: Namespace = None):
        self.model_name = getattr(args, "model", None)
        self.model_class = make_model(self.model_name) if self.model_name else None
        self.model_params: Dict[str, Any] = {}
        self.rs = getattr(args, "random_state", None)
        self.k_folds = int(getattr(args, "k_folds", 5))
        self.dataset_name = None
        self.result_dir = os.path.join(getattr(args, "output_dir", "out"),
                                       getattr(args, "result_dir", "result"))
        if args is not None:
            os.makedirs(self.result_dir, exist_ok=True)

    def get_state(self) -> Dict[str, Any]:
        """What a result file records about the run."""
        return {
            "model": self.model_name,
            "model_params": self.model_params,
            "random_state": self.rs,
            "k_folds": self.k_folds,
            "dataset": self.dataset_name,
        }
