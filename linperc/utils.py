"""utils.py: General utility functions for models and experiments.

This module provides helpers for random number generation, command-line value
coercion and JSON encoding used throughout the package.
"""
import json
from typing import Optional, Union

import numpy as np

RandomState = Optional[Union[int, np.integer, np.random.Generator]]


def as_generator(random_state: RandomState = None) -> np.random.Generator:
    """Turn a seed or generator into a numpy Generator.

    Args:
        random_state (int | np.random.Generator | None): Seed, existing generator,
            or None for fresh OS entropy.

    Returns:
        np.random.Generator: The generator itself when one is passed, otherwise a
        new generator seeded with ``random_state``.
    """
    if isinstance(random_state, np.random.Generator):
        return random_state
    return np.random.default_rng(random_state)


def str2bool(value) -> bool:
    """Coerce a command-line value into a boolean.

    Flags given without a value arrive as ``True``; values given as
    ``--key value`` arrive as strings.

    Args:
        value (bool | str | int): Raw value.

    Returns:
        bool: Parsed boolean.

    Raises:
        ValueError: If the string is not a recognised boolean literal.
    """
    if isinstance(value, (bool, np.bool_)):
        return bool(value)
    if isinstance(value, (int, np.integer)):
        return bool(value)
    lowered = str(value).strip().lower()
    if lowered in {"1", "true", "yes", "y", "on"}:
        return True
    if lowered in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"Cannot interpret {value!r} as a boolean")


class NumpyEncoder(json.JSONEncoder):
    """JSON encoder for fold results, which mix numpy scalars and arrays.

    Arrays of fewer than 50 values are written out, longer ones only as their
    shape and dtype.
    """

    def default(self, o):
        if isinstance(o, np.ndarray):
            if o.size < 50:
                return o.tolist()
            return f"ARRAY: {o.shape} {o.dtype}"
        if isinstance(o, (np.integer, np.floating)):
            return o.item()
        if isinstance(o, np.bool_):
            return bool(o)
        return super().default(o)
