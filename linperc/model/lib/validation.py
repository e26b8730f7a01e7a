"""validation.py: Input checks performed before a perceptron is trained."""
import numpy as np
import pandas as pd
from numpy.typing import ArrayLike

from linperc.errors import ValidationError

_NUMERIC_INFERRED = {"integer", "floating", "mixed-integer-float", "decimal", "empty"}


def _is_numeric_column(col: pd.Series) -> bool:
    if pd.api.types.is_bool_dtype(col):
        return False
    if pd.api.types.is_numeric_dtype(col):
        return True
    if col.dtype == object:
        return pd.api.types.infer_dtype(col, skipna=False) in _NUMERIC_INFERRED
    return False


def check_attributes(X: ArrayLike) -> None:
    """Verify that every feature column is numeric.

    Args:
        X (ArrayLike): Feature matrix (ndarray, DataFrame or nested sequence)
            without the label column.

    Raises:
        ValidationError: Naming the index of the first non-numeric column.
    """
    if isinstance(X, np.ndarray) and X.dtype != np.bool_ and np.issubdtype(X.dtype, np.number):
        return
    frame = X if isinstance(X, pd.DataFrame) else pd.DataFrame(np.asarray(X, dtype=object))
    for idx in range(frame.shape[1]):
        if not _is_numeric_column(frame.iloc[:, idx]):
            raise ValidationError(
                f"Attributes must be continuous: column {idx} ({frame.columns[idx]!r}) is not numeric",
                column=idx,
            )


def check_labels(y: ArrayLike) -> np.ndarray:
    """Return the labels as an int array, rejecting anything outside {0, 1}.

    Raises:
        ValidationError: If a label is not 0 or 1.
    """
    y = np.asarray(y)
    if y.ndim != 1:
        raise ValidationError(f"Labels must be one-dimensional, got shape {y.shape}")
    uniq = set(np.unique(y).tolist())
    if not uniq <= {0, 1}:
        raise ValidationError(f"Need binary classification with labels {{0,1}}, got {sorted(uniq, key=str)}")
    return y.astype(np.int64)


def as_feature_matrix(X: ArrayLike) -> np.ndarray:
    """Convert a feature matrix to a float64 2-D array (always a copy)."""
    X = np.array(X, dtype=np.float64)
    if X.ndim == 1:
        X = X.reshape(1, -1)
    if X.ndim != 2:
        raise ValueError(f"Expected a 2-D feature matrix, got shape {X.shape}")
    return X
