"""Leave-one-out k-NN estimates.

Every row is predicted by a model fitted on all the *other* rows. Refitting
the model on the full table and predicting the same rows would make each
row its own nearest neighbour (distance zero) and return its own target.
"""

import logging

import numpy as np
import pandas as pd
from joblib import Parallel, delayed
from sklearn.neighbors import KNeighborsRegressor

from .errors import InsufficientDataError, InvalidFeatureError
from .features import select_feature_columns
from .knn import KNNRegressor, check_k

logger = logging.getLogger(__name__)


def _scratch_model(k):
    return KNNRegressor(k=k)


def _sklearn_model(k):
    return KNeighborsRegressor(n_neighbors=k, algorithm="brute", metric="euclidean")


BACKENDS = {
    "scratch": _scratch_model,
    "sklearn": _sklearn_model,
}


def resolve_backend(backend):
    """Map a backend name to a model factory; callables pass through."""
    if callable(backend):
        return backend
    try:
        return BACKENDS[backend]
    except KeyError:
        raise ValueError(
            f"unknown backend {backend!r}; expected one of {sorted(BACKENDS)}"
        ) from None


def _as_numeric_matrix(X, what="feature"):
    try:
        arr = np.asarray(X, dtype=float)
    except (TypeError, ValueError) as exc:
        raise InvalidFeatureError(f"non-numeric {what} value: {exc}") from exc
    if not np.all(np.isfinite(arr)):
        bad = np.argwhere(~np.isfinite(arr))
        raise InvalidFeatureError(
            f"missing or non-finite {what} value at position {tuple(bad[0])}"
        )
    return arr


def loo_training_indices(n, i):
    """Positions of the rows used to fit the model that predicts row ``i``."""
    if not 0 <= i < n:
        raise IndexError(f"row {i} out of range for {n} rows")
    return np.delete(np.arange(n), i)


def _predict_one(X, y, i, k, factory):
    train_idx = loo_training_indices(len(X), i)
    model = factory(k)
    model.fit(X[train_idx], y[train_idx])
    return float(np.asarray(model.predict(X[i:i + 1])).ravel()[0])


def leave_one_out_predict(X, y, k, backend="scratch", n_jobs=1):
    """Return one leave-one-out prediction per row, in row order.

    Raises InsufficientDataError when there are not more rows than k and
    InvalidFeatureError when X or y holds a missing or non-numeric value.
    A failure on any single row aborts the whole run.
    """
    k = check_k(k)
    factory = resolve_backend(backend)
    X = _as_numeric_matrix(X)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    y = _as_numeric_matrix(y, what="target").ravel()
    n = len(X)
    if len(y) != n:
        raise ValueError(f"X has {n} rows but y has {len(y)}")
    if n <= k:
        raise InsufficientDataError(
            f"leave-one-out with k={k} needs at least {k + 1} rows, got {n}"
        )

    logger.info("leave-one-out k-NN: n=%d, k=%d, features=%d, n_jobs=%s", n, k, X.shape[1], n_jobs)
    if n_jobs == 1:
        values = [_predict_one(X, y, i, k, factory) for i in range(n)]
    else:
        values = Parallel(n_jobs=n_jobs, prefer="threads")(
            delayed(_predict_one)(X, y, i, k, factory) for i in range(n)
        )

    preds = np.empty(n, dtype=float)
    for i, value in enumerate(values):
        preds[i] = value
    return preds


def in_sample_predict(X, y, k, backend="scratch"):
    """Fit on every row and predict those same rows (self-match included)."""
    k = check_k(k)
    X = _as_numeric_matrix(X)
    if X.ndim == 1:
        X = X.reshape(-1, 1)
    y = _as_numeric_matrix(y, what="target").ravel()
    if len(X) < k:
        raise InsufficientDataError(f"need at least k={k} rows, got {len(X)}")
    model = resolve_backend(backend)(k)
    model.fit(X, y)
    return np.asarray(model.predict(X), dtype=float).ravel()


def loo_knn(df, target_col, k, feature_cols=None, pred_col="predicted", backend="scratch", n_jobs=1):
    """Return a copy of ``df`` with a leave-one-out prediction column.

    ``feature_cols`` defaults to every numeric column except the target and
    an existing ``pred_col``.
    """
    if target_col not in df.columns:
        raise InvalidFeatureError(f"target column {target_col!r} not in table")
    feature_cols = select_feature_columns(
        df, target_col, exclude=(), include=feature_cols, pred_col=pred_col
    )
    if not feature_cols:
        raise InvalidFeatureError("no numeric feature columns to fit on")
    if not pd.api.types.is_numeric_dtype(df[target_col]):
        raise InvalidFeatureError(f"target column {target_col!r} is not numeric")

    preds = leave_one_out_predict(
        df[feature_cols].to_numpy(),
        df[target_col].to_numpy(),
        k=k,
        backend=backend,
        n_jobs=n_jobs,
    )
    out = df.copy()
    out[pred_col] = preds
    return out
