import numpy as np
import pandas as pd

from .errors import InvalidFeatureError

# row counters and similar identifiers, never used as features
DEFAULT_EXCLUDE = ("Rk",)


def select_feature_columns(df, target_col, exclude=DEFAULT_EXCLUDE, include=None, pred_col=None):
    """
    Numeric columns to measure player similarity on.
    With `include`, exactly those columns are returned (after checking them).
    A `pred_col` left over from an earlier run is never a feature.
    """
    if include is not None:
        feats = list(include)
        if not feats:
            raise InvalidFeatureError("empty feature list")
        missing = [c for c in feats if c not in df.columns]
        if missing:
            raise InvalidFeatureError(f"unknown feature columns: {missing}")
        non_numeric = [c for c in feats if not pd.api.types.is_numeric_dtype(df[c])]
        if non_numeric:
            raise InvalidFeatureError(f"non-numeric feature columns: {non_numeric}")
        if target_col in feats:
            raise InvalidFeatureError(f"target column {target_col!r} listed as a feature")
        if pred_col is not None and pred_col in feats:
            raise InvalidFeatureError(f"prediction column {pred_col!r} listed as a feature")
        return feats

    skip = set(exclude) | {target_col}
    if pred_col is not None:
        skip.add(pred_col)
    feats = []
    for c in df.columns:
        if c in skip:
            continue
        if pd.api.types.is_numeric_dtype(df[c]) and not pd.api.types.is_bool_dtype(df[c]):
            feats.append(c)
    return feats


def fit_standardizer(X_train):
    X_train = np.asarray(X_train, dtype=float)
    mu = X_train.mean(axis=0)
    sigma = X_train.std(axis=0, ddof=0)
    sigma[sigma == 0.0] = 1.0
    return mu, sigma


def apply_standardizer(X, mu, sigma):
    return (np.asarray(X, dtype=float) - mu) / sigma


def standardize_frame(df, cols):
    """Copy of `df` with `cols` z-scored (population std, flat columns left centred)."""
    cols = list(cols)
    out = df.copy()
    if not cols:
        return out
    mu, sigma = fit_standardizer(df[cols].to_numpy())
    out[cols] = apply_standardizer(df[cols].to_numpy(), mu, sigma)
    return out
