"""Over/underpaid rankings and summary metrics."""

from __future__ import annotations

import numpy as np
import pandas as pd
from numpy.typing import ArrayLike
from sklearn.metrics import mean_absolute_error, mean_squared_error, r2_score

REPORT_COLUMNS = ["player", "salary", "predicted", "difference"]


def salary_report(
    df: pd.DataFrame,
    name_col: str = "Player",
    target_col: str = "Salary",
    pred_col: str = "predicted",
) -> pd.DataFrame:
    """One row per player: actual salary, estimate and salary minus estimate."""
    missing = [c for c in (name_col, target_col, pred_col) if c not in df.columns]
    if missing:
        raise KeyError(f"report needs column(s) {missing}")
    report = pd.DataFrame({
        "player": df[name_col].to_numpy(),
        "salary": df[target_col].astype("float64").to_numpy(),
        "predicted": df[pred_col].astype("float64").to_numpy(),
    })
    report["difference"] = report["salary"] - report["predicted"]
    return report


def most_overpaid(report: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """Largest positive differences first: paid well above their neighbours."""
    return report.sort_values("difference", ascending=False, kind="stable").head(n)


def most_underpaid(report: pd.DataFrame, n: int = 10) -> pd.DataFrame:
    """Most negative differences first: paid well below their neighbours."""
    return report.sort_values("difference", ascending=True, kind="stable").head(n)


def regression_metrics(y_true: ArrayLike, y_pred: ArrayLike) -> dict:
    y_true = np.asarray(y_true, dtype=float)
    y_pred = np.asarray(y_pred, dtype=float)
    mse = float(mean_squared_error(y_true, y_pred))
    return {
        "mae": float(mean_absolute_error(y_true, y_pred)),
        "rmse": float(mse ** 0.5),
        "r2": float(r2_score(y_true, y_pred)),
    }


def _money(value: float) -> str:
    sign = "-" if value < 0 else ""
    return f"{sign}${abs(value):,.0f}"


def format_table(report: pd.DataFrame) -> str:
    shown = report.copy()
    for col in ("salary", "predicted", "difference"):
        if col in shown.columns:
            shown[col] = shown[col].map(_money)
    return shown.to_string(index=False)
