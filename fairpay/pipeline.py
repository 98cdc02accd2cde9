"""Load -> standardise -> leave-one-out k-NN -> rankings."""

import logging
from dataclasses import dataclass
from pathlib import Path

import pandas as pd

from .data import load_dataset
from .features import select_feature_columns, standardize_frame
from .loo import in_sample_predict, loo_knn
from .report import most_overpaid, most_underpaid, regression_metrics, salary_report

logger = logging.getLogger(__name__)


@dataclass
class AnalysisResult:
    table: pd.DataFrame
    report: pd.DataFrame
    overpaid: pd.DataFrame
    underpaid: pd.DataFrame
    metrics: dict
    in_sample_metrics: dict
    features: list[str]


def analyze_table(df, cfg):
    """Run the estimate on an already joined and cleaned table."""
    feats = select_feature_columns(
        df, cfg.salary_col, exclude=cfg.exclude, include=cfg.features, pred_col=cfg.pred_col
    )
    logger.info("using %d features: %s", len(feats), ", ".join(feats))
    model_df = standardize_frame(df, feats) if cfg.standardize else df

    scored = loo_knn(
        model_df,
        target_col=cfg.salary_col,
        k=cfg.k,
        feature_cols=feats,
        pred_col=cfg.pred_col,
        backend=cfg.backend,
        n_jobs=cfg.n_jobs,
    )
    # keep the caller's unscaled feature values in the output table
    table = df.copy()
    table[cfg.pred_col] = scored[cfg.pred_col].to_numpy()

    y = table[cfg.salary_col].to_numpy(dtype=float)
    in_sample = in_sample_predict(model_df[feats].to_numpy(), y, k=cfg.k, backend=cfg.backend)

    report = salary_report(table, name_col=cfg.player_col, target_col=cfg.salary_col, pred_col=cfg.pred_col)
    return AnalysisResult(
        table=table,
        report=report,
        overpaid=most_overpaid(report, cfg.top_n),
        underpaid=most_underpaid(report, cfg.top_n),
        metrics=regression_metrics(y, table[cfg.pred_col].to_numpy()),
        in_sample_metrics=regression_metrics(y, in_sample),
        features=feats,
    )


def run_analysis(per_game_path, advanced_path, salaries_path, cfg):
    logger.info("config: %s", cfg.to_dict())
    df = load_dataset(
        per_game_path,
        advanced_path,
        salaries_path,
        key=cfg.player_col,
        salary_col=cfg.salary_col,
    )
    return analyze_table(df, cfg)


def save_outputs(result, outdir):
    outdir = Path(outdir)
    outdir.mkdir(parents=True, exist_ok=True)
    paths = {
        "predictions": outdir / "predictions_loo_knn.csv",
        "overpaid": outdir / "overpaid.csv",
        "underpaid": outdir / "underpaid.csv",
    }
    result.table.to_csv(paths["predictions"], index=False)
    result.overpaid.to_csv(paths["overpaid"], index=False)
    result.underpaid.to_csv(paths["underpaid"], index=False)
    return paths
