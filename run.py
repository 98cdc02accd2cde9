# run.py
import argparse
import logging
import sys

from fairpay.config import AnalysisConfig
from fairpay.errors import DataFormatError, InsufficientDataError, InvalidFeatureError
from fairpay.loo import BACKENDS
from fairpay.pipeline import run_analysis, save_outputs
from fairpay.report import format_table


def parse_list(list_str):
    return [x.strip() for x in list_str.split(",") if x.strip()]


def build_parser():
    ap = argparse.ArgumentParser(
        description="Leave-one-out k-NN salary estimates and over/underpaid rankings."
    )
    ap.add_argument("--per-game", required=True, help="Path to per-game stats CSV")
    ap.add_argument("--advanced", required=True, help="Path to advanced stats CSV")
    ap.add_argument("--salaries", required=True, help="Path to salaries CSV")
    ap.add_argument("--k", type=int, required=True, help="Number of neighbours (fixed, not tuned)")
    ap.add_argument("--top-n", type=int, default=10)
    ap.add_argument("--backend", choices=sorted(BACKENDS), default="scratch")
    ap.add_argument("--n-jobs", type=int, default=1, help="Parallel leave-one-out fits (-1 = all cores)")
    ap.add_argument("--features", type=str, help="comma-separated feature columns (default: all numeric)")
    ap.add_argument("--player-col", type=str, default="Player")
    ap.add_argument("--salary-col", type=str, default="Salary")
    ap.add_argument("--no-standardize", action="store_true")
    ap.add_argument("--outdir", type=str, default="results")
    ap.add_argument("--verbose", action="store_true")
    return ap


def print_metrics(label, metrics):
    print(f"{label} MAE : {metrics['mae']:,.0f}")
    print(f"{label} RMSE: {metrics['rmse']:,.0f}")
    print(f"{label} R^2 : {metrics['r2']:,.4f}")


def main(argv=None):
    ap = build_parser()
    args = ap.parse_args(argv)

    # Basic arg checks
    if args.k < 1:
        ap.error("--k must be a positive integer")
    if args.top_n < 1:
        ap.error("--top-n must be a positive integer")
    if args.n_jobs == 0:
        ap.error("--n-jobs must be non-zero")
    features = parse_list(args.features) if args.features is not None else None
    if features is not None and not features:
        ap.error("--features needs at least one column name")

    logging.basicConfig(
        level=logging.INFO if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    cfg = AnalysisConfig(
        k=args.k,
        player_col=args.player_col,
        salary_col=args.salary_col,
        top_n=args.top_n,
        backend=args.backend,
        n_jobs=args.n_jobs,
        standardize=not args.no_standardize,
        features=features,
        outdir=args.outdir,
    )

    print(f"\n[run.py] Leave-one-out k-NN (k={cfg.k}, backend={cfg.backend})...")
    try:
        result = run_analysis(args.per_game, args.advanced, args.salaries, cfg)
    except (DataFormatError, InsufficientDataError, InvalidFeatureError) as exc:
        print(f"[run.py] error: {exc}", file=sys.stderr)
        return 1

    print(f"[run.py] {len(result.report)} players, {len(result.features)} features")
    print_metrics("Leave-one-out", result.metrics)
    print_metrics("In-sample    ", result.in_sample_metrics)

    print(f"\n[run.py] Top {cfg.top_n} overpaid (salary above estimate)")
    print(format_table(result.overpaid))
    print(f"\n[run.py] Top {cfg.top_n} underpaid (salary below estimate)")
    print(format_table(result.underpaid))

    paths = save_outputs(result, cfg.outdir)
    for name, path in paths.items():
        print(f"[run.py] Saved {name} → {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
