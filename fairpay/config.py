"""Settings for one salary analysis run."""

from dataclasses import asdict, dataclass, field
from typing import Optional

from .features import DEFAULT_EXCLUDE
from .knn import check_k
from .loo import BACKENDS


@dataclass
class AnalysisConfig:
    """Column names and k-NN settings.

    ``k`` has no default: it is chosen by judgement and never tuned against
    the salaries being estimated.
    """

    k: int
    player_col: str = "Player"
    salary_col: str = "Salary"
    pred_col: str = "predicted"
    top_n: int = 10
    backend: str = "scratch"
    n_jobs: Optional[int] = 1
    standardize: bool = True
    features: Optional[list[str]] = None
    exclude: tuple[str, ...] = field(default=DEFAULT_EXCLUDE)
    outdir: str = "results"

    def __post_init__(self) -> None:
        self.k = check_k(self.k)
        if isinstance(self.top_n, bool) or not isinstance(self.top_n, int) or self.top_n < 1:
            raise ValueError(f"top_n must be a positive integer, got {self.top_n!r}")
        if self.backend not in BACKENDS:
            raise ValueError(f"backend must be one of {sorted(BACKENDS)}, got {self.backend!r}")
        self.exclude = tuple(self.exclude)

    def to_dict(self) -> dict:
        return asdict(self)
