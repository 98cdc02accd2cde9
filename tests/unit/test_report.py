"""
Unit tests for the over/underpaid report
"""
import pandas as pd
import pytest

from fairpay.report import (
    REPORT_COLUMNS,
    format_table,
    most_overpaid,
    most_underpaid,
    regression_metrics,
    salary_report,
)


@pytest.fixture
def scored():
    return pd.DataFrame({
        "Player": ["A", "B", "C", "D"],
        "Salary": [10_000_000.0, 2_000_000.0, 5_000_000.0, 7_000_000.0],
        "predicted": [4_000_000.0, 6_000_000.0, 5_000_000.0, 6_000_000.0],
    })


class TestSalaryReport:
    def test_difference_is_salary_minus_estimate(self, scored):
        report = salary_report(scored)
        assert list(report.columns) == REPORT_COLUMNS
        assert report["difference"].tolist() == [6_000_000.0, -4_000_000.0, 0.0, 1_000_000.0]

    def test_missing_column(self, scored):
        with pytest.raises(KeyError):
            salary_report(scored, pred_col="fair")

    def test_overpaid_descending(self, scored):
        top = most_overpaid(salary_report(scored), n=2)
        assert top["player"].tolist() == ["A", "D"]

    def test_underpaid_ascending(self, scored):
        top = most_underpaid(salary_report(scored), n=3)
        assert top["player"].tolist() == ["B", "C", "D"]

    def test_n_larger_than_table(self, scored):
        assert len(most_overpaid(salary_report(scored), n=50)) == 4


class TestMetrics:
    def test_perfect_predictions(self):
        m = regression_metrics([1.0, 2.0, 3.0], [1.0, 2.0, 3.0])
        assert m == {"mae": 0.0, "rmse": 0.0, "r2": 1.0}

    def test_errors(self):
        m = regression_metrics([0.0, 0.0, 6.0], [1.0, -1.0, 6.0])
        assert m["mae"] == pytest.approx(2.0 / 3.0)
        assert m["rmse"] == pytest.approx((2.0 / 3.0) ** 0.5)


class TestFormatTable:
    def test_money_formatting(self, scored):
        text = format_table(salary_report(scored).head(2))
        assert "$10,000,000" in text
        assert "-$4,000,000" in text
        assert "player" in text
