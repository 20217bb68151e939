"""Tests for the CLI entry point."""

import os

import pytest
import yaml
from click.testing import CliRunner

from finplan.core.cli import main


@pytest.fixture
def run(tmp_dir, monkeypatch):
    """Invoke the CLI with an isolated config file and a wide console."""
    monkeypatch.setenv("COLUMNS", "200")
    config_path = os.path.join(tmp_dir, "config.yaml")

    def _run(*args):
        return CliRunner().invoke(main, ["--config", config_path, *args])

    return _run


class TestCliGroup:
    def test_help(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--help"])
        assert result.exit_code == 0
        assert "financial future" in result.output
        assert "forecast" in result.output
        assert "validate" in result.output
        assert "accounts" in result.output

    def test_version(self):
        runner = CliRunner()
        result = runner.invoke(main, ["--version"])
        assert result.exit_code == 0
        assert "0.1.0" in result.output


class TestForecastCommand:
    def test_forecast_help(self):
        result = CliRunner().invoke(main, ["forecast", "--help"])
        assert result.exit_code == 0
        assert "YEARS" in result.output

    def test_forecast_table(self, run, plan_file):
        result = run("-f", plan_file, "forecast", "3", "--start-year", "2026", "--today", "2025-01-01")
        assert result.exit_code == 0, result.output
        for year in ("2026-01-01", "2027-01-01", "2028-01-01"):
            assert year in result.output
        assert "assets:savings" in result.output
        assert "income:salary" not in result.output
        assert "equity:interest" not in result.output

    def test_forecast_years_from_config(self, run, plan_file, monkeypatch):
        monkeypatch.setenv("FINPLAN_FORECAST__YEARS", "2")
        result = run("-f", plan_file, "forecast", "--start-year", "2030")
        assert result.exit_code == 0, result.output
        assert "2031-01-01" in result.output
        assert "2032-01-01" not in result.output

    def test_forecast_missing_plan(self, run, tmp_dir):
        result = run("-f", os.path.join(tmp_dir, "missing.yaml"), "forecast", "1")
        assert result.exit_code == 1
        assert "plan file not found" in result.output

    def test_forecast_failing_simulation(self, run, tmp_dir):
        path = os.path.join(tmp_dir, "bad.yaml")
        with open(path, "w") as f:
            yaml.safe_dump(
                {
                    "accounts": {"cash": {"amount": 10}, "total": {"expression": "cash"}},
                    "rules": {"oops": {"type": "transfer", "amount": 1, "from": "cash", "to": "total"}},
                },
                f,
            )
        result = run("-f", path, "forecast", "1", "--today", "2020-01-01", "--start-year", "2021")
        assert result.exit_code == 1
        assert "simulation failed" in result.output


class TestValidateCommand:
    def test_validate(self, run, plan_file):
        result = run("-f", plan_file, "validate")
        assert result.exit_code == 0, result.output
        assert "4 accounts" in result.output
        assert "2 transfer rules, 1 interest rules" in result.output

    def test_validate_warns_on_missing_references(self, run, tmp_dir):
        path = os.path.join(tmp_dir, "plan.yaml")
        with open(path, "w") as f:
            yaml.safe_dump({"accounts": {"net": {"expression": "assets - debts"}}}, f)
        result = run("-f", path, "validate")
        assert result.exit_code == 0
        assert "net refers to missing accounts: assets, debts" in result.output

    def test_validate_invalid_plan(self, run, tmp_dir):
        path = os.path.join(tmp_dir, "plan.yaml")
        with open(path, "w") as f:
            yaml.safe_dump({"rules": {"r": {"type": "bogus"}}}, f)
        result = run("-f", path, "validate")
        assert result.exit_code == 1
        assert "invalid plan" in result.output


class TestAccountsCommand:
    def test_accounts(self, run, plan_file):
        result = run("-f", plan_file, "accounts")
        assert result.exit_code == 0, result.output
        assert "assets:bank" in result.output
        assert "$5000.00" in result.output
        assert "assets + liabilities" in result.output
