"""Tests for the icofr-rules command line."""
from __future__ import annotations

import json
import os
import subprocess
import sys
from pathlib import Path

import pytest

from icofr.cli import build_parser, main


def run_json(capsys: pytest.CaptureFixture, argv: list[str]) -> dict:
    code = main(argv)
    assert code == 0
    return json.loads(capsys.readouterr().out)


class TestParser:
    def test_parser_builds(self):
        args = build_parser().parse_args(["sample", "--frequency", "Daily", "--risk", "High"])
        assert args.command == "sample"
        assert args.nature == "Manual"
        assert args.output_path == ""
        assert args.dotenv_path == ".env"

    def test_materiality_defaults_left_to_config(self):
        """Materiality defaults are read from config when the command runs."""
        args = build_parser().parse_args(["materiality", "--value", "1000"])
        assert args.percentage is None
        assert args.haircut is None
        assert args.location_count is None
        assert args.benchmark is None

    def test_invalid_choice_exits(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["sample", "--frequency", "Hourly", "--risk", "High"])


class TestCommands:
    def test_risk(self, capsys):
        payload = run_json(capsys, ["risk", "--quantitative", "High", "--qualitative", "Low"])
        assert payload["result"] == "Medium"

    def test_risk_from_factors(self, capsys):
        payload = run_json(
            capsys,
            ["risk", "--quantitative", "Medium", "--factor", "fraud_risk", "--factor", "high_judgement",
             "--factor", "accounting_estimates"],
        )
        assert payload["inputs"]["qualitative"] == "Medium"
        assert payload["result"] == "Medium"

    def test_qualitative(self, capsys):
        payload = run_json(capsys, ["qualitative"])
        assert payload["result"] == "Low"

    def test_haircut(self, capsys):
        payload = run_json(
            capsys,
            ["haircut", "--factor", "past_adjustments", "--factor", "complex_operations",
             "--factor", "significant_changes"],
        )
        assert payload["result"] == {"haircut": 75, "risk": "High"}

    def test_sample_automated(self, capsys):
        payload = run_json(capsys, ["sample", "--frequency", "Daily", "--risk", "High", "--nature", "Automated"])
        assert payload["result"]["label"] == "1 (Test of One)"

    def test_remediation(self, capsys):
        payload = run_json(
            capsys,
            ["remediation", "--frequency", "Monthly", "--remediated-at", "2024-01-01T00:00:00",
             "--now", "2024-03-01T00:00:00"],
        )
        assert payload["result"]["is_ready"] is False
        assert payload["result"]["elapsed_days"] == 60.0

    def test_materiality_uses_config_defaults(self, capsys):
        payload = run_json(capsys, ["materiality", "--value", "1000000"])
        assert payload["inputs"]["percentage"] == 5.0
        assert payload["inputs"]["haircut"] == 25.0
        assert payload["inputs"]["benchmark"] == "Pre-Tax Income"
        assert payload["result"]["performance_materiality"] == pytest.approx(37_500)

    def test_qualitative_with_factors(self, capsys):
        payload = run_json(
            capsys,
            ["qualitative", "--factor", "fraud_risk", "--factor", "high_judgement", "--factor", "prior_deficiencies"],
        )
        assert payload["result"] == "Medium"
        assert payload["inputs"]["factors"] == {
            "fraud_risk": True,
            "high_judgement": True,
            "prior_deficiencies": True,
        }

    def test_materiality(self, capsys):
        payload = run_json(capsys, ["materiality", "--value", "1000000", "--locations", "2", "--haircut", "0"])
        result = payload["result"]
        assert result["overall_materiality"] == pytest.approx(75_000)
        assert result["performance_materiality"] == result["overall_materiality"]

    def test_dod(self, capsys):
        payload = run_json(capsys, ["dod", "--answer", "1=no", "--answer", "4=no"])
        assert payload["result"]["severity"] == "Control Deficiency"
        assert payload["result"]["distribution"] == ["Process Owner"]

    def test_distribution(self, capsys):
        payload = run_json(capsys, ["distribution", "--severity", "Significant Deficiency"])
        assert "Audit Committee" in payload["result"]

    def test_itgc(self, capsys):
        payload = run_json(capsys, ["itgc", "--cobit-id", "DSS03", "--area", "Program Changes"])
        assert payload["result"]["consistent"] is False

    def test_suggest_control(self, capsys):
        payload = run_json(capsys, ["suggest-control", "--principle", "99"])
        assert payload["result"]["name"] == "Transaction Authorization"

    def test_scope_accounts(self, capsys, tmp_path: Path):
        accounts = tmp_path / "accounts.json"
        accounts.write_text(
            json.dumps([{"name": "Revenue", "balance": 500}, {"name": "Cash", "balance": 5}]),
            encoding="utf-8",
        )
        code = main(["scope-accounts", "--accounts", str(accounts), "--pm", "100"])
        assert code == 0
        decisions = json.loads(capsys.readouterr().out)
        assert [d["significant"] for d in decisions] == [True, False]

    def test_output_file(self, tmp_path: Path):
        out_path = tmp_path / "nested" / "out.json"
        code = main(["distribution", "--severity", "Material Weakness", "--output", str(out_path)])
        assert code == 0
        assert json.loads(out_path.read_text(encoding="utf-8"))["inputs"]["severity"] == "Material Weakness"


class TestErrors:
    def test_incomplete_dod_returns_error_code(self, capsys):
        code = main(["dod", "--answer", "1=yes"])
        assert code == 1
        assert "not complete" in capsys.readouterr().err

    def test_bad_dod_answer(self, capsys):
        code = main(["dod", "--answer", "1=maybe"])
        assert code == 1
        assert "Invalid input" in capsys.readouterr().err

    def test_range_error(self, capsys):
        code = main(["materiality", "--value", "100", "--percentage", "120"])
        assert code == 1
        assert "percentage out of range" in capsys.readouterr().err

    def test_risk_rating_with_factors_rejected(self, capsys):
        code = main(["risk", "--quantitative", "High", "--qualitative", "Low", "--factor", "fraud_risk"])
        assert code == 1
        assert "not both" in capsys.readouterr().err

    def test_duplicate_dod_answer_rejected(self, capsys):
        code = main(["dod", "--answer", "1=no", "--answer", "1=yes", "--answer", "4=no"])
        assert code == 1
        assert "more than once" in capsys.readouterr().err

    def test_account_missing_balance(self, capsys, tmp_path: Path):
        accounts = tmp_path / "accounts.json"
        accounts.write_text(json.dumps([{"name": "Cash"}]), encoding="utf-8")
        code = main(["scope-accounts", "--accounts", str(accounts), "--pm", "10"])
        assert code == 1
        assert "Invalid input" in capsys.readouterr().err

    def test_accounts_file_missing(self, capsys, tmp_path: Path):
        code = main(["scope-accounts", "--accounts", str(tmp_path / "absent.json"), "--pm", "10"])
        assert code == 1
        assert "Invalid input" in capsys.readouterr().err

    def test_accounts_file_not_json(self, capsys, tmp_path: Path):
        accounts = tmp_path / "accounts.json"
        accounts.write_text("name,balance\nCash,10\n", encoding="utf-8")
        code = main(["scope-accounts", "--accounts", str(accounts), "--pm", "10"])
        assert code == 1


class TestSubprocess:
    def test_stdout_is_pure_json(self, tmp_path: Path):
        """Log output, including the config load, never reaches stdout."""
        src_dir = Path(__file__).resolve().parents[1] / "src"
        env = dict(os.environ)
        env["PYTHONPATH"] = os.pathsep.join(filter(None, [str(src_dir), env.get("PYTHONPATH")]))
        env["ICOFR_LOG_LEVEL"] = "DEBUG"
        env.pop("ICOFR_RULES_CONFIG", None)
        completed = subprocess.run(
            [sys.executable, "-m", "icofr.cli", "materiality", "--value", "1000"],
            cwd=tmp_path,
            env=env,
            capture_output=True,
            text=True,
            check=False,
        )
        assert completed.returncode == 0, completed.stderr
        payload = json.loads(completed.stdout)
        assert payload["result"]["overall_materiality"] == pytest.approx(50)
        assert "config_loaded" in completed.stderr
