from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Any, Callable, Optional, Union

import structlog
from dotenv import load_dotenv
from pydantic import ValidationError

from icofr.config.loader import get_log_level, get_materiality_defaults
from icofr.models.records import HaircutFactors, QualitativeRiskFactors
from icofr.models.shared import (
    BenchmarkBasis,
    Frequency,
    ITGCArea,
    RiskLevel,
    UserRole,
    parse_enum,
)
from icofr.service import ComplianceService, ServiceConfig
from icofr.utils.error_handler import RulesError, exit_with_error


logger = logging.getLogger(__name__)

YES_ANSWERS = {"y", "yes", "true", "1"}
NO_ANSWERS = {"n", "no", "false", "0"}


def _common_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument(
        "--output",
        dest="output_path",
        default="",
        help="Optional output JSON file path. If not set, prints to stdout.",
    )
    common.add_argument(
        "--role",
        choices=[r.value for r in UserRole],
        default=None,
        help="Acting role passed to the service (default: ICOFR_ROLE or config).",
    )
    common.add_argument(
        "--log-level",
        dest="log_level",
        default=None,
        help="Logging level (DEBUG, INFO, WARNING, ERROR). Default: ICOFR_LOG_LEVEL or config.",
    )
    common.add_argument(
        "--dotenv",
        dest="dotenv_path",
        default=".env",
        help="Path to .env file to load (default: .env in the working directory)",
    )
    return common


def build_parser() -> argparse.ArgumentParser:
    common = _common_parser()
    parser = argparse.ArgumentParser(prog="icofr-rules", description="ICOFR regulatory calculators")
    sub = parser.add_subparsers(dest="command", required=True)

    risk = sub.add_parser("risk", parents=[common], help="Combined control risk rating")
    risk.add_argument("--quantitative", required=True, choices=[r.value for r in RiskLevel])
    risk.add_argument(
        "--qualitative",
        choices=[r.value for r in RiskLevel],
        default=None,
        help="Qualitative rating; omit to score it from --factor flags.",
    )
    risk.add_argument(
        "--factor",
        dest="factors",
        action="append",
        default=[],
        choices=list(QualitativeRiskFactors.model_fields),
        help="Active qualitative risk criterion (repeatable).",
    )

    qualitative = sub.add_parser("qualitative", parents=[common], help="Qualitative risk checklist score")
    qualitative.add_argument(
        "--factor",
        dest="factors",
        action="append",
        default=[],
        choices=list(QualitativeRiskFactors.model_fields),
    )

    haircut = sub.add_parser("haircut", parents=[common], help="Suggested PM haircut")
    haircut.add_argument(
        "--factor",
        dest="factors",
        action="append",
        default=[],
        choices=list(HaircutFactors.model_fields),
    )

    sample = sub.add_parser("sample", parents=[common], help="Sample-size guidance")
    sample.add_argument("--frequency", required=True, choices=[f.value for f in Frequency])
    sample.add_argument("--risk", required=True, choices=[r.value for r in RiskLevel])
    sample.add_argument("--nature", default="Manual", help="Control nature, e.g. Manual or Automated")

    remediation = sub.add_parser("remediation", parents=[common], help="Remediation retest readiness")
    remediation.add_argument("--frequency", required=True, choices=[f.value for f in Frequency])
    remediation.add_argument(
        "--remediated-at",
        dest="remediated_at",
        required=True,
        help="ISO-8601 datetime or epoch milliseconds of the remediation.",
    )
    remediation.add_argument("--now", default=None, help="Reference instant (default: current UTC time).")

    materiality = sub.add_parser("materiality", parents=[common], help="Overall and Performance Materiality")
    materiality.add_argument("--value", dest="benchmark_value", type=float, required=True)
    materiality.add_argument("--percentage", type=float, default=None)
    materiality.add_argument("--haircut", type=float, default=None)
    materiality.add_argument("--locations", dest="location_count", type=int, default=None)
    materiality.add_argument(
        "--benchmark",
        choices=[b.value for b in BenchmarkBasis],
        default=None,
        help="Benchmark basis (default from config).",
    )

    dod = sub.add_parser("dod", parents=[common], help="Degree of Deficiency classification")
    dod.add_argument(
        "--answer",
        dest="answers",
        action="append",
        default=[],
        help="Box answer as BOX=yes|no, e.g. --answer 1=yes (repeatable).",
    )
    dod.add_argument("--aggregate", action="store_true", help="Assess a combination of deficiencies.")

    distribution = sub.add_parser("distribution", parents=[common], help="Deficiency report recipients")
    distribution.add_argument("--severity", required=True)

    itgc = sub.add_parser("itgc", parents=[common], help="COBIT / ITGC area consistency check")
    itgc.add_argument("--cobit-id", dest="cobit_id", required=True)
    itgc.add_argument("--area", required=True, choices=[a.value for a in ITGCArea])

    control = sub.add_parser("suggest-control", parents=[common], help="Suggested control for a COSO principle")
    control.add_argument("--principle", type=int, required=True)

    scope = sub.add_parser("scope-accounts", parents=[common], help="Significant account scoping")
    scope.add_argument(
        "--accounts",
        dest="accounts_path",
        required=True,
        help="JSON file with a list of {name, balance, qualitative_reasons}.",
    )
    scope.add_argument("--pm", dest="performance_materiality", type=float, required=True)

    return parser


def configure_logging(level: Optional[str] = None) -> None:
    """Route structlog events through stdlib logging (stderr) so stdout stays JSON-only.

    structlog is configured before the level is resolved from config, so the
    config load itself never logs to stdout.
    """
    structlog.configure(
        processors=[
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
    )
    resolved = level or get_log_level()
    logging.basicConfig(
        level=getattr(logging, str(resolved).upper(), logging.INFO),
        stream=sys.stderr,
    )


def _parse_instant(text: str) -> Union[datetime, int]:
    try:
        return int(text)
    except ValueError:
        return datetime.fromisoformat(text)


def _parse_answers(pairs: list[str]) -> dict[int, bool]:
    answers: dict[int, bool] = {}
    for pair in pairs:
        box, _, raw = pair.partition("=")
        value = raw.strip().lower()
        if int(box) in answers:
            raise argparse.ArgumentTypeError(f"Box {box} answered more than once: {pair!r}")
        if value in YES_ANSWERS:
            answers[int(box)] = True
        elif value in NO_ANSWERS:
            answers[int(box)] = False
        else:
            raise argparse.ArgumentTypeError(f"Invalid DoD answer: {pair!r}")
    return answers


def _flags(names: list[str]) -> dict[str, bool]:
    return {name: True for name in names}


def _run_risk(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.rate_control_risk(args.quantitative, args.qualitative, _flags(args.factors))


def _run_qualitative(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.score_qualitative_risk(_flags(args.factors))


def _run_haircut(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.suggest_haircut(_flags(args.factors))


def _run_sample(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.suggest_samples(args.frequency, args.risk, args.nature)


def _run_remediation(service: ComplianceService, args: argparse.Namespace) -> Any:
    now = _parse_instant(args.now) if args.now else None
    return service.check_remediation(args.frequency, _parse_instant(args.remediated_at), now=now)


def _run_materiality(service: ComplianceService, args: argparse.Namespace) -> Any:
    defaults = get_materiality_defaults()
    return service.calculate_materiality(
        benchmark_value=args.benchmark_value,
        percentage=args.percentage if args.percentage is not None else float(defaults["percentage"]),
        haircut=args.haircut if args.haircut is not None else float(defaults["haircut"]),
        location_count=(
            args.location_count if args.location_count is not None else int(defaults["location_count"])
        ),
        benchmark=args.benchmark or defaults["benchmark"],
    )


def _run_dod(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.classify_deficiency(_parse_answers(args.answers), aggregate=bool(args.aggregate))


def _run_distribution(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.route_deficiency_report(args.severity)


def _run_itgc(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.review_itgc_mapping(args.cobit_id, args.area)


def _run_suggest_control(service: ComplianceService, args: argparse.Namespace) -> Any:
    return service.suggest_control(args.principle)


def _run_scope_accounts(service: ComplianceService, args: argparse.Namespace) -> Any:
    accounts = json.loads(Path(args.accounts_path).read_text(encoding="utf-8"))
    return service.assess_accounts(accounts, args.performance_materiality)


COMMANDS: dict[str, Callable[[ComplianceService, argparse.Namespace], Any]] = {
    "risk": _run_risk,
    "qualitative": _run_qualitative,
    "haircut": _run_haircut,
    "sample": _run_sample,
    "remediation": _run_remediation,
    "materiality": _run_materiality,
    "dod": _run_dod,
    "distribution": _run_distribution,
    "itgc": _run_itgc,
    "suggest-control": _run_suggest_control,
    "scope-accounts": _run_scope_accounts,
}


def run(args: argparse.Namespace) -> int:
    if args.role:
        config = ServiceConfig(role=parse_enum(UserRole, args.role, "role"))
    else:
        config = ServiceConfig.from_environment()
    service = ComplianceService(config)

    logger.info("[run] command=%s role=%s", args.command, config.role.value)

    try:
        payload = COMMANDS[args.command](service, args)
    except RulesError as e:
        return exit_with_error(e, context=args.command)
    except (ValidationError, argparse.ArgumentTypeError, ValueError, OSError) as e:
        error = RulesError(error_type="INVALID_INPUT", message="Invalid input", details=str(e))
        return exit_with_error(error, context=args.command)

    text = json.dumps(payload, indent=2)
    if args.output_path:
        output_file = Path(args.output_path)
        output_file.parent.mkdir(parents=True, exist_ok=True)
        output_file.write_text(text, encoding="utf-8")
        logger.info("[output] wrote=%s", str(output_file))
    else:
        print(text)

    return 0


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    load_dotenv(args.dotenv_path)

    configure_logging(args.log_level)

    return run(args)


if __name__ == "__main__":
    raise SystemExit(main())
