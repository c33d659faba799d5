#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Command line handling and output shared by all DB2 plug-ins"""

from __future__ import annotations

import argparse
import sys
import tempfile
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import ClassVar, NoReturn, Self, TypeVar

from pydantic import BaseModel, Field, model_validator, ValidationError

from db2checks import __version__
from db2checks.checkengine import Report, StatusLevel, ThresholdPolicy
from db2checks.db2.clp import CommandRunnerProto, Db2Clp, run_bash
from db2checks.exceptions import ConfigurationError, Db2CheckException, InstanceAlreadyRunning
from db2checks.utils.log import close_trace, logger, open_trace, setup_console_logging
from db2checks.utils.store import lockfile_path, try_locked

__all__ = [
    "CheckArgs",
    "create_default_argument_parser",
    "run_active_check",
    "validate_arguments",
]

DEFAULT_TIMEOUT = 20.0
DEFAULT_LOCK_DIR = Path(tempfile.gettempdir())


class CheckArgs(BaseModel, frozen=True):
    # used for -w and -c if they are not given
    default_levels: ClassVar[tuple[float, float]] = (80.0, 90.0)

    instance_home: Path
    database: str | None = None
    warning: float | None = None
    critical: float | None = None
    checkmk: bool
    service_name: str | None
    trace: Path | None
    verbose: int
    timeout: float = Field(gt=0)
    lock_dir: Path
    debug: bool

    @property
    def levels_upper_bound(self) -> float:
        return 100.0

    @property
    def levels(self) -> tuple[float, float]:
        warning, critical = self.default_levels
        return (
            warning if self.warning is None else self.warning,
            critical if self.critical is None else self.critical,
        )

    @property
    def policy(self) -> ThresholdPolicy:
        return ThresholdPolicy(*self.levels, self.levels_upper_bound)

    @model_validator(mode="after")
    def _validate_levels(self) -> Self:
        # building the policy validates the levels. ConfigurationError is no
        # ValueError, pydantic passes it through
        ThresholdPolicy(*self.levels, self.levels_upper_bound)
        return self


ArgsT = TypeVar("ArgsT", bound=CheckArgs)


class _ArgumentParser(argparse.ArgumentParser):
    """argparse exits with 2 on errors, which a monitoring core takes for CRITICAL"""

    def error(self, message: str) -> NoReturn:
        raise ConfigurationError(f"{self.prog}: {message}")


def create_default_argument_parser(
    prog: str,
    description: str | None,
    *,
    levels: tuple[float, float],
    levels_unit: str = "%",
    database_required: bool = True,
) -> argparse.ArgumentParser:
    parser = _ArgumentParser(prog=prog, description=description)
    parser.add_argument(
        "-i",
        "--instance-home",
        type=Path,
        required=True,
        metavar="DIRECTORY",
        help="Home directory of the DB2 instance, the one containing 'sqllib'",
    )
    parser.add_argument(
        "-d",
        "--database",
        type=str,
        required=database_required,
        metavar="DATABASE",
        help="Name of the database to check",
    )
    parser.add_argument(
        "-w",
        "--warning",
        type=float,
        default=None,
        metavar="WARNING",
        help=f"Warning level in {levels_unit} (Default: {levels[0]:g})",
    )
    parser.add_argument(
        "-c",
        "--critical",
        type=float,
        default=None,
        metavar="CRITICAL",
        help=f"Critical level in {levels_unit}, must be above the warning level (Default: {levels[1]:g})",
    )
    parser.add_argument(
        "-K",
        "--checkmk",
        action="store_true",
        help="Print the result as a Checkmk local check instead of Nagios plug-in output",
    )
    parser.add_argument(
        "-N",
        "--service-name",
        type=str,
        default=None,
        metavar="NAME",
        help="Service name of the Checkmk local check",
    )
    parser.add_argument(
        "-T",
        "--trace",
        type=Path,
        default=None,
        metavar="FILE",
        help="Append a trace of the execution to FILE",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log to stderr, repeat for more details (-vvv)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        metavar="SECONDS",
        help=f"Seconds before a DB2 command is aborted (Default: {DEFAULT_TIMEOUT:g})",
    )
    parser.add_argument(
        "--lock-dir",
        type=Path,
        default=DEFAULT_LOCK_DIR,
        metavar="DIRECTORY",
        help=f"Directory of the lock files (Default: {DEFAULT_LOCK_DIR})",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Debug mode: let Python exceptions come through.",
    )
    parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def validate_arguments(model: type[ArgsT], namespace: argparse.Namespace) -> ArgsT:
    try:
        return model.model_validate(vars(namespace))
    except ValidationError as e:
        raise ConfigurationError(
            "Invalid arguments: "
            + ", ".join(
                f"{'.'.join(str(part) for part in error['loc'])}: {error['msg']}"
                for error in e.errors()
            )
        ) from e


def _output_check_result(s: str) -> None:
    sys.stdout.write("%s\n" % s)


def run_active_check(
    prog: str,
    argv: Sequence[str],
    *,
    parse_arguments: Callable[[Sequence[str]], ArgsT],
    check: Callable[[ArgsT, Db2Clp], Report],
    service_name: Callable[[ArgsT], str],
    runner: CommandRunnerProto = run_bash,
) -> int:
    try:
        args = parse_arguments(argv)
    except ConfigurationError as e:
        _output_check_result(Report(state=StatusLevel.UNKNOWN, summary=str(e)).as_text())
        return StatusLevel.UNKNOWN.exit_code

    setup_console_logging(args.verbose)
    tracefile = open_trace(args.trace) if args.trace else None
    logger.info("%s %s", prog, " ".join(argv))

    try:
        report = _run_locked(prog, argv, args, check, runner)
    finally:
        if tracefile is not None:
            close_trace(tracefile)

    _output_check_result(
        report.as_checkmk(args.service_name or service_name(args))
        if args.checkmk
        else report.as_text()
    )
    return report.state.exit_code


def _run_locked(
    prog: str,
    argv: Sequence[str],
    args: ArgsT,
    check: Callable[[ArgsT, Db2Clp], Report],
    runner: CommandRunnerProto,
) -> Report:
    try:
        with try_locked(lockfile_path(args.lock_dir, prog, argv)) as acquired:
            if not acquired:
                raise InstanceAlreadyRunning(
                    f"{prog} is already running with the same arguments"
                )
            report = check(args, Db2Clp(args.instance_home, timeout=args.timeout, runner=runner))

    except Db2CheckException as e:
        logger.error("%s", e)
        report = Report(state=StatusLevel.UNKNOWN, summary=str(e))

    except Exception as e:
        if args.debug:
            raise
        logger.exception("Unhandled exception")
        report = Report(state=StatusLevel.UNKNOWN, summary=f"Unhandled exception: {e}")

    logger.info("Result: %s - %s", report.state.name, report.summary)
    return report
