#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_db2_connection - Check that a DB2 database accepts connections"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import ClassVar

from db2checks.checkengine import evaluate, Measurement, Overrides, Report
from db2checks.checkengine.overrides import CONNECTION_RULES
from db2checks.db2.clp import CommandRunnerProto, Db2Clp, run_bash
from db2checks.db2.connection import fetch_connection
from db2checks.exceptions import DataUnavailable

from .common import CheckArgs, create_default_argument_parser, run_active_check, validate_arguments

PROG = "check_db2_connection"
DEFAULT_LEVELS = (1000.0, 5000.0)


class Args(CheckArgs, frozen=True):
    default_levels: ClassVar[tuple[float, float]] = DEFAULT_LEVELS

    database: str

    @property
    def levels_upper_bound(self) -> float:
        return self.timeout * 1000

    @property
    def levels(self) -> tuple[float, float]:
        """Levels not given on the command line are fitted into the timeout"""
        warning, critical = self.default_levels
        if self.critical is not None:
            critical = self.critical
        else:
            critical = min(critical, self.levels_upper_bound)
        if self.warning is not None:
            warning = self.warning
        else:
            warning = min(warning, critical / 2)
        return warning, critical


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = create_default_argument_parser(
        PROG, __doc__, levels=DEFAULT_LEVELS, levels_unit="milliseconds"
    )
    return validate_arguments(Args, parser.parse_args(argv))


def check_connection(args: Args, clp: Db2Clp) -> Report:
    try:
        measurement = fetch_connection(clp, args.database)
    except DataUnavailable as e:
        measurement = Measurement.unavailable(f"Database {args.database}", str(e))

    return evaluate(measurement, args.policy, Overrides(rules=CONNECTION_RULES))


def main(
    argv: Sequence[str] | None = None,
    runner: CommandRunnerProto = run_bash,
) -> int:
    return run_active_check(
        PROG,
        sys.argv[1:] if argv is None else argv,
        parse_arguments=parse_arguments,
        check=check_connection,
        service_name=lambda args: f"DB2 {args.database} connection",
        runner=runner,
    )


if __name__ == "__main__":
    sys.exit(main())
