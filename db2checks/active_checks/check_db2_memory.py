#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_db2_memory - Monitor the memory usage of a DB2 instance against its limit"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import ClassVar

from db2checks.checkengine import evaluate, Measurement, Overrides, Report
from db2checks.checkengine.overrides import ignore_levels
from db2checks.db2.clp import CommandRunnerProto, Db2Clp, run_bash
from db2checks.db2.memory import fetch_memory
from db2checks.exceptions import DataUnavailable

from .common import CheckArgs, create_default_argument_parser, run_active_check, validate_arguments

PROG = "check_db2_memory"
DEFAULT_LEVELS = (85.0, 95.0)


class Args(CheckArgs, frozen=True):
    default_levels: ClassVar[tuple[float, float]] = DEFAULT_LEVELS

    ignore_levels: bool


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = create_default_argument_parser(
        PROG, __doc__, levels=DEFAULT_LEVELS, database_required=False
    )
    parser.add_argument(
        "--ignore-levels",
        action="store_true",
        help="Always report OK, only collect the performance data",
    )
    return validate_arguments(Args, parser.parse_args(argv))


def check_memory(args: Args, clp: Db2Clp) -> Report:
    try:
        measurement = fetch_memory(clp)
    except DataUnavailable as e:
        measurement = Measurement.unavailable("Instance memory", str(e))

    return evaluate(
        measurement,
        args.policy,
        Overrides(rules=(ignore_levels,) if args.ignore_levels else ()),
    )


def main(
    argv: Sequence[str] | None = None,
    runner: CommandRunnerProto = run_bash,
) -> int:
    return run_active_check(
        PROG,
        sys.argv[1:] if argv is None else argv,
        parse_arguments=parse_arguments,
        check=check_memory,
        service_name=lambda args: f"DB2 {args.instance_home.name} memory",
        runner=runner,
    )


if __name__ == "__main__":
    sys.exit(main())
