#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""check_db2_tablespace - Monitor the utilization of a DB2 tablespace"""

from __future__ import annotations

import sys
from collections.abc import Sequence
from typing import ClassVar

from pydantic import Field

from db2checks.checkengine import evaluate, Measurement, Overrides, Report
from db2checks.checkengine.overrides import TABLESPACE_RULES
from db2checks.db2.clp import CommandRunnerProto, Db2Clp, run_bash
from db2checks.db2.tablespace import fetch_tablespace
from db2checks.exceptions import DataUnavailable

from .common import CheckArgs, create_default_argument_parser, run_active_check, validate_arguments

PROG = "check_db2_tablespace"
DEFAULT_LEVELS = (80.0, 90.0)


class Args(CheckArgs, frozen=True):
    default_levels: ClassVar[tuple[float, float]] = DEFAULT_LEVELS

    database: str
    # the name ends up in an SQL statement
    tablespace: str = Field(pattern=r"^[A-Za-z0-9_@#$]{1,128}$")
    absence_ok: bool


def parse_arguments(argv: Sequence[str]) -> Args:
    parser = create_default_argument_parser(PROG, __doc__, levels=DEFAULT_LEVELS)
    parser.add_argument(
        "-t",
        "--tablespace",
        type=str,
        required=True,
        metavar="TABLESPACE",
        help="Name of the tablespace",
    )
    parser.add_argument(
        "--absence-ok",
        action="store_true",
        help="Report OK instead of CRITICAL if the tablespace does not exist",
    )
    return validate_arguments(Args, parser.parse_args(argv))


def check_tablespace(args: Args, clp: Db2Clp) -> Report:
    try:
        measurement = fetch_tablespace(clp, args.database, args.tablespace)
    except DataUnavailable as e:
        measurement = Measurement.unavailable(f"Tablespace {args.tablespace}", str(e))

    return evaluate(
        measurement,
        args.policy,
        Overrides(absence_ok=args.absence_ok, rules=TABLESPACE_RULES),
    )


def main(
    argv: Sequence[str] | None = None,
    runner: CommandRunnerProto = run_bash,
) -> int:
    return run_active_check(
        PROG,
        sys.argv[1:] if argv is None else argv,
        parse_arguments=parse_arguments,
        check=check_tablespace,
        service_name=lambda args: f"DB2 {args.database} tablespace {args.tablespace}",
        runner=runner,
    )


if __name__ == "__main__":
    sys.exit(main())
