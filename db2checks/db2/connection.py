#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Example output of a successful "db2 connect to SAMPLE":
#
#    Database Connection Information
#
#  Database server        = DB2/LINUXX8664 11.5.8.0
#  SQL authorization ID   = DB2INST1
#  Local database alias   = SAMPLE

from __future__ import annotations

import re
import time
from collections.abc import Callable
from typing import Final

from db2checks.checkengine import Measurement
from db2checks.exceptions import DataUnavailable
from db2checks.utils.log import logger, VERBOSE

from .clp import Db2Clp, parse_sql_message

__all__ = ["fetch_connection", "SQL_DATABASE_NOT_FOUND", "SQL_INSTANCE_NOT_STARTED"]

SQL_DATABASE_NOT_FOUND: Final = "SQL1013N"
SQL_INSTANCE_NOT_STARTED: Final = "SQL1032N"

_SERVER_RE: Final = re.compile(r"Database server\s*=\s*(.*\S)")


def fetch_connection(
    clp: Db2Clp,
    database: str,
    clock: Callable[[], float] = time.monotonic,
) -> Measurement:
    entity = f"Database {database}"
    started = clock()
    result, elapsed_ms = clp.connect(database)
    if elapsed_ms is None:
        # includes starting bash and loading the profile
        elapsed_ms = (clock() - started) * 1000
        logger.log(VERBOSE, "Shell cannot time db2 connect, measured the whole script")

    if (message := parse_sql_message(result.output)) is not None and result.returncode:
        if message.code == SQL_DATABASE_NOT_FOUND:
            return Measurement.not_found(entity)
        if message.code == SQL_INSTANCE_NOT_STARTED:
            return Measurement(
                entity,
                attributes={"sql_code": message.code, "sql_message": message.description},
            )
        raise DataUnavailable(f"Cannot connect: {message}")

    if result.returncode:
        raise DataUnavailable(f"Cannot connect: {result.output}")

    server = _SERVER_RE.search(result.stdout)
    return Measurement(
        entity,
        elapsed_ms,
        label="connection time",
        metric_name="connection_time",
        unit="ms",
        details=(f"Server: {server.group(1) if server else 'unknown'}",),
    )
