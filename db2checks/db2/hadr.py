#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Example output of "db2pd -hadr -db SAMPLE" (shortened):
#
# Database Member 0 -- Database SAMPLE -- Active -- Up 2 days 01:12:09 -- Date 2026-10-19-10.11.12.123456
#
#                             HADR_ROLE = PRIMARY
#                           REPLAY_TYPE = PHYSICAL
#                         HADR_SYNCMODE = NEARSYNC
#                            STANDBY_ID = 1
#                            HADR_STATE = PEER
#                   HADR_CONNECT_STATUS = CONNECTED
#                   HADR_LOG_GAP(bytes) = 0
#              STANDBY_RECV_BUF_PERCENT = 0
#
# A primary with several standbys prints one block per standby, each starting
# with HADR_ROLE.

from __future__ import annotations

import re
from collections.abc import Mapping, Sequence
from typing import Final

from db2checks.checkengine import Measurement, PerfMetric
from db2checks.exceptions import DataUnavailable

from .clp import Db2Clp

__all__ = ["fetch_hadr", "parse_hadr"]

_KEY_VALUE_RE: Final = re.compile(r"^\s*([A-Z_]+(?:\([a-z]+\))?)\s*=\s*(.*?)\s*$")

_HADR_INACTIVE_RE: Final = re.compile(r"HADR is not active", re.IGNORECASE)
_DATABASE_INACTIVE_RE: Final = re.compile(r"not activated|cannot be found", re.IGNORECASE)


def parse_hadr(output: str) -> Sequence[Mapping[str, str]]:
    """One mapping per HADR_ROLE block

    >>> parse_hadr('''
    ...       HADR_ROLE = STANDBY
    ...      HADR_STATE = REMOTE_CATCHUP_PENDING
    ... HADR_LOG_GAP(bytes) = 1024
    ... ''')
    [{'HADR_ROLE': 'STANDBY', 'HADR_STATE': 'REMOTE_CATCHUP_PENDING', 'HADR_LOG_GAP(bytes)': '1024'}]
    >>> parse_hadr("HADR is not active.")
    []
    """
    blocks: list[dict[str, str]] = []
    for line in output.splitlines():
        if (match := _KEY_VALUE_RE.match(line)) is None:
            continue
        key, value = match.groups()
        if key == "HADR_ROLE":
            blocks.append({})
        if blocks:
            blocks[-1][key] = value
    return blocks


def _float_or_none(value: str | None) -> float | None:
    try:
        return None if value is None else float(value)
    except ValueError:
        return None


def fetch_hadr(clp: Db2Clp, database: str) -> Measurement:
    entity = f"HADR of database {database}"
    result = clp.command(["db2pd", "-hadr", "-db", database])
    if _HADR_INACTIVE_RE.search(result.output):
        return Measurement.not_found(entity)
    if _DATABASE_INACTIVE_RE.search(result.output):
        raise DataUnavailable(f"Database {database} is not active")

    blocks = parse_hadr(result.stdout)
    if not blocks:
        raise DataUnavailable(f"Cannot parse the output of db2pd: {result.output!r}")

    status = blocks[0]
    role = status.get("HADR_ROLE", "")
    if role == "STANDARD":
        return Measurement.not_found(entity)

    state = status.get("HADR_STATE", "")
    connect_status = status.get("HADR_CONNECT_STATUS", "")
    log_gap = _float_or_none(status.get("HADR_LOG_GAP(bytes)"))
    details = [
        f"Connection: {connect_status or 'unknown'}",
        f"Sync mode: {status.get('HADR_SYNCMODE', 'unknown')}",
    ]
    if len(blocks) > 1:
        details.append(f"Additional standbys: {len(blocks) - 1}")

    return Measurement(
        f"{entity} ({role}, {state})",
        _float_or_none(status.get("STANDBY_RECV_BUF_PERCENT")),
        label="standby receive buffer",
        metric_name="standby_recv_buf",
        attributes={"role": role, "state": state, "connect_status": connect_status},
        metrics=() if log_gap is None else (PerfMetric("log_gap", log_gap, "B", min=0),),
        details=tuple(details),
    )
