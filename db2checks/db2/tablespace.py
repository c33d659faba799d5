#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Example output of the query below (db2 -x, one line per tablespace):
# SYSCATSPACE     DMS LARGE   NORMAL 1  99.42 16384  16480  4096
# TEMPSPACE1      SMS SYSTEMP NORMAL -  100.00 1     1      4096
# USERSPACE1      DMS LARGE   NORMAL 1  12.50 4096   32768  8192

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from db2checks.checkengine import Measurement, PerfMetric
from db2checks.exceptions import DataUnavailable
from db2checks.utils.render import fmt_bytes

from .clp import Db2Clp

__all__ = ["fetch_tablespace", "parse_tablespace", "Tablespace", "TABLESPACE_QUERY"]

TABLESPACE_QUERY = (
    "SELECT TBSP_NAME, TBSP_TYPE, TBSP_CONTENT_TYPE, TBSP_STATE,"
    " TBSP_AUTO_RESIZE_ENABLED, TBSP_UTILIZATION_PERCENT,"
    " TBSP_USED_PAGES, TBSP_TOTAL_PAGES, TBSP_PAGE_SIZE"
    " FROM SYSIBMADM.TBSP_UTILIZATION WHERE TBSP_NAME = '%s'"
)


@dataclass(frozen=True)
class Tablespace:
    name: str
    type: str
    content_type: str
    state: str
    auto_resize: bool | None
    utilization_percent: float
    used_pages: int
    total_pages: int
    page_size: int

    @property
    def used_bytes(self) -> int:
        return self.used_pages * self.page_size

    @property
    def total_bytes(self) -> int:
        return self.total_pages * self.page_size


def parse_tablespace(lines: Sequence[str]) -> Tablespace | None:
    """
    >>> parse_tablespace(["USERSPACE1  DMS LARGE NORMAL 1  12.50  4096 32768 8192"])
    Tablespace(name='USERSPACE1', type='DMS', content_type='LARGE', state='NORMAL', auto_resize=True, utilization_percent=12.5, used_pages=4096, total_pages=32768, page_size=8192)
    >>> parse_tablespace([]) is None
    True
    """
    if not lines:
        return None

    try:
        name, type_, content_type, state, auto_resize, percent, used, total, page_size = lines[
            0
        ].split()
        return Tablespace(
            name=name,
            type=type_,
            content_type=content_type,
            state=state,
            auto_resize=None if auto_resize == "-" else auto_resize == "1",
            utilization_percent=_percent(percent, used, total),
            used_pages=int(used),
            total_pages=int(total),
            page_size=int(page_size),
        )
    except ValueError as e:
        raise DataUnavailable(f"Cannot parse tablespace utilization: {lines[0]!r}") from e


def _percent(percent: str, used: str, total: str) -> float:
    if percent != "-":
        return float(percent)
    return 100.0 * int(used) / int(total) if int(total) else 0.0


def fetch_tablespace(clp: Db2Clp, database: str, tablespace: str) -> Measurement:
    entity = f"Tablespace {tablespace}"
    parsed = parse_tablespace(clp.query(database, TABLESPACE_QUERY % tablespace.upper()))
    if parsed is None:
        return Measurement.not_found(entity)

    return Measurement(
        entity,
        parsed.utilization_percent,
        attributes={
            "type": parsed.type,
            "content_type": parsed.content_type,
            "state": parsed.state,
            "auto_resize": {None: "", True: "YES", False: "NO"}[parsed.auto_resize],
        },
        metrics=(
            PerfMetric("used_bytes", parsed.used_bytes, "B", min=0, max=parsed.total_bytes),
        ),
        details=(
            f"Type: {parsed.type}, content: {parsed.content_type}, state: {parsed.state}",
            f"Used: {fmt_bytes(parsed.used_bytes)} of {fmt_bytes(parsed.total_bytes)}",
        ),
    )
