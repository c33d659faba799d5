#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

# Example output of "db2pd -dbptnmem":
#
# Database Member 0 -- Active -- Up 2 days 01:12:09 -- Date 2026-10-19-10.11.12.123456
#
# Database Member Memory Controller Statistics
#
# Controller Automatic: Y
# Memory Limit:         8388608 KB
# Current usage:        1654272 KB
# HWM usage:            2031616 KB
# Cached memory:        212992 KB

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Final

from db2checks.checkengine import Measurement, PerfMetric
from db2checks.exceptions import DataUnavailable
from db2checks.utils.render import fmt_bytes

from .clp import Db2Clp

__all__ = ["fetch_memory", "MemoryUsage", "parse_memory"]

_FIELDS: Final = {
    "Memory Limit": "limit",
    "Current usage": "current",
    "HWM usage": "hwm",
}

_LINE_RE: Final = re.compile(r"^\s*(Memory Limit|Current usage|HWM usage):\s*(\d+)\s*KB", re.M)


@dataclass(frozen=True)
class MemoryUsage:
    limit: int
    current: int
    hwm: int

    @property
    def percent(self) -> float:
        return 100.0 * self.current / self.limit if self.limit else 0.0


def parse_memory(output: str) -> MemoryUsage:
    """Values in bytes

    >>> parse_memory('''Memory Limit:  1000 KB
    ... Current usage: 250 KB
    ... HWM usage:     300 KB''')
    MemoryUsage(limit=1024000, current=256000, hwm=307200)
    """
    values = {_FIELDS[key]: int(value) * 1024 for key, value in _LINE_RE.findall(output)}
    try:
        return MemoryUsage(**values)
    except TypeError as e:
        raise DataUnavailable(f"Cannot parse the output of db2pd: {output!r}") from e


def fetch_memory(clp: Db2Clp) -> Measurement:
    result = clp.command(["db2pd", "-dbptnmem"])
    if result.returncode:
        raise DataUnavailable(f"db2pd failed: {result.output}")

    usage = parse_memory(result.stdout)
    return Measurement(
        "Instance memory",
        usage.percent,
        metrics=(
            PerfMetric("memory_current", usage.current, "B", min=0, max=usage.limit),
            PerfMetric("memory_hwm", usage.hwm, "B", min=0, max=usage.limit),
        ),
        details=(
            f"Current: {fmt_bytes(usage.current)} of {fmt_bytes(usage.limit)}",
            f"High water mark: {fmt_bytes(usage.hwm)}",
        ),
    )
