#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from db2checks.checkengine import PerfMetric
from db2checks.db2.tablespace import fetch_tablespace, parse_tablespace, Tablespace
from db2checks.exceptions import DataUnavailable

from tests.unit.db2checks.fakes import failed, MakeClp, ok


def test_parse_system_managed() -> None:
    assert parse_tablespace(["TEMPSPACE1      SMS SYSTEMP NORMAL -  100.00 1     1      4096"]) == (
        Tablespace(
            name="TEMPSPACE1",
            type="SMS",
            content_type="SYSTEMP",
            state="NORMAL",
            auto_resize=None,
            utilization_percent=100.0,
            used_pages=1,
            total_pages=1,
            page_size=4096,
        )
    )


def test_parse_without_utilization_percent() -> None:
    tablespace = parse_tablespace(["TS1 DMS LARGE NORMAL 0 - 250 1000 4096"])
    assert tablespace is not None
    assert tablespace.utilization_percent == 25.0
    assert tablespace.auto_resize is False
    assert tablespace.used_bytes == 1024000
    assert tablespace.total_bytes == 4096000


def test_parse_garbage() -> None:
    with pytest.raises(DataUnavailable, match="Cannot parse tablespace utilization"):
        parse_tablespace(["SQL0100W  No row was found"])


def test_fetch_tablespace(make_clp: MakeClp) -> None:
    clp, runner = make_clp(ok("USERSPACE1  DMS LARGE NORMAL 1  12.50  4096 32768 8192\n"))
    measurement = fetch_tablespace(clp, "SAMPLE", "userspace1")

    assert "SYSIBMADM.TBSP_UTILIZATION" in runner.scripts[0]
    assert "USERSPACE1" in runner.scripts[0]
    assert "userspace1" not in runner.scripts[0]
    assert measurement.entity == "Tablespace userspace1"
    assert measurement.value == 12.5
    assert measurement.attributes == {
        "type": "DMS",
        "content_type": "LARGE",
        "state": "NORMAL",
        "auto_resize": "YES",
    }
    assert measurement.metrics == (
        PerfMetric("used_bytes", 33554432, "B", min=0, max=268435456),
    )
    assert measurement.details == (
        "Type: DMS, content: LARGE, state: NORMAL",
        "Used: 32.00 MiB of 256.00 MiB",
    )


def test_fetch_missing_tablespace(make_clp: MakeClp) -> None:
    clp, _runner = make_clp(failed(1, "SQL0100W  No row was found for FETCH"))
    measurement = fetch_tablespace(clp, "SAMPLE", "NOPE")
    assert measurement.absent
    assert measurement.available
