#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from db2checks.checkengine import PerfMetric, Report, StatusLevel

REPORT = Report(
    state=StatusLevel.WARNING,
    summary="Tablespace TS1 used: 85.0% (warn/crit at 80.0%/90.0%)",
    details=("Type: DMS, content: LARGE, state: NORMAL", "Used: 85.00 MiB of 100.00 MiB"),
    metrics=(
        PerfMetric("used", 85.0, "%", 80, 90, 0, 100),
        PerfMetric("used_bytes", 89128960, "B", min=0, max=104857600),
    ),
)


def test_as_text() -> None:
    assert REPORT.as_text() == (
        "Tablespace TS1 used: 85.0% (warn/crit at 80.0%/90.0%)"
        " | used=85%;80;90;0;100 used_bytes=89128960B;;;0;104857600\n"
        "Type: DMS, content: LARGE, state: NORMAL\n"
        "Used: 85.00 MiB of 100.00 MiB"
    )


def test_as_text_without_metrics_and_details() -> None:
    assert Report(state=StatusLevel.UNKNOWN, summary="Timeout").as_text() == "Timeout"


def test_as_text_replaces_pipes() -> None:
    report = Report(summary="a|b", details=("c|d",))
    assert report.as_text() == "a❘b\nc❘d"


def test_as_checkmk() -> None:
    assert REPORT.as_checkmk("DB2 SAMPLE tablespace TS1") == (
        "1 DB2_SAMPLE_tablespace_TS1 used=85;80;90;0;100|used_bytes=89128960;;;0;104857600"
        " Tablespace TS1 used: 85.0% (warn/crit at 80.0%/90.0%)"
        "\\nType: DMS, content: LARGE, state: NORMAL\\nUsed: 85.00 MiB of 100.00 MiB"
    )


def test_replace_returns_new_report() -> None:
    replaced = REPORT.replace(state=StatusLevel.OK)
    assert replaced.state is StatusLevel.OK
    assert REPORT.state is StatusLevel.WARNING
    assert replaced.metrics == REPORT.metrics
