#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

import pytest

from db2checks.checkengine import PerfMetric
from db2checks.db2.hadr import fetch_hadr, parse_hadr
from db2checks.exceptions import DataUnavailable

from tests.unit.db2checks.fakes import MakeClp, ok

DB2PD_PRIMARY = """
Database Member 0 -- Database SAMPLE -- Active -- Up 2 days 01:12:09 -- Date 2026-10-19-10.11.12.123456

                            HADR_ROLE = PRIMARY
                          REPLAY_TYPE = PHYSICAL
                        HADR_SYNCMODE = NEARSYNC
                           STANDBY_ID = 1
                        LOG_STREAM_ID = 0
                           HADR_STATE = PEER
                           HADR_FLAGS =
                  PRIMARY_MEMBER_HOST = db2a.example.com
                  STANDBY_MEMBER_HOST = db2b.example.com
                  HADR_CONNECT_STATUS = CONNECTED
             HADR_CONNECT_STATUS_TIME = 10/17/2026 09:00:00.123456 (1792227600)
                  HADR_LOG_GAP(bytes) = 4096
             STANDBY_RECV_BUF_PERCENT = 3

                            HADR_ROLE = PRIMARY
                        HADR_SYNCMODE = SUPERASYNC
                           STANDBY_ID = 2
                           HADR_STATE = REMOTE_CATCHUP
                  HADR_CONNECT_STATUS = CONNECTED
"""

DB2PD_STANDBY_PENDING = """
Database Member 0 -- Database SAMPLE -- Standby -- Up 0 days 00:00:42 -- Date 2026-10-19-10.11.12.123456

                            HADR_ROLE = STANDBY
                        HADR_SYNCMODE = NEARSYNC
                           HADR_STATE = REMOTE_CATCHUP_PENDING
                  HADR_CONNECT_STATUS = DISCONNECTED
"""


def test_parse_several_standbys() -> None:
    blocks = parse_hadr(DB2PD_PRIMARY)
    assert len(blocks) == 2
    assert blocks[0]["HADR_FLAGS"] == ""
    assert blocks[0]["HADR_CONNECT_STATUS_TIME"] == "10/17/2026 09:00:00.123456 (1792227600)"
    assert blocks[1]["STANDBY_ID"] == "2"


def test_fetch_primary(make_clp: MakeClp) -> None:
    clp, runner = make_clp(ok(DB2PD_PRIMARY))
    measurement = fetch_hadr(clp, "SAMPLE")

    assert runner.scripts[0].splitlines()[-1] == "db2pd -hadr -db SAMPLE"
    assert measurement.entity == "HADR of database SAMPLE (PRIMARY, PEER)"
    assert measurement.value == 3.0
    assert measurement.attributes == {
        "role": "PRIMARY",
        "state": "PEER",
        "connect_status": "CONNECTED",
    }
    assert measurement.metrics == (PerfMetric("log_gap", 4096.0, "B", min=0),)
    assert measurement.details == (
        "Connection: CONNECTED",
        "Sync mode: NEARSYNC",
        "Additional standbys: 1",
    )


def test_fetch_standby_without_buffer(make_clp: MakeClp) -> None:
    clp, _runner = make_clp(ok(DB2PD_STANDBY_PENDING))
    measurement = fetch_hadr(clp, "SAMPLE")
    assert measurement.value is None
    assert measurement.metrics == ()
    assert measurement.attributes["state"] == "REMOTE_CATCHUP_PENDING"


@pytest.mark.parametrize(
    "output",
    [
        "Database Member 0 -- Database SAMPLE -- Active -- Up 0 days 00:10:00\n\nHADR is not active.\n",
        "HADR_ROLE = STANDARD\n",
    ],
)
def test_fetch_without_hadr(make_clp: MakeClp, output: str) -> None:
    clp, _runner = make_clp(ok(output))
    assert fetch_hadr(clp, "SAMPLE").absent


def test_fetch_inactive_database(make_clp: MakeClp) -> None:
    clp, _runner = make_clp(
        ok(
            "Database SAMPLE not activated on database member 0 or this database name"
            " cannot be found in the local database directory."
        )
    )
    with pytest.raises(DataUnavailable, match="Database SAMPLE is not active"):
        fetch_hadr(clp, "SAMPLE")


def test_fetch_garbage(make_clp: MakeClp) -> None:
    clp, _runner = make_clp(ok("Changing to a different database is not supported."))
    with pytest.raises(DataUnavailable, match="Cannot parse the output of db2pd"):
        fetch_hadr(clp, "SAMPLE")
