#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from pathlib import Path

import pytest

from db2checks.active_checks.check_db2_tablespace import main, parse_arguments
from db2checks.db2.clp import CommandOutput

from tests.unit.db2checks.fakes import failed, FakeRunner, ok


def _argv(instance_home: Path, lock_dir: Path, *extra: str) -> list[str]:
    return [
        "-i",
        str(instance_home),
        "-d",
        "SAMPLE",
        "-t",
        "USERSPACE1",
        "--lock-dir",
        str(lock_dir),
        *extra,
    ]


def _row(auto_resize: str, percent: str, used_pages: int, tbsp_type: str = "DMS") -> CommandOutput:
    return ok(f"USERSPACE1 {tbsp_type} LARGE NORMAL {auto_resize} {percent} {used_pages} 25600 4096\n")


def test_parse_arguments(tmp_path: Path) -> None:
    args = parse_arguments(["-i", "/home/db2inst1", "-d", "SAMPLE", "-t", "TS1", "--absence-ok"])
    assert args.tablespace == "TS1"
    assert args.absence_ok
    assert (args.policy.warning, args.policy.critical) == (80.0, 90.0)


def test_warning(
    instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    assert main(_argv(instance_home, tmp_path), runner=FakeRunner([_row("0", "85.00", 21760)])) == 1
    assert capsys.readouterr().out == (
        "Tablespace USERSPACE1 used: 85.0% (warn/crit at 80.0%/90.0%)"
        " | used=85%;80;90;0;100 used_bytes=89128960B;;;0;104857600\n"
        "Type: DMS, content: LARGE, state: NORMAL\n"
        "Used: 85.00 MiB of 100.00 MiB\n"
    )


def test_checkmk(instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    runner = FakeRunner([_row("0", "85.00", 21760)])
    assert main(_argv(instance_home, tmp_path, "--checkmk"), runner=runner) == 1
    assert capsys.readouterr().out == (
        "1 DB2_SAMPLE_tablespace_USERSPACE1 used=85;80;90;0;100|used_bytes=89128960;;;0;104857600"
        " Tablespace USERSPACE1 used: 85.0% (warn/crit at 80.0%/90.0%)"
        "\\nType: DMS, content: LARGE, state: NORMAL\\nUsed: 85.00 MiB of 100.00 MiB\n"
    )


def test_auto_resize(instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    assert main(_argv(instance_home, tmp_path), runner=FakeRunner([_row("1", "95.00", 24320)])) == 0
    assert capsys.readouterr().out.startswith(
        "Tablespace USERSPACE1 used: 95.0% (warn/crit at 80.0%/90.0%),"
        " auto-resize is enabled: check the free space of the file system | "
    )


def test_system_managed(instance_home: Path, tmp_path: Path) -> None:
    runner = FakeRunner([ok("TEMPSPACE1 SMS SYSTEMP NORMAL - 100.00 1 1 4096\n")])
    assert main(_argv(instance_home, tmp_path), runner=runner) == 0


def test_custom_levels(instance_home: Path, tmp_path: Path) -> None:
    runner = FakeRunner([_row("0", "85.00", 21760)])
    assert main(_argv(instance_home, tmp_path, "-w", "86", "-c", "99"), runner=runner) == 0


@pytest.mark.parametrize("absence_ok, exit_code", [(False, 2), (True, 0)])
def test_missing_tablespace(
    instance_home: Path,
    tmp_path: Path,
    capsys: pytest.CaptureFixture[str],
    absence_ok: bool,
    exit_code: int,
) -> None:
    argv = _argv(instance_home, tmp_path, *(["--absence-ok"] if absence_ok else []))
    assert main(argv, runner=FakeRunner([failed(1, "SQL0100W  No row was found")])) == exit_code
    assert capsys.readouterr().out == "Tablespace USERSPACE1 does not exist\n"


def test_instance_not_started(
    instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = FakeRunner(
        [failed(64, "SQL1032N  No start database manager command was issued.  SQLSTATE=57019")]
    )
    assert main(_argv(instance_home, tmp_path), runner=runner) == 3
    assert capsys.readouterr().out == (
        "Tablespace USERSPACE1: Cannot connect to database SAMPLE: SQL1032N Instance is not"
        " started (no start database manager command was issued)\n"
    )


def test_missing_profile(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    runner = FakeRunner([])
    assert main(_argv(tmp_path / "nobody", tmp_path), runner=runner) == 3
    assert "Cannot find the DB2 profile" in capsys.readouterr().out
    assert not runner.scripts


def test_invalid_tablespace_name(
    instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    runner = FakeRunner([])
    argv = ["-i", str(instance_home), "-d", "SAMPLE", "-t", "X' OR '1'='1", "--lock-dir", str(tmp_path)]
    assert main(argv, runner=runner) == 3
    assert capsys.readouterr().out.startswith("Invalid arguments: tablespace: ")
    assert not runner.scripts


def test_invalid_levels(instance_home: Path, tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    runner = FakeRunner([])
    assert main(_argv(instance_home, tmp_path, "-w", "90", "-c", "80"), runner=runner) == 3
    assert "must be lower than critical level" in capsys.readouterr().out
    assert not runner.scripts


def test_missing_arguments(capsys: pytest.CaptureFixture[str]) -> None:
    assert main(["-d", "SAMPLE"], runner=FakeRunner([])) == 3
    assert capsys.readouterr().out.startswith("check_db2_tablespace: the following arguments")
