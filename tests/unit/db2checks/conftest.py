#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from collections.abc import Iterator
from pathlib import Path

import pytest

from tests.unit.db2checks.fakes import FakeRunner, MakeClp

from db2checks.db2.clp import CommandOutput, Db2Clp
from db2checks.utils.log import clear_console_logging


@pytest.fixture(name="instance_home")
def fixture_instance_home(tmp_path: Path) -> Path:
    home = tmp_path / "db2inst1"
    (home / "sqllib").mkdir(parents=True)
    (home / "sqllib" / "db2profile").write_text("# DB2 environment\n")
    return home


@pytest.fixture(name="make_clp")
def fixture_make_clp(instance_home: Path) -> MakeClp:
    def _make_clp(*outputs: CommandOutput) -> tuple[Db2Clp, FakeRunner]:
        runner = FakeRunner(outputs)
        return Db2Clp(instance_home, timeout=5, runner=runner), runner

    return _make_clp


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    yield
    clear_console_logging()
