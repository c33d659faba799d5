#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Running DB2 commands in the environment of an instance

The DB2 command line processor (CLP) keeps its connection in a background
process bound to the calling shell. A "db2 connect" and the following query
therefore have to run in the same shell, which is why every call here is one
bash script that sources the db2profile of the instance first.
"""

from __future__ import annotations

import os
import re
import shlex
import subprocess
from collections.abc import Sequence
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Final, NamedTuple, Protocol

from db2checks.exceptions import DataUnavailable
from db2checks.utils.log import logger, VERBOSE

__all__ = [
    "CommandOutput",
    "CommandRunnerProto",
    "Db2Clp",
    "parse_sql_message",
    "SqlMessage",
]

# Return codes of the CLP for the "db2 -x" statement
CLP_OK: Final = 0
CLP_NO_ROWS: Final = 1
CLP_WARNING: Final = 2

# Return code of the scripts below if "db2 connect" fails
_CONNECT_FAILED: Final = 64

_SQL_MESSAGE_RE: Final = re.compile(r"\b(SQL\d{4,5}[NCW])\s+(.*)")

# Marks the line with the time stamps around "db2 connect"
_CONNECT_TIME_TAG: Final = "DB2CHECKS_CONNECT_TIME"
_CONNECT_TIME_RE: Final = re.compile(
    rf"^{_CONNECT_TIME_TAG}(?: (\d+[.,]\d+) (\d+[.,]\d+))?[ \t]*\n?", re.M
)

_KNOWN_SQL_MESSAGES: Final = {
    "SQL1013N": "Database alias not found",
    "SQL1032N": "Instance is not started (no start database manager command was issued)",
    "SQL1060N": "User does not have the CONNECT privilege",
    "SQL0551N": "User does not have the required authorization or privilege",
    "SQL30082N": "Security processing failed (wrong user or password)",
    "SQL30081N": "Communication error",
    "SQL1224N": "The database manager is not able to accept new requests",
}


class SqlMessage(NamedTuple):
    code: str
    text: str

    @property
    def description(self) -> str:
        return _KNOWN_SQL_MESSAGES.get(self.code, self.text)

    def __str__(self) -> str:
        return f"{self.code} {self.description}"


def parse_sql_message(output: str) -> SqlMessage | None:
    """Find the first SQL error or warning message in a CLP output

    >>> parse_sql_message("SQL1032N  No start database manager command was issued.  SQLSTATE=57019")
    SqlMessage(code='SQL1032N', text='No start database manager command was issued.  SQLSTATE=57019')
    >>> str(parse_sql_message("SQL1013N  The database alias name or database name cannot be found."))
    'SQL1013N Database alias not found'
    >>> parse_sql_message("   Database Connection Information") is None
    True
    """
    for line in output.splitlines():
        if (match := _SQL_MESSAGE_RE.search(line)) is not None:
            return SqlMessage(match.group(1), match.group(2).strip())
    return None


@dataclass(frozen=True)
class CommandOutput:
    returncode: int
    stdout: str
    stderr: str

    @property
    def output(self) -> str:
        return "\n".join(s for s in (self.stdout.strip(), self.stderr.strip()) if s)


def _split_connect_time(result: CommandOutput) -> tuple[CommandOutput, float | None]:
    """Remove the time stamps of the connect script from the output

    >>> _split_connect_time(CommandOutput(0, "connected\\nDB2CHECKS_CONNECT_TIME 10.500000 10,750000\\n", ""))
    (CommandOutput(returncode=0, stdout='connected\\n', stderr=''), 250.0)
    >>> _split_connect_time(CommandOutput(0, "connected\\nDB2CHECKS_CONNECT_TIME  \\n", ""))[1] is None
    True
    """
    if (match := _CONNECT_TIME_RE.search(result.stdout)) is None:
        return result, None

    stdout = result.stdout[: match.start()] + result.stdout[match.end() :]
    stripped = replace(result, stdout=stdout)
    if match.group(1) is None:
        return stripped, None
    # EPOCHREALTIME uses the decimal separator of the locale
    start, end = (float(match.group(n).replace(",", ".")) for n in (1, 2))
    return stripped, (end - start) * 1000


class CommandRunnerProto(Protocol):
    def __call__(self, script: str, *, timeout: float) -> CommandOutput: ...


def run_bash(script: str, *, timeout: float) -> CommandOutput:
    try:
        completed_process = subprocess.run(
            ["bash", "-c", script],
            capture_output=True,
            encoding="utf8",
            errors="replace",
            check=False,
            timeout=timeout,
            env={k: v for k, v in os.environ.items() if k != "LANG"},
        )
    except subprocess.TimeoutExpired as e:
        raise DataUnavailable(f"Timeout: DB2 command did not finish within {timeout:g}s") from e
    except OSError as e:
        raise DataUnavailable(f"Cannot execute DB2 command: {e}") from e
    return CommandOutput(
        completed_process.returncode,
        completed_process.stdout,
        completed_process.stderr,
    )


class Db2Clp:
    def __init__(
        self,
        instance_home: Path,
        *,
        timeout: float = 20.0,
        runner: CommandRunnerProto = run_bash,
    ) -> None:
        self.instance_home = instance_home
        self.timeout = timeout
        self._runner = runner

    @property
    def profile(self) -> Path:
        return self.instance_home / "sqllib" / "db2profile"

    def _script(self, *lines: str) -> str:
        if not self.profile.is_file():
            raise DataUnavailable(f"Cannot find the DB2 profile {self.profile}")
        return "\n".join((f". {shlex.quote(str(self.profile))} || exit 127", *lines))

    def _run(self, script: str) -> CommandOutput:
        logger.debug("Executing:\n%s", script)
        result = self._runner(script, timeout=self.timeout)
        logger.log(VERBOSE, "Return code %d, output:\n%s", result.returncode, result.output)
        if result.returncode == 127:
            raise DataUnavailable(f"Cannot load the DB2 environment: {result.output}")
        return result

    def command(self, args: Sequence[str]) -> CommandOutput:
        """Run a command like db2pd, which does not need a connection"""
        return self._run(self._script(shlex.join(args)))

    def connect(self, database: str) -> tuple[CommandOutput, float | None]:
        """Connect and disconnect again

        Returns the output of "db2 connect" and its duration in milliseconds.
        The duration is None if the shell cannot measure it (bash < 5.0).
        """
        result = self._run(
            self._script(
                "START=$EPOCHREALTIME",
                f"db2 connect to {shlex.quote(database)}",
                "RC=$?",
                "END=$EPOCHREALTIME",
                "db2 connect reset > /dev/null",
                f'echo "{_CONNECT_TIME_TAG} $START $END"',
                "exit $RC",
            )
        )
        return _split_connect_time(result)

    def query(self, database: str, sql: str) -> list[str]:
        """Return the lines of a query result, without column headers

        A failing connection or statement raises DataUnavailable, the text of
        the SQL message is the reason.
        """
        result = self._run(
            self._script(
                f"OUT=$(db2 connect to {shlex.quote(database)}) || "
                f'{{ echo "$OUT"; exit {_CONNECT_FAILED}; }}',
                f"db2 -x {shlex.quote(sql)}",
                "RC=$?",
                "db2 connect reset > /dev/null",
                "exit $RC",
            )
        )

        if result.returncode == CLP_NO_ROWS:
            return []
        if result.returncode in (CLP_OK, CLP_WARNING):
            return [line for line in result.stdout.splitlines() if line.strip()]

        message = parse_sql_message(result.output)
        if result.returncode == _CONNECT_FAILED:
            raise DataUnavailable(
                f"Cannot connect to database {database}: {message or result.output}"
            )
        raise DataUnavailable(f"Query failed: {message or result.output}")
