#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

__all__ = [
    "ConfigurationError",
    "DataUnavailable",
    "Db2CheckException",
    "InstanceAlreadyRunning",
]


# never used directly in the code. Just some wrapper to make all of our
# exceptions handleable with one call
class Db2CheckException(Exception):
    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)

    def __str__(self) -> str:
        return self.reason


class ConfigurationError(Db2CheckException):
    """Raised for malformed command line arguments or threshold levels.

    This is detected before anything is measured. The plug-in reports
    UNKNOWN, as the monitoring plug-in API demands for invalid arguments."""


class DataUnavailable(Db2CheckException):
    """A DB2 command failed or its output could not be interpreted.

    Only the data acquisition raises this. It is turned into a flag on the
    measurement before the evaluation, which never sees the exception."""


class InstanceAlreadyRunning(Db2CheckException):
    """Another process runs the same plug-in with the same arguments."""
