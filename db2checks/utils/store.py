#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

#   .--File locking--------------------------------------------------------.
#   | A plug-in must not run twice with the same arguments at a time, e.g. |
#   | when a DB2 command hangs longer than the check interval. The lock is |
#   | an flock() on a file named after the plug-in and its arguments. The  |
#   | kernel drops it when the process dies, so stale PIDs do not matter.  |
#   '----------------------------------------------------------------------'

from __future__ import annotations

import errno
import fcntl
import hashlib
import os
import re
from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from pathlib import Path

from db2checks.utils.log import logger

__all__ = ["lockfile_path", "try_locked"]

_MAX_KEY_LENGTH = 128


def lockfile_path(lock_dir: Path, prog: str, argv: Sequence[str]) -> Path:
    """Path of the lock file for one set of arguments

    >>> lockfile_path(Path("/tmp"), "check_db2_tablespace", ["-d", "SAMPLE", "-t", "TS_1"])
    PosixPath('/tmp/check_db2_tablespace_dSAMPLEtTS1.lock')
    >>> len(lockfile_path(Path("/tmp"), "check", ["x" * 500]).name)
    91
    """
    key = re.sub(r"[^A-Za-z0-9]", "", "".join(argv))
    if len(key) > _MAX_KEY_LENGTH:
        key = key[: _MAX_KEY_LENGTH // 2] + hashlib.sha256(key.encode()).hexdigest()[:16]
    return lock_dir / f"{prog}_{key}.lock"


@contextmanager
def try_locked(path: Path) -> Iterator[bool]:
    """Try to get an exclusive lock without waiting for it

    Yields True if the lock was acquired, False if another process holds it.
    """
    path.parent.mkdir(mode=0o770, parents=True, exist_ok=True)
    logger.debug("Try to acquire lock on %s", path)
    fd = os.open(path, os.O_RDWR | os.O_CREAT, 0o660)
    try:
        try:
            fcntl.flock(fd, fcntl.LOCK_EX | fcntl.LOCK_NB)
        except OSError as e:
            if e.errno not in (errno.EAGAIN, errno.EWOULDBLOCK, errno.EACCES):
                raise
            logger.debug("Lock on %s is held by another process", path)
            yield False
            return

        os.ftruncate(fd, 0)
        os.write(fd, b"%d\n" % os.getpid())
        logger.debug("Got lock on %s", path)
        yield True
    finally:
        # closing the descriptor releases the lock
        os.close(fd)
        logger.debug("Released lock on %s", path)
