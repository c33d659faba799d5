#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Health-check plug-ins for IBM DB2, compatible with Nagios and Checkmk.

The plug-ins live in :mod:`db2checks.active_checks`, the threshold evaluation
they share in :mod:`db2checks.checkengine`."""

__version__ = "1.0.0"
