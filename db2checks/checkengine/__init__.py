#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from .checkresults import PerfMetric, Report
from .evaluator import evaluate, Measurement, OverrideRule, Overrides
from .levels import check_levels, StatusLevel, ThresholdPolicy

__all__ = [
    "check_levels",
    "evaluate",
    "Measurement",
    "OverrideRule",
    "Overrides",
    "PerfMetric",
    "Report",
    "StatusLevel",
    "ThresholdPolicy",
]
