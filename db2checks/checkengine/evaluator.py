#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Derive a report from a measurement

The evaluation is a chain of stages, the first one that applies wins:

    1. the data could not be acquired                 -> UNKNOWN
    2. the monitored object does not exist            -> OK or CRITICAL
    3. categorical override rules of the plug-in      -> modify the result of 4.
    4. the numeric rule of the threshold policy

An override rule receives the report of the numeric rule and returns a new
one. Reports are immutable, the rules never modify them in place.
"""

from __future__ import annotations

import dataclasses
from collections.abc import Callable, Mapping
from typing import Final, Self

from db2checks.utils import render

from .checkresults import PerfMetric, Report
from .levels import check_levels, StatusLevel, ThresholdPolicy

__all__ = ["evaluate", "Measurement", "OverrideRule", "Overrides"]

_RENDER_FUNCTIONS: Final[Mapping[str, Callable[[float], str]]] = {
    "%": render.percent,
    "ms": render.milliseconds,
    "B": render.fmt_bytes,
}


@dataclasses.dataclass(frozen=True)
class Measurement:
    entity: str
    value: float | None = None
    label: str = "used"
    metric_name: str = "used"
    unit: str = "%"
    attributes: Mapping[str, str] = dataclasses.field(default_factory=dict)
    absent: bool = False
    error: str | None = None
    metrics: tuple[PerfMetric, ...] = ()
    details: tuple[str, ...] = ()

    @classmethod
    def unavailable(cls, entity: str, error: str) -> Self:
        return cls(entity, error=error)

    @classmethod
    def not_found(cls, entity: str) -> Self:
        return cls(entity, absent=True)

    @property
    def available(self) -> bool:
        return self.error is None


OverrideRule = Callable[[Report, Measurement], Report]


@dataclasses.dataclass(frozen=True)
class Overrides:
    absence_ok: bool = False
    rules: tuple[OverrideRule, ...] = ()


def evaluate(
    measurement: Measurement,
    policy: ThresholdPolicy,
    overrides: Overrides = Overrides(),
) -> Report:
    """
    >>> evaluate(Measurement("Tablespace TS1", 85.0), ThresholdPolicy(80, 90)).summary
    'Tablespace TS1 used: 85.0% (warn/crit at 80.0%/90.0%)'
    >>> evaluate(Measurement.unavailable("Tablespace TS1", "SQL1032N"), ThresholdPolicy(80, 90)).state
    <StatusLevel.UNKNOWN: 3>
    """
    if not measurement.available:
        return Report(
            state=StatusLevel.UNKNOWN,
            summary=f"{measurement.entity}: {measurement.error}",
            details=measurement.details,
        )

    if measurement.absent:
        return Report(
            state=StatusLevel.OK if overrides.absence_ok else StatusLevel.CRITICAL,
            summary=f"{measurement.entity} does not exist",
            details=measurement.details,
        )

    report = _apply_numeric_rule(measurement, policy)
    for rule in overrides.rules:
        report = rule(report, measurement)
    return report


def _apply_numeric_rule(measurement: Measurement, policy: ThresholdPolicy) -> Report:
    if measurement.value is None:
        # nothing to compare, only the categorical rules may change the state
        return Report(
            summary=measurement.entity,
            details=measurement.details,
            metrics=measurement.metrics,
        )

    state, text = check_levels(
        measurement.value,
        policy,
        label=measurement.label,
        render_func=_RENDER_FUNCTIONS.get(measurement.unit, render.drop_dotzero),
    )
    return Report(
        state=state,
        summary=f"{measurement.entity} {text}",
        details=measurement.details,
        metrics=(
            PerfMetric.with_levels(
                measurement.metric_name, measurement.value, policy, unit=measurement.unit
            ),
            *measurement.metrics,
        ),
    )
