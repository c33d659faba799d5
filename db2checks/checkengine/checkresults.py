#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import dataclasses
import re

from db2checks.utils.render import drop_dotzero

from .levels import StatusLevel, ThresholdPolicy

__all__ = ["PerfMetric", "Report"]


@dataclasses.dataclass(frozen=True)
class PerfMetric:
    name: str
    value: float
    unit: str = ""
    warn: float | None = None
    crit: float | None = None
    min: float | None = None
    max: float | None = None

    @classmethod
    def with_levels(
        cls,
        name: str,
        value: float,
        policy: ThresholdPolicy,
        *,
        unit: str = "",
        min: float | None = 0,  # pylint: disable=redefined-builtin
    ) -> PerfMetric:
        return cls(
            name,
            value,
            unit,
            policy.warning,
            policy.critical,
            min,
            policy.upper_bound,
        )

    def _fields(self) -> list[str]:
        fields = [_fmt(v) for v in (self.warn, self.crit, self.min, self.max)]
        while fields and not fields[-1]:
            fields.pop()
        return fields

    def as_nagios(self) -> str:
        """
        >>> PerfMetric("used", 85.0, "%", 80, 90, 0, 100).as_nagios()
        'used=85%;80;90;0;100'
        >>> PerfMetric("log gap", 1024).as_nagios()
        "'log gap'=1024"
        """
        name = f"'{self.name}'" if re.search(r"[\s'=]", self.name) else self.name
        return ";".join([f"{name}={_fmt(self.value)}{self.unit}", *self._fields()])

    def as_checkmk(self) -> str:
        """Local checks do not know about units

        >>> PerfMetric("used", 85.0, "%", 80, 90, 0, 100).as_checkmk()
        'used=85;80;90;0;100'
        """
        name = re.sub(r"[^\w.-]", "_", self.name)
        return ";".join([f"{name}={_fmt(self.value)}", *self._fields()])


def _fmt(value: float | None) -> str:
    return "" if value is None else drop_dotzero(value, 2)


@dataclasses.dataclass(frozen=True, kw_only=True)
class Report:
    state: StatusLevel = StatusLevel.OK
    summary: str = ""
    details: tuple[str, ...] = ()
    metrics: tuple[PerfMetric, ...] = ()

    def replace(self, **changes: object) -> Report:
        return dataclasses.replace(self, **changes)  # type: ignore[arg-type]

    def as_text(self) -> str:
        """Two line Nagios output: summary and performance data, then the long output

        >>> print(Report(state=StatusLevel.WARNING, summary="Used: 85.0%", details=("Type: DMS",),
        ...              metrics=(PerfMetric("used", 85, "%", 80, 90),)).as_text())
        Used: 85.0% | used=85%;80;90
        Type: DMS
        """
        safe_summary = self._replace_pipe(self.summary)
        safe_details = "".join(f"{self._replace_pipe(line)}\n" for line in self.details)
        return "\n".join(
            (
                (
                    " | ".join((safe_summary, " ".join(m.as_nagios() for m in self.metrics)))
                    if self.metrics
                    else safe_summary
                ),
                safe_details,
            )
        ).strip()

    def as_checkmk(self, service_name: str) -> str:
        """Single line in the format of a Checkmk local check

        >>> Report(state=StatusLevel.CRITICAL, summary="Instance is not started").as_checkmk(
        ...     "DB2 connection SAMPLE")
        '2 DB2_connection_SAMPLE - Instance is not started'
        """
        metrics = "|".join(m.as_checkmk() for m in self.metrics) or "-"
        text = "\\n".join((self.summary, *self.details))
        name = re.sub(r"\s+", "_", service_name.strip())
        return f"{self.state.value} {name} {metrics} {text}"

    @staticmethod
    def _replace_pipe(txt: str) -> str:
        """The vertical bar indicates end of service output and start of metrics.
        Replace the ones in the output by a Unicode "Light vertical bar"
        """
        return txt.replace("|", "❘")
