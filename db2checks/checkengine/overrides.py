#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Categorical override rules of the plug-ins

Every rule has the signature of :data:`db2checks.checkengine.OverrideRule`.
The attribute keys they read are filled in by the parsers in
:mod:`db2checks.db2`.
"""

from __future__ import annotations

from typing import Final

from .checkresults import Report
from .evaluator import Measurement, OverrideRule
from .levels import StatusLevel

__all__ = [
    "CONNECTION_RULES",
    "connection_refused",
    "HADR_RULES",
    "hadr_connection",
    "ignore_levels",
    "TABLESPACE_RULES",
    "tablespace_auto_resize",
    "tablespace_state",
    "tablespace_system_managed",
]

_TEMPORARY_OR_ANY: Final = frozenset({"ANY", "SYSTEMP", "USRTEMP"})


def _normalize(value: str) -> str:
    """DB2 spells states as REMOTE_CATCHUP_PENDING, documentation as RemoteCatchupPending

    >>> _normalize("REMOTE_CATCHUP_PENDING") == _normalize("RemoteCatchupPending")
    True
    """
    return value.replace("_", "").replace(" ", "").lower()


#   .--tablespace----------------------------------------------------------.


def tablespace_auto_resize(report: Report, measurement: Measurement) -> Report:
    if measurement.attributes.get("auto_resize", "").upper() not in ("YES", "1"):
        return report
    if report.state is not StatusLevel.CRITICAL:
        return report
    return report.replace(
        state=StatusLevel.OK,
        summary=f"{report.summary}, auto-resize is enabled: check the free space of the file system",
    )


def tablespace_system_managed(report: Report, measurement: Measurement) -> Report:
    """SMS tablespaces always use all of their allocated space"""
    if measurement.attributes.get("type", "").upper() != "SMS":
        return report
    if measurement.attributes.get("content_type", "").upper() not in _TEMPORARY_OR_ANY:
        return report
    return report.replace(
        state=StatusLevel.OK,
        summary=f"{report.summary}, system managed space",
    )


def tablespace_state(report: Report, measurement: Measurement) -> Report:
    state = measurement.attributes.get("state", "NORMAL").upper()
    if state == "NORMAL":
        return report
    return report.replace(
        state=StatusLevel.worst(report.state, StatusLevel.WARNING),
        summary=f"[{state}] {report.summary}",
    )


TABLESPACE_RULES: Final[tuple[OverrideRule, ...]] = (
    tablespace_auto_resize,
    tablespace_system_managed,
    tablespace_state,
)


#   .--HADR----------------------------------------------------------------.


def hadr_connection(report: Report, measurement: Measurement) -> Report:
    role = _normalize(measurement.attributes.get("role", ""))
    state = _normalize(measurement.attributes.get("state", ""))
    disconnected = "disconnected" in (
        state,
        _normalize(measurement.attributes.get("connect_status", "")),
    )

    match role:
        case "primary" if disconnected:
            return report.replace(
                state=StatusLevel.CRITICAL,
                summary=f"Primary is disconnected from its standby, {report.summary}",
            )
        case "standby" if state == "remotecatchuppending":
            return report.replace(
                state=StatusLevel.WARNING,
                summary=f"Standby is waiting for the primary (remote catchup pending), {report.summary}",
            )
        case "standby" if disconnected:
            return report.replace(
                state=StatusLevel.CRITICAL,
                summary=f"Standby is disconnected from its primary, {report.summary}",
            )
    return report


HADR_RULES: Final[tuple[OverrideRule, ...]] = (hadr_connection,)


#   .--connection----------------------------------------------------------.


def connection_refused(report: Report, measurement: Measurement) -> Report:
    if "sql_code" not in measurement.attributes:
        return report
    return report.replace(
        state=StatusLevel.CRITICAL,
        summary=(
            f"{report.summary} is not connectable: {measurement.attributes['sql_code']} "
            f"{measurement.attributes.get('sql_message', '')}".rstrip()
        ),
    )


CONNECTION_RULES: Final[tuple[OverrideRule, ...]] = (connection_refused,)


#   .--memory--------------------------------------------------------------.


def ignore_levels(
    report: Report, measurement: Measurement  # pylint: disable=unused-argument
) -> Report:
    if report.state is StatusLevel.OK:
        return report
    return report.replace(state=StatusLevel.OK, summary=f"{report.summary}, levels ignored")
