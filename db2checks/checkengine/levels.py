#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.

from __future__ import annotations

import enum
from collections.abc import Callable
from dataclasses import dataclass

from db2checks.exceptions import ConfigurationError

__all__ = ["check_levels", "StatusLevel", "ThresholdPolicy"]


class StatusLevel(enum.Enum):
    """Monitoring states, their values are the plug-in exit codes

    OK, WARNING and CRITICAL form a scale of severity. UNKNOWN means that
    nothing could be measured and has no place on that scale, so the members
    are not comparable with `<` and :meth:`worst` refuses UNKNOWN.
    """

    OK = 0
    WARNING = 1
    CRITICAL = 2
    UNKNOWN = 3

    @property
    def exit_code(self) -> int:
        return self.value

    @classmethod
    def worst(cls, *states: StatusLevel) -> StatusLevel:
        """The most severe of the given OK, WARNING and CRITICAL states

        >>> StatusLevel.worst(StatusLevel.OK, StatusLevel.WARNING)
        <StatusLevel.WARNING: 1>
        >>> StatusLevel.worst(StatusLevel.CRITICAL, StatusLevel.WARNING)
        <StatusLevel.CRITICAL: 2>
        >>> StatusLevel.worst()
        <StatusLevel.OK: 0>
        >>> StatusLevel.worst(StatusLevel.WARNING, StatusLevel.UNKNOWN)
        Traceback (most recent call last):
            ...
        ValueError: UNKNOWN has no severity
        """
        if cls.UNKNOWN in states:
            raise ValueError("UNKNOWN has no severity")
        # the values of OK, WARNING and CRITICAL are in the order of severity
        return cls(max((s.value for s in states), default=cls.OK.value))


@dataclass(frozen=True)
class ThresholdPolicy:
    """Upper warning and critical levels

    >>> ThresholdPolicy(80, 90)
    ThresholdPolicy(warning=80, critical=90, upper_bound=100.0)
    >>> ThresholdPolicy(90, 80)
    Traceback (most recent call last):
        ...
    db2checks.exceptions.ConfigurationError: Warning level (90) must be lower than critical level (80)
    """

    warning: float
    critical: float
    upper_bound: float = 100.0

    def __post_init__(self) -> None:
        for name, level in (("Warning", self.warning), ("Critical", self.critical)):
            if not 0 < level <= self.upper_bound:
                raise ConfigurationError(
                    f"{name} level ({level}) must be greater than 0 and at most {self.upper_bound}"
                )
        if self.warning >= self.critical:
            raise ConfigurationError(
                f"Warning level ({self.warning}) must be lower than critical level ({self.critical})"
            )

    def classify(self, value: float) -> StatusLevel:
        if value < self.warning:
            return StatusLevel.OK
        if value < self.critical:
            return StatusLevel.WARNING
        return StatusLevel.CRITICAL


def check_levels(
    value: float,
    policy: ThresholdPolicy,
    *,
    label: str,
    render_func: Callable[[float], str],
) -> tuple[StatusLevel, str]:
    """Apply the numeric rule and describe the outcome

    >>> check_levels(85, ThresholdPolicy(80, 90), label="Used", render_func=str)
    (<StatusLevel.WARNING: 1>, 'Used: 85 (warn/crit at 80/90)')
    >>> check_levels(12, ThresholdPolicy(80, 90), label="Used", render_func=str)
    (<StatusLevel.OK: 0>, 'Used: 12')
    """
    state = policy.classify(value)
    text = f"{label}: {render_func(value)}"
    if state is StatusLevel.OK:
        return state, text
    return (
        state,
        f"{text} (warn/crit at {render_func(policy.warning)}/{render_func(policy.critical)})",
    )
