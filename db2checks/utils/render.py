#!/usr/bin/env python3
# Copyright (C) 2026 db2checks authors - License: GNU General Public License v2
# This file is part of db2checks. It is subject to the terms and
# conditions defined in the file COPYING, which is part of this source code package.
"""Rendering of numbers for the human readable part of the plug-in output"""

_IEC_PREFIXES = ("", "Ki", "Mi", "Gi", "Ti", "Pi", "Ei", "Zi", "Yi")


def drop_dotzero(v: float, digits: int = 2) -> str:
    """Renders a number as a floating point number and drops useless
    zeroes at the end of the fraction

    >>> drop_dotzero(45.1)
    '45.1'
    >>> drop_dotzero(45.0)
    '45'
    >>> drop_dotzero(45.111, 1)
    '45.1'
    >>> drop_dotzero(45.999, 1)
    '46'
    """
    t = "%.*f" % (digits, v)
    if "." in t:
        return t.rstrip("0").rstrip(".")
    return t


def percent(perc: float) -> str:
    """Renders a given number as percentage string

    >>> percent(0)
    '0%'
    >>> percent(85)
    '85.0%'
    >>> percent(12.3456)
    '12.35%'
    >>> percent(100)
    '100%'
    >>> percent(0.001)
    '0.001%'
    """
    if perc == 0:
        return "0%"

    if abs(perc) >= 100:
        result = "%d" % perc
    elif 0.0 < abs(perc) < 0.01:
        result = ("%.7f" % perc).rstrip("0")
    else:
        result = drop_dotzero(perc, 2)

    # add .0 to all integers < 100
    if float(result).is_integer() and abs(float(result)) < 100:
        result += ".0"

    return result + "%"


def fmt_bytes(b: float, *, precision: int = 2) -> str:
    """Formats byte values to be used in texts for humans.

    >>> fmt_bytes(512)
    '512.00 B'
    >>> fmt_bytes(2048)
    '2.00 KiB'
    >>> fmt_bytes(5 * 1024**3, precision=1)
    '5.0 GiB'
    """
    value = float(b)
    for prefix in _IEC_PREFIXES:
        if abs(value) < 1024 or prefix == _IEC_PREFIXES[-1]:
            return "%.*f %sB" % (precision, value, prefix)
        value /= 1024
    raise AssertionError("unreachable")


def milliseconds(ms: float) -> str:
    """
    >>> milliseconds(12.3456)
    '12.35 ms'
    >>> milliseconds(2500)
    '2.50 s'
    """
    if ms >= 1000:
        return "%.2f s" % (ms / 1000)
    return "%.2f ms" % ms
