# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from typing import Mapping

logger = logging.getLogger(__name__)


def to_float(x: str) -> float:
    """to_float parses a GTFS float, returning 0.0 on empty or malformed inputs.

    >>> to_float("52.25")
    52.25
    >>> to_float(" -1e3 ")
    -1000.0
    >>> to_float("")
    0.0
    >>> to_float("N/A")
    0.0
    """
    try:
        return float(x)
    except ValueError:
        if x:
            logger.debug("Malformed float %r - using 0.0", x)
        return 0.0


def to_int(x: str) -> int:
    """to_int parses a GTFS integer, returning 0 on empty or malformed inputs.

    >>> to_int("12")
    12
    >>> to_int("1.5")
    0
    >>> to_int("")
    0
    """
    try:
        return int(x)
    except ValueError:
        if x:
            logger.debug("Malformed integer %r - using 0", x)
        return 0


def cell(row: Mapping[str, str | None], column: str) -> str:
    """cell returns ``row[column]``, or an empty string if the column is missing.
    csv.DictReader uses None for cells missing in short rows, which is also
    mapped to an empty string.

    >>> cell({"stop_id": "1"}, "stop_id")
    '1'
    >>> cell({"stop_id": "1"}, "stop_name")
    ''
    >>> cell({"stop_id": None}, "stop_id")
    ''
    """
    return row.get(column) or ""
