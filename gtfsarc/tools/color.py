# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

# pyright: reportConstantRedefinition=false
import logging
import os
import re

from ..errors import DataFormatError
from .types import RGBA

if os.getenv("NO_COLOR"):
    RESET = ""
    DIM = ""

    RED = ""
    GREEN = ""
    YELLOW = ""
    BLUE = ""
    CYAN = ""
    WHITE = ""

    BG_RED = ""

else:
    RESET = "\x1b[0m"
    DIM = "\x1b[2m"

    RED = "\x1b[31m"
    GREEN = "\x1b[32m"
    YELLOW = "\x1b[33m"
    BLUE = "\x1b[34m"
    CYAN = "\x1b[36m"
    WHITE = "\x1b[37m"

    BG_RED = "\x1b[41m"


DEFAULT_RGBA: RGBA = (136, 136, 136, 255)
"""Mid-grey, used for routes without a (valid) route_color."""

_HEX_COLOR = re.compile(r"([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})([0-9A-Fa-f]{2})")

logger = logging.getLogger(__name__)


def parse_hex_rgba(color: str) -> RGBA:
    """Decodes a color of exactly six hex digits (without a "#" prefix)
    into a fully opaque RGBA tuple. Raises :py:exc:`~gtfsarc.errors.DataFormatError`
    on any other input.

    >>> parse_hex_rgba("FF8000")
    (255, 128, 0, 255)
    >>> parse_hex_rgba("0a0B0c")
    (10, 11, 12, 255)
    >>> parse_hex_rgba("F80")
    Traceback (most recent call last):
    ...
    gtfsarc.errors.DataFormatError: invalid 6-digit hex color: 'F80'
    """
    m = _HEX_COLOR.fullmatch(color)
    if not m:
        raise DataFormatError(f"invalid 6-digit hex color: {color!r}")
    return (int(m[1], base=16), int(m[2], base=16), int(m[3], base=16), 255)


def to_rgba(color: str, default: RGBA = DEFAULT_RGBA) -> RGBA:
    """Like :py:func:`parse_hex_rgba`, but empty or malformed colors
    fall back to ``default`` instead of raising.

    >>> to_rgba("00FF00")
    (0, 255, 0, 255)
    >>> to_rgba("")
    (136, 136, 136, 255)
    >>> to_rgba("GGGGGG")
    (136, 136, 136, 255)
    >>> to_rgba("#00FF00")
    (136, 136, 136, 255)
    """
    if not color:
        return default
    try:
        return parse_hex_rgba(color)
    except DataFormatError as e:
        logger.debug("%s - using default color", e)
        return default
