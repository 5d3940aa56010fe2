# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from os import PathLike
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from typing_extensions import Self
else:
    Self = TypeVar("Self")


StrPath = str | PathLike[str]
"""StrPath represents anything which can be interpreted as a string-based path."""

RGBA = tuple[int, int, int, int]
"""RGBA is a color with 4 components, each in the [0, 255] range."""

LatLon = tuple[float, float]
"""LatLon is a WGS84 (latitude, longitude) pair."""

XY = tuple[float, float]
"""XY is a projected (x, y) pair, in the target spatial reference."""

JSONObject = dict[str, Any]
"""JSONObject is a decoded JSON object, as sent to or received from the remote portal."""
