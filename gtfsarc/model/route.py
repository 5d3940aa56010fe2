# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import Mapping, Type, final

from ..tools.color import to_rgba
from ..tools.types import RGBA, Self
from .converters import cell


@final
@dataclass(frozen=True)
class Route:
    """Route instances group multiple trips under a single, common identifier.

    The same as a "line"; not to be confused with a "shape" or a "pattern".

    Equivalent to `GTFS's routes.txt entries <https://gtfs.org/schedule/reference/#routestxt>`_.
    """

    id: str
    short_name: str = ""
    long_name: str = field(default="", repr=False)
    color: str = field(default="", repr=False)

    @property
    def rgba(self) -> RGBA:
        """rgba is the decoded :py:attr:`color`, falling back to
        :py:const:`~gtfsarc.tools.color.DEFAULT_RGBA` if it's empty or malformed."""
        return to_rgba(self.color)

    @classmethod
    def from_gtfs_row(cls: Type[Self], row: Mapping[str, str]) -> Self:
        return cls(  # type: ignore
            id=cell(row, "route_id"),
            short_name=cell(row, "route_short_name"),
            long_name=cell(row, "route_long_name"),
            color=cell(row, "route_color"),
        )
