# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import Mapping, Type, final

from ..tools.types import LatLon, Self
from .converters import cell, to_float


@final
@dataclass(frozen=True)
class Stop:
    """Stop represents a physical place where passengers can embark
    and disembark from vehicles (or a station grouping such places).

    Equivalent to `GTFS's stops.txt entries <https://gtfs.org/schedule/reference/#stopstxt>`_.
    """

    id: str
    name: str
    lat: float = field(repr=False)
    lon: float = field(repr=False)

    @property
    def lat_lon(self) -> LatLon:
        return self.lat, self.lon

    @classmethod
    def from_gtfs_row(cls: Type[Self], row: Mapping[str, str]) -> Self:
        return cls(  # type: ignore
            id=cell(row, "stop_id"),
            name=cell(row, "stop_name"),
            lat=to_float(cell(row, "stop_lat")),
            lon=to_float(cell(row, "stop_lon")),
        )
