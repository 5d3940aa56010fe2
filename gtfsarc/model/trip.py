# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import Mapping, Type, final

from ..tools.types import Self
from .converters import cell


@final
@dataclass(frozen=True)
class Trip:
    """Trips represent a single journey made by a vehicle, belonging to
    a specific :py:class:`Route`. Only the fields used for styling shapes are kept.

    Equivalent to `GTFS's trips.txt entries <https://gtfs.org/schedule/reference/#tripstxt>`_.
    """

    id: str
    route_id: str

    shape_id: str = field(default="", repr=False)
    """shape_id references :py:attr:`ShapePoint.shape_id`, empty if the trip has no shape."""

    @classmethod
    def from_gtfs_row(cls: Type[Self], row: Mapping[str, str]) -> Self:
        return cls(  # type: ignore
            id=cell(row, "trip_id"),
            route_id=cell(row, "route_id"),
            shape_id=cell(row, "shape_id"),
        )
