# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import Mapping, Type, final

from ..tools.types import LatLon, Self
from .converters import cell, to_float, to_int


@final
@dataclass(frozen=True)
class ShapePoint:
    """ShapePoints describe the real path a trip takes, used for plotting
    journeys on a map.

    Equivalent to `GTFS's shapes.txt entries <https://gtfs.org/schedule/reference/#shapestxt>`_.
    """

    shape_id: str
    sequence: int
    lat: float = field(repr=False)
    lon: float = field(repr=False)
    dist_traveled: float = field(default=0.0, repr=False)

    @property
    def lat_lon(self) -> LatLon:
        return self.lat, self.lon

    @classmethod
    def from_gtfs_row(cls: Type[Self], row: Mapping[str, str]) -> Self:
        """Creates a ShapePoint from a row returned by csv.DictReader.
        Malformed numeric fields are parsed as zero.

        >>> ShapePoint.from_gtfs_row({"shape_id": "A", "shape_pt_lat": "52.1",
        ...                           "shape_pt_lon": "21.0", "shape_pt_sequence": "x"})
        ShapePoint(shape_id='A', sequence=0)
        """
        return cls(  # type: ignore
            shape_id=cell(row, "shape_id"),
            sequence=to_int(cell(row, "shape_pt_sequence")),
            lat=to_float(cell(row, "shape_pt_lat")),
            lon=to_float(cell(row, "shape_pt_lon")),
            dist_traveled=to_float(cell(row, "shape_dist_traveled")),
        )
