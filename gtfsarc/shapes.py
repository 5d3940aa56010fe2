# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from operator import attrgetter
from typing import Iterable, Iterator, Mapping

from .model import ShapeLine, ShapePoint


def group_points(points: Iterable[ShapePoint]) -> dict[str, list[ShapePoint]]:
    """group_points groups ShapePoints by their shape_id. The returned dictionary
    preserves the order in which shape ids were first seen, and points within
    every group are stably sorted by their sequence.
    """
    groups: dict[str, list[ShapePoint]] = {}
    for point in points:
        groups.setdefault(point.shape_id, []).append(point)

    for group in groups.values():
        group.sort(key=attrgetter("sequence"))
    return groups


def assemble_lines(rows: Iterable[Mapping[str, str]]) -> Iterator[ShapeLine]:
    """assemble_lines generates one :py:class:`~gtfsarc.model.ShapeLine` per distinct
    shape_id from raw shapes.txt rows (as returned by csv.DictReader).

    Lines are generated lazily, but all rows are consumed before the first line
    is generated, as a shape's points may be scattered throughout the file.

    >>> rows = [
    ...     {"shape_id": "A", "shape_pt_lat": "1", "shape_pt_lon": "2", "shape_pt_sequence": "2"},
    ...     {"shape_id": "B", "shape_pt_lat": "5", "shape_pt_lon": "6", "shape_pt_sequence": "0"},
    ...     {"shape_id": "A", "shape_pt_lat": "3", "shape_pt_lon": "4", "shape_pt_sequence": "1"},
    ... ]
    >>> [(line.shape_id, line.coordinates) for line in assemble_lines(rows)]
    [('A', ((3.0, 4.0), (1.0, 2.0))), ('B', ((5.0, 6.0),))]
    """
    groups = group_points(map(ShapePoint.from_gtfs_row, rows))
    for shape_id, points in groups.items():
        yield ShapeLine(shape_id, tuple(p.lat_lon for p in points))
