# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Iterable, Sequence

from .model import ShapeLine, Stop
from .tools.types import XY, JSONObject
from .translator import ROW_ID, WEB_MERCATOR, point_xy

STOP_ATTRIBUTES = ("stop_name", "stop_lat", "stop_lon", ROW_ID)
"""Attributes of generated stop features which are published; everything else is dropped."""

STOP_COLUMNS = (ROW_ID, "stop_name", "stop_lat", "stop_lon")
"""Columns of the CSV text submitted when generating stop features."""


def stop_rows(stops: Sequence[Stop], start: int = 0) -> list[tuple[int, str, float, float]]:
    """stop_rows converts stops into rows matching :py:const:`STOP_COLUMNS`,
    with row ids starting at ``start``."""
    return [(start + i, s.name, s.lat, s.lon) for i, s in enumerate(stops)]


def stop_features(generated: Iterable[JSONObject]) -> list[JSONObject]:
    """stop_features converts features returned by the generation service into
    features ready to be added to the stops layer. Only the attributes listed in
    :py:const:`STOP_ATTRIBUTES` are preserved. Features without a point geometry
    raise :py:exc:`~gtfsarc.errors.ResponseMismatch`.
    """
    return [
        {
            "geometry": dict(zip(("x", "y"), point_xy(feature))),
            "attributes": {
                key: (feature.get("attributes") or {}).get(key) for key in STOP_ATTRIBUTES
            },
        }
        for feature in generated
    ]


def shape_features(
    lines: Sequence[ShapeLine],
    projected: Sequence[XY],
    wkid: int = WEB_MERCATOR,
) -> list[JSONObject]:
    """shape_features creates one polyline feature per shape.

    ``projected`` must contain the projected coordinates of all ``lines``, concatenated
    in the same order as the lines; each shape takes as many consecutive coordinates
    as it has points.
    """
    expected = sum(len(line) for line in lines)
    if expected != len(projected):
        raise ValueError(
            f"shapes have {expected} point(s) in total, but got {len(projected)} projected"
        )

    features: list[JSONObject] = []
    offset = 0
    for line in lines:
        path = [[x, y] for x, y in projected[offset : offset + len(line)]]
        offset += len(line)
        features.append(
            {
                "geometry": {"paths": [path], "spatialReference": {"wkid": wkid}},
                "attributes": {"shape_id": line.shape_id, ROW_ID: line.shape_id},
            }
        )
    return features
