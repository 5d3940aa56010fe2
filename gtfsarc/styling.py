# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""Per-shape colors and ArcGIS drawing info for the shapes layer.

Every function in this module is pure - calling it multiple times with the same
input produces the same output, and inputs are never consumed or mutated.
"""

import logging
from typing import Iterable, Mapping

from .model import Route, Trip
from .tools.color import DEFAULT_RGBA
from .tools.types import RGBA, JSONObject

LINE_WIDTH = 2

logger = logging.getLogger(__name__)


def route_colors(routes: Iterable[Route]) -> dict[str, RGBA]:
    """route_colors maps route_id to its decoded color; routes with an empty or
    malformed color get :py:const:`~gtfsarc.tools.color.DEFAULT_RGBA`."""
    return {route.id: route.rgba for route in routes}


def shape_colors(routes: Iterable[Route], trips: Iterable[Trip]) -> dict[str, RGBA]:
    """shape_colors maps shape_id to the color of a route using that shape,
    as resolved through trips.

    Trips without a shape, or referencing an unknown route, are silently skipped -
    shapes used only by such trips have no entry in the returned mapping.
    If a shape is used by trips of multiple routes, the last trip wins.
    """
    colors_by_route = route_colors(routes)
    colors: dict[str, RGBA] = {}
    for trip in trips:
        if not trip.shape_id:
            continue
        route_color = colors_by_route.get(trip.route_id)
        if route_color is None:
            logger.debug("Trip %s references unknown route %s", trip.id, trip.route_id)
            continue
        colors[trip.shape_id] = route_color
    return colors


def line_symbol(rgba: RGBA) -> JSONObject:
    """line_symbol returns a solid
    `esriSLS <https://developers.arcgis.com/documentation/common-data-types/symbol-objects.htm>`_
    line symbol in the provided color.

    >>> line_symbol((255, 0, 0, 255))
    {'type': 'esriSLS', 'style': 'esriSLSSolid', 'color': [255, 0, 0, 255], 'width': 2}
    """
    return {"type": "esriSLS", "style": "esriSLSSolid", "color": list(rgba), "width": LINE_WIDTH}


def shapes_renderer(colors: Mapping[str, RGBA], field: str = "shape_id") -> JSONObject:
    """shapes_renderer creates a uniqueValue renderer, drawing every shape in its color.
    Shapes without a color are drawn with the default (grey) symbol."""
    return {
        "type": "uniqueValue",
        "field1": field,
        "defaultSymbol": line_symbol(DEFAULT_RGBA),
        "defaultLabel": "Other",
        "uniqueValueInfos": [
            {"value": shape_id, "label": shape_id, "symbol": line_symbol(colors[shape_id])}
            for shape_id in sorted(colors)
        ],
    }
