# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

"""JSON definitions of the published feature service and its layers, see
https://developers.arcgis.com/rest/services-reference/enterprise/add-to-definition-feature-service/.
"""

from typing import Mapping

from .styling import shapes_renderer
from .tools.types import RGBA, JSONObject
from .translator import CHUNK_SIZE, ROW_ID, WEB_MERCATOR

STOPS_LAYER_ID = 0
SHAPES_LAYER_ID = 1

OBJECT_ID = "OBJECTID"


def _field(name: str, type: str, length: int | None = None) -> JSONObject:
    f: JSONObject = {
        "name": name,
        "type": type,
        "alias": name,
        "nullable": type != "esriFieldTypeOID",
        "editable": type != "esriFieldTypeOID",
    }
    if length is not None:
        f["length"] = length
    return f


def service_definition(wkid: int = WEB_MERCATOR) -> JSONObject:
    """service_definition returns the parameters for creating an empty feature service.
    The service name is added by the :py:class:`~gtfsarc.connection.Connection`."""
    return {
        "serviceDescription": "GTFS stops and shapes",
        "hasStaticData": False,
        "maxRecordCount": CHUNK_SIZE,
        "supportedQueryFormats": "JSON",
        "capabilities": "Query",
        "allowGeometryUpdates": True,
        "units": "esriMeters",
        "spatialReference": {"wkid": wkid},
    }


def stops_layer() -> JSONObject:
    return {
        "id": STOPS_LAYER_ID,
        "name": "Stops",
        "type": "Feature Layer",
        "geometryType": "esriGeometryPoint",
        "objectIdField": OBJECT_ID,
        "displayField": "stop_name",
        "fields": [
            _field(OBJECT_ID, "esriFieldTypeOID"),
            _field("stop_name", "esriFieldTypeString", 256),
            _field("stop_lat", "esriFieldTypeDouble"),
            _field("stop_lon", "esriFieldTypeDouble"),
            _field(ROW_ID, "esriFieldTypeInteger"),
        ],
        "drawingInfo": {
            "renderer": {
                "type": "simple",
                "symbol": {
                    "type": "esriSMS",
                    "style": "esriSMSCircle",
                    "color": [0, 92, 230, 255],
                    "size": 5,
                },
            },
        },
    }


def shapes_layer(colors: Mapping[str, RGBA]) -> JSONObject:
    return {
        "id": SHAPES_LAYER_ID,
        "name": "Shapes",
        "type": "Feature Layer",
        "geometryType": "esriGeometryPolyline",
        "objectIdField": OBJECT_ID,
        "displayField": "shape_id",
        "fields": [
            _field(OBJECT_ID, "esriFieldTypeOID"),
            _field("shape_id", "esriFieldTypeString", 256),
            _field(ROW_ID, "esriFieldTypeString", 256),
        ],
        "drawingInfo": {"renderer": shapes_renderer(colors)},
    }


def layers(colors: Mapping[str, RGBA], with_shapes: bool) -> list[JSONObject]:
    """layers returns definitions of all layers to be added to the service:
    stops are always present, shapes only if ``with_shapes`` is set."""
    result = [stops_layer()]
    if with_shapes:
        result.append(shapes_layer(colors))
    return result
