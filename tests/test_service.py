from unittest import TestCase

from gtfsarc.service import (
    SHAPES_LAYER_ID,
    STOPS_LAYER_ID,
    layers,
    service_definition,
    shapes_layer,
    stops_layer,
)


class TestServiceDefinition(TestCase):
    def test(self) -> None:
        definition = service_definition(2180)
        self.assertDictEqual(definition["spatialReference"], {"wkid": 2180})
        self.assertNotIn("name", definition)


class TestLayers(TestCase):
    def test_with_shapes(self) -> None:
        got = layers({"Sh1": (255, 0, 0, 255)}, with_shapes=True)
        self.assertListEqual([layer["id"] for layer in got], [STOPS_LAYER_ID, SHAPES_LAYER_ID])
        self.assertEqual(got[1]["drawingInfo"]["renderer"]["uniqueValueInfos"][0]["value"], "Sh1")

    def test_without_shapes(self) -> None:
        got = layers({"Sh1": (255, 0, 0, 255)}, with_shapes=False)
        self.assertListEqual([layer["id"] for layer in got], [STOPS_LAYER_ID])

    def test_geometry_types(self) -> None:
        self.assertEqual(stops_layer()["geometryType"], "esriGeometryPoint")
        self.assertEqual(shapes_layer({})["geometryType"], "esriGeometryPolyline")

    def test_fields(self) -> None:
        self.assertListEqual(
            [f["name"] for f in stops_layer()["fields"]],
            ["OBJECTID", "stop_name", "stop_lat", "stop_lon", "row_id"],
        )
        self.assertListEqual(
            [f["name"] for f in shapes_layer({})["fields"]],
            ["OBJECTID", "shape_id", "row_id"],
        )
