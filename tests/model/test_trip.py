from unittest import TestCase

from gtfsarc.model import Trip


class TestTrip(TestCase):
    def test_from_gtfs_row(self) -> None:
        t = Trip.from_gtfs_row(
            {
                "route_id": "A",
                "service_id": "C",
                "trip_id": "T1",
                "shape_id": "Sh1",
            }
        )
        self.assertEqual(t, Trip("T1", "A", "Sh1"))

    def test_from_gtfs_row_without_shape(self) -> None:
        t = Trip.from_gtfs_row({"route_id": "A", "service_id": "C", "trip_id": "T1"})
        self.assertEqual(t.shape_id, "")
