from unittest import TestCase

from gtfsarc.model import Stop


class TestStop(TestCase):
    def test_from_gtfs_row(self) -> None:
        s = Stop.from_gtfs_row(
            {
                "stop_id": "KEN",
                "stop_name": "Warszawa Kenkowa",
                "stop_lat": "52.1234",
                "stop_lon": "21.0125",
                "location_type": "",
            }
        )

        self.assertEqual(s.id, "KEN")
        self.assertEqual(s.name, "Warszawa Kenkowa")
        self.assertTupleEqual(s.lat_lon, (52.1234, 21.0125))

    def test_from_gtfs_row_malformed_position(self) -> None:
        s = Stop.from_gtfs_row({"stop_id": "KEN", "stop_name": "Kenkowa", "stop_lat": "north"})
        self.assertTupleEqual(s.lat_lon, (0.0, 0.0))
