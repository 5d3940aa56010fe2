from pathlib import Path
from unittest import TestCase

from gtfsarc.model import GTFSFile
from gtfsarc.tools.testing_mocks import MockFile


class TestGTFSFile(TestCase):
    def test_from_path(self) -> None:
        f = GTFSFile.from_path("/tmp/gtfs/calendar_dates.txt")
        self.assertEqual(f.name, "Calendar Dates")
        self.assertEqual(f.file_name, "calendar_dates.txt")
        self.assertIs(f.kind, GTFSFile.Kind.OPTIONAL)
        self.assertEqual(f.path, Path("/tmp/gtfs/calendar_dates.txt"))

    def test_kinds(self) -> None:
        self.assertIs(GTFSFile.from_path("stops.txt").kind, GTFSFile.Kind.REQUIRED)
        self.assertIs(GTFSFile.from_path("shapes.txt").kind, GTFSFile.Kind.OPTIONAL)
        self.assertIs(GTFSFile.from_path("readme.md").kind, GTFSFile.Kind.UNKNOWN)

    def test_read_rows(self) -> None:
        with MockFile(suffix=".txt") as path:
            path.write_bytes(
                "\ufeffstop_id,stop_name\r\n1,Zażółć\r\n2,\"Foo, Bar\"\r\n".encode("utf-8")
            )
            rows = list(GTFSFile.from_path(path).read_rows())

        self.assertListEqual(
            rows,
            [
                {"stop_id": "1", "stop_name": "Zażółć"},
                {"stop_id": "2", "stop_name": "Foo, Bar"},
            ],
        )
