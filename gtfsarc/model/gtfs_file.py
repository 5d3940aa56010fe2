# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from csv import DictReader
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Iterator, Type, final

from ..tools.types import Self, StrPath

REQUIRED_FILES = frozenset(
    {
        "agency.txt",
        "stops.txt",
        "routes.txt",
        "trips.txt",
        "stop_times.txt",
        "calendar.txt",
    }
)

OPTIONAL_FILES = frozenset(
    {
        "calendar_dates.txt",
        "fare_attributes.txt",
        "fare_rules.txt",
        "shapes.txt",
        "frequencies.txt",
        "transfers.txt",
        "feed_info.txt",
    }
)


def display_name(file_name: str) -> str:
    """display_name converts a GTFS file name into a human-readable title,
    used for the uploaded items.

    >>> display_name("calendar_dates.txt")
    'Calendar Dates'
    >>> display_name("stops.txt")
    'Stops'
    """
    return " ".join(part.capitalize() for part in file_name.removesuffix(".txt").split("_"))


@final
@dataclass(frozen=True)
class GTFSFile:
    """GTFSFile is a single, already extracted file of a GTFS bundle.
    The file is only ever read, and must stay in place until publishing finishes.
    """

    class Kind(Enum):
        REQUIRED = "required"
        OPTIONAL = "optional"
        UNKNOWN = "unknown"

    name: str
    file_name: str
    kind: Kind
    path: Path

    @classmethod
    def from_path(cls: Type[Self], path: StrPath) -> Self:
        path = Path(path)
        if path.name in REQUIRED_FILES:
            kind = GTFSFile.Kind.REQUIRED
        elif path.name in OPTIONAL_FILES:
            kind = GTFSFile.Kind.OPTIONAL
        else:
            kind = GTFSFile.Kind.UNKNOWN
        return cls(display_name(path.name), path.name, kind, path)  # type: ignore

    def read_rows(self) -> Iterator[dict[str, str]]:
        """read_rows generates all rows of the file, as returned by csv.DictReader.
        The file is decoded as UTF-8, with an optional byte order mark.
        """
        with self.path.open(mode="r", encoding="utf-8-sig", newline="") as f:
            yield from DictReader(f)
