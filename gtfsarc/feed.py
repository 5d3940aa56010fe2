# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from tempfile import TemporaryDirectory
from typing import Generator, Iterable, Mapping

from .errors import ValidationError
from .model import REQUIRED_FILES, GTFSFile, Route, Stop, Trip

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParsedFeed:
    """ParsedFeed holds all GTFS records required to publish a feature service.

    Shape points are kept as raw rows, as they are only parsed while
    assembling :py:class:`~gtfsarc.model.ShapeLine` objects.
    """

    stops: list[Stop] = field(default_factory=list)
    routes: list[Route] = field(default_factory=list)
    trips: list[Trip] = field(default_factory=list)
    shape_rows: list[Mapping[str, str]] = field(default_factory=list)

    @property
    def has_shapes(self) -> bool:
        return bool(self.shape_rows)


def validate_files(files: Iterable[GTFSFile]) -> list[GTFSFile]:
    """validate_files ensures all required GTFS files are present, raising
    :py:exc:`~gtfsarc.errors.ValidationError` otherwise.

    Returns the provided files without any non-standard ones.
    """
    files = list(files)
    missing = REQUIRED_FILES.difference(f.file_name for f in files)
    if missing:
        raise ValidationError(missing)

    standard: list[GTFSFile] = []
    for f in files:
        if f.kind is GTFSFile.Kind.UNKNOWN:
            logger.warning("Ignoring non-standard file %s", f.file_name)
        else:
            standard.append(f)
    return standard


def read_feed(files: Iterable[GTFSFile]) -> ParsedFeed:
    """read_feed parses stops, routes, trips and shapes from the provided files.
    Files not relevant for the feature service are skipped. shapes.txt is optional.
    """
    by_name = {f.file_name: f for f in files}

    def rows(file_name: str) -> Iterable[dict[str, str]]:
        if f := by_name.get(file_name):
            logger.info("Reading %s", file_name)
            return f.read_rows()
        return ()

    return ParsedFeed(
        stops=[Stop.from_gtfs_row(row) for row in rows("stops.txt")],
        routes=[Route.from_gtfs_row(row) for row in rows("routes.txt")],
        trips=[Trip.from_gtfs_row(row) for row in rows("trips.txt")],
        shape_rows=list(rows("shapes.txt")),
    )


@contextmanager
def extracted_dir(prefix: str = "gtfsarc-") -> Generator[Path, None, None]:
    """extracted_dir provides a temporary directory for extracted GTFS files,
    owned exclusively by the caller. The directory and everything inside it
    is removed on exit, also when an exception is raised.

    >>> with extracted_dir() as d:
    ...     _ = (d / "stops.txt").write_text("stop_id\\n")
    ...     d.is_dir()
    True
    >>> d.exists()
    False
    """
    with TemporaryDirectory(prefix=prefix) as d:
        yield Path(d)


def list_files(directory: Path) -> list[GTFSFile]:
    """list_files wraps every regular file in ``directory`` (non-recursively)
    in a :py:class:`~gtfsarc.model.GTFSFile`, sorted by file name."""
    return [GTFSFile.from_path(p) for p in sorted(directory.iterdir()) if p.is_file()]
