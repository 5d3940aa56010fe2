# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import csv
import logging
from concurrent.futures import Executor, ThreadPoolExecutor
from contextlib import nullcontext
from io import StringIO
from typing import Any, Iterable, Sequence

from .connection import Connection
from .errors import ResponseMismatch
from .tools.iteration import chunked, flatten
from .tools.types import XY, JSONObject, LatLon

CHUNK_SIZE = 1000
"""Maximum number of records sent to the portal in a single request."""

WEB_MERCATOR = 102100
"""Well-known ID of the default target spatial reference."""

ROW_ID = "row_id"
"""Name of the column used to pair generated features with submitted rows."""

logger = logging.getLogger(__name__)


def encode_csv(header: Sequence[str], rows: Iterable[Sequence[Any]]) -> str:
    """encode_csv creates the CSV text submitted for analysis and generation.

    >>> encode_csv(["row_id", "lat", "lon"], [(0, 52.5, 21.0), (1, 52.25, 20.75)])
    'row_id,lat,lon\\n0,52.5,21.0\\n1,52.25,20.75\\n'
    """
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerow(header)
    writer.writerows(rows)
    return buffer.getvalue()


def with_location(
    publish_parameters: JSONObject,
    lat_field: str,
    lon_field: str,
    wkid: int = WEB_MERCATOR,
) -> JSONObject:
    """with_location merges analyzed publish parameters with a location descriptor,
    telling the generator which columns hold WGS84 coordinates and what the
    target spatial reference is. The input mapping is not modified.
    """
    return {
        **publish_parameters,
        "locationType": "coordinates",
        "latitudeFieldName": lat_field,
        "longitudeFieldName": lon_field,
        "sourceSR": {"wkid": 4326},
        "targetSR": {"wkid": wkid},
    }


def generate_paired(
    connection: Connection,
    text: str,
    publish_parameters: JSONObject,
    expected_ids: Sequence[int],
) -> list[JSONObject]:
    """generate_paired generates features from CSV text, and ensures that the i-th
    returned feature corresponds to the i-th row by comparing the :py:const:`ROW_ID`
    attribute with ``expected_ids``. Any discrepancy raises
    :py:exc:`~gtfsarc.errors.ResponseMismatch`.
    """
    features = connection.generate(text, publish_parameters)
    if len(features) != len(expected_ids):
        raise ResponseMismatch(
            "generate",
            f"expected {len(expected_ids)} feature(s), got {len(features)}",
        )

    for expected_id, feature in zip(expected_ids, features):
        got_id = (feature.get("attributes") or {}).get(ROW_ID)
        try:
            matches = got_id is not None and int(got_id) == expected_id
        except (TypeError, ValueError):
            matches = False
        if not matches:
            raise ResponseMismatch(
                "generate",
                f"unpaired feature: expected {ROW_ID} {expected_id}, got {got_id!r}",
            )
    return features


def point_xy(feature: JSONObject) -> XY:
    """point_xy extracts the (x, y) pair from a generated point feature."""
    geometry = feature.get("geometry") or {}
    try:
        return float(geometry["x"]), float(geometry["y"])
    except (KeyError, TypeError, ValueError) as e:
        row_id = (feature.get("attributes") or {}).get(ROW_ID)
        raise ResponseMismatch("generate", f"row {row_id!r} has no point geometry") from e


class CoordinateTranslator:
    """CoordinateTranslator projects arbitrary many WGS84 (lat, lon) pairs into
    the target spatial reference, using the portal's feature generation service.

    The whole input is analyzed once (to get stable publish parameters), and then
    split into chunks of at most ``chunk_size`` coordinates, each generated
    by a separate, independent request. :py:meth:`translate` runs those requests
    concurrently; :py:meth:`analyze` and :py:meth:`generate_chunk` are exposed
    so that the chunks can be scheduled on an external task graph.
    """

    LAT = "lat"
    LON = "lon"

    def __init__(
        self,
        connection: Connection,
        chunk_size: int = CHUNK_SIZE,
        wkid: int = WEB_MERCATOR,
    ) -> None:
        self.connection = connection
        self.chunk_size = chunk_size
        self.wkid = wkid

    def encode(self, coordinates: Sequence[LatLon], start: int = 0) -> str:
        return encode_csv(
            [ROW_ID, self.LAT, self.LON],
            ((start + i, lat, lon) for i, (lat, lon) in enumerate(coordinates)),
        )

    def chunks(self, coordinates: Sequence[LatLon]) -> list[tuple[int, list[LatLon]]]:
        """chunks splits the input into (offset, chunk) pairs, where offset is the
        position of the chunk's first coordinate in the input."""
        return [
            (i * self.chunk_size, chunk)
            for i, chunk in enumerate(chunked(coordinates, self.chunk_size))
        ]

    def analyze(self, coordinates: Sequence[LatLon]) -> JSONObject:
        """analyze returns the publish parameters for all chunks of ``coordinates``."""
        logger.debug("Analyzing %d coordinate(s)", len(coordinates))
        publish_parameters = self.connection.analyze(self.encode(coordinates))
        return with_location(publish_parameters, self.LAT, self.LON, self.wkid)

    def generate_chunk(
        self,
        publish_parameters: JSONObject,
        start: int,
        chunk: Sequence[LatLon],
    ) -> list[XY]:
        """generate_chunk projects a single chunk of coordinates, with the first one
        having ``start`` as its position in the whole input."""
        logger.debug("Generating coordinates %d-%d", start, start + len(chunk) - 1)
        features = generate_paired(
            self.connection,
            self.encode(chunk, start),
            publish_parameters,
            range(start, start + len(chunk)),
        )
        return [point_xy(f) for f in features]

    def translate(
        self,
        coordinates: Sequence[LatLon],
        executor: Executor | None = None,
        max_workers: int | None = None,
    ) -> list[XY]:
        """translate projects all coordinates, returning them in the same order.

        Chunks are generated concurrently on the provided executor, or a new
        ThreadPoolExecutor with ``max_workers``. The executor must not be
        the one running the caller, as this call blocks until all chunks are done.
        """
        if not coordinates:
            return []

        publish_parameters = self.analyze(coordinates)
        chunks = self.chunks(coordinates)

        with nullcontext(executor) if executor else ThreadPoolExecutor(max_workers) as pool:
            results = pool.map(
                lambda c: self.generate_chunk(publish_parameters, c[0], c[1]),
                chunks,
            )
            return flatten(results)
