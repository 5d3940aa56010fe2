# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from functools import partial
from typing import Sequence

from .connection import Connection, FeatureService
from .features import STOP_COLUMNS, shape_features, stop_features, stop_rows
from .feed import ParsedFeed
from .graph import ImportResult, PublishTask, TaskGraph
from .model import ShapeLine, Stop
from .options import PublishOptions
from .service import SHAPES_LAYER_ID, STOPS_LAYER_ID, layers, service_definition
from .shapes import assemble_lines
from .styling import shape_colors
from .tools.iteration import chunked, flatten
from .tools.types import XY, JSONObject, LatLon
from .translator import CoordinateTranslator, encode_csv, generate_paired, with_location

logger = logging.getLogger(__name__)


class Publisher:
    """Publisher adds the tasks publishing a :py:class:`~gtfsarc.feed.ParsedFeed`
    as a hosted feature service onto a :py:class:`~gtfsarc.graph.TaskGraph`:

    * ``createService`` creates an empty feature service,
    * ``shareService`` shares it with the group, as soon as it exists,
    * ``addLayers`` adds the stops layer, and the shapes layer if there are any shapes,
    * ``uploadStops`` analyzes the stops (``uploadStops.analyze``), and then generates and
      uploads every chunk of stops (``uploadStops.chunk.N``),
    * ``uploadShapes`` analyzes all shape points (``uploadShapes.analyze``), projects every
      chunk of them (``uploadShapes.translate.N``), assembles the polylines
      (``uploadShapes.features``), and uploads every chunk of them (``uploadShapes.chunk.N``).

    Upload sub-tasks only start after ``addLayers`` has succeeded.
    """

    def __init__(
        self,
        connection: Connection,
        feed: ParsedFeed,
        group_id: str,
        service_name: str,
        options: PublishOptions = PublishOptions(),
    ) -> None:
        self.connection = connection
        self.feed = feed
        self.group_id = group_id
        self.service_name = service_name
        self.options = options

        self.lines: list[ShapeLine] = list(assemble_lines(feed.shape_rows))
        self.colors = shape_colors(feed.routes, feed.trips)
        self.translator = CoordinateTranslator(connection, options.chunk_size, options.wkid)

    def add_tasks(self, graph: TaskGraph) -> None:
        create = graph.add("createService", self.create_service)
        graph.add("shareService", self.share_service, [create])
        add_layers = graph.add("addLayers", self.add_layers, [create])
        self.add_stops_tasks(graph, add_layers)
        if self.feed.has_shapes:
            self.add_shapes_tasks(graph, add_layers)

    # Service

    def create_service(self) -> FeatureService:
        logger.info("Creating feature service %s", self.service_name)
        return self.connection.create_feature_service(
            self.service_name,
            service_definition(self.options.wkid),
        )

    def share_service(self, service: FeatureService) -> None:
        logger.info("Sharing feature service %s", self.service_name)
        self.connection.share(
            service.item_id,
            self.group_id,
            everyone=self.options.share_with_everyone,
            org=self.options.share_with_org,
        )

    def add_layers(self, service: FeatureService) -> FeatureService:
        layer_definitions = layers(self.colors, with_shapes=self.feed.has_shapes)
        logger.info("Adding %d layer(s) to %s", len(layer_definitions), self.service_name)
        self.connection.add_to_definition(service, layer_definitions)
        return service

    # Stops

    def add_stops_tasks(self, graph: TaskGraph, add_layers: PublishTask) -> None:
        stops = self.feed.stops
        if not stops:
            logger.warning("No stops to upload")
            graph.add("uploadStops", None, [add_layers])
            return

        analyze = graph.add("uploadStops.analyze", self.analyze_stops, [add_layers])
        chunk_tasks = [
            graph.add(
                f"uploadStops.chunk.{i}",
                partial(self.upload_stops, i * self.options.chunk_size, chunk),
                [add_layers, analyze],
            )
            for i, chunk in enumerate(chunked(stops, self.options.chunk_size))
        ]
        graph.add("uploadStops", None, chunk_tasks)

    def analyze_stops(self, _: FeatureService) -> JSONObject:
        logger.info("Analyzing %d stop(s)", len(self.feed.stops))
        publish_parameters = self.connection.analyze(
            encode_csv(STOP_COLUMNS, stop_rows(self.feed.stops)),
        )
        return with_location(publish_parameters, "stop_lat", "stop_lon", self.options.wkid)

    def upload_stops(
        self,
        start: int,
        chunk: Sequence[Stop],
        service: FeatureService,
        publish_parameters: JSONObject,
    ) -> int:
        logger.info("Uploading stops %d-%d", start, start + len(chunk) - 1)
        generated = generate_paired(
            self.connection,
            encode_csv(STOP_COLUMNS, stop_rows(chunk, start)),
            publish_parameters,
            range(start, start + len(chunk)),
        )
        self.connection.add_features(service, STOPS_LAYER_ID, stop_features(generated))
        return len(chunk)

    # Shapes

    def add_shapes_tasks(self, graph: TaskGraph, add_layers: PublishTask) -> None:
        coordinates = [c for line in self.lines for c in line.coordinates]

        analyze = graph.add(
            "uploadShapes.analyze",
            partial(self.analyze_shapes, coordinates),
            [add_layers],
        )
        translate_tasks = [
            graph.add(
                f"uploadShapes.translate.{i}",
                partial(self.translate_shapes, start, chunk),
                [analyze],
            )
            for i, (start, chunk) in enumerate(self.translator.chunks(coordinates))
        ]
        features = graph.add("uploadShapes.features", self.build_shape_features, translate_tasks)

        chunk_count = -(-len(self.lines) // self.options.chunk_size)
        chunk_tasks = [
            graph.add(
                f"uploadShapes.chunk.{i}",
                partial(self.upload_shapes, i * self.options.chunk_size),
                [add_layers, features],
            )
            for i in range(chunk_count)
        ]
        graph.add("uploadShapes", None, chunk_tasks)

    def analyze_shapes(self, coordinates: Sequence[LatLon], _: FeatureService) -> JSONObject:
        logger.info("Analyzing %d shape(s)", len(self.lines))
        return self.translator.analyze(coordinates)

    def translate_shapes(
        self,
        start: int,
        chunk: Sequence[LatLon],
        publish_parameters: JSONObject,
    ) -> list[XY]:
        return self.translator.generate_chunk(publish_parameters, start, chunk)

    def build_shape_features(self, *projected_chunks: list[XY]) -> list[JSONObject]:
        return shape_features(self.lines, flatten(projected_chunks), self.options.wkid)

    def upload_shapes(
        self,
        start: int,
        service: FeatureService,
        features: list[JSONObject],
    ) -> int:
        chunk = features[start : start + self.options.chunk_size]
        logger.info("Uploading shapes %d-%d", start, start + len(chunk) - 1)
        self.connection.add_features(service, SHAPES_LAYER_ID, chunk)
        return len(chunk)


def publish(
    group_id: str,
    connection: Connection,
    feed: ParsedFeed,
    service_name: str,
    options: PublishOptions = PublishOptions(),
) -> ImportResult:
    """publish creates a hosted feature service with stops and shapes from the feed,
    shares it with the group, and blocks until all of that is done.

    Failures of remote calls don't raise - they are collected in the returned
    :py:class:`~gtfsarc.graph.ImportResult`. Nothing is rolled back on failures.
    """
    graph = TaskGraph("Publish")
    Publisher(connection, feed, group_id, service_name, options).add_tasks(graph)
    return graph.run(options.max_workers)
