# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from typing import Iterable

from .connection import Connection
from .feed import read_feed, validate_files
from .graph import ImportResult, TaskGraph
from .model import GTFSFile
from .options import PublishOptions
from .publish import Publisher

logger = logging.getLogger(__name__)


def add_item_tasks(
    graph: TaskGraph,
    connection: Connection,
    file: GTFSFile,
    group_id: str,
    options: PublishOptions = PublishOptions(),
) -> None:
    """add_item_tasks adds two tasks for uploading a GTFS file as-is, as a CSV item:
    ``item.<file_name>.create`` and ``item.<file_name>.share``."""

    def create() -> str:
        logger.info("Creating %s", file.name)
        return connection.add_item(file.name, "CSV", options.tags, file.path)

    def share(item_id: str) -> None:
        logger.info("Sharing %s", file.name)
        connection.share(
            item_id,
            group_id,
            everyone=options.share_with_everyone,
            org=options.share_with_org,
        )

    created = graph.add(f"item.{file.file_name}.create", create)
    graph.add(f"item.{file.file_name}.share", share, [created])


def import_feed(
    connection: Connection,
    files: Iterable[GTFSFile],
    service_name: str,
    group_id: str | None = None,
    options: PublishOptions = PublishOptions(),
) -> ImportResult:
    """import_feed publishes a whole, already extracted GTFS feed:
    every standard GTFS file is uploaded as a CSV item, and stops and shapes
    are published as a feature service. Everything is shared with the
    provided group, or a newly-created one if ``group_id`` is None.

    Raises :py:exc:`~gtfsarc.errors.ValidationError` if a required file is missing -
    in that case nothing is uploaded. Failing to create the group raises
    :py:exc:`~gtfsarc.errors.RemoteCallError`. Any other failures are collected
    in the returned :py:class:`~gtfsarc.graph.ImportResult`.
    """
    files = validate_files(files)
    feed = read_feed(files)

    if group_id is None:
        logger.info("Creating GTFS group")
        group_id = connection.create_group(
            title=options.group_title,
            access="account",
            description="An import of GTFS data",
        )

    graph = TaskGraph("Import")
    for file in files:
        add_item_tasks(graph, connection, file, group_id, options)
    Publisher(connection, feed, group_id, service_name, options).add_tasks(graph)

    result = graph.run(options.max_workers)
    if result.ok:
        logger.info("Everything has been imported successfully")
    return result
