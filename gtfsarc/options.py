# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass

from .translator import CHUNK_SIZE, WEB_MERCATOR


@dataclass(frozen=True)
class PublishOptions:
    """PublishOptions control the behavior of :py:func:`~gtfsarc.publish.publish`
    and :py:func:`~gtfsarc.importer.import_feed`."""

    chunk_size: int = CHUNK_SIZE
    """chunk_size is the maximum number of records (coordinates or features) sent
    in a single request. The default of 1000 matches the usual ArcGIS Online limits.
    """

    max_workers: int | None = None
    """max_workers limits the number of concurrently running requests.

    Defaults to ``None``, which uses the default ThreadPoolExecutor pool size.
    """

    wkid: int = WEB_MERCATOR
    """wkid is the well-known ID of the spatial reference of the published service."""

    tags: str = "gtfs"
    """tags are attached to every uploaded content item."""

    share_with_everyone: bool = True
    share_with_org: bool = True

    group_title: str = "GTFS Import"
    """group_title is used when :py:func:`~gtfsarc.importer.import_feed` has to create
    a new group."""

    def __post_init__(self) -> None:
        if self.chunk_size < 1:
            raise ValueError(f"chunk_size must be positive, got {self.chunk_size}")
