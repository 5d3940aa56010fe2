# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from . import errors, model, tools
from .connection import ArcGISConnection, Connection, FeatureService
from .feed import ParsedFeed, read_feed, validate_files
from .graph import ImportResult, PublishTask, TaskGraph, TaskState
from .importer import import_feed
from .options import PublishOptions
from .publish import Publisher, publish
from .tools.logs import initialize as initialize_logging

__all__ = [
    "errors",
    "model",
    "tools",
    "ArcGISConnection",
    "Connection",
    "FeatureService",
    "ImportResult",
    "ParsedFeed",
    "PublishOptions",
    "PublishTask",
    "Publisher",
    "TaskGraph",
    "TaskState",
    "import_feed",
    "initialize_logging",
    "publish",
    "read_feed",
    "validate_files",
]

__version__ = "0.1.0"
