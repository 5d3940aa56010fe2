# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from .gtfs_file import OPTIONAL_FILES, REQUIRED_FILES, GTFSFile
from .route import Route
from .shape_line import ShapeLine
from .shape_point import ShapePoint
from .stop import Stop
from .trip import Trip

__all__ = [
    "GTFSFile",
    "OPTIONAL_FILES",
    "REQUIRED_FILES",
    "Route",
    "ShapeLine",
    "ShapePoint",
    "Stop",
    "Trip",
]
