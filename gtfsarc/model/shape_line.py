# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from dataclasses import dataclass, field
from typing import final

from ..tools.types import LatLon


@final
@dataclass(frozen=True)
class ShapeLine:
    """ShapeLine is a whole shape, assembled from all of its
    :py:class:`ShapePoint` instances, ordered by their sequence.

    Coordinates are (lat, lon) pairs, as read from shapes.txt;
    they are projected into the target spatial reference only when publishing.
    """

    shape_id: str
    coordinates: tuple[LatLon, ...] = field(repr=False)

    def __len__(self) -> int:
        return len(self.coordinates)
