# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from . import color, iteration, logs, testing_mocks, types

__all__ = [
    "color",
    "iteration",
    "logs",
    "testing_mocks",
    "types",
]
