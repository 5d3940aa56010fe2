# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from itertools import chain, islice
from typing import Iterable, Sequence, TypeVar

T = TypeVar("T")


def chunked(it: Iterable[T], n: int) -> Iterable[list[T]]:
    """chunked splits the iterable into consecutive lists of at most n elements,
    preserving order. The last chunk may be shorter; no empty chunks are generated.

    >>> list(chunked(range(7), 3))
    [[0, 1, 2], [3, 4, 5], [6]]
    >>> list(chunked([], 3))
    []
    """
    if n < 1:
        raise ValueError(f"chunk size must be positive, got {n}")

    it = iter(it)
    while chunk := list(islice(it, n)):
        yield chunk


def flatten(chunks: Iterable[Sequence[T]]) -> list[T]:
    """flatten concatenates all chunks, in order.

    >>> flatten([[0, 1, 2], [3, 4, 5], [6]])
    [0, 1, 2, 3, 4, 5, 6]
    """
    return list(chain.from_iterable(chunks))
