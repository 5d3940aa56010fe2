from unittest import TestCase

from gtfsarc.tools.iteration import chunked, flatten


class TestChunked(TestCase):
    def test(self) -> None:
        self.assertListEqual(list(chunked(range(5), 2)), [[0, 1], [2, 3], [4]])

    def test_exact_multiple(self) -> None:
        self.assertListEqual(list(chunked("abcdef", 3)), [["a", "b", "c"], ["d", "e", "f"]])

    def test_empty(self) -> None:
        self.assertListEqual(list(chunked([], 1000)), [])

    def test_chunk_sizes(self) -> None:
        chunks = list(chunked(range(2500), 1000))
        self.assertListEqual([len(c) for c in chunks], [1000, 1000, 500])
        self.assertListEqual(flatten(chunks), list(range(2500)))

    def test_invalid_size(self) -> None:
        with self.assertRaises(ValueError):
            list(chunked([1, 2, 3], 0))
