import importlib
import os
import unittest
from itertools import product
from unittest.mock import patch

from gtfsarc.errors import DataFormatError
from gtfsarc.tools import color


class TestColors(unittest.TestCase):
    @patch.dict(os.environ, {"NO_COLOR": ""})
    def test(self) -> None:
        importlib.reload(color)

        self.assertNotEqual(color.RED, "")
        self.assertNotEqual(color.RESET, "")

    @patch.dict(os.environ, {"NO_COLOR": "1"})
    def test_respects_no_color(self) -> None:
        importlib.reload(color)

        self.assertEqual(color.RED, "")
        self.assertEqual(color.RESET, "")


class TestParseHexRGBA(unittest.TestCase):
    def test(self) -> None:
        self.assertEqual(color.parse_hex_rgba("000000"), (0, 0, 0, 255))
        self.assertEqual(color.parse_hex_rgba("FFFFFF"), (255, 255, 255, 255))
        self.assertEqual(color.parse_hex_rgba("c0FFee"), (192, 255, 238, 255))

    def test_all_byte_values(self) -> None:
        for r, g, b in product(range(0, 256, 15), range(0, 256, 51), range(0, 256, 85)):
            with self.subTest(r=r, g=g, b=b):
                self.assertEqual(color.parse_hex_rgba(f"{r:02X}{g:02x}{b:02X}"), (r, g, b, 255))

    def test_malformed(self) -> None:
        for malformed in [
            "",
            "F",
            "FFF",
            "FFFFF",
            "FFFFFFF",
            "GGGGGG",
            "12 456",
            "0x1234",
            "##123456",
            "#123456",
            "123456\n",
            " 123456",
        ]:
            with self.subTest(color=malformed):
                with self.assertRaises(DataFormatError):
                    color.parse_hex_rgba(malformed)


class TestToRGBA(unittest.TestCase):
    def test(self) -> None:
        self.assertEqual(color.to_rgba("FF8000"), (255, 128, 0, 255))

    def test_empty(self) -> None:
        self.assertEqual(color.to_rgba(""), (136, 136, 136, 255))

    def test_malformed(self) -> None:
        for malformed in ["F", "FFFFFFF", "GGGGGG", "red", "-12345", "#FF8000", "FF8000\n"]:
            with self.subTest(color=malformed):
                self.assertEqual(color.to_rgba(malformed), color.DEFAULT_RGBA)

    def test_custom_default(self) -> None:
        self.assertEqual(color.to_rgba("nope", default=(0, 0, 0, 0)), (0, 0, 0, 0))
