import logging
import re
import sys
import unittest
from io import StringIO
from threading import Thread
from unittest.mock import patch

from gtfsarc.tools import color, logs


class TestInitializeLogging(unittest.TestCase):
    fake_root_logger: logging.Logger

    def setUp(self) -> None:
        self.fake_root_logger = logging.Logger("FakeRootLogger")

    def fake_get_logger(self, _name: str = "") -> logging.Logger:
        return self.fake_root_logger

    def test_adds_handler(self) -> None:
        self.assertEqual(len(self.fake_root_logger.handlers), 0)

        with patch("logging.getLogger", self.fake_get_logger):
            logs.initialize(verbose=False)

        self.assertEqual(len(self.fake_root_logger.handlers), 1)
        added_handler = self.fake_root_logger.handlers[0]
        assert isinstance(added_handler, logging.StreamHandler)
        self.assertIs(added_handler.stream, sys.stderr)  # type: ignore
        self.assertIsInstance(added_handler.formatter, logs.ColoredFormatter)

    def test_removes_handlers(self) -> None:
        handler_removed_1 = logging.StreamHandler(sys.stdout)
        handler_removed_2 = logging.StreamHandler(sys.stderr)
        handler_retained = logging.StreamHandler(StringIO())
        self.fake_root_logger.addHandler(handler_removed_1)
        self.fake_root_logger.addHandler(handler_removed_2)
        self.fake_root_logger.addHandler(handler_retained)

        with patch("logging.getLogger", self.fake_get_logger):
            logs.initialize(verbose=False)

        self.assertNotIn(handler_removed_1, self.fake_root_logger.handlers)
        self.assertNotIn(handler_removed_2, self.fake_root_logger.handlers)
        self.assertIn(handler_retained, self.fake_root_logger.handlers)

    def test_level(self) -> None:
        with patch("logging.getLogger", self.fake_get_logger):
            logs.initialize(verbose=False)
        self.assertEqual(self.fake_root_logger.level, logging.INFO)

        with patch("logging.getLogger", self.fake_get_logger):
            logs.initialize(verbose=True)
        self.assertEqual(self.fake_root_logger.level, logging.DEBUG)


class TestColoredFormatter(unittest.TestCase):
    LOGGER_NAME = "Publish.Task.createService"

    def setUp(self) -> None:
        self.output = StringIO()
        self.logger = logging.Logger(self.LOGGER_NAME)
        handler = logging.StreamHandler(self.output)
        handler.setFormatter(logs.ColoredFormatter())
        self.logger.addHandler(handler)

    def expected_msg_format(
        self,
        level: str,
        msg_color: str,
        msg: str,
        source: str = LOGGER_NAME,
    ) -> str:
        blue_e = re.escape(color.BLUE)
        cyan_e = re.escape(color.CYAN)
        green_e = re.escape(color.GREEN)
        reset_e = re.escape(color.RESET)

        return (
            rf"{blue_e}\[{cyan_e}{re.escape(level)}{blue_e} \d\d?:\d\d:\d\d\.\d\d\d] "
            rf"{green_e}{re.escape(source)}{reset_e}: {re.escape(msg_color)}{re.escape(msg)}"
            rf"{reset_e}"
        )

    def test_info(self) -> None:
        self.logger.info("Creating feature service")
        self.assertRegex(
            self.output.getvalue(),
            self.expected_msg_format("INFO", color.RESET, "Creating feature service"),
        )

    def test_debug(self) -> None:
        self.logger.debug("Executing")
        self.assertRegex(
            self.output.getvalue(),
            self.expected_msg_format("DEBUG", color.DIM, "Executing"),
        )

    def test_error(self) -> None:
        self.logger.error("Failed: createService: mock failure")
        self.assertRegex(
            self.output.getvalue(),
            self.expected_msg_format("ERROR", color.RED, "Failed: createService: mock failure"),
        )

    def test_critical(self) -> None:
        self.logger.critical("Hello world")
        self.assertRegex(
            self.output.getvalue(),
            self.expected_msg_format("CRITICAL", color.WHITE + color.BG_RED, "Hello world"),
        )

    def test_worker_thread(self) -> None:
        t = Thread(target=self.logger.warning, args=("Hello world",), name="publish_0")
        t.start()
        t.join()

        self.assertRegex(
            self.output.getvalue(),
            self.expected_msg_format(
                "WARNING",
                color.YELLOW,
                "Hello world",
                source=f"{self.LOGGER_NAME} (publish_0)",
            ),
        )

    def test_exception(self) -> None:
        try:
            raise ValueError("Oh no")
        except ValueError:
            self.logger.exception("Failed with an unexpected error")

        output = self.output.getvalue()
        self.assertIn("Traceback (most recent call last):", output)
        self.assertIn("ValueError: Oh no", output)
