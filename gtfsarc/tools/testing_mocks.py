# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import os
from csv import DictReader
from io import StringIO
from pathlib import Path
from shutil import rmtree
from tempfile import mkdtemp, mkstemp
from threading import Lock
from typing import Any, Callable, Iterable, Mapping, NamedTuple, Optional, Sequence

import requests

from ..connection import FeatureService
from ..errors import RemoteCallError
from .types import JSONObject, StrPath


class MockHTTPResponse:
    """MockHTTPResponse tries to mimic the requests.Response object.
    Only methods and attributes required for the tests are implemented.

    >>> r = MockHTTPResponse(200, b'{"id": "foo"}')
    >>> r.status_code
    200
    >>> r.json()
    {'id': 'foo'}
    """

    def __init__(
        self,
        status_code: int,
        content: bytes = b"",
        headers: Optional[Mapping[str, str]] = None,
    ) -> None:
        self.status_code = status_code
        self.content = content
        self.headers = headers or {}
        self.url = ""

    @classmethod
    def with_json(cls, body: Any, status_code: int = 200) -> "MockHTTPResponse":
        return cls(status_code, json.dumps(body).encode("utf-8"))

    def __enter__(self) -> "MockHTTPResponse":
        return self

    def __exit__(self, *_: Any) -> bool:
        return False

    def raise_for_status(self) -> None:
        """Raises requests.HTTPError if the status_code is bigger than or equal to 400.

        >>> MockHTTPResponse(200).raise_for_status()
        >>> MockHTTPResponse(404).raise_for_status()
        Traceback (most recent call last):
            ...
        requests.exceptions.HTTPError: 404
        """
        if self.status_code >= 400:
            raise requests.HTTPError(str(self.status_code))

    def json(self) -> Any:
        return json.loads(self.content)


class MockCall(NamedTuple):
    method: str
    args: tuple[Any, ...]


class MockConnection:
    """MockConnection is an in-memory :py:class:`~gtfsarc.connection.Connection`,
    recording all calls made, and all features added to services.

    Generated geometries are fake projections: ``x = lon * SCALE`` and ``y = lat * SCALE``.

    ``fail_when`` is called before every call with the method name and its arguments;
    if it returns True, the call raises :py:exc:`~gtfsarc.errors.RemoteCallError`
    (without any side effects). ``reverse_generated`` makes ``generate``
    return features in reverse order, like a misbehaving server might.
    """

    SCALE = 1000.0

    def __init__(
        self,
        fail_when: Callable[[str, tuple[Any, ...]], bool] | None = None,
        reverse_generated: bool = False,
    ) -> None:
        self.fail_when = fail_when
        self.reverse_generated = reverse_generated
        self.calls: list[MockCall] = []
        self.features: dict[tuple[str, int], list[JSONObject]] = {}
        self.layers: dict[str, list[JSONObject]] = {}
        self.shared: list[tuple[str, str]] = []
        self.lock = Lock()

    @staticmethod
    def failing(*methods: str) -> "MockConnection":
        """Creates a MockConnection where all calls to the provided methods fail."""
        return MockConnection(fail_when=lambda method, _: method in methods)

    def _call(self, method: str, *args: Any) -> None:
        with self.lock:
            self.calls.append(MockCall(method, args))
        if self.fail_when is not None and self.fail_when(method, args):
            raise RemoteCallError(method, "mock failure")

    def called(self, method: str) -> list[MockCall]:
        """called returns all recorded calls to the provided method."""
        with self.lock:
            return [c for c in self.calls if c.method == method]

    def create_group(self, title: str, access: str, description: str) -> str:
        self._call("create_group", title, access, description)
        return "group-0"

    def add_item(self, title: str, type: str, tags: str, path: StrPath) -> str:
        self._call("add_item", title, type, tags, path)
        return f"item-{title}"

    def create_feature_service(self, name: str, definition: JSONObject) -> FeatureService:
        self._call("create_feature_service", name, definition)
        return FeatureService(f"service-{name}", f"https://example.com/rest/services/{name}")

    def add_to_definition(self, service: FeatureService, layers: Sequence[JSONObject]) -> None:
        self._call("add_to_definition", service, layers)
        with self.lock:
            self.layers.setdefault(service.item_id, []).extend(layers)

    def analyze(self, text: str) -> JSONObject:
        self._call("analyze", text)
        header = text.partition("\n")[0].split(",")
        return {"layerInfo": {"fields": [{"name": h} for h in header]}}

    def generate(self, text: str, publish_parameters: JSONObject) -> list[JSONObject]:
        self._call("generate", text, publish_parameters)
        lat_field = publish_parameters["latitudeFieldName"]
        lon_field = publish_parameters["longitudeFieldName"]

        features: list[JSONObject] = []
        for row in DictReader(StringIO(text)):
            attributes: JSONObject = {k: _guess_type(v) for k, v in row.items()}
            attributes["extra_generated_field"] = "should not leak"
            features.append(
                {
                    "geometry": {
                        "x": float(row[lon_field]) * self.SCALE,
                        "y": float(row[lat_field]) * self.SCALE,
                    },
                    "attributes": attributes,
                }
            )

        if self.reverse_generated:
            features.reverse()
        return features

    def add_features(
        self,
        service: FeatureService,
        layer_id: int,
        features: Sequence[JSONObject],
    ) -> None:
        self._call("add_features", service, layer_id, features)
        with self.lock:
            self.features.setdefault((service.item_id, layer_id), []).extend(features)

    def share(self, item_id: str, group_id: str, everyone: bool = True, org: bool = True) -> None:
        self._call("share", item_id, group_id, everyone, org)
        with self.lock:
            self.shared.append((item_id, group_id))


def _guess_type(value: str) -> int | float | str:
    for converter in (int, float):
        try:
            return converter(value)
        except ValueError:
            pass
    return value


class MockFile:
    """MockFile creates a temporary file for testing purposes.
    The file must be removed after usage by calling mock_file.cleanup().
    This action is automatically performed if MockFile is used in a with statement.

    >>> with MockFile() as f:
    ...     _ = f.write_text("Hello, world!")
    ...     f.read_text()
    'Hello, world!'
    """

    path: Path

    def __init__(
        self, prefix: str = "gtfsarc-test", suffix: Optional[str] = None, directory: bool = False
    ) -> None:
        if directory:
            path = mkdtemp(prefix=prefix, suffix=suffix)
        else:
            handle, path = mkstemp(prefix=prefix, suffix=suffix)
            os.close(handle)
        self.path = Path(path)

    def __enter__(self) -> Path:
        return self.path

    def __exit__(self, *_: Any) -> bool:
        self.cleanup()
        return False

    def cleanup(self) -> None:
        if self.path.is_dir():
            rmtree(self.path)
        elif self.path.exists():
            self.path.unlink()

    def write_feed(self, files: Mapping[str, Iterable[str]]) -> None:
        """write_feed writes GTFS files (given as lines) into this (directory) MockFile."""
        for name, lines in files.items():
            (self.path / name).write_text("".join(f"{line}\n" for line in lines), "utf-8")
