# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Protocol, Sequence

import requests

from .errors import RemoteCallError
from .tools.types import JSONObject, StrPath

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FeatureService:
    """FeatureService is a handle to a hosted feature service created on the portal.
    It's immutable, and thus may be freely shared between concurrent tasks.
    """

    item_id: str
    url: str

    @property
    def admin_url(self) -> str:
        """admin_url is the URL of the administrative endpoint of the service,
        used for modifying its definition."""
        return self.url.replace("/rest/services/", "/rest/admin/services/", 1)

    def layer_url(self, layer_id: int) -> str:
        return f"{self.url}/{layer_id}"


class Connection(Protocol):
    """Connection is an authenticated handle to an ArcGIS portal.

    Implementations must be safe to use from multiple threads at once and must not
    change after construction. Every method may raise
    :py:exc:`~gtfsarc.errors.RemoteCallError`.
    """

    def create_group(self, title: str, access: str, description: str) -> str:
        """Creates a new group and returns its id."""
        ...

    def add_item(self, title: str, type: str, tags: str, path: StrPath) -> str:
        """Uploads a file as a new content item and returns its id."""
        ...

    def create_feature_service(self, name: str, definition: JSONObject) -> FeatureService:
        """Creates an empty hosted feature service from a JSON service definition."""
        ...

    def add_to_definition(self, service: FeatureService, layers: Sequence[JSONObject]) -> None:
        """Appends layers to the definition of an existing service."""
        ...

    def analyze(self, text: str) -> JSONObject:
        """Analyzes CSV text and returns the inferred publish parameters."""
        ...

    def generate(self, text: str, publish_parameters: JSONObject) -> list[JSONObject]:
        """Generates features (geometry and attributes) from CSV text, one feature per row."""
        ...

    def add_features(
        self,
        service: FeatureService,
        layer_id: int,
        features: Sequence[JSONObject],
    ) -> None:
        """Appends features to a layer of a service."""
        ...

    def share(self, item_id: str, group_id: str, everyone: bool = True, org: bool = True) -> None:
        """Shares an item (or a service) with a group."""
        ...


class ArcGISConnection:
    """ArcGISConnection implements :py:class:`Connection` on top of the
    `ArcGIS REST API <https://developers.arcgis.com/rest/users-groups-and-items/>`_.

    Obtaining the token is outside of the scope of this class - it must be
    provided by the caller.

    :param str host: Portal root, e.g. ``https://www.arcgis.com``
    :param str username: Name of the user owning created content
    :param str token: Access token for the user
    :param requests.Session | None session: Session to be used for all requests
    :param float | None timeout: Timeout for every request, defaults to none
    """

    def __init__(
        self,
        host: str,
        username: str,
        token: str,
        session: requests.Session | None = None,
        timeout: float | None = None,
    ) -> None:
        self.host = host.rstrip("/")
        self.username = username
        self.token = token
        self.session = session or requests.Session()
        self.timeout = timeout

    @property
    def sharing_url(self) -> str:
        return f"{self.host}/sharing/rest"

    @property
    def user_content_url(self) -> str:
        return f"{self.sharing_url}/content/users/{self.username}"

    def _post(
        self,
        call: str,
        url: str,
        data: Mapping[str, Any],
        files: Mapping[str, Any] | None = None,
    ) -> JSONObject:
        logger.debug("POST %s (%s)", url, call)
        try:
            with self.session.post(
                url,
                data={**data, "f": "json", "token": self.token},
                files=files,
                timeout=self.timeout,
            ) as response:
                response.raise_for_status()
                body = response.json()
        except requests.RequestException as e:
            raise RemoteCallError(call, str(e)) from e
        except ValueError as e:
            raise RemoteCallError(call, "response is not valid JSON") from e

        if not isinstance(body, dict):
            raise RemoteCallError(call, f"expected a JSON object, got {type(body).__name__}")

        if error := body.get("error"):
            if not isinstance(error, dict):
                raise RemoteCallError(call, str(error))
            details = "; ".join(str(d) for d in error.get("details") or [])
            message = str(error.get("message", "unknown error"))
            raise RemoteCallError(
                call,
                f"{message} ({details})" if details else message,
            )
        return body

    def create_group(self, title: str, access: str, description: str) -> str:
        body = self._post(
            "createGroup",
            f"{self.sharing_url}/community/createGroup",
            {"title": title, "access": access, "description": description, "tags": "gtfs"},
        )
        return body["group"]["id"]

    def add_item(self, title: str, type: str, tags: str, path: StrPath) -> str:
        path = Path(path)
        with path.open(mode="rb") as f:
            body = self._post(
                "addItem",
                f"{self.user_content_url}/addItem",
                {"title": title, "type": type, "tags": tags},
                files={"file": (path.name, f)},
            )
        return body["id"]

    def create_feature_service(self, name: str, definition: JSONObject) -> FeatureService:
        body = self._post(
            "createService",
            f"{self.user_content_url}/createService",
            {
                "createParameters": json.dumps({**definition, "name": name}),
                "outputType": "featureService",
            },
        )
        return FeatureService(item_id=body["itemId"], url=body["serviceurl"])

    def add_to_definition(self, service: FeatureService, layers: Sequence[JSONObject]) -> None:
        self._post(
            "addToDefinition",
            f"{service.admin_url}/addToDefinition",
            {"addToDefinition": json.dumps({"layers": list(layers)})},
        )

    def analyze(self, text: str) -> JSONObject:
        body = self._post(
            "analyze",
            f"{self.sharing_url}/content/features/analyze",
            {"text": text, "filetype": "csv"},
        )
        return body["publishParameters"]

    def generate(self, text: str, publish_parameters: JSONObject) -> list[JSONObject]:
        body = self._post(
            "generate",
            f"{self.sharing_url}/content/features/generate",
            {
                "text": text,
                "filetype": "csv",
                "publishParameters": json.dumps(publish_parameters),
            },
        )
        layers = body["featureCollection"]["layers"]
        if not layers:
            return []
        return layers[0]["featureSet"]["features"]

    def add_features(
        self,
        service: FeatureService,
        layer_id: int,
        features: Sequence[JSONObject],
    ) -> None:
        body = self._post(
            "addFeatures",
            f"{service.layer_url(layer_id)}/addFeatures",
            {"features": json.dumps(list(features))},
        )
        failed = [r for r in body.get("addResults", []) if not r.get("success")]
        if failed:
            first_error = failed[0].get("error", {}).get("description", "unknown error")
            raise RemoteCallError(
                "addFeatures",
                f"{len(failed)} of {len(features)} feature(s) rejected, first: {first_error}",
            )

    def share(self, item_id: str, group_id: str, everyone: bool = True, org: bool = True) -> None:
        body = self._post(
            "share",
            f"{self.user_content_url}/items/{item_id}/share",
            {
                "groups": group_id,
                "everyone": str(everyone).lower(),
                "org": str(org).lower(),
            },
        )
        if body.get("notSharedWith"):
            raise RemoteCallError(
                "share",
                f"item {item_id} not shared with: {', '.join(body['notSharedWith'])}",
            )
