# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

from typing import Iterable


class ValidationError(ValueError):
    """ValidationError is raised when the provided GTFS files can't possibly form
    a valid feed (e.g. a required file is missing). It is raised before any remote
    call is made, so nothing is published."""

    missing: list[str]

    def __init__(self, missing: Iterable[str]) -> None:
        self.missing = sorted(missing)
        super().__init__(
            "Invalid GTFS format, missing required file(s): " + ", ".join(self.missing)
        )


class DataError(ValueError):
    """DataError represents any error related to incorrect input data.

    The main point of DataErrors is that it may be caught
    and any underlying process may continue. Thus, any process raising
    DataError must not leave the publishing process in an undefined state.
    """

    pass


class DataFormatError(DataError):
    """DataFormatError is raised by strict parsers when a field is malformed
    (e.g. a non-hex route_color). Record parsing always catches it and
    degrades to a default value, so it never escapes out of :py:mod:`gtfsarc.model`.
    """

    pass


class RemoteCallError(Exception):
    """RemoteCallError is raised when a call to the remote portal fails,
    either on the HTTP level, or because the portal responded with an error object.

    Within a :py:class:`~gtfsarc.graph.TaskGraph`, RemoteCallErrors are not propagated
    immediately, but they mark the task (and its dependents) as failed.
    """

    call: str

    def __init__(self, call: str, reason: str) -> None:
        self.call = call
        super().__init__(f"{call}: {reason}")


class ResponseMismatch(RemoteCallError):
    """ResponseMismatch is raised when the portal's response can't be paired
    with the request, e.g. the geometry generator returned a different number
    of features, or returned them in a different order."""

    pass


class ImportFailed(Exception):
    """ImportFailed is raised when publishing finished with a non-zero amount of failures.

    Every failure reason is preserved in the ``errors`` attribute, in the order in which
    the corresponding tasks resolved.
    """

    errors: list[BaseException]

    def __init__(self, when: str, errors: list[BaseException]) -> None:
        self.errors = errors
        super().__init__(
            f"{len(errors)} error(s) encountered during {when}:\n    "
            + "\n    ".join(str(err) for err in errors)
        )

    @staticmethod
    def deduplicate(errors: Iterable[BaseException]) -> list[BaseException]:
        """deduplicate ensures every exception object appears only once,
        keeping the first occurrence. A failure propagated through a task graph
        carries the very same exception object, thus it's only reported once.

        >>> e1, e2 = ValueError("foo"), ValueError("bar")
        >>> ImportFailed.deduplicate([e1, e2, e1, e2, e1])
        [ValueError('foo'), ValueError('bar')]
        """
        seen: set[int] = set()
        deduplicated: list[BaseException] = []
        for err in errors:
            if id(err) not in seen:
                deduplicated.append(err)
                seen.add(id(err))
        return deduplicated
