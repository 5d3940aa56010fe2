# © Copyright 2022-2025 Mikołaj Kuranowski
# SPDX-License-Identifier: GPL-3.0-or-later

import logging
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from enum import Enum
from time import perf_counter
from typing import Any, Callable, Iterable, Iterator, Optional

from .errors import DataError, ImportFailed, RemoteCallError


class TaskState(Enum):
    PENDING = "pending"
    RUNNING = "running"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


@dataclass(eq=False)
class PublishTask:
    """PublishTask is a single node of a :py:class:`TaskGraph`.

    Once all dependencies have succeeded, ``action`` is called with the results
    of the dependencies (in the order of declaration) as positional arguments.
    The return value becomes the task's result. Tasks without an action simply
    join their dependencies - their result is the list of dependency results.
    """

    id: str
    action: Optional[Callable[..., Any]] = field(default=None, repr=False)
    dependencies: list["PublishTask"] = field(default_factory=list, repr=False)
    state: TaskState = TaskState.PENDING
    result: Any = field(default=None, repr=False)
    failure_reason: Optional[BaseException] = field(default=None, repr=False)
    logger: logging.Logger = field(init=False, repr=False)

    def __post_init__(self) -> None:
        self.logger = logging.getLogger(f"Task.{self.id}")

    def execute(self) -> Any:
        args = [dependency.result for dependency in self.dependencies]
        if self.action is None:
            return args

        self.logger.debug("Executing")
        start = perf_counter()
        result = self.action(*args)
        self.logger.debug("Finished; elapsed: %.3f s", perf_counter() - start)
        return result


@dataclass(frozen=True)
class ImportResult:
    """ImportResult is the outcome of running a :py:class:`TaskGraph` - ids of all tasks
    which have succeeded, and all distinct failure reasons, in the order in which
    the failed tasks have resolved."""

    succeeded: list[str]
    failures: list[BaseException]

    @property
    def ok(self) -> bool:
        return not self.failures

    def report(self) -> str:
        """report returns every failure reason on a separate line,
        or an empty string if there were no failures."""
        return "\n".join(str(failure) for failure in self.failures)

    def raise_for_failures(self, when: str = "publishing") -> None:
        """Raises :py:exc:`~gtfsarc.errors.ImportFailed` if there were any failures."""
        if self.failures:
            raise ImportFailed(when, self.failures)


class TaskGraph:
    """TaskGraph is a directed acyclic graph of :py:class:`PublishTask` objects,
    executed concurrently on a bounded thread pool.

    A task starts only after all of its dependencies have succeeded. If any dependency
    fails, the task fails as well - without being run, and with the same failure reason.
    Tasks which don't depend on each other run concurrently, in no particular order.
    Running tasks are never cancelled, not even if a sibling has already failed.

    :py:exc:`~gtfsarc.errors.RemoteCallError` and :py:exc:`~gtfsarc.errors.DataError`
    raised by a task are recorded as its failure reason. Any other exception
    is recorded as well (so that the graph can be drained), but it is re-raised
    once all tasks have resolved.

    Dependencies must be added to the graph before their dependents,
    which makes cycles impossible.
    """

    def __init__(self, name: str = "") -> None:
        self.name = name
        self.logger = logging.getLogger(f"{name}.TaskGraph" if name else "TaskGraph")
        self.tasks: dict[str, PublishTask] = {}

    def __len__(self) -> int:
        return len(self.tasks)

    def __iter__(self) -> Iterator[PublishTask]:
        return iter(self.tasks.values())

    def __contains__(self, id: str) -> bool:
        return id in self.tasks

    def __getitem__(self, id: str) -> PublishTask:
        return self.tasks[id]

    def add(
        self,
        id: str,
        action: Optional[Callable[..., Any]] = None,
        depends_on: Iterable[PublishTask] = (),
    ) -> PublishTask:
        """add creates a new task in the graph and returns it."""
        if id in self.tasks:
            raise ValueError(f"duplicate task id: {id}")

        dependencies = list(depends_on)
        for dependency in dependencies:
            if self.tasks.get(dependency.id) is not dependency:
                raise ValueError(
                    f"task {id} depends on {dependency.id}, which is not in the graph"
                )

        task = PublishTask(id, action, dependencies)
        if self.name:
            task.logger = logging.getLogger(f"{self.name}.Task.{id}")
        self.tasks[id] = task
        return task

    def run(self, max_workers: int | None = None) -> ImportResult:
        """run executes all tasks on a ThreadPoolExecutor with at most ``max_workers``
        threads, and blocks until every task has either succeeded or failed.
        Every task's terminal state is then inspected once to create an
        :py:class:`ImportResult`.
        """
        resolved: list[PublishTask] = []
        unexpected: list[BaseException] = []

        with ThreadPoolExecutor(max_workers, thread_name_prefix="publish") as pool:
            running: dict[Future[Any], PublishTask] = {}
            self._schedule(pool, running, resolved)

            while running:
                done, _ = wait(running, return_when=FIRST_COMPLETED)
                for future in done:
                    task = running.pop(future)
                    self._resolve(task, future, unexpected)
                    resolved.append(task)
                self._schedule(pool, running, resolved)

        result = ImportResult(
            succeeded=[t.id for t in resolved if t.state is TaskState.SUCCEEDED],
            failures=ImportFailed.deduplicate(
                t.failure_reason
                for t in resolved
                if t.state is TaskState.FAILED and t.failure_reason is not None
            ),
        )

        if unexpected:
            raise unexpected[0]

        if result.ok:
            self.logger.info("All %d task(s) succeeded", len(result.succeeded))
        else:
            self.logger.error("%d task(s) failed", len(resolved) - len(result.succeeded))
        return result

    def _schedule(
        self,
        pool: ThreadPoolExecutor,
        running: dict[Future[Any], PublishTask],
        resolved: list[PublishTask],
    ) -> None:
        # A failure propagates through a whole chain of pending tasks,
        # hence the loop until a fixed point is reached.
        changed = True
        while changed:
            changed = False
            for task in self.tasks.values():
                if task.state is not TaskState.PENDING:
                    continue

                failed = next((d for d in task.dependencies if d.state is TaskState.FAILED), None)
                if failed is not None:
                    task.state = TaskState.FAILED
                    task.failure_reason = failed.failure_reason
                    task.logger.debug("Not running, as %s has failed", failed.id)
                    resolved.append(task)
                    changed = True
                elif all(d.state is TaskState.SUCCEEDED for d in task.dependencies):
                    task.state = TaskState.RUNNING
                    running[pool.submit(task.execute)] = task

    @staticmethod
    def _resolve(
        task: PublishTask,
        future: Future[Any],
        unexpected: list[BaseException],
    ) -> None:
        try:
            task.result = future.result()
            task.state = TaskState.SUCCEEDED
        except (RemoteCallError, DataError) as e:
            task.state = TaskState.FAILED
            task.failure_reason = e
            task.logger.error("Failed: %s", e)
        except Exception as e:
            task.state = TaskState.FAILED
            task.failure_reason = e
            task.logger.exception("Failed with an unexpected error")
            unexpected.append(e)
