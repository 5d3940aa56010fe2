from time import sleep
from typing import Callable
from unittest import TestCase

from gtfsarc.errors import DataError, ImportFailed, RemoteCallError
from gtfsarc.graph import ImportResult, TaskGraph, TaskState


class Boom(RuntimeError):
    pass


def raiser(e: Exception) -> Callable[..., None]:
    def f(*_: object) -> None:
        raise e

    return f


class TestTaskGraph(TestCase):
    def test_results_flow_through_dependencies(self) -> None:
        graph = TaskGraph()
        a = graph.add("a", lambda: 2)
        b = graph.add("b", lambda x: x * 10, [a])
        c = graph.add("c", lambda x: x + 1, [a])
        graph.add("d", lambda x, y: (x, y), [b, c])

        result = graph.run()

        self.assertTrue(result.ok)
        self.assertEqual(graph["d"].result, (20, 3))
        self.assertSetEqual(set(result.succeeded), {"a", "b", "c", "d"})
        self.assertEqual(result.succeeded[0], "a")
        self.assertEqual(result.succeeded[-1], "d")
        self.assertTrue(all(t.state is TaskState.SUCCEEDED for t in graph))

    def test_join_task(self) -> None:
        graph = TaskGraph()
        a = graph.add("a", lambda: 1)
        b = graph.add("b", lambda: 2)
        graph.add("join", None, [a, b])

        graph.run()

        self.assertListEqual(graph["join"].result, [1, 2])

    def test_dependents_never_start_before_dependencies(self) -> None:
        started: list[str] = []
        graph = TaskGraph()

        def root() -> None:
            sleep(0.05)
            started.append("root")

        r = graph.add("root", root)
        for i in range(8):
            graph.add(f"leaf.{i}", lambda _, i=i: started.append(f"leaf.{i}"), [r])

        graph.run(max_workers=4)

        self.assertEqual(started[0], "root")
        self.assertEqual(len(started), 9)

    def test_failure_propagates_without_running(self) -> None:
        error = RemoteCallError("createService", "quota exceeded")
        ran: list[str] = []

        graph = TaskGraph()
        a = graph.add("a", raiser(error))
        b = graph.add("b", lambda _: ran.append("b"), [a])
        graph.add("c", lambda _: ran.append("c"), [b])
        graph.add("sibling", lambda: ran.append("sibling"))

        result = graph.run()

        self.assertListEqual(ran, ["sibling"])
        for id in ("a", "b", "c"):
            self.assertIs(graph[id].state, TaskState.FAILED)
            self.assertIs(graph[id].failure_reason, error)
        self.assertIs(graph["sibling"].state, TaskState.SUCCEEDED)
        self.assertListEqual(result.failures, [error])
        self.assertListEqual(result.succeeded, ["sibling"])

    def test_siblings_keep_running(self) -> None:
        graph = TaskGraph()
        root = graph.add("root", lambda: None)
        graph.add("fail", raiser(DataError("bad data")), [root])
        graph.add("ok", lambda _: "done", [root])

        result = graph.run()

        self.assertEqual(graph["ok"].result, "done")
        self.assertEqual(len(result.failures), 1)
        self.assertIsInstance(result.failures[0], DataError)

    def test_distinct_failures(self) -> None:
        e1 = RemoteCallError("generate", "one")
        e2 = RemoteCallError("generate", "two")

        graph = TaskGraph()
        a = graph.add("a", raiser(e1))
        b = graph.add("b", raiser(e2))
        graph.add("a.child", None, [a])
        graph.add("both", None, [a, b])

        result = graph.run(max_workers=1)

        self.assertEqual(len(result.failures), 2)
        self.assertSetEqual({id(e) for e in result.failures}, {id(e1), id(e2)})
        self.assertListEqual(result.succeeded, [])

    def test_unexpected_error_is_raised_after_all_tasks(self) -> None:
        ran: list[str] = []

        graph = TaskGraph()
        graph.add("boom", raiser(Boom("programming error")))
        graph.add("other", lambda: ran.append("other"))

        with self.assertRaises(Boom):
            graph.run()

        self.assertListEqual(ran, ["other"])
        self.assertIs(graph["boom"].state, TaskState.FAILED)
        self.assertIs(graph["other"].state, TaskState.SUCCEEDED)

    def test_empty(self) -> None:
        result = TaskGraph().run()
        self.assertTrue(result.ok)
        self.assertListEqual(result.succeeded, [])

    def test_duplicate_id(self) -> None:
        graph = TaskGraph()
        graph.add("a")
        with self.assertRaises(ValueError):
            graph.add("a")

    def test_dependency_from_other_graph(self) -> None:
        other = TaskGraph().add("a")
        with self.assertRaises(ValueError):
            TaskGraph().add("b", depends_on=[other])

    def test_named_graph_loggers(self) -> None:
        graph = TaskGraph("Publish")
        task = graph.add("createService")
        self.assertEqual(task.logger.name, "Publish.Task.createService")
        self.assertEqual(TaskGraph().add("x").logger.name, "Task.x")


class TestImportResult(TestCase):
    def test_ok(self) -> None:
        result = ImportResult(["a"], [])
        self.assertTrue(result.ok)
        self.assertEqual(result.report(), "")
        result.raise_for_failures()

    def test_failures(self) -> None:
        result = ImportResult(
            [],
            [RemoteCallError("share", "denied"), RemoteCallError("generate", "timeout")],
        )
        self.assertFalse(result.ok)
        self.assertEqual(result.report(), "share: denied\ngenerate: timeout")

        with self.assertRaises(ImportFailed) as ctx:
            result.raise_for_failures()
        self.assertEqual(
            str(ctx.exception),
            "2 error(s) encountered during publishing:\n    share: denied\n    generate: timeout",
        )
        self.assertEqual(len(ctx.exception.errors), 2)
