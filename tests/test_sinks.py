from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path
from typing import Any

from ig_details.errors import OutputError
from ig_details.retry import RetryConfig
from ig_details.sinks import ApifyDatasetSink, JsonlOutputSink


class _FlakyDatasetClient:
    def __init__(self, failures: list[BaseException]) -> None:
        self._failures = list(failures)
        self.pushed: list[Any] = []

    def push_items(self, items: Any) -> None:
        if self._failures:
            raise self._failures.pop(0)
        self.pushed.append(items)


class _FakeApifyClient:
    def __init__(self, dataset: _FlakyDatasetClient) -> None:
        self._dataset = dataset
        self.dataset_ids: list[str] = []

    def dataset(self, dataset_id: str) -> _FlakyDatasetClient:
        self.dataset_ids.append(dataset_id)
        return self._dataset


_FAST_RETRY = RetryConfig(max_attempts=3, base_delay_seconds=0.0, max_delay_seconds=0.0, jitter_ratio=0.0)


class TestApifyDatasetSink(unittest.IsolatedAsyncioTestCase):
    async def test_pushes_record(self) -> None:
        dataset = _FlakyDatasetClient([])
        fake = _FakeApifyClient(dataset)
        sink = ApifyDatasetSink("x", "ds_1", client=fake)  # type: ignore[arg-type]

        await sink.emit({"id": "1", "#debug": {}}, {"label": "details"})

        self.assertEqual(fake.dataset_ids, ["ds_1"])
        self.assertEqual(dataset.pushed, [{"id": "1", "#debug": {}}])

    async def test_retries_network_errors(self) -> None:
        dataset = _FlakyDatasetClient([ConnectionError("reset"), TimeoutError("slow")])
        events: list[Any] = []
        sink = ApifyDatasetSink(
            "x",
            "ds_1",
            client=_FakeApifyClient(dataset),  # type: ignore[arg-type]
            retry=_FAST_RETRY,
            on_retry=events.append,
        )

        await sink.emit({"id": "1"}, {})

        self.assertEqual(dataset.pushed, [{"id": "1"}])
        self.assertEqual([e.reason for e in events], ["network_error", "network_error"])

    async def test_non_retryable_error_is_wrapped(self) -> None:
        dataset = _FlakyDatasetClient([ValueError("bad item")])
        sink = ApifyDatasetSink(
            "x", "ds_1", client=_FakeApifyClient(dataset), retry=_FAST_RETRY  # type: ignore[arg-type]
        )

        with self.assertRaises(OutputError):
            await sink.emit({"id": "1"}, {})
        self.assertEqual(dataset.pushed, [])

    def test_requires_dataset_id(self) -> None:
        with self.assertRaises(OutputError):
            ApifyDatasetSink("x", "  ", client=_FakeApifyClient(_FlakyDatasetClient([])))  # type: ignore[arg-type]


class TestJsonlOutputSink(unittest.IsolatedAsyncioTestCase):
    async def test_appends_lines(self) -> None:
        with tempfile.TemporaryDirectory() as td:
            path = Path(td) / "out" / "details.jsonl"
            sink = JsonlOutputSink(path)

            await sink.emit({"id": "1", "name": "café"}, {})
            await sink.emit({"id": "2"}, {})

            lines = path.read_text(encoding="utf-8").splitlines()

        self.assertEqual([json.loads(line)["id"] for line in lines], ["1", "2"])
        self.assertIn("café", lines[0])


if __name__ == "__main__":
    unittest.main()
