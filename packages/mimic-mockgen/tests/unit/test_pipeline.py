import threading
import time
from collections import Counter

import pytest

from mimic.common import L
from mimic.mockgen import EntityMap, generate_entity_map, generate_protocol_map
from mimic.mockgen.models import Entity
from mimic.spec import DeclKind, ErrorPolicy, GenerationAbortedError, ParseError
from mimic.test_utils import SpyBus


class FakeExtractor:
    """Yields one protocol per file and tracks how many calls overlap."""

    def __init__(self, failing=(), delay=0.01):
        self.failing = set(failing)
        self.delay = delay
        self.lock = threading.Lock()
        self.in_flight = 0
        self.max_in_flight = 0
        self.seen = []

    def extract(self, file_path, processed):
        with self.lock:
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
            self.seen.append(file_path)
        try:
            time.sleep(self.delay)
            if file_path in self.failing:
                raise ParseError(file_path, "unexpected token")
            name = file_path.split("/")[-1].split(".")[0]
            entity = Entity(
                name=name,
                kind=DeclKind.PROTOCOL,
                file_path=file_path,
                is_processed=processed,
            )
            return [entity], [f"import {name}Kit"]
        finally:
            with self.lock:
                self.in_flight -= 1


PATHS = [f"src/P{i}.swift" for i in range(12)]


def _summary(sink):
    return Counter((e.name, e.file_path) for e in sink.entities), sink.imports


@pytest.mark.parametrize("concurrency", [None, 0, 1])
def test_sequential_modes_process_in_order(concurrency):
    extractor = FakeExtractor(delay=0)
    sink = EntityMap()

    failures = generate_protocol_map(PATHS, extractor, sink, concurrency)

    assert failures == []
    assert extractor.seen == PATHS
    assert extractor.max_in_flight == 1
    assert len(sink) == len(PATHS)


def test_pooled_run_matches_sequential_run():
    sequential, pooled = EntityMap(), EntityMap()

    generate_protocol_map(PATHS, FakeExtractor(delay=0), sequential, None)
    generate_protocol_map(PATHS, FakeExtractor(), pooled, 4)

    assert _summary(pooled) == _summary(sequential)
    assert [e.name for e in pooled.sorted_entities()] == [
        e.name for e in sequential.sorted_entities()
    ]


def test_in_flight_work_never_exceeds_the_limit():
    extractor = FakeExtractor(delay=0.02)

    generate_protocol_map(PATHS, extractor, EntityMap(), 3)

    assert 1 <= extractor.max_in_flight <= 3


def test_processed_flag_reaches_the_extractor():
    sink = EntityMap()

    generate_entity_map(PATHS[:2], FakeExtractor(delay=0), sink, processed=True)

    assert all(e.is_processed for e in sink.entities)


def test_abort_policy_raises_after_reporting(monkeypatch):
    spy_bus = SpyBus()
    extractor = FakeExtractor(failing={PATHS[0]}, delay=0)
    sink = EntityMap()

    with spy_bus.patch(monkeypatch):
        with pytest.raises(GenerationAbortedError) as exc_info:
            generate_protocol_map(PATHS, extractor, sink, None, ErrorPolicy.ABORT)

    assert [f.file_path for f in exc_info.value.failures] == [PATHS[0]]
    assert exc_info.value.failures[0].reason == "unexpected token"
    # Nothing after the failing file is dispatched.
    assert extractor.seen == [PATHS[0]]
    assert len(sink) == 0
    spy_bus.assert_id_called(L.error.parse.failed, level="error")


def test_abort_policy_stops_dispatch_in_pooled_mode():
    extractor = FakeExtractor(failing={PATHS[0]}, delay=0.02)

    with pytest.raises(GenerationAbortedError):
        generate_protocol_map(PATHS, extractor, EntityMap(), 1)

    assert len(extractor.seen) < len(PATHS)


@pytest.mark.parametrize("concurrency", [None, 4])
def test_skip_policy_keeps_going(monkeypatch, concurrency):
    spy_bus = SpyBus()
    broken = {PATHS[3], PATHS[7]}
    sink = EntityMap()

    with spy_bus.patch(monkeypatch):
        failures = generate_protocol_map(
            PATHS, FakeExtractor(failing=broken), sink, concurrency, "skip"
        )

    assert {f.file_path for f in failures} == broken
    assert len(sink) == len(PATHS) - 2
    assert PATHS[3] not in sink.imports
    errors = [m for m in spy_bus.get_messages() if m["level"] == "error"]
    assert len(errors) == 2
    spy_bus.assert_id_called(L.generate.file.parsed, level="debug")


def test_missing_file_is_a_failure_not_a_crash(tmp_path):
    from mimic.mockgen import SourceKitExtractor
    from mimic.test_utils import StaticStructureProvider

    extractor = SourceKitExtractor(provider=StaticStructureProvider())
    missing = str(tmp_path / "Gone.swift")

    failures = generate_protocol_map(
        [missing], extractor, EntityMap(), on_error=ErrorPolicy.SKIP
    )

    assert [f.file_path for f in failures] == [missing]
