from dataclasses import replace
from textwrap import dedent

import pytest

from mimic.common import L, source_buffers
from mimic.config import MimicConfig, load_config_from_path
from mimic.mockgen import GenerateRunner, SourceKitExtractor
from mimic.spec import ErrorPolicy, GenerationAbortedError
from mimic.test_utils import SpyBus, WorkspaceFactory

FETCHER = """
import Foundation
import Combine

/// @mockable
public protocol Fetcher: Cancellable {
    func fetch(id: Int) -> Data
    var session: URLSession { get }
}
"""

STORE = """
import Foundation
#if canImport(UIKit)
import UIKit
#endif

/// Not mocked.
protocol Cache {
    func clear()
}

/// @mockable
protocol Store {
    func load(key: String) -> Fetcher
}
"""

CANCELLABLE_MOCK = """
class CancellableMock: Cancellable {
    init() { }
    var cancelCallCount = 0
    func cancel() {
        cancelCallCount += 1
    }
}
"""


def _describe_fetcher(builder):
    (
        builder.add_type(
            "public protocol Fetcher",
            "Fetcher",
            inherited=["Cancellable"],
            accessibility="public",
        )
        .method(
            "func fetch(id: Int) -> Data",
            "fetch(id:)",
            params=[("id", "Int")],
            return_type="Data",
        )
        .variable("var session: URLSession { get }", "session", "URLSession")
    )


def _describe_store(builder):
    builder.add_type("protocol Cache", "Cache").method("func clear()", "clear()")
    builder.add_type("protocol Store", "Store").method(
        "func load(key: String) -> Fetcher",
        "load(key:)",
        params=[("key", "String")],
        return_type="Fetcher",
    )


def _describe_cancellable_mock(builder):
    (
        builder.add_type("class CancellableMock", "CancellableMock", kind="class")
        .method("init() { }", "init()")
        .variable("var cancelCallCount = 0", "cancelCallCount")
        .method("func cancel() {", "cancel()")
    )


@pytest.fixture(autouse=True)
def clean_buffers():
    source_buffers.clear()
    yield
    source_buffers.clear()


@pytest.fixture
def project(tmp_path):
    factory = (
        WorkspaceFactory(tmp_path)
        .with_swift("Sources/Fetcher.swift", FETCHER, _describe_fetcher)
        .with_swift("Sources/Store.swift", STORE, _describe_store)
        .with_swift(
            "Mocks/CancellableMock.swift",
            CANCELLABLE_MOCK,
            _describe_cancellable_mock,
        )
        # Generated test doubles next to the sources are never scanned.
        .with_source("Sources/FetcherMocks.swift", "class Leftover {}\n")
    )
    factory.build()
    return factory


def _runner(factory, **overrides):
    on_error = overrides.pop("on_error", ErrorPolicy.ABORT)
    config = MimicConfig(
        scan_paths=["Sources"],
        mock_files=["Mocks/CancellableMock.swift"],
        output="Tests/GeneratedMocks.swift",
        max_concurrency=2,
    )
    config = replace(config, **overrides)
    provider = factory.structure_provider()
    runner = GenerateRunner(
        root_path=factory.root_path,
        config=config,
        extractor=SourceKitExtractor(provider=provider),
        on_error=on_error,
    )
    return runner, provider


def test_generates_mocks_for_annotated_protocols(project, monkeypatch):
    runner, provider = _runner(project)
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        content = runner.run()

    output = project.root_path / "Tests/GeneratedMocks.swift"
    assert output.read_text(encoding="utf-8") == content
    assert source_buffers.loads == 0
    spy_bus.assert_id_called(L.generate.file.success, level="success")
    spy_bus.assert_id_called(L.generate.processed.loaded, level="info")
    assert project.path_of("Sources/FetcherMocks.swift") not in provider.calls

    assert content.startswith(
        dedent(
            """\
            import Foundation
            import Combine
            #if canImport(UIKit)
            import UIKit
            #endif

            public class FetcherMock: Fetcher {
            """
        )
    )
    assert "CacheMock" not in content
    assert content.index("class FetcherMock") < content.index("class StoreMock")


def test_fetcher_mock_merges_the_passed_through_parent(project):
    runner, _ = _runner(project)

    content = runner.run()

    assert "    var fetchCallCount = 0" in content
    assert "        return Data()" in content
    assert "    var underlyingSession: URLSession!" in content
    assert "    func cancel() {\n        cancelCallCount += 1\n    }" in content


def test_return_values_use_other_mocks(project):
    runner, _ = _runner(project)

    content = runner.run()

    assert content.endswith(
        dedent(
            """\
            class StoreMock: Store {
                init() { }

                var loadCallCount = 0
                var loadHandler: ((String) -> (Fetcher))?
                func load(key: String) -> Fetcher {
                    loadCallCount += 1
                    if let loadHandler = loadHandler {
                        return loadHandler(key)
                    }
                    return FetcherMock()
                }
            }
            """
        )
    )


def test_rerun_leaves_output_untouched(project, monkeypatch):
    runner, _ = _runner(project)
    first = runner.run()
    output = project.root_path / "Tests/GeneratedMocks.swift"
    mtime = output.stat().st_mtime_ns

    spy_bus = SpyBus()
    with spy_bus.patch(monkeypatch):
        second = runner.run()

    assert second == first
    assert output.stat().st_mtime_ns == mtime
    spy_bus.assert_id_called(L.generate.file.unchanged, level="info")


def test_header_and_sequential_mode(project):
    sequential, _ = _runner(
        project, max_concurrency=0, header="// Generated by mimic. Do not edit."
    )
    pooled, _ = _runner(project, max_concurrency=4, output=None)

    sequential_content = sequential.run()
    pooled_content = pooled.run()

    assert sequential_content.startswith("// Generated by mimic. Do not edit.\n\n")
    assert sequential_content.split("\n", 2)[2] == pooled_content


def test_unparsable_file_aborts_without_writing(project):
    project.structures.pop(project.path_of("Sources/Store.swift"))
    runner, _ = _runner(project)

    with pytest.raises(GenerationAbortedError):
        runner.run()

    assert not (project.root_path / "Tests/GeneratedMocks.swift").exists()


def test_unparsable_file_is_skipped_on_request(project, monkeypatch):
    project.structures.pop(project.path_of("Sources/Store.swift"))
    runner, _ = _runner(project, on_error=ErrorPolicy.SKIP)
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        content = runner.run()

    assert "class FetcherMock" in content
    assert "class StoreMock" not in content
    assert "UIKit" not in content
    spy_bus.assert_id_called(L.error.parse.failed, level="error")


def test_no_sources_is_a_warning(tmp_path, monkeypatch):
    factory = WorkspaceFactory(tmp_path)
    factory.build()
    runner, _ = _runner(factory, scan_paths=["Missing"])
    spy_bus = SpyBus()

    with spy_bus.patch(monkeypatch):
        assert runner.run() == ""

    spy_bus.assert_id_called(L.generate.no_sources, level="warning")


def test_runner_from_pyproject(project):
    WorkspaceFactory(project.root_path).with_config(
        {
            "scan_paths": ["Sources/Store.swift"],
            "output": "Out/Mocks.swift",
            "max_concurrency": 0,
        }
    ).build()
    config = load_config_from_path(project.root_path)

    runner = GenerateRunner(
        project.root_path,
        config,
        SourceKitExtractor(provider=project.structure_provider()),
    )
    content = runner.run()

    assert (project.root_path / "Out/Mocks.swift").is_file()
    assert "class StoreMock: Store {" in content
    # Fetcher was not scanned, so no mock is known for its return type.
    assert "return FetcherMock()" not in content
