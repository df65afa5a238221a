import subprocess

import pytest

from mimic.lang.swift import SourceKittenCLI, StructureNode, top_level_nodes
from mimic.lang.swift.constants import ATTRIBUTE_AVAILABLE
from mimic.spec import DeclKind, ParseError
from mimic.test_utils import SwiftStructureBuilder

SOURCE = """
import Foundation

/// @mockable
public protocol Fetcher: AnyObject {
    init(url: URL)
    @available(iOS 13.0, *)
    static func fetch(url: URL) throws -> Data
    var timeout: Double { get set }
}
"""


@pytest.fixture
def structure():
    builder = SwiftStructureBuilder(SOURCE)
    (
        builder.add_type(
            "public protocol Fetcher",
            "Fetcher",
            inherited=["AnyObject"],
            accessibility="public",
        )
        .method("init(url: URL)", "init(url:)", params=[("url", "URL")])
        .method(
            "static func fetch(url: URL) throws -> Data",
            "fetch(url:)",
            params=[("url", "URL")],
            return_type="Data",
            static=True,
            available="@available(iOS 13.0, *)",
        )
        .variable("var timeout: Double { get set }", "timeout", "Double")
    )
    return builder


def test_structure_node_maps_kinds_and_metadata(structure):
    (protocol,) = top_level_nodes(structure.build())

    assert protocol.kind == DeclKind.PROTOCOL
    assert protocol.name == "Fetcher"
    assert protocol.access_level == "public"
    assert protocol.inherited_types == ["AnyObject"]
    assert protocol.span.doc is not None

    init, fetch, timeout = protocol.substructures
    assert init.kind == DeclKind.INITIALIZER
    assert fetch.kind == DeclKind.METHOD
    assert fetch.is_static
    assert fetch.type_name == "Data"
    assert fetch.has_available_attribute
    assert timeout.kind == DeclKind.VARIABLE
    assert not timeout.is_static
    assert [p.kind for p in fetch.substructures] == [DeclKind.PARAMETER]


def test_structure_node_extracts_attribute_text(structure):
    (protocol,) = top_level_nodes(structure.build())
    fetch = protocol.substructures[1]

    attrs = fetch.extract_attributes(structure.buffer, ATTRIBUTE_AVAILABLE)

    assert attrs == ["@available(iOS 13.0, *)"]


def test_missing_keys_fall_back_to_defaults():
    node = StructureNode({})

    assert node.kind == DeclKind.OTHER
    assert node.type_name == "_unknown_"
    assert node.span.body_offset == -1
    assert node.access_level == ""
    assert node.substructures == []


def test_sourcekitten_cli_reports_missing_binary(monkeypatch):
    def missing(*args, **kwargs):
        raise FileNotFoundError("sourcekitten")

    monkeypatch.setattr(subprocess, "run", missing)

    with pytest.raises(ParseError, match="not installed"):
        SourceKittenCLI().load("A.swift")


def test_sourcekitten_cli_parses_json(monkeypatch):
    def fake_run(cmd, **kwargs):
        assert cmd == ["sourcekitten", "structure", "--file", "A.swift"]
        return subprocess.CompletedProcess(cmd, 0, stdout='{"key.offset": 0}')

    monkeypatch.setattr(subprocess, "run", fake_run)

    assert SourceKittenCLI().load("A.swift") == {"key.offset": 0}


def test_sourcekitten_cli_wraps_failures(monkeypatch):
    def failing(cmd, **kwargs):
        raise subprocess.CalledProcessError(1, cmd, stderr="bad file")

    monkeypatch.setattr(subprocess, "run", failing)

    with pytest.raises(ParseError, match="bad file"):
        SourceKittenCLI().load("A.swift")
