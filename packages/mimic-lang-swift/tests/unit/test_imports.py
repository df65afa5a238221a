from mimic.lang.swift import find_import_lines, merge_import_lines


def test_find_import_lines_stops_at_first_declaration():
    content = b"""import UIKit
@testable import Core
#if DEBUG
import DebugKit
#endif

protocol P {}
import Late
"""
    offset = content.index(b"protocol")

    assert find_import_lines(content, offset) == [
        "import UIKit",
        "@testable import Core",
        "#if DEBUG",
        "import DebugKit",
        "#endif",
    ]


def test_empty_directive_blocks_are_dropped():
    content = b"#if os(iOS)\n#endif\nimport Foundation\n"

    assert find_import_lines(content) == ["import Foundation"]


def test_merge_deduplicates_unconditional_imports():
    merged = merge_import_lines(
        [
            ["import Foundation", "import UIKit"],
            ["import Foundation", "#if DEBUG", "import Foundation", "#endif"],
        ]
    )

    assert merged == [
        "import Foundation",
        "import UIKit",
        "#if DEBUG",
        "import Foundation",
        "#endif",
    ]
