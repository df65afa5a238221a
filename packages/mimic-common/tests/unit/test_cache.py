import threading

from mimic.common import SourceBufferCache


def test_buffer_is_encoded_once_per_file():
    cache = SourceBufferCache()
    content = "// ünïcode\nprotocol P {}\n"

    first = cache.buffer("a.swift", content)
    second = cache.buffer("a.swift", content)

    assert first is second
    assert first == content.encode("utf-8")
    assert cache.loads == 1


def test_changed_content_is_encoded_again():
    cache = SourceBufferCache()
    cache.buffer("a.swift", "one")
    cache.buffer("a.swift", "two")

    assert cache.loads == 2


def test_extract_slices_bytes_and_memoises():
    cache = SourceBufferCache()
    content = "/* ☃ */ func foo()"
    offset = len("/* ☃ */ ".encode("utf-8"))

    text = cache.extract("k", "a.swift", content, offset, len("func foo()"))

    assert text == "func foo()"
    assert cache.extract("k", "a.swift", content, offset, 10) == text
    assert cache.loads == 1


def test_concurrent_population_yields_one_consistent_buffer():
    cache = SourceBufferCache()
    content = "x" * 10_000
    results = []

    def worker():
        results.append(cache.buffer("big.swift", content))

    threads = [threading.Thread(target=worker) for _ in range(8)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert all(r == content.encode("utf-8") for r in results)


def test_clear_resets_counters():
    cache = SourceBufferCache()
    cache.buffer("a.swift", "x")
    cache.clear()

    assert cache.loads == 0


def test_slices_follow_content_changes():
    cache = SourceBufferCache()
    old = "func foo()"
    new = "func bar()"

    assert cache.extract("k", "a.swift", old, 0, 10) == "func foo()"
    assert cache.extract("k", "a.swift", new, 0, 10) == "func bar()"
    assert cache.loads == 2


def test_files_are_cached_independently():
    cache = SourceBufferCache()
    cache.buffer("a.swift", "same")
    cache.buffer("b.swift", "same")
    cache.buffer("a.swift", "same")

    assert cache.loads == 2
