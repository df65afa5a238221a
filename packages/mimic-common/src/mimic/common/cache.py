import threading
from typing import Dict, Tuple

from .text import extract_text


class SourceBufferCache:
    """
    Memoises the UTF-8 encoding of whole files and the slices extracted from
    them.

    An entry is reused only while the file content is unchanged; new content
    replaces the buffer and drops the slices cut from the old one. Workers may
    populate the same entry concurrently, every write storing an identical,
    fully built value.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._buffers: Dict[str, Tuple[str, bytes]] = {}
        self._slices: Dict[str, Dict[Tuple[str, int, int], str]] = {}
        self.loads = 0

    def buffer(self, file_path: str, content: str) -> bytes:
        cached = self._buffers.get(file_path)
        if cached is not None and cached[0] == content:
            return cached[1]

        encoded = content.encode("utf-8")
        with self._lock:
            self._buffers[file_path] = (content, encoded)
            self._slices[file_path] = {}
            self.loads += 1
        return encoded

    def extract(
        self, cache_key: str, file_path: str, content: str, offset: int, length: int
    ) -> str:
        buffer = self.buffer(file_path, content)
        slices = self._slices.setdefault(file_path, {})
        key = (cache_key, offset, length)
        text = slices.get(key)
        if text is None:
            text = extract_text(buffer, offset, length)
            slices[key] = text
        return text

    def clear(self) -> None:
        with self._lock:
            self._buffers.clear()
            self._slices.clear()
            self.loads = 0


# Process wide cache shared by every passthrough member.
source_buffers = SourceBufferCache()
