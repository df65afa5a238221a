import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import List, Optional, Sequence, Union

from mimic.common import L, bus
from mimic.spec import (
    EntityExtractorProtocol,
    ErrorPolicy,
    GenerationAbortedError,
    ParseError,
    ParseFailure,
    ResultSinkProtocol,
    SourceReadError,
)

log = logging.getLogger(__name__)


class _FileUnit:
    """Processes one file and hands the result to the shared sink."""

    def __init__(
        self,
        extractor: EntityExtractorProtocol,
        sink: ResultSinkProtocol,
        lock: threading.Lock,
        processed: bool,
    ):
        self.extractor = extractor
        self.sink = sink
        self.lock = lock
        self.processed = processed

    def __call__(self, file_path: str) -> Optional[ParseFailure]:
        log.debug("Processing %s (processed=%s)", file_path, self.processed)
        try:
            entities, imports = self.extractor.extract(file_path, self.processed)
        except (ParseError, SourceReadError) as e:
            reason = getattr(e, "reason", str(e))
            return ParseFailure(file_path, reason)

        bus.debug(L.generate.file.parsed, path=file_path, count=len(entities))
        # Held for the merge only, never while parsing.
        with self.lock:
            self.sink.append(entities, {file_path: imports})
        return None


def _run_sequential(
    paths: Sequence[str], unit: _FileUnit, policy: ErrorPolicy
) -> List[ParseFailure]:
    failures = []
    for path in paths:
        failure = unit(path)
        if failure is None:
            continue
        failures.append(failure)
        if policy == ErrorPolicy.ABORT:
            break
    return failures


def _run_pooled(
    paths: Sequence[str], unit: _FileUnit, policy: ErrorPolicy, max_concurrency: int
) -> List[ParseFailure]:
    slots = threading.BoundedSemaphore(max_concurrency)
    failed = threading.Event()

    def run_unit(path: str) -> Optional[ParseFailure]:
        failure = unit(path)
        if failure is not None:
            failed.set()
        return failure

    def release(_: Future) -> None:
        slots.release()

    futures: List[Future] = []
    with ThreadPoolExecutor(max_workers=max_concurrency) as pool:
        for path in paths:
            slots.acquire()
            if policy == ErrorPolicy.ABORT and failed.is_set():
                slots.release()
                break
            future = pool.submit(run_unit, path)
            # The slot frees when the unit completes, not when it is dispatched.
            future.add_done_callback(release)
            futures.append(future)

    # The pool has drained; surface worker exceptions in submission order.
    return [f for f in (future.result() for future in futures) if f is not None]


def generate_entity_map(
    paths: Sequence[str],
    extractor: EntityExtractorProtocol,
    sink: ResultSinkProtocol,
    max_concurrency: Optional[int] = None,
    processed: bool = False,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
) -> List[ParseFailure]:
    """
    Extracts entities from every path into `sink`.

    With `max_concurrency` unset or 0 the files are handled one by one on the
    calling thread. Otherwise at most `max_concurrency` files are in flight
    and `sink.append` is serialised by a single lock. Returns the failures
    that were skipped; under the abort policy any failure raises
    `GenerationAbortedError` once in-flight work has finished.
    """
    policy = ErrorPolicy(on_error)
    unit = _FileUnit(extractor, sink, threading.Lock(), processed)

    if max_concurrency:
        failures = _run_pooled(paths, unit, policy, max_concurrency)
    else:
        failures = _run_sequential(paths, unit, policy)

    for failure in failures:
        bus.error(L.error.parse.failed, path=failure.file_path, reason=failure.reason)
    if failures and policy == ErrorPolicy.ABORT:
        raise GenerationAbortedError(failures)
    return failures


def generate_processed_type_map(
    paths: Sequence[str],
    extractor: EntityExtractorProtocol,
    sink: ResultSinkProtocol,
    max_concurrency: Optional[int] = None,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
) -> List[ParseFailure]:
    """Loads previously generated mocks; their members are passed through."""
    return generate_entity_map(
        paths, extractor, sink, max_concurrency, processed=True, on_error=on_error
    )


def generate_protocol_map(
    paths: Sequence[str],
    extractor: EntityExtractorProtocol,
    sink: ResultSinkProtocol,
    max_concurrency: Optional[int] = None,
    on_error: Union[ErrorPolicy, str] = ErrorPolicy.ABORT,
) -> List[ParseFailure]:
    return generate_entity_map(
        paths, extractor, sink, max_concurrency, processed=False, on_error=on_error
    )
