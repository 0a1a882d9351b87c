"""Concurrent in-place PORTREVISION bumping for a batch of port origins."""

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field
from typing import cast

from portbump.config import Settings
from portbump.models import (
    INTERNAL_ERROR_CODE,
    IO_ERROR_CODE,
    BatchSummary,
    BumpError,
    TaskResult,
)
from portbump.revision import bump_revision

logger = logging.getLogger(__name__)

_SENTINEL = object()

Transform = Callable[[bytes], bytes]


class BatchRunner:
    """Bump Makefiles of many origins, at most ``settings.jobs`` at a time.

    Every origin yields exactly one :class:`TaskResult`, in completion order.
    A failing origin is reported and never stops the rest of the batch.
    """

    def __init__(self, settings: Settings, *, transform: Transform = bump_revision) -> None:
        settings.validate()
        self.settings = settings
        self._transform = transform

    def process_origin(self, origin: str) -> TaskResult:
        """Read, transform and rewrite the Makefile of one origin."""

        path = self.settings.makefile_path(origin)
        try:
            with path.open("r+b") as handle:
                content = handle.read()
                bumped = self._transform(content)
                changed = bumped != content
                if changed:
                    handle.seek(0)
                    handle.write(bumped)
                    handle.truncate()
        except OSError as exc:
            return TaskResult(
                origin=origin,
                error=_describe_os_error(exc),
                error_code=IO_ERROR_CODE,
            )
        except BumpError as exc:
            return TaskResult(origin=origin, error=str(exc), error_code=exc.code)
        return TaskResult(origin=origin, changed=changed)

    def run(self, origins: Iterable[str]) -> Iterator[TaskResult]:
        """Stream results while origins are still being consumed.

        The origin iterable is drained on a producer thread that blocks
        whenever ``jobs`` tasks are in flight. The stream ends only after
        every started task has reported.
        """

        results: queue.Queue[TaskResult | object] = queue.Queue()
        gate = threading.BoundedSemaphore(self.settings.jobs)
        producer_errors: list[BaseException] = []

        def _work(origin: str) -> None:
            try:
                results.put(self._guarded_process(origin))
            finally:
                gate.release()

        def _produce() -> None:
            workers: list[threading.Thread] = []
            try:
                for origin in origins:
                    gate.acquire()
                    worker = threading.Thread(
                        target=_work,
                        args=(origin,),
                        name=f"portbump-{len(workers)}",
                        daemon=True,
                    )
                    try:
                        worker.start()
                    except BaseException:
                        gate.release()
                        raise
                    workers.append(worker)
            except Exception as exc:  # noqa: BLE001
                producer_errors.append(exc)
            finally:
                for worker in workers:
                    worker.join()
                results.put(_SENTINEL)

        producer = threading.Thread(target=_produce, name="portbump-producer", daemon=True)
        producer.start()

        while True:
            item = results.get()
            if item is _SENTINEL:
                break
            item = cast(TaskResult, item)
            logger.debug(
                "Bumped %s: %s",
                item.origin,
                "ok" if item.is_success else item.error,
            )
            yield item

        producer.join()
        if producer_errors:
            raise producer_errors[0]

    def _guarded_process(self, origin: str) -> TaskResult:
        try:
            return self.process_origin(origin)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unexpected error bumping %s", origin)
            return TaskResult(
                origin=origin,
                error=str(exc) or type(exc).__name__,
                error_code=INTERNAL_ERROR_CODE,
            )


@dataclass(slots=True)
class BatchOutcome:
    """Summary plus the failed results of a drained batch."""

    summary: BatchSummary = field(default_factory=BatchSummary)
    failures: list[TaskResult] = field(default_factory=list)


def run_batch(
    *,
    settings: Settings,
    origins: Iterable[str],
    on_result: Callable[[TaskResult], None] | None = None,
    transform: Transform = bump_revision,
) -> BatchOutcome:
    """Run a whole batch, passing each result to ``on_result`` as it completes."""

    outcome = BatchOutcome()
    for result in BatchRunner(settings, transform=transform).run(origins):
        outcome.summary.record(result)
        if not result.is_success:
            outcome.failures.append(result)
        if on_result is not None:
            on_result(result)
    logger.info(
        "Batch finished: total=%d succeeded=%d changed=%d failed=%d",
        outcome.summary.total,
        outcome.summary.succeeded,
        outcome.summary.changed,
        outcome.summary.failed,
    )
    return outcome


def _describe_os_error(exc: OSError) -> str:
    if exc.filename is not None and exc.strerror:
        return f"{exc.filename}: {exc.strerror}"
    return str(exc)
