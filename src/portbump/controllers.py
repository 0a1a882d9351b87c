"""Controller for the bump CLI command."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import TextIO

from portbump.config import Settings
from portbump.models import BatchSummary, TaskResult
from portbump.origins import iter_origins
from portbump.runner import run_batch

PROG_NAME = "portbump"


@dataclass(slots=True)
class BumpCommand:
    """CLI inputs for the bump command."""

    origins: tuple[str, ...]
    ports_root: str | None = None
    quiet: bool | None = None
    jobs: int | None = None
    fail_on_error: bool | None = None
    stdin: TextIO | None = None


@dataclass(slots=True, frozen=True)
class OutputLine:
    """One line of command output and the stream it belongs to."""

    text: str
    is_error: bool = False


@dataclass(slots=True)
class BumpReport:
    """Final state of a bump command once every origin was reported."""

    summary: BatchSummary
    fail_on_error: bool

    @property
    def success(self) -> bool:
        """Exit status policy: failures only count when ``fail_on_error`` is set."""

        return not (self.fail_on_error and self.summary.failed)


class BumpCliController:
    """Coordinates bump command execution."""

    def run(self, command: BumpCommand, *, emit: Callable[[OutputLine], None]) -> BumpReport:
        settings = Settings.from_env(
            ports_root=command.ports_root,
            quiet=command.quiet,
            jobs=command.jobs,
            fail_on_error=command.fail_on_error,
        )
        settings.validate()

        def _on_result(result: TaskResult) -> None:
            line = format_result(result, quiet=settings.quiet)
            if line is not None:
                emit(line)

        outcome = run_batch(
            settings=settings,
            origins=iter_origins(command.origins, command.stdin),
            on_result=_on_result,
        )
        return BumpReport(summary=outcome.summary, fail_on_error=settings.fail_on_error)


def format_result(result: TaskResult, *, quiet: bool) -> OutputLine | None:
    """Origin on stdout for success, ``prog: origin: error`` on stderr for failure."""

    if not result.is_success:
        return OutputLine(text=f"{PROG_NAME}: {result.origin}: {result.error}", is_error=True)
    if quiet:
        return None
    return OutputLine(text=result.origin)
