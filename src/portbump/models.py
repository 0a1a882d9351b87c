"""Result and error types shared by the transformer and the batch runner."""

from __future__ import annotations

from dataclasses import dataclass


class BumpError(Exception):
    """Revision field cannot be bumped."""

    code = "bump_error"

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class NotNumericRevisionError(BumpError):
    """PORTREVISION value is not a base-10 unsigned integer."""

    code = "not_numeric_revision"


class RevisionOverflowError(BumpError):
    """PORTREVISION value (or its successor) does not fit into 64 bits."""

    code = "numeric_overflow"


IO_ERROR_CODE = "io_error"
INTERNAL_ERROR_CODE = "internal_error"


@dataclass(slots=True, frozen=True)
class TaskResult:
    """Outcome of bumping one port origin."""

    origin: str
    error: str | None = None
    error_code: str | None = None
    changed: bool = False

    @property
    def is_success(self) -> bool:
        return self.error is None


@dataclass(slots=True)
class BatchSummary:
    """Counters for one batch run."""

    succeeded: int = 0
    failed: int = 0
    changed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    def record(self, result: TaskResult) -> None:
        if result.is_success:
            self.succeeded += 1
            if result.changed:
                self.changed += 1
        else:
            self.failed += 1
