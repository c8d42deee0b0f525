"""Uniform result of subdirectory operations."""

import enum
from dataclasses import dataclass
from http import HTTPStatus
from pathlib import Path
from typing import final


class Outcome(enum.StrEnum):
    """How an operation ended."""

    SUCCESS = 'success'
    PARTIAL_SUCCESS = 'partial_success'
    FAILURE = 'failure'


class ErrorKind(enum.StrEnum):
    """Why an operation failed."""

    # Empty, unknown, colliding or self-referential input
    VALIDATION = 'validation'
    # Referenced subdirectory does not exist
    NOT_FOUND = 'not_found'
    # Filesystem call raised
    IO_FAILURE = 'io_failure'


@final
@dataclass(frozen=True, slots=True)
class OperationResult:
    """Result returned by every subdirectory operation.

    Failures are detected before mutation except for ``IO_FAILURE``,
    which may leave partially applied changes behind. Status codes
    follow HTTP semantics so views can pass them through unchanged.
    """

    outcome: Outcome
    message: str
    status_code: int
    error_kind: ErrorKind | None = None
    path: Path | None = None

    @property
    def success(self) -> bool:
        """Check if the operation fully succeeded."""
        return self.outcome is Outcome.SUCCESS

    @classmethod
    def ok(cls, message: str, path: Path | None = None) -> 'OperationResult':
        """Create success result.

        Args:
            message: User-facing confirmation.
            path: Resulting directory, if any.

        Returns:
            Success OperationResult.
        """
        return cls(
            outcome=Outcome.SUCCESS,
            message=message,
            status_code=HTTPStatus.OK,
            path=path,
        )

    @classmethod
    def partial(
        cls,
        message: str,
        error_kind: ErrorKind,
        path: Path | None = None,
    ) -> 'OperationResult':
        """Create partial success result.

        Args:
            message: User-facing description of what did and did not happen.
            error_kind: Kind of the step that failed.
            path: Resulting directory, if any.

        Returns:
            Partial success OperationResult.
        """
        return cls(
            outcome=Outcome.PARTIAL_SUCCESS,
            message=message,
            status_code=HTTPStatus.MULTI_STATUS,
            error_kind=error_kind,
            path=path,
        )

    @classmethod
    def failed(cls, message: str, error_kind: ErrorKind) -> 'OperationResult':
        """Create failure result.

        Args:
            message: User-facing error.
            error_kind: Why the operation failed.

        Returns:
            Failure OperationResult.
        """
        return cls(
            outcome=Outcome.FAILURE,
            message=message,
            status_code=HTTPStatus.INTERNAL_SERVER_ERROR,
            error_kind=error_kind,
        )
