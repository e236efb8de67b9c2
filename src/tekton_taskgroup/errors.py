"""Typed exceptions for tekton-taskgroup.

All resolution-related errors inherit from TaskGroupError.
None of them are retryable: they describe malformed input.
"""

from __future__ import annotations

from typing import Any


class TaskGroupError(Exception):
    """Base exception for all task group errors."""

    def __init__(self, message: str, *, context: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.context = context or {}

    def __str__(self) -> str:
        if self.context:
            ctx = ", ".join(f"{k}={v!r}" for k, v in self.context.items())
            return f"{self.message} ({ctx})"
        return self.message


class MissingReferenceError(TaskGroupError):
    """A step declares `uses` but no resolved task spec was supplied for it."""

    def __init__(
        self,
        message: str,
        *,
        step_index: int,
        step_name: str | None = None,
        task_ref: str | None = None,
    ):
        context = {"step_index": step_index, "step_name": step_name, "task_ref": task_ref}
        super().__init__(message, context={k: v for k, v in context.items() if v is not None})
        self.step_index = step_index
        self.step_name = step_name
        self.task_ref = task_ref


class ParamTypeConflictError(TaskGroupError):
    """Two params merging into the same name disagree on type."""

    def __init__(
        self,
        message: str,
        *,
        param: str,
        existing_type: str,
        incoming_type: str,
    ):
        super().__init__(
            message,
            context={
                "param": param,
                "existing_type": existing_type,
                "incoming_type": incoming_type,
            },
        )
        self.param = param
        self.existing_type = existing_type
        self.incoming_type = incoming_type


class ManifestError(TaskGroupError):
    """Manifest loading, parsing, or kind check failed."""

    def __init__(self, message: str, *, path: str | None = None):
        context: dict[str, Any] = {}
        if path:
            context["path"] = path
        super().__init__(message, context=context)
        self.path = path


class SchemaValidationError(TaskGroupError):
    """Raised when a raw manifest fails schema validation."""

    def __init__(self, message: str, errors: list[str]) -> None:
        super().__init__(message)
        self.errors = errors
