"""Resolve a TaskGroup spec into a single flat TaskSpec.

Resolution walks the group steps in order:
- Inline steps are copied as-is.
- Reference steps are replaced by every step of the task they use, named
  `<outer>-<inner>`, with bound param references renamed to the group
  side. Unbound params of the referenced task are merged into the
  group's params.

The resolver does no lookups: referenced specs are supplied by the caller
(already flattened) keyed by group step index.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from typing import Any

from tekton_taskgroup.errors import MissingReferenceError, ParamTypeConflictError
from tekton_taskgroup.models import (
    ParamSpec,
    ReferenceStep,
    ResolvedReferences,
    Step,
    TaskGroupSpec,
    TaskSpec,
)

logger = logging.getLogger(__name__)

# Matches the head of a param reference: $(params.NAME, $(params["NAME"] or $(params['NAME'].
# Anything after the name ([*], [0], .key, closing paren) is left untouched.
PARAM_REF_PATTERN = re.compile(
    r"""\$\(params(?:\.(?P<dotted>[\w-]+)|\[(?P<quote>["'])(?P<bracketed>[^"']+)(?P=quote)\])"""
)


def resolve_task_spec(
    group_spec: TaskGroupSpec,
    resolved_references: ResolvedReferences,
) -> TaskSpec:
    """Flatten a task group into a single task spec.

    Args:
        group_spec: The task group to resolve.
        resolved_references: Resolved spec of the task used by each
            reference step, keyed by the step's index in `group_spec.steps`.

    Returns:
        The flattened task spec. Its params list is never None.

    Raises:
        MissingReferenceError: If a reference step has no resolved spec.
        ParamTypeConflictError: If two params merge into one name with
            different types.
    """
    params = [param.model_copy(deep=True) for param in group_spec.params]
    group_param_names = {param.name for param in params}
    steps: list[Step] = []

    for index, step in enumerate(group_spec.steps):
        if not isinstance(step, ReferenceStep):
            steps.append(step.model_copy(deep=True))
            continue

        referenced = resolved_references.get(index)
        if referenced is None:
            raise MissingReferenceError(
                f"No resolved task spec for step {index} using '{step.uses.task_ref.name}'",
                step_index=index,
                step_name=step.name,
                task_ref=step.uses.task_ref.name,
            )

        bindings = step.uses.binding_table()
        for ref_name, group_name in bindings.items():
            if group_name not in group_param_names:
                logger.warning(
                    f"Step '{step.name}' binds '{ref_name}' to undeclared group param '{group_name}'"
                )

        _merge_params(params, referenced.params, bindings)

        logger.debug(
            f"Splicing {len(referenced.steps)} step(s) of '{step.uses.task_ref.name}' "
            f"into step {index} ('{step.name}')"
        )
        for inner in referenced.steps:
            steps.append(merge_step(step, inner, bindings))

    return TaskSpec(params=params, steps=steps, description=group_spec.description)


def _merge_params(
    params: list[ParamSpec],
    incoming: list[ParamSpec],
    bindings: Mapping[str, str],
) -> None:
    """Append unbound incoming params to params, checking types of duplicates."""
    for param in incoming:
        if param.name in bindings:
            continue

        existing = next((p for p in params if p.name == param.name), None)
        if existing is None:
            params.append(param.model_copy(deep=True))
        elif existing.type != param.type:
            raise ParamTypeConflictError(
                f"Param '{param.name}' is declared with conflicting types",
                param=param.name,
                existing_type=existing.type.value,
                incoming_type=param.type.value,
            )


def merge_step(outer: Step, inner: Step, bindings: Mapping[str, str]) -> Step:
    """Build the step emitted for one step of a referenced task.

    The name is `<outer>-<inner>`; everything else comes from the inner
    step with bound param references renamed.

    Args:
        outer: The group step that `uses` the referenced task.
        inner: A step of the referenced task.
        bindings: Referenced param name -> group param name.

    Returns:
        A new step; neither input is modified.
    """
    data = inner.to_dict()
    data.pop("name", None)
    if bindings:
        data = rewrite_param_refs(data, bindings)
    data["name"] = f"{outer.name or ''}-{inner.name or ''}"
    return Step.model_validate(data)


def rewrite_param_refs(value: Any, bindings: Mapping[str, str]) -> Any:
    """Rename bound param references in every string within value.

    Args:
        value: A string, or lists/dicts nesting strings.
        bindings: Referenced param name -> group param name.

    Returns:
        A copy of value with `$(params.<name>...)` references renamed for
        every bound name. Unbound references are left verbatim.
    """
    if isinstance(value, str):
        return PARAM_REF_PATTERN.sub(lambda m: _rename_ref(m, bindings), value)
    if isinstance(value, list):
        return [rewrite_param_refs(item, bindings) for item in value]
    if isinstance(value, dict):
        return {key: rewrite_param_refs(item, bindings) for key, item in value.items()}
    return value


def _rename_ref(match: re.Match[str], bindings: Mapping[str, str]) -> str:
    if match.group("dotted") is not None:
        name = match.group("dotted")
        if name in bindings:
            return f"$(params.{bindings[name]}"
        return match.group(0)

    name = match.group("bracketed")
    if name in bindings:
        quote = match.group("quote")
        return f"$(params[{quote}{bindings[name]}{quote}]"
    return match.group(0)
