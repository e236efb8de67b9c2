"""Semantic checks for task groups, run ahead of resolution."""

from __future__ import annotations

from collections import Counter

from tekton_taskgroup.models import ResolvedReferences, TaskGroupSpec


def validate_task_group(
    group_spec: TaskGroupSpec,
    resolved_references: ResolvedReferences | None = None,
) -> list[str]:
    """Validate a task group definition without resolving it.

    Checks:
    - Group param names are unique
    - Step names are unique
    - Reference steps are named (the name prefixes every spliced step)
    - Bindings target declared group params
    - Binding names are unique within one `uses`
    - Bindings name params the referenced task declares (when references
      are given)

    Args:
        group_spec: The task group to validate.
        resolved_references: Optional resolved specs keyed by step index.

    Returns:
        List of error messages (empty if valid).
    """
    errors: list[str] = []

    param_counts = Counter(param.name for param in group_spec.params)
    for name, count in param_counts.items():
        if count > 1:
            errors.append(f"Param '{name}' is declared {count} times")

    step_counts = Counter(step.name for step in group_spec.steps if step.name)
    for name, count in step_counts.items():
        if count > 1:
            errors.append(f"Step name '{name}' is used {count} times")

    group_param_names = set(param_counts)
    for index, step in group_spec.reference_steps():
        label = f"'{step.name}'" if step.name else f"at index {index}"

        if not step.name:
            errors.append(
                f"Step {label} uses '{step.uses.task_ref.name}' but has no name"
            )

        binding_counts = Counter(b.name for b in step.uses.param_bindings)
        for name, count in binding_counts.items():
            if count > 1:
                errors.append(f"Step {label} binds param '{name}' {count} times")

        for binding in step.uses.param_bindings:
            if binding.param not in group_param_names:
                errors.append(
                    f"Step {label} binds '{binding.name}' to unknown group param "
                    f"'{binding.param}'"
                )

        if resolved_references is None:
            continue
        referenced = resolved_references.get(index)
        if referenced is None:
            continue
        for binding in step.uses.param_bindings:
            if referenced.get_param(binding.name) is None:
                errors.append(
                    f"Step {label} binds '{binding.name}' which task "
                    f"'{step.uses.task_ref.name}' does not declare"
                )

    return errors
