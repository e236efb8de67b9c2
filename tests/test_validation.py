"""Tests for task group validation."""

from __future__ import annotations

from tekton_taskgroup.models import ParamSpec, TaskGroupSpec, TaskSpec
from tekton_taskgroup.validation import validate_task_group


def group(**data) -> TaskGroupSpec:
    return TaskGroupSpec.model_validate(data)


class TestValidateTaskGroup:
    """Tests for validate_task_group."""

    def test_valid_group(self, bound_group_spec: TaskGroupSpec, foo_task_spec: TaskSpec):
        """A well-formed group has no errors."""
        assert validate_task_group(bound_group_spec) == []
        assert validate_task_group(bound_group_spec, {1: foo_task_spec}) == []

    def test_duplicate_params(self):
        """Group params must be unique."""
        spec = group(params=[{"name": "a"}, {"name": "a", "type": "array"}])

        errors = validate_task_group(spec)

        assert errors == ["Param 'a' is declared 2 times"]

    def test_duplicate_step_names(self):
        """Named steps must be unique; unnamed steps are not compared."""
        spec = group(steps=[{"name": "s"}, {"name": "s"}, {}, {}])

        errors = validate_task_group(spec)

        assert errors == ["Step name 's' is used 2 times"]

    def test_unnamed_reference_step(self):
        """Reference steps need a name to prefix spliced steps."""
        spec = group(steps=[{"uses": {"taskRef": {"name": "foo"}}}])

        errors = validate_task_group(spec)

        assert errors == ["Step at index 0 uses 'foo' but has no name"]

    def test_binding_to_unknown_group_param(self):
        """Bindings must target declared group params."""
        spec = group(
            steps=[
                {
                    "name": "foo",
                    "uses": {
                        "taskRef": {"name": "foo"},
                        "paramBindings": [{"name": "paramBar", "param": "missing"}],
                    },
                }
            ]
        )

        errors = validate_task_group(spec)

        assert errors == ["Step 'foo' binds 'paramBar' to unknown group param 'missing'"]

    def test_duplicate_binding_names(self):
        """A referenced param may only be bound once per step."""
        spec = group(
            params=[{"name": "a"}, {"name": "b"}],
            steps=[
                {
                    "name": "foo",
                    "uses": {
                        "taskRef": {"name": "foo"},
                        "paramBindings": [
                            {"name": "x", "param": "a"},
                            {"name": "x", "param": "b"},
                        ],
                    },
                }
            ],
        )

        errors = validate_task_group(spec)

        assert errors == ["Step 'foo' binds param 'x' 2 times"]

    def test_binding_to_undeclared_referenced_param(self):
        """With references, bindings must name params the task declares."""
        spec = group(
            params=[{"name": "a"}],
            steps=[
                {
                    "name": "foo",
                    "uses": {
                        "taskRef": {"name": "foo"},
                        "paramBindings": [{"name": "nope", "param": "a"}],
                    },
                }
            ],
        )
        references = {0: TaskSpec(params=[ParamSpec(name="other")])}

        assert validate_task_group(spec) == []
        assert validate_task_group(spec, references) == [
            "Step 'foo' binds 'nope' which task 'foo' does not declare"
        ]

    def test_missing_reference_not_reported(self):
        """Missing references are left to the resolver."""
        spec = group(steps=[{"name": "foo", "uses": {"taskRef": {"name": "foo"}}}])
        assert validate_task_group(spec, {}) == []
