"""Tests for typed exceptions."""

from __future__ import annotations

from tekton_taskgroup.errors import (
    ManifestError,
    MissingReferenceError,
    ParamTypeConflictError,
    TaskGroupError,
)


class TestErrors:
    """Tests for the TaskGroupError hierarchy."""

    def test_base_without_context(self):
        """Plain messages render unchanged."""
        assert str(TaskGroupError("boom")) == "boom"

    def test_missing_reference_context(self):
        """Unset context values are dropped from the rendering."""
        err = MissingReferenceError("missing", step_index=2, task_ref="foo")

        assert isinstance(err, TaskGroupError)
        assert err.context == {"step_index": 2, "task_ref": "foo"}
        assert str(err) == "missing (step_index=2, task_ref='foo')"

    def test_param_type_conflict_context(self):
        """Both types are recorded."""
        err = ParamTypeConflictError(
            "conflict", param="p", existing_type="string", incoming_type="array"
        )

        assert err.existing_type == "string"
        assert str(err) == "conflict (param='p', existing_type='string', incoming_type='array')"

    def test_manifest_error_path(self):
        """The path is optional context."""
        assert str(ManifestError("bad")) == "bad"
        assert str(ManifestError("bad", path="a.yaml")) == "bad (path='a.yaml')"
