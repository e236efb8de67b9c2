"""Tests for the task catalog."""

from __future__ import annotations

from pathlib import Path

import pytest

from tekton_taskgroup.catalog import TaskCatalog
from tekton_taskgroup.errors import ManifestError
from tekton_taskgroup.models import Task, TaskGroupSpec, TaskSpec


def make_task(name: str, **spec) -> Task:
    return Task.model_validate({"metadata": {"name": name}, "spec": spec})


class TestTaskCatalog:
    """Tests for TaskCatalog."""

    def test_empty(self):
        """A new catalog has no tasks."""
        catalog = TaskCatalog()
        assert len(catalog) == 0
        assert catalog.get("foo") is None
        assert catalog.names() == []

    def test_add_and_get(self):
        """Tasks are looked up by name."""
        catalog = TaskCatalog([make_task("foo", steps=[{"name": "s"}])])

        assert catalog.get("foo") == TaskSpec.model_validate({"steps": [{"name": "s"}]})
        assert catalog.names() == ["foo"]

    def test_duplicate_rejected(self):
        """The same task name cannot be added twice."""
        catalog = TaskCatalog([make_task("foo")])

        with pytest.raises(ManifestError, match="more than once"):
            catalog.add(make_task("foo"))

    def test_from_path(self, task_manifest_file: Path):
        """Every Task document in the file is loaded."""
        catalog = TaskCatalog.from_path(task_manifest_file)

        assert catalog.names() == ["foo", "lint"]
        assert catalog.get("foo").params[0].name == "paramBar"

    def test_from_directory_ignores_other_kinds(
        self, tmp_path: Path, task_manifest_file: Path, taskgroup_manifest_file: Path
    ):
        """TaskGroup documents next to Tasks are skipped."""
        catalog = TaskCatalog.from_path(tmp_path)
        assert catalog.names() == ["foo", "lint"]

    def test_references_for(self, task_manifest_file: Path):
        """References are keyed by step index; unknown tasks are left out."""
        catalog = TaskCatalog.from_path(task_manifest_file)
        spec = TaskGroupSpec.model_validate(
            {
                "steps": [
                    {"name": "inline"},
                    {"name": "a", "uses": {"taskRef": {"name": "foo"}}},
                    {"name": "b", "uses": {"taskRef": {"name": "unknown"}}},
                    {"name": "c", "uses": {"taskRef": {"name": "lint"}}},
                ]
            }
        )

        references = catalog.references_for(spec)

        assert sorted(references) == [1, 3]
        assert references[1] is catalog.get("foo")
        assert references[3] is catalog.get("lint")
