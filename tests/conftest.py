"""Pytest fixtures for tekton-taskgroup tests."""

from __future__ import annotations

from pathlib import Path

import pytest

from tekton_taskgroup.models import (
    ParamBinding,
    ParamSpec,
    ParamType,
    ReferenceStep,
    Step,
    TaskGroupSpec,
    TaskRef,
    TaskSpec,
    Uses,
)


@pytest.fixture
def inline_step() -> Step:
    """An inline step with no reference."""
    return Step(image="bash:latest", script="echo foo")


@pytest.fixture
def foo_task_spec() -> TaskSpec:
    """Spec of a task named 'foo' with one param and one step."""
    return TaskSpec(
        params=[ParamSpec(name="paramBar", type=ParamType.STRING)],
        steps=[Step(name="baz", image="bash:latest", script="echo $(params.paramBar)")],
    )


@pytest.fixture
def bound_group_spec(inline_step: Step) -> TaskGroupSpec:
    """Group that uses 'foo', binding its paramBar to the group's paramFoo."""
    return TaskGroupSpec(
        params=[ParamSpec(name="paramFoo", type=ParamType.STRING)],
        steps=[
            inline_step,
            ReferenceStep(
                name="foo",
                uses=Uses(
                    task_ref=TaskRef(name="foo"),
                    param_bindings=[ParamBinding(name="paramBar", param="paramFoo")],
                ),
            ),
        ],
    )


TASK_YAML = """\
apiVersion: tekton.dev/v1beta1
kind: Task
metadata:
  name: foo
spec:
  params:
    - name: paramBar
      type: string
      description: value to echo
  steps:
    - name: baz
      image: bash:latest
      script: echo $(params.paramBar)
---
apiVersion: tekton.dev/v1beta1
kind: Task
metadata:
  name: lint
spec:
  params:
    - name: paths
      type: array
      default: ["."]
  steps:
    - name: run
      image: python:3.12
      args: ["$(params.paths[*])"]
"""

TASKGROUP_YAML = """\
apiVersion: tekton.dev/v1alpha1
kind: TaskGroup
metadata:
  name: build
  namespace: ci
  labels:
    team: platform
spec:
  params:
    - name: message
      type: string
  steps:
    - image: bash:latest
      script: echo start
    - name: greet
      uses:
        taskRef:
          name: foo
        paramBindings:
          - name: paramBar
            param: message
    - name: check
      uses:
        taskRef:
          name: lint
"""


@pytest.fixture
def task_manifest_file(tmp_path: Path) -> Path:
    """Write a multi-document Task manifest file."""
    path = tmp_path / "tasks.yaml"
    path.write_text(TASK_YAML)
    return path


@pytest.fixture
def taskgroup_manifest_file(tmp_path: Path) -> Path:
    """Write a TaskGroup manifest file."""
    path = tmp_path / "group.yaml"
    path.write_text(TASKGROUP_YAML)
    return path
