"""Resource models for task groups and tasks.

This module defines the data shapes the resolver consumes and produces:
- ParamSpec/ParamType: Parameter declarations
- Step/ReferenceStep: Inline steps and steps that `uses` another task
- TaskGroupSpec: The composite definition (input)
- TaskSpec: A plain task definition (referenced input and flat output)
- TaskGroup/Task: Kubernetes-style resources wrapping the specs

Fields are snake_case in Python and camelCase on the wire, so manifests
can be loaded with `model_validate` and written back with `to_dict`.
"""

from __future__ import annotations

from collections.abc import Mapping
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Discriminator, Field, Tag, model_validator
from pydantic.alias_generators import to_camel

TASKGROUP_API_VERSION = "tekton.dev/v1alpha1"
TASK_API_VERSION = "tekton.dev/v1beta1"


class _Model(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_dict(self) -> dict[str, Any]:
        """Convert to a camelCase dictionary without null fields."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ParamType(str, Enum):
    """Parameter value types."""

    STRING = "string"
    ARRAY = "array"
    OBJECT = "object"


class ParamSpec(_Model):
    """Declaration of a parameter.

    Attributes:
        name: Unique name within its owning spec.
        type: Value type of the parameter.
        default: Optional default value matching the type.
        description: Human-readable description.
    """

    name: str
    type: ParamType = ParamType.STRING
    default: str | list[str] | dict[str, str] | None = None
    description: str = ""

    @model_validator(mode="before")
    @classmethod
    def infer_type(cls, data: Any) -> Any:
        """Infer an omitted type from the default: list -> array, map -> object."""
        if not isinstance(data, Mapping) or data.get("type") is not None:
            return data
        default = data.get("default")
        if isinstance(default, list):
            return {**data, "type": ParamType.ARRAY}
        if isinstance(default, Mapping):
            return {**data, "type": ParamType.OBJECT}
        return data


class EnvVar(_Model):
    """Environment variable for a step container."""

    model_config = ConfigDict(extra="allow")

    name: str
    value: str | None = None


class Step(_Model):
    """A unit of work: container-like execution attributes.

    Container attributes not listed here (resources, volumeMounts, ...)
    are accepted and carried through untouched.

    Attributes:
        name: Step identifier, unique within a task.
        image: Container image.
        command: Entrypoint array.
        args: Arguments to the entrypoint.
        working_dir: Container working directory.
        env: Environment variables.
        script: Script text run in place of command/args.
    """

    model_config = ConfigDict(extra="allow")

    name: str | None = None
    image: str | None = None
    command: list[str] | None = None
    args: list[str] | None = None
    working_dir: str | None = None
    env: list[EnvVar] | None = None
    script: str | None = None


class TaskRef(_Model):
    """Reference to a separately defined task."""

    name: str
    kind: str | None = None
    api_version: str | None = None


class ParamBinding(_Model):
    """Rename edge from a referenced task's param into the group's params.

    Attributes:
        name: Param name as known inside the referenced task.
        param: Param name as known inside the enclosing group.
    """

    name: str
    param: str


class Uses(_Model):
    """Declares that a step's work is supplied by another task."""

    task_ref: TaskRef
    param_bindings: list[ParamBinding] = Field(default_factory=list)

    def binding_table(self) -> dict[str, str]:
        """Map referenced param names to group param names."""
        return {binding.name: binding.param for binding in self.param_bindings}


class ReferenceStep(Step):
    """A group step whose work comes from the task named in `uses`."""

    uses: Uses


def _group_step_kind(value: Any) -> str:
    if isinstance(value, Mapping):
        uses = value.get("uses")
    else:
        uses = getattr(value, "uses", None)
    return "reference" if uses is not None else "inline"


# Tagged variant: a group step is either inline or a reference
GroupStep = Annotated[
    Union[
        Annotated[Step, Tag("inline")],
        Annotated[ReferenceStep, Tag("reference")],
    ],
    Discriminator(_group_step_kind),
]


class TaskSpec(_Model):
    """Plain task definition, as referenced by `uses` and as resolved output.

    Attributes:
        params: Parameter declarations (never None, may be empty).
        steps: Ordered steps.
        description: Optional description.
    """

    params: list[ParamSpec] = Field(default_factory=list)
    steps: list[Step] = Field(default_factory=list)
    description: str | None = None

    def get_param(self, name: str) -> ParamSpec | None:
        """Get a param declaration by name."""
        for param in self.params:
            if param.name == name:
                return param
        return None


class TaskGroupSpec(_Model):
    """Composite task definition.

    Attributes:
        params: Group-level parameter declarations.
        steps: Ordered steps, each inline or a reference.
        description: Optional description.
    """

    params: list[ParamSpec] = Field(default_factory=list)
    steps: list[GroupStep] = Field(default_factory=list)
    description: str | None = None

    def reference_steps(self) -> list[tuple[int, ReferenceStep]]:
        """Get (index, step) pairs for every step that `uses` another task."""
        return [
            (index, step)
            for index, step in enumerate(self.steps)
            if isinstance(step, ReferenceStep)
        ]


# Mapping from group step index to the resolved spec of the task it uses
ResolvedReferences = Mapping[int, TaskSpec]


class OwnerReference(_Model):
    """Link from a produced resource back to the resource that owns it."""

    api_version: str
    kind: str
    name: str
    uid: str | None = None
    controller: bool | None = None
    block_owner_deletion: bool | None = None


class ObjectMeta(_Model):
    """Subset of Kubernetes object metadata."""

    model_config = ConfigDict(extra="allow")

    name: str
    namespace: str | None = None
    uid: str | None = None
    labels: dict[str, str] = Field(default_factory=dict)
    owner_references: list[OwnerReference] | None = None


class TaskGroup(_Model):
    """TaskGroup resource."""

    api_version: str = TASKGROUP_API_VERSION
    kind: Literal["TaskGroup"] = "TaskGroup"
    metadata: ObjectMeta
    spec: TaskGroupSpec = Field(default_factory=TaskGroupSpec)


class Task(_Model):
    """Task resource."""

    api_version: str = TASK_API_VERSION
    kind: Literal["Task"] = "Task"
    metadata: ObjectMeta
    spec: TaskSpec = Field(default_factory=TaskSpec)
