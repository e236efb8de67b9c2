"""tekton-taskgroup: Resolve TaskGroups into flat Tekton Task specs."""

__version__ = "0.1.0"

from tekton_taskgroup.catalog import TaskCatalog
from tekton_taskgroup.errors import (
    ManifestError,
    MissingReferenceError,
    ParamTypeConflictError,
    SchemaValidationError,
    TaskGroupError,
)
from tekton_taskgroup.manifest import (
    build_task,
    dump_manifest,
    load_documents,
    load_task_groups,
    parse_task,
    parse_task_group,
)
from tekton_taskgroup.models import (
    EnvVar,
    GroupStep,
    ParamBinding,
    ParamSpec,
    ParamType,
    ReferenceStep,
    ResolvedReferences,
    Step,
    Task,
    TaskGroup,
    TaskGroupSpec,
    TaskRef,
    TaskSpec,
    Uses,
)
from tekton_taskgroup.resolve import merge_step, resolve_task_spec, rewrite_param_refs
from tekton_taskgroup.validation import validate_task_group

__all__ = [
    # Core
    "resolve_task_spec",
    "merge_step",
    "rewrite_param_refs",
    "validate_task_group",
    # Models
    "EnvVar",
    "GroupStep",
    "ParamBinding",
    "ParamSpec",
    "ParamType",
    "ReferenceStep",
    "ResolvedReferences",
    "Step",
    "Task",
    "TaskGroup",
    "TaskGroupSpec",
    "TaskRef",
    "TaskSpec",
    "Uses",
    # Errors
    "TaskGroupError",
    "MissingReferenceError",
    "ParamTypeConflictError",
    "ManifestError",
    "SchemaValidationError",
    # Manifests
    "TaskCatalog",
    "build_task",
    "dump_manifest",
    "load_documents",
    "load_task_groups",
    "parse_task",
    "parse_task_group",
]
