"""Manifest I/O for TaskGroup and Task resources.

Reads YAML files (multi-document allowed), validates raw documents against
the packaged JSON schemas, parses them into resource models, and renders
the Task produced from a resolved TaskGroup.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

import pydantic
import yaml

from tekton_taskgroup.errors import ManifestError
from tekton_taskgroup.models import (
    TASKGROUP_API_VERSION,
    ObjectMeta,
    OwnerReference,
    Task,
    TaskGroup,
    TaskSpec,
)
from tekton_taskgroup.schema import validate_manifest

logger = logging.getLogger(__name__)

MANIFEST_SUFFIXES = (".yaml", ".yml")

# Label stamped on every Task produced from a TaskGroup
TASKGROUP_LABEL = "taskgroup.tekton.dev/name"

OUTPUT_FORMATS = ("yaml", "json")


def load_documents(path: str | Path) -> list[dict[str, Any]]:
    """Load every YAML document from a file or a directory of files.

    Directories are read non-recursively, files sorted by name.
    Empty documents are skipped.

    Args:
        path: Manifest file or directory.

    Returns:
        The parsed documents, in file then document order.

    Raises:
        ManifestError: If the path is missing, a file is not valid YAML,
            or a document is not a mapping.
    """
    path = Path(path)
    if not path.exists():
        raise ManifestError("Manifest path not found", path=str(path))

    if path.is_dir():
        files = sorted(p for p in path.iterdir() if p.suffix in MANIFEST_SUFFIXES)
    else:
        files = [path]

    documents: list[dict[str, Any]] = []
    for file in files:
        try:
            with open(file, encoding="utf-8") as f:
                loaded = [doc for doc in yaml.safe_load_all(f) if doc is not None]
        except yaml.YAMLError as e:
            raise ManifestError(f"Invalid YAML: {e}", path=str(file)) from e

        for doc in loaded:
            if not isinstance(doc, dict):
                raise ManifestError(
                    f"Manifest must be a YAML object, got {type(doc).__name__}",
                    path=str(file),
                )
            documents.append(doc)

        logger.debug(f"Loaded {len(loaded)} document(s) from {file}")

    return documents


def _parse(doc: dict[str, Any], kind: str, model: type[pydantic.BaseModel]) -> Any:
    if doc.get("kind") != kind:
        raise ManifestError(f"Expected kind '{kind}', got {doc.get('kind')!r}")

    validate_manifest(doc, kind)

    try:
        return model.model_validate(doc)
    except pydantic.ValidationError as e:
        name = doc.get("metadata", {}).get("name", "<unnamed>")
        raise ManifestError(f"Invalid {kind} '{name}': {e}") from e


def parse_task_group(doc: dict[str, Any]) -> TaskGroup:
    """Parse a raw document into a TaskGroup.

    Raises:
        ManifestError: If the kind is wrong or the model rejects it.
        SchemaValidationError: If the document fails schema validation.
    """
    return _parse(doc, "TaskGroup", TaskGroup)


def parse_task(doc: dict[str, Any]) -> Task:
    """Parse a raw document into a Task.

    Raises:
        ManifestError: If the kind is wrong or the model rejects it.
        SchemaValidationError: If the document fails schema validation.
    """
    return _parse(doc, "Task", Task)


def load_task_groups(path: str | Path) -> list[TaskGroup]:
    """Load every TaskGroup document under path, ignoring other kinds."""
    return [parse_task_group(doc) for doc in load_documents(path) if doc.get("kind") == "TaskGroup"]


def build_task(
    task_group: TaskGroup,
    spec: TaskSpec,
    *,
    namespace: str | None = None,
) -> Task:
    """Build the Task resource backing a resolved TaskGroup.

    The Task shares the group's name, carries its labels plus a
    back-reference label, and is owned by the group.

    Args:
        task_group: The TaskGroup that was resolved.
        spec: Its resolved spec.
        namespace: Namespace override (defaults to the group's).

    Returns:
        The Task resource.
    """
    meta = task_group.metadata
    labels = dict(meta.labels)
    labels[TASKGROUP_LABEL] = meta.name

    owner = OwnerReference(
        api_version=task_group.api_version or TASKGROUP_API_VERSION,
        kind=task_group.kind,
        name=meta.name,
        uid=meta.uid,
        controller=True,
        block_owner_deletion=True,
    )

    return Task(
        metadata=ObjectMeta(
            name=meta.name,
            namespace=namespace or meta.namespace,
            labels=labels,
            owner_references=[owner],
        ),
        spec=spec.model_copy(deep=True),
    )


def dump_manifest(resource: pydantic.BaseModel | list[Any], fmt: str = "yaml") -> str:
    """Render one resource (or a list of them) as YAML or JSON.

    Args:
        resource: A resource model, or a list of them.
        fmt: "yaml" or "json".

    Returns:
        The rendered text. Lists become multi-document YAML or a JSON array.

    Raises:
        ValueError: If fmt is not a known output format.
    """
    if fmt not in OUTPUT_FORMATS:
        raise ValueError(f"Unknown output format '{fmt}', expected one of {OUTPUT_FORMATS}")

    resources = resource if isinstance(resource, list) else [resource]
    data = [r.model_dump(mode="json", by_alias=True, exclude_none=True) for r in resources]

    if fmt == "json":
        payload = data if isinstance(resource, list) else data[0]
        return json.dumps(payload, indent=2) + "\n"

    return yaml.safe_dump_all(data, default_flow_style=False, sort_keys=False, allow_unicode=True)
