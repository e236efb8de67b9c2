"""File-backed catalog of Task specs, keyed by task name.

The catalog only answers lookups for manifests it was given. It exists so
the CLI can build the resolved references the resolver expects.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from tekton_taskgroup.errors import ManifestError
from tekton_taskgroup.manifest import load_documents, parse_task
from tekton_taskgroup.models import Task, TaskGroupSpec, TaskSpec

logger = logging.getLogger(__name__)


class TaskCatalog:
    """Lookup of task specs by name."""

    def __init__(self, tasks: Iterable[Task] = ()) -> None:
        self._specs: dict[str, TaskSpec] = {}
        for task in tasks:
            self.add(task)

    @classmethod
    def from_path(cls, path: str | Path) -> TaskCatalog:
        """Build a catalog from every Task manifest in a file or directory.

        Documents of other kinds are ignored.

        Raises:
            ManifestError: If loading fails or a task name is duplicated.
        """
        docs = [doc for doc in load_documents(path) if doc.get("kind") == "Task"]
        catalog = cls(parse_task(doc) for doc in docs)
        logger.info(f"Catalog loaded: {len(catalog)} task(s) from {path}")
        return catalog

    def add(self, task: Task) -> None:
        """Add a task to the catalog.

        Raises:
            ManifestError: If a task with the same name is already present.
        """
        name = task.metadata.name
        if name in self._specs:
            raise ManifestError(f"Task '{name}' is defined more than once")
        self._specs[name] = task.spec

    def get(self, name: str) -> TaskSpec | None:
        """Get a task spec by name."""
        return self._specs.get(name)

    def names(self) -> list[str]:
        """List task names, sorted."""
        return sorted(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def references_for(self, group_spec: TaskGroupSpec) -> dict[int, TaskSpec]:
        """Build the resolved references for a task group.

        Reference steps whose task is not in the catalog are left out, so
        resolving the group reports them as missing references.

        Args:
            group_spec: The task group about to be resolved.

        Returns:
            Mapping of step index to the referenced task spec.
        """
        references: dict[int, TaskSpec] = {}
        for index, step in group_spec.reference_steps():
            spec = self.get(step.uses.task_ref.name)
            if spec is None:
                logger.debug(f"Task '{step.uses.task_ref.name}' not in catalog (step {index})")
                continue
            references[index] = spec
        return references
