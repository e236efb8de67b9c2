"""JSON Schema checks for raw TaskGroup and Task manifests.

Raw documents are checked before they reach the pydantic models, so
mistakes are reported against manifest paths (spec.steps.0.uses) rather
than model fields.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import jsonschema
from jsonschema import Draft202012Validator

from tekton_taskgroup.errors import ManifestError, SchemaValidationError

SCHEMAS_DIR = Path(__file__).parent / "schemas"

# Manifest kind -> packaged schema file
KIND_SCHEMAS = {
    "TaskGroup": "taskgroup.json",
    "Task": "task.json",
}


def load_kind_schema(kind: str) -> dict[str, Any]:
    """Load the packaged JSON schema for a manifest kind.

    Raises:
        ManifestError: If no schema is packaged for the kind.
    """
    if kind not in KIND_SCHEMAS:
        raise ManifestError(
            f"No schema for kind '{kind}', expected one of {', '.join(KIND_SCHEMAS)}"
        )
    with open(SCHEMAS_DIR / KIND_SCHEMAS[kind], encoding="utf-8") as f:
        return json.load(f)


def validate_manifest(doc: dict[str, Any], kind: str) -> None:
    """Check a raw manifest against the schema of its kind.

    Args:
        doc: The raw document, as loaded from YAML.
        kind: Manifest kind ("TaskGroup" or "Task").

    Raises:
        SchemaValidationError: If the document violates the schema. Its
            message names the kind and manifest; `errors` lists every
            violation as "At '<path>': <message>".
        ManifestError: If the kind has no schema.
    """
    validator = Draft202012Validator(load_kind_schema(kind))
    errors = [_describe(e) for e in validator.iter_errors(doc)]
    if not errors:
        return

    metadata = doc.get("metadata")
    name = metadata.get("name") if isinstance(metadata, dict) else None
    label = f"{kind} '{name}'" if name else kind
    raise SchemaValidationError(f"{label} failed schema validation with {len(errors)} error(s)", errors)


def _describe(error: jsonschema.ValidationError) -> str:
    location = ".".join(str(p) for p in error.absolute_path) or "(root)"
    return f"At '{location}': {error.message}"
