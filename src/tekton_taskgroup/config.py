"""Environment configuration for the taskgroup CLI.

Parses TASKGROUP_* environment variables into a typed CliEnv object.
CLI options fall back to these values when not given explicitly.
"""

from __future__ import annotations

import logging
import os
from typing import Any

from pydantic import BaseModel, Field, ValidationError, field_validator

from tekton_taskgroup.manifest import OUTPUT_FORMATS


class CliEnv(BaseModel):
    """Parsed TASKGROUP_* environment variables."""

    catalog: str = Field(default="tasks", description="TASKGROUP_CATALOG - Task manifest file or directory")
    namespace: str = Field(default="default", description="TASKGROUP_NAMESPACE - Namespace for produced Tasks")
    output: str = Field(default="yaml", description="TASKGROUP_OUTPUT - Output format (yaml or json)")
    log_level: str = Field(default="INFO", description="TASKGROUP_LOG_LEVEL - Logging level name")

    @field_validator("output", mode="before")
    @classmethod
    def parse_output(cls, v: Any) -> str:
        """Normalize and check the output format."""
        value = str(v).strip().lower()
        if value not in OUTPUT_FORMATS:
            raise ValueError(f"must be one of {', '.join(OUTPUT_FORMATS)}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def parse_log_level(cls, v: Any) -> str:
        """Normalize and check the logging level name."""
        value = str(v).strip().upper()
        if not isinstance(logging.getLevelName(value), int):
            raise ValueError(f"unknown logging level '{v}'")
        return value

    @property
    def log_level_value(self) -> int:
        """Numeric logging level."""
        return logging.getLevelName(self.log_level)


# Environment variable names (single source of truth)
ENV_VARS = {
    "catalog": "TASKGROUP_CATALOG",
    "namespace": "TASKGROUP_NAMESPACE",
    "output": "TASKGROUP_OUTPUT",
    "log_level": "TASKGROUP_LOG_LEVEL",
}


class EnvParseError(Exception):
    """Raised when environment variables are invalid."""

    pass


def load_cli_env(environ: dict[str, str] | None = None) -> CliEnv:
    """Load and parse TASKGROUP_* environment variables into CliEnv.

    Args:
        environ: Environment mapping (defaults to os.environ)

    Returns:
        Parsed CliEnv object

    Raises:
        EnvParseError: If a variable has an invalid value
    """
    if environ is None:
        environ = dict(os.environ)

    kwargs: dict[str, Any] = {}
    for field_name, env_var in ENV_VARS.items():
        value = environ.get(env_var)
        if value:
            kwargs[field_name] = value

    try:
        return CliEnv(**kwargs)
    except ValidationError as e:
        problems = "; ".join(
            f"{ENV_VARS[str(err['loc'][0])]}: {err['msg']}" for err in e.errors()
        )
        raise EnvParseError(f"Invalid environment variables: {problems}") from e
