from __future__ import annotations

from enum import Enum
from pathlib import Path

import yaml
from expandvars import expandvars
from pydantic import BaseModel, ConfigDict, field_validator


class ColorMode(str, Enum):
    AUTO = "auto"
    ALWAYS = "always"
    NEVER = "never"

    def as_echo_flag(self) -> bool | None:
        """Map to the ``color`` argument of ``typer.echo`` (None = detect tty)."""
        if self is ColorMode.ALWAYS:
            return True
        if self is ColorMode.NEVER:
            return False
        return None


class TestConfig(BaseModel):
    """Settings of one test runner, fixed before the run starts."""

    __test__ = False

    model_config = ConfigDict(frozen=True, extra="forbid")
    name: str
    timed: bool = False
    repeat_count: int = 1

    @field_validator("name")
    @classmethod
    def name_must_not_be_empty(cls, v: str) -> str:
        if not v:
            raise ValueError("test name must not be empty")
        return v

    @field_validator("repeat_count")
    @classmethod
    def repeat_count_must_be_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError(f"repeat count must be at least 1, got {v}")
        return v


class SessionConfig(BaseModel):
    model_config = ConfigDict(extra="forbid")
    color: ColorMode = ColorMode.AUTO
    strict: bool = False
    verbose: bool = False
    log_file: str | None = None

    @field_validator("log_file")
    @classmethod
    def expand_log_file(cls, v: str | None) -> str | None:
        """Expand ${VAR} references; a missing variable without default is an error."""
        if v is None:
            return v
        try:
            return expandvars(v, nounset=True)
        except Exception as e:
            raise ValueError(f"log_file has missing environment variables: {v}") from e


def load_config(path: Path) -> SessionConfig:
    """Load and validate a session config from a YAML file."""
    config_dir = path.parent.resolve()

    with open(path) as f:
        raw = yaml.safe_load(f)

    if raw is None:
        raw = {}
    if not isinstance(raw, dict):
        raise ValueError(
            f"config file {path} must contain a mapping, got {type(raw).__name__}"
        )

    config = SessionConfig(**raw)

    # Resolve a relative log file against the config file location
    if config.log_file is not None:
        log_path = Path(config.log_file)
        if not log_path.is_absolute():
            config.log_file = str((config_dir / log_path).resolve())

    return config
