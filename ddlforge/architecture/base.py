"""Base model for ddlforge definition classes with YAML support."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Self

import yaml
from pydantic import BaseModel, ConfigDict


class ConfigBaseModel(BaseModel):
    """Base model for all ddlforge definition and configuration classes.

    Provides YAML serialization/deserialization and standard configuration
    for all Pydantic models in the system. Instances are frozen: a table
    definition is built once per compilation and never mutated afterwards.
    Fields may be given by name or by alias (``nullable`` for
    ``is_nullable``, ``using`` for an index method, ...).
    """

    model_config = ConfigDict(
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    @classmethod
    def from_yaml(cls, path: Path | str) -> Self:
        """Load a single instance from a YAML file."""
        data = yaml.safe_load(Path(path).read_text())
        return cls.model_validate(data if data is not None else {})

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        """Load from a dictionary, e.g. one table of a parsed YAML document."""
        return cls.model_validate(data)

    def to_yaml_str(self, **kwargs: Any) -> str:
        """Render the instance as YAML, keys in field order."""
        return yaml.safe_dump(
            self.to_dict(), default_flow_style=False, sort_keys=False, **kwargs
        )

    def to_yaml(self, path: Path | str, **kwargs: Any) -> None:
        """Save instance to a YAML file."""
        Path(path).write_text(self.to_yaml_str(**kwargs))

    def to_dict(self, **kwargs: Any) -> dict[str, Any]:
        """Convert instance to a JSON-compatible dictionary using aliases.

        Supports skip_defaults=True (mapped to exclude_defaults).
        """
        if kwargs.pop("skip_defaults", False):
            kwargs["exclude_defaults"] = True
        return self.model_dump(mode="json", by_alias=True, exclude_none=True, **kwargs)

    def evolve(self, **changes: Any) -> Self:
        """Return a validated copy with the given fields replaced."""
        data = self.model_dump()
        data.update(changes)
        return type(self).model_validate(data)
