"""Storage location configuration model."""

from __future__ import annotations

import os

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LocationConfig(BaseModel):
    """Configuration for a local storage location.

    The path is canonicalized on validation and must name an existing
    directory, so a dialed location never has to check its root again.

    Attributes:
        path: Directory holding the containers.
    """

    model_config = ConfigDict(frozen=True)

    path: str = Field(description="Location root directory")

    @field_validator("path")
    @classmethod
    def validate_path(cls, v: str) -> str:
        """Require an existing directory and return its canonical path."""
        if not v:
            raise ValueError("path must not be empty")
        path = os.path.realpath(os.path.abspath(os.path.expanduser(v)))
        if not os.path.exists(path):
            raise ValueError(f"path does not exist: {path}")
        if not os.path.isdir(path):
            raise ValueError(f"path is not a directory: {path}")
        return path
