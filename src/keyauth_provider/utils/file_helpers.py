"""File helpers shared by config loading and the CLI."""

from __future__ import annotations

__all__ = [
    "load_validated_json",
    "require_file_exists",
]

import json
from pathlib import Path
from typing import TypeVar

from pydantic import BaseModel, ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)


def require_file_exists(path: Path, file_type: str = "file") -> None:
    """Raise FileNotFoundError with a readable message if path is missing.

    Args:
        path: File that must exist.
        file_type: Human-readable kind of file, used in the message.
    """
    if not path.is_file():
        raise FileNotFoundError(f"{file_type.capitalize()} file not found at {path}")


def load_validated_json(
    path: Path,
    model: type[ModelT],
    *,
    file_type: str,
    recovery_hint: str | None = None,
    encoding: str = "utf-8",
) -> ModelT:
    """Read a JSON file and validate it against a pydantic model.

    Args:
        path: JSON file to read.
        model: Pydantic model class to validate against.
        file_type: Human-readable kind of file, used in messages.
        recovery_hint: Optional sentence appended to error messages.
        encoding: File encoding.

    Returns:
        Validated model instance.

    Raises:
        ValueError: If the file cannot be read, is not JSON, or fails validation.
    """
    hint = f" {recovery_hint}" if recovery_hint else ""

    try:
        raw = path.read_text(encoding=encoding)
    except OSError as e:
        raise ValueError(f"Could not read {file_type} file {path}: {e}.{hint}") from e

    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise ValueError(f"Invalid JSON in {file_type} file {path}: {e}.{hint}") from e

    try:
        return model.model_validate(data)
    except ValidationError as e:
        errors = "; ".join(
            f"{'.'.join(str(part) for part in err['loc'])}: {err['msg']}" for err in e.errors()
        )
        raise ValueError(f"Invalid {file_type} file {path}: {errors}.{hint}") from e
