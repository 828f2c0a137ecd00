"""Load an ApiDescriptionModel document from JSON or YAML.

Failures are returned as values so nothing raised by the reader or the
validator crosses into the generator.
"""

import json
from enum import Enum
from pathlib import Path

import yaml
from pydantic import BaseModel, ValidationError

from .base import ApiDescriptionModel


class LoadErrorKind(str, Enum):
    UNREADABLE = "unreadable"  # file missing, permissions, bad encoding
    MALFORMED = "malformed"  # neither YAML nor JSON, or not a mapping
    INVALID = "invalid"  # parsed, but does not match the model


class DescriptionLoadResult(BaseModel):
    """Outcome of loading a description document."""

    model: ApiDescriptionModel | None = None
    error_kind: LoadErrorKind | None = None
    message: str = ""

    @property
    def ok(self) -> bool:
        return self.model is not None


def load_description(file_path: Path) -> DescriptionLoadResult:
    """Read and validate a description file."""
    try:
        text = file_path.read_text(encoding="utf-8-sig")
    except (OSError, UnicodeDecodeError) as e:
        return DescriptionLoadResult(error_kind=LoadErrorKind.UNREADABLE, message=str(e))
    return parse_description(text)


def parse_description(text: str) -> DescriptionLoadResult:
    """Validate a description document given as text."""
    data = _parse_document(text)
    if not isinstance(data, dict):
        return DescriptionLoadResult(
            error_kind=LoadErrorKind.MALFORMED,
            message="description document must be a JSON/YAML object",
        )

    try:
        model = ApiDescriptionModel.model_validate(data)
    except ValidationError as e:
        return DescriptionLoadResult(error_kind=LoadErrorKind.INVALID, message=_summarize(e))
    return DescriptionLoadResult(model=model)


def _parse_document(text: str) -> object:
    try:
        return yaml.safe_load(text)
    except yaml.YAMLError:
        pass

    # JSON that YAML rejects (tabs in indentation, for instance)
    try:
        return json.loads(text)
    except (json.JSONDecodeError, ValueError):
        return None


def _summarize(error: ValidationError, limit: int = 5) -> str:
    lines = []
    for item in error.errors()[:limit]:
        location = ".".join(str(part) for part in item["loc"])
        lines.append(f"{location}: {item['msg']}")
    extra = error.error_count() - limit
    if extra > 0:
        lines.append(f"... and {extra} more")
    return "\n".join(lines)
