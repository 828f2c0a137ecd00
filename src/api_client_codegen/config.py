"""Generator and project configuration.

``GeneratorConfig`` is everything the generator itself reads. ``ProjectConfig``
adds the output locations used by the CLI. Both load from YAML or JSON and
accept camelCase keys, so existing ``config.json`` files keep working.
"""

from enum import Enum
from pathlib import Path

import yaml
from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, ValidationError

from api_client_codegen.description.base import any_case_aliases
from api_client_codegen.errors import ConfigError
from api_client_codegen.generator.comments import CommentConfig

DEFAULT_IMPORT_LINES = ["import { request as requestHttp } from '../request';"]

# Older config files use these names.
LEGACY_KEYS = {
    "import_lines": ("importLine", "ImportLine"),
    "comment_config": ("comments", "Comments"),
}


def _config_aliases(field_name: str) -> AliasChoices:
    choices = any_case_aliases(field_name).choices
    return AliasChoices(*choices, *LEGACY_KEYS.get(field_name, ()))


class CyclePolicy(str, Enum):
    """What to do with types that cannot be ordered after their base types."""

    IGNORE = "ignore"  # omit them silently
    WARN = "warn"  # omit them and report a diagnostic
    ERROR = "error"  # raise DependencyCycleError


class GeneratorConfig(BaseModel):
    """Settings consumed by the type and service generators."""

    model_config = ConfigDict(alias_generator=AliasGenerator(validation_alias=_config_aliases))

    use_interface: bool = True  # False emits `export type X = {...}`
    namespace_prefix: str = ""
    unwrap_generic_types: set[str] = set()
    generate_comments: bool = True
    comment_config: CommentConfig = CommentConfig()
    type_prefix: str = "types."
    import_lines: list[str] = DEFAULT_IMPORT_LINES
    request_function: str = "requestHttp"
    api_prefix: str = ""  # prepended to every endpoint path
    template_path: Path | None = None
    cycle_policy: CyclePolicy = CyclePolicy.WARN


class ProjectConfig(GeneratorConfig):
    """Generator settings plus where the CLI writes files."""

    output_dir: Path = Path("./api")
    types_dir: Path = Path("./types")


def load_config(file_path: Path | None) -> ProjectConfig:
    """Load project config. A missing file yields the defaults."""
    if file_path is None or not file_path.exists():
        return ProjectConfig()

    try:
        data = yaml.safe_load(file_path.read_text(encoding="utf-8-sig"))
    except (OSError, yaml.YAMLError) as e:
        raise ConfigError(f"Cannot read config {file_path}: {e}") from e

    if data is None:
        return ProjectConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"Config {file_path} must be a mapping")

    try:
        return ProjectConfig.model_validate(data)
    except ValidationError as e:
        raise ConfigError(f"Invalid config {file_path}:\n{e}") from e
