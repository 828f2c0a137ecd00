"""Normalized API description models.

The collector (reflection over a live API, or an exporter) produces these; the
generator only reads them. Keys are accepted in camelCase, PascalCase or
snake_case, so documents serialized by ASP.NET load unchanged.
"""

from typing import Any

from pydantic import AliasChoices, AliasGenerator, BaseModel, ConfigDict, field_validator, model_validator
from pydantic.alias_generators import to_camel, to_pascal


def any_case_aliases(field_name: str) -> AliasChoices:
    """Accept ``field_name``, ``fieldName`` and ``FieldName`` on input."""
    return AliasChoices(field_name, to_camel(field_name), to_pascal(field_name))


ANY_CASE = AliasGenerator(validation_alias=any_case_aliases)


class DescriptionModel(BaseModel):
    """Base for all description models."""

    model_config = ConfigDict(
        alias_generator=ANY_CASE,
        frozen=True,
    )

    @model_validator(mode="before")
    @classmethod
    def _drop_nulls(cls, data: Any) -> Any:
        # Explicit nulls fall back to field defaults.
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


class EnumValue(DescriptionModel):
    """A single enum member."""

    name: str
    value: str = ""  # kept as text to avoid int/long differences
    summary: str | None = None

    @field_validator("value", mode="before")
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value


class PropertyDescription(DescriptionModel):
    """A property of a record type."""

    name: str
    type: str = ""  # source signature, or a generic argument of the owner
    is_nullable: bool = False
    is_required: bool = False
    summary: str | None = None
    remarks: str | None = None


class TypeDescription(DescriptionModel):
    """A data type reachable from the API surface."""

    name: str = ""
    namespace: str | None = None
    base_type: str | None = None  # fully-qualified key into the type map
    generic_arguments: list[str] = []
    properties: list[PropertyDescription] = []
    enum_values: list[EnumValue] = []
    summary: str | None = None
    remarks: str | None = None

    @model_validator(mode="after")
    def _record_or_enum(self) -> "TypeDescription":
        if self.properties and self.enum_values:
            raise ValueError(f"type {self.name!r} has both properties and enum values")
        return self

    @property
    def is_enum(self) -> bool:
        return bool(self.enum_values)


class ParameterDescription(DescriptionModel):
    """A single endpoint parameter."""

    name: str
    type: str = ""
    source: str = ""  # Path / Query / Body / Form / Header ...
    is_optional: bool = False
    default_value: Any = None
    summary: str | None = None


class ReturnTypeModel(DescriptionModel):
    """Declared return type of an action, with any Task wrapper already removed."""

    type: str | None = None
    type_simple: str | None = None
    summary: str | None = None


class ApiDescription(DescriptionModel):
    """A single endpoint."""

    controller: str = ""
    action: str | None = None
    http_method: str | None = None  # GET / POST / PUT / DELETE / PATCH
    path: str = ""  # api/widgets/{id}
    parameters: list[ParameterDescription] = []
    return_type: ReturnTypeModel | None = None
    summary: str | None = None
    remarks: str | None = None


class ApiDescriptionModel(DescriptionModel):
    """Everything the generator consumes: endpoints plus the type map."""

    apis: list[ApiDescription] = []
    types: dict[str, TypeDescription] = {}
