"""Type declaration emitter.

Declarations are emitted base-first: each pass over the pending types emits
every type whose base type (when the base is part of the type map) has already
been emitted, and passes repeat until nothing is pending or a pass makes no
progress. Whatever is left at that point sits on an inheritance cycle or
extends a type outside the namespace scope; ``cycle_policy`` decides whether
that is silent, reported, or fatal.
"""

import json
import re
from collections.abc import Mapping

from pydantic import BaseModel

from api_client_codegen.config import CyclePolicy, GeneratorConfig
from api_client_codegen.description.base import TypeDescription
from api_client_codegen.errors import DependencyCycleError
from api_client_codegen.mapping.expression import parse
from api_client_codegen.mapping.mapper import TypeMapper

from .comments import sanitize_multi_line, sanitize_single_line

INDEX_FILE = "index.ts"
UNIMPORTABLE_BASES = {"", "object", "any"}

_IDENTIFIER = re.compile(r"^[A-Za-z_$][\w$]*$")
_NUMBER = re.compile(r"^-?\d+(\.\d+)?$")


class TypeEmission(BaseModel):
    """Declarations produced from one type map."""

    files: dict[str, str] = {}  # {"Widget.ts": source, "index.ts": source}
    names: list[str] = []  # emitted display names, emission order
    unresolved: list[str] = []  # in-scope keys that could not be ordered
    skipped: list[str] = []  # keys outside the namespace scope
    duplicates: list[str] = []  # keys whose display name was already emitted
    diagnostics: list[str] = []


class TypeGraphEmitter:
    """Emits one TypeScript declaration per in-scope type plus an index module."""

    def __init__(self, config: GeneratorConfig):
        self.config = config
        self.mapper = TypeMapper(config.namespace_prefix)

    def in_scope(self, described: TypeDescription) -> bool:
        prefix = self.config.namespace_prefix.rstrip(".")
        if not prefix:
            return True
        namespace = described.namespace or ""
        return namespace == prefix or namespace.startswith(prefix + ".")

    def emit(self, types: Mapping[str, TypeDescription]) -> TypeEmission:
        emission = TypeEmission()
        pending = {key: t for key, t in types.items() if self.in_scope(t)}
        emission.skipped = [key for key in types if key not in pending]
        declared = {t.name for t in pending.values() if t.name}
        generated: set[str] = set()

        progress = True
        while pending and progress:
            progress = False
            for key, described in list(pending.items()):
                base = described.base_type
                if base and base in types and base not in generated:
                    continue

                del pending[key]
                generated.add(key)
                progress = True

                if not described.name:
                    continue
                if described.name in emission.names:
                    emission.duplicates.append(key)
                    continue
                emission.files[f"{described.name}.ts"] = self.render_declaration(described, types, declared)
                emission.names.append(described.name)

        if pending:
            self._report_unresolved(emission, list(pending), types)

        if emission.names:
            emission.files[INDEX_FILE] = render_index(emission.names)
        return emission

    def render_declaration(
        self,
        described: TypeDescription,
        types: Mapping[str, TypeDescription],
        declared: set[str] | None = None,
    ) -> str:
        """Render the full source of one declaration file, imports included."""
        declared = declared if declared is not None else {t.name for t in types.values() if t.name}
        lines = self._doc_block(described.summary, described.remarks)

        if described.is_enum:
            lines.extend(self._enum_body(described))
            return "\n".join(lines) + "\n"

        imports: list[str] = []
        placeholders = _placeholders(described.generic_arguments)
        generic_params = _generic_params(len(described.generic_arguments))

        base_clause = ""
        base = types.get(described.base_type) if described.base_type else None
        if base is not None:
            base_ref = base.name + self._base_arguments(described, base, placeholders, declared, imports)
            if base.name not in UNIMPORTABLE_BASES and base.name != described.name:
                _add_import(imports, base.name)
            base_clause = base_ref

        if self.config.use_interface:
            extends = f" extends {base_clause}" if base_clause else ""
            lines.append(f"export interface {described.name}{generic_params}{extends} {{")
            closing = "}"
        else:
            intersection = f"{base_clause} & " if base_clause else ""
            lines.append(f"export type {described.name}{generic_params} = {intersection}{{")
            closing = "};"

        for prop in described.properties:
            ts_type = self.mapper.map(prop.type, placeholders)
            for name in self.mapper.references(prop.type, placeholders):
                if name in declared and name != described.name:
                    _add_import(imports, name)
            if self.config.generate_comments and prop.summary:
                lines.append(f"  /** {sanitize_single_line(prop.summary, self.config.comment_config)} */")
            optional = "?" if prop.is_nullable or not prop.is_required else ""
            lines.append(f"  {_member_name(prop.name)}{optional}: {ts_type};")
        lines.append(closing)

        if imports:
            import_lines = [f"import {{ {name} }} from './{name}';" for name in imports]
            lines = import_lines + [""] + lines
        return "\n".join(lines) + "\n"

    # -- helpers ---------------------------------------------------------------

    def _base_arguments(
        self,
        described: TypeDescription,
        base: TypeDescription,
        placeholders: dict[str, str],
        declared: set[str],
        imports: list[str],
    ) -> str:
        if not base.generic_arguments:
            return ""
        arguments = []
        for argument in base.generic_arguments:
            arguments.append(self.mapper.map(argument, placeholders))
            for name in self.mapper.references(argument, placeholders):
                if name in declared and name != described.name:
                    _add_import(imports, name)
        return f"<{', '.join(arguments)}>"

    def _enum_body(self, described: TypeDescription) -> list[str]:
        lines = [f"export enum {described.name} {{"]
        for member in described.enum_values:
            if self.config.generate_comments and member.summary:
                lines.append(f"  /** {sanitize_single_line(member.summary, self.config.comment_config)} */")
            lines.append(f"  {_member_name(member.name)}{_enum_initializer(member.value)},")
        lines.append("}")
        return lines

    def _doc_block(self, summary: str | None, remarks: str | None) -> list[str]:
        if not self.config.generate_comments:
            return []
        doc = sanitize_multi_line(summary, self.config.comment_config)
        doc += sanitize_multi_line(remarks, self.config.comment_config)
        if not doc:
            return []
        return ["/**", *(f" * {line}" for line in doc), " */"]

    def _report_unresolved(
        self, emission: TypeEmission, keys: list[str], types: Mapping[str, TypeDescription]
    ) -> None:
        emission.unresolved = keys
        policy = self.config.cycle_policy
        if policy == CyclePolicy.ERROR:
            raise DependencyCycleError(keys)
        if policy == CyclePolicy.WARN:
            reasons = ", ".join(f"{key} ({self._blocked_reason(key, types)})" for key in keys)
            emission.diagnostics.append(f"Types not generated, base types could not be emitted first: {reasons}")

    def _blocked_reason(self, key: str, types: Mapping[str, TypeDescription]) -> str:
        seen = {key}
        current = types[key].base_type
        while current and current in types:
            if not self.in_scope(types[current]):
                return f"base {current} is outside the namespace scope"
            if current in seen:
                return "inheritance cycle"
            seen.add(current)
            current = types[current].base_type
        return "inheritance cycle"


def render_index(names: list[str]) -> str:
    """Aggregate module re-exporting every emitted declaration."""
    unique = list(dict.fromkeys(names))
    return "\n".join(f"export * from './{name}';" for name in unique) + "\n"


def _placeholders(generic_arguments: list[str]) -> dict[str, str]:
    placeholders: dict[str, str] = {}
    for index, argument in enumerate(generic_arguments):
        placeholders.setdefault(str(parse(argument)), f"T{index}")
    return placeholders


def _generic_params(count: int) -> str:
    if not count:
        return ""
    return f"<{', '.join(f'T{i}' for i in range(count))}>"


def _add_import(imports: list[str], name: str) -> None:
    if name not in imports:
        imports.append(name)


def _member_name(name: str) -> str:
    if _IDENTIFIER.match(name):
        return name
    return json.dumps(name)


def _enum_initializer(value: str) -> str:
    if not value:
        return ""
    if _NUMBER.match(value):
        return f" = {value}"
    return f" = {json.dumps(value)}"
