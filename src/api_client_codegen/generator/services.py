"""Service modules: one per controller, one request function per endpoint."""

import json
import re
from collections.abc import Mapping

from api_client_codegen.config import GeneratorConfig
from api_client_codegen.description.base import ApiDescription, ParameterDescription, TypeDescription
from api_client_codegen.mapping.mapper import TypeMapper
from api_client_codegen.mapping.returns import ReturnTypeResolver

from .comments import sanitize_multi_line, sanitize_single_line
from .naming import ActionNamer
from .render import EndpointRenderModel, ParameterRenderModel, ServiceRenderModel, TemplateRenderer

DEFAULT_CONTROLLER = "Default"
READ_ONLY_VERBS = {"GET", "HEAD", "OPTIONS"}
ROUTE_SOURCES = {"path", "route"}

# {id}, {id:int}, {id?}, {*slug}
_ROUTE_PARAM = re.compile(r"\{\*{0,2}([^}:?=]+)[^}]*\}")
_NON_IDENTIFIER = re.compile(r"[^\w$]")

# Not usable as parameter names in strict-mode TypeScript.
RESERVED_WORDS = {
    "break", "case", "catch", "class", "const", "continue", "debugger", "default", "delete",
    "do", "else", "enum", "export", "extends", "false", "finally", "for", "function", "if",
    "implements", "import", "in", "instanceof", "interface", "let", "new", "null", "package",
    "private", "protected", "public", "return", "static", "super", "switch", "this", "throw",
    "true", "try", "typeof", "var", "void", "while", "with", "yield", "await", "arguments", "eval",
}


class ServiceGenerator:
    """Builds a ServiceRenderModel per controller and renders it to TypeScript."""

    def __init__(self, config: GeneratorConfig, renderer: TemplateRenderer | None = None):
        self.config = config
        self.mapper = TypeMapper(config.namespace_prefix, qualifier=config.type_prefix)
        self.returns = ReturnTypeResolver(self.mapper, config.unwrap_generic_types)
        self.renderer = renderer or TemplateRenderer(config.template_path)
        self.diagnostics: list[str] = []

    def generate(
        self, apis: list[ApiDescription], types: Mapping[str, TypeDescription]
    ) -> dict[str, str]:
        """Render every controller group. Returns {filename: source}."""
        files = {}
        for controller, group in self.group_by_controller(apis).items():
            model = self.build_service(controller, group, types)
            files[f"{model.service_name}.ts"] = self.renderer.render(model)
        return files

    def group_by_controller(self, apis: list[ApiDescription]) -> dict[str, list[ApiDescription]]:
        """Group endpoints by controller, in first-seen order."""
        groups: dict[str, list[ApiDescription]] = {}
        for api in apis:
            groups.setdefault(api.controller or DEFAULT_CONTROLLER, []).append(api)
        return groups

    def build_service(
        self, controller: str, apis: list[ApiDescription], types: Mapping[str, TypeDescription]
    ) -> ServiceRenderModel:
        service_name = ActionNamer.controller_stem(controller) + "Service"
        proposed = [ActionNamer.name(controller, api.action, api.http_method) for api in apis]
        names = ActionNamer.unique(proposed)
        for before, after in zip(proposed, names):
            if before != after:
                self.diagnostics.append(f"{service_name}: duplicate function name {before!r} renamed to {after!r}")

        return ServiceRenderModel(
            service_name=service_name,
            import_lines=self.import_lines(),
            request_function=self.config.request_function,
            endpoints=[self.build_endpoint(api, name, types) for api, name in zip(apis, names)],
        )

    def import_lines(self) -> list[str]:
        lines = []
        alias = self.config.type_prefix.rstrip(".")
        if alias:
            lines.append(f"import * as {alias} from '../types';")
        lines.extend(self.config.import_lines)
        return lines

    def build_endpoint(
        self, api: ApiDescription, name: str, types: Mapping[str, TypeDescription]
    ) -> EndpointRenderModel:
        verb = (api.http_method or "GET").upper()
        route_names = {n.strip().lower() for n in _ROUTE_PARAM.findall(api.path)}
        parameters = [
            self.build_parameter(p, verb, route_names) for p in order_parameters(api.parameters)
        ]
        return_type = self.returns.resolve(api.return_type, types)

        return EndpointRenderModel(
            name=name,
            param_list=", ".join(f"{p.name}{'?' if p.optional else ''}: {p.ts_type}" for p in parameters),
            parameters=parameters,
            return_type=return_type,
            path=api.path,
            url=self.build_url(api.path, parameters),
            http_method=verb.lower(),
            data_shape=data_shape(parameters),
            doc_lines=self.doc_lines(api, parameters),
        )

    def build_parameter(
        self, param: ParameterDescription, verb: str, route_names: set[str]
    ) -> ParameterRenderModel:
        source = (param.source or "").lower()
        if source in ROUTE_SOURCES or param.name.lower() in route_names:
            location = "route"
        elif source == "header":
            location = "header"
        elif verb in READ_ONLY_VERBS or source == "query":
            location = "query"
        elif source == "body":
            location = "body"
        else:
            location = "payload"  # form fields and unlabelled parameters

        return ParameterRenderModel(
            name=to_identifier(param.name),
            wire_name=param.name,
            ts_type=self.mapper.map(param.type),
            optional=param.is_optional,
            source=location,
            doc=sanitize_single_line(param.summary, self.config.comment_config),
            default=None if param.default_value is None else json.dumps(param.default_value, default=str),
        )

    def build_url(self, path: str, parameters: list[ParameterRenderModel]) -> str:
        prefix = self.config.api_prefix.rstrip("/")
        url = f"{prefix}/{path.lstrip('/')}"
        by_name = {p.wire_name.lower(): p.name for p in parameters if p.source == "route"}

        interpolated = False

        def substitute(match: re.Match) -> str:
            nonlocal interpolated
            identifier = by_name.get(match.group(1).strip().lower())
            if identifier is None:
                return match.group(0)
            interpolated = True
            return f"${{{identifier}}}"

        url = _ROUTE_PARAM.sub(substitute, url)
        if interpolated:
            return f"`{url}`"
        return "'" + url.replace("\\", "\\\\").replace("'", "\\'") + "'"

    def doc_lines(self, api: ApiDescription, parameters: list[ParameterRenderModel]) -> list[str]:
        if not self.config.generate_comments:
            return []
        comment_config = self.config.comment_config
        lines = sanitize_multi_line(api.summary, comment_config)
        lines += sanitize_multi_line(api.remarks, comment_config)
        for p in parameters:
            if not p.doc and p.default is None:
                continue
            text = p.doc
            if p.default is not None:
                text = f"{text} (default: {p.default})".strip()
            lines.append(f"@param {p.name} {sanitize_single_line(text, comment_config)}")
        if api.return_type is not None and api.return_type.summary:
            lines.append(f"@returns {sanitize_single_line(api.return_type.summary, comment_config)}")
        return lines


def order_parameters(parameters: list[ParameterDescription]) -> list[ParameterDescription]:
    """Required parameters first; relative order otherwise unchanged."""
    return sorted(parameters, key=lambda p: p.is_optional)


def data_shape(parameters: list[ParameterRenderModel]) -> list[str]:
    """Request options carrying the non-route parameters."""
    query = [p for p in parameters if p.source == "query"]
    body = [p for p in parameters if p.source in ("body", "payload")]
    headers = [p for p in parameters if p.source == "header"]

    lines = []
    if query:
        lines.append(f"params: {_object_literal(query)}")
    if len(body) == 1 and body[0].source == "body":
        lines.append(f"data: {body[0].name}")
    elif body:
        lines.append(f"data: {_object_literal(body)}")
    if headers:
        lines.append(f"headers: {_object_literal(headers)}")
    return lines


def to_identifier(name: str) -> str:
    """``input.Name`` -> ``input_Name``; leading digits get an underscore, reserved words a trailing one."""
    identifier = _NON_IDENTIFIER.sub("_", name) or "_"
    if identifier[0].isdigit():
        identifier = f"_{identifier}"
    if identifier in RESERVED_WORDS:
        identifier = f"{identifier}_"
    return identifier


def _object_literal(parameters: list[ParameterRenderModel]) -> str:
    members = []
    for p in parameters:
        if p.name == p.wire_name:
            members.append(p.name)
        else:
            members.append(f"'{p.wire_name}': {p.name}")
    return "{ " + ", ".join(members) + " }"
